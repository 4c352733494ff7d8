from datetime import datetime, timedelta

import pytz
from bson import ObjectId

from config import NEWS_COLLECTION
from schemas.news import CreateNewsRequest, UpdateNewsRequest
from payloads import news_payload


def test_create_defaults_published_date_and_owner(news_manager):
    owner = str(ObjectId())
    before = datetime.now(pytz.utc) - timedelta(seconds=1)

    news = news_manager.create_news(
        CreateNewsRequest.model_validate(news_payload()), user_id=owner
    )

    assert ObjectId.is_valid(news.id)
    assert news.user_id == owner
    assert news.is_published
    assert news.tags == ["finance"]
    assert news.published_date >= before
    assert news.created_at.tzinfo is not None


def test_explicit_owner_wins_over_caller(news_manager):
    owner = str(ObjectId())
    news = news_manager.create_news(
        CreateNewsRequest.model_validate(news_payload(userId=owner)),
        user_id=str(ObjectId()),
    )
    assert news.user_id == owner


def test_category_match_ignores_case_but_not_partial(make_news, news_manager):
    make_news()
    make_news(title="Match report", category="Sports")

    assert [n.title for n in news_manager.list_news_by_category("politics")] == ["Budget Update"]
    assert news_manager.list_news_by_category("Polit") == []


def test_published_news_most_recent_first(make_news, news_manager):
    older = make_news(title="Older story", publishedDate="2024-01-01T00:00:00Z")
    newer = make_news(title="Newer story", publishedDate="2024-06-01T00:00:00Z")
    make_news(title="Draft story", isPublished=False)

    published = news_manager.list_published_news()
    assert [n.id for n in published] == [newer.id, older.id]


def test_search_covers_title_and_tags(make_news, news_manager):
    news = make_news()

    assert [n.id for n in news_manager.search_news("budget")] == [news.id]
    assert [n.id for n in news_manager.search_news("finance")] == [news.id]
    assert [n.id for n in news_manager.search_news("SPENDING")] == [news.id]
    assert news_manager.search_news("xyz") == []


def test_search_term_is_not_a_regex(make_news, news_manager):
    make_news()
    assert news_manager.search_news("B.dget") == []


def test_list_news_newest_first(make_news, news_manager, mongo_db):
    first = make_news()
    second = make_news(title="Second story")
    mongo_db[NEWS_COLLECTION].update_one(
        {"_id": ObjectId(first.id)},
        {"$set": {"createdAt": datetime(2020, 1, 1, tzinfo=pytz.utc)}},
    )

    assert [n.id for n in news_manager.list_news()] == [second.id, first.id]


def test_partial_update(make_news, news_manager):
    news = make_news()

    updated = news_manager.update_news(
        news.id, UpdateNewsRequest(title="Budget Revised", is_published=False, summary="")
    )

    assert updated.title == "Budget Revised"
    assert not updated.is_published
    assert updated.summary == news.summary
    assert updated.content == news.content
    assert updated.tags == ["finance"]
    assert updated.updated_at >= news.updated_at


def test_update_can_clear_tags(make_news, news_manager):
    news = make_news()
    assert news_manager.update_news(news.id, UpdateNewsRequest(tags=[])).tags == []


def test_unknown_and_malformed_ids(news_manager):
    for news_id in ["nope", str(ObjectId())]:
        assert news_manager.get_news_by_id(news_id) is None
        assert news_manager.update_news(news_id, UpdateNewsRequest(title="Whatever")) is None
        assert news_manager.delete_news(news_id) is False


def test_delete(make_news, news_manager):
    news = make_news()
    assert news_manager.delete_news(news.id) is True
    assert news_manager.get_news_by_id(news.id) is None
    assert news_manager.delete_news(news.id) is False
