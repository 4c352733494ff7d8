"""News article routes.

Every route requires a valid bearer token.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from api.routes.auth import get_current_user_id
from core.dependencies import NewsManagerDep
from schemas.news import CreateNewsRequest, News, UpdateNewsRequest

router = APIRouter(
    prefix="/api/news",
    tags=["News"],
    dependencies=[Depends(get_current_user_id)],
)


def _not_found(news_id: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"News with ID {news_id} not found",
    )


@router.get("", response_model=List[News], summary="List news")
def list_news(news_manager: NewsManagerDep) -> List[News]:
    return news_manager.list_news()


@router.get("/published", response_model=List[News], summary="List published news")
def list_published_news(news_manager: NewsManagerDep) -> List[News]:
    return news_manager.list_published_news()


@router.get("/category/{category}", response_model=List[News], summary="List news by category")
def list_news_by_category(category: str, news_manager: NewsManagerDep) -> List[News]:
    return news_manager.list_news_by_category(category)


@router.get("/search", response_model=List[News], summary="Search news")
def search_news(
    news_manager: NewsManagerDep,
    search_term: Optional[str] = Query(default=None, alias="searchTerm"),
) -> List[News]:
    """Search titles, content, summaries and tags.

    Raises:
        HTTPException: 400 if the search term is blank.
    """
    if not search_term or not search_term.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Search term is required",
        )
    return news_manager.search_news(search_term.strip())


@router.get("/{news_id}", response_model=News, summary="Get news by id")
def get_news(news_id: str, news_manager: NewsManagerDep) -> News:
    news = news_manager.get_news_by_id(news_id)
    if news is None:
        raise _not_found(news_id)
    return news


@router.post(
    "",
    response_model=News,
    status_code=status.HTTP_201_CREATED,
    summary="Create news",
)
def create_news(
    req: CreateNewsRequest,
    response: Response,
    news_manager: NewsManagerDep,
    user_id: str = Depends(get_current_user_id),
) -> News:
    """Create an article. The caller owns it unless ``userId`` is given."""
    news = news_manager.create_news(req, user_id=user_id)
    response.headers["Location"] = f"{router.prefix}/{news.id}"
    return news


@router.put("/{news_id}", response_model=News, summary="Update news")
def update_news(
    news_id: str,
    req: UpdateNewsRequest,
    news_manager: NewsManagerDep,
) -> News:
    news = news_manager.update_news(news_id, req)
    if news is None:
        raise _not_found(news_id)
    return news


@router.delete(
    "/{news_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete news",
)
def delete_news(news_id: str, news_manager: NewsManagerDep) -> Response:
    if not news_manager.delete_news(news_id):
        raise _not_found(news_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
