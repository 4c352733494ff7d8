from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, HttpUrl, TypeAdapter, ValidationError
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

_http_url_adapter = TypeAdapter(HttpUrl)


class ApiModel(BaseModel):
    """Base model for request and response bodies.

    Fields are declared in snake_case and exchanged on the wire in camelCase.
    Both spellings are accepted on input.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


def _check_http_url(value: str) -> str:
    """Validate as an http(s) URL but keep the text exactly as sent."""
    try:
        _http_url_adapter.validate_python(value)
    except ValidationError:
        raise PydanticCustomError("url_parsing", "Input should be a valid http or https URL")
    return value


# Unlike HttpUrl, which normalizes (e.g. appends a trailing slash).
HttpUrlString = Annotated[str, AfterValidator(_check_http_url)]
