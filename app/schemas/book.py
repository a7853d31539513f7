from datetime import datetime, timezone
from typing import Annotated

from pydantic import (
    AnyUrl,
    BaseModel,
    ConfigDict,
    Field,
    StrictInt,
    StrictStr,
    TypeAdapter,
    ValidationError,
    field_validator,
)

ISBN_MIN_LENGTH = 10
ISBN_MAX_LENGTH = 13
MIN_PAGES = 1
# bounds of the 32-bit INTEGER columns backing pages and year
MAX_PAGES = 2**31 - 1
MIN_YEAR = -(2**31)

NonEmptyStr = Annotated[StrictStr, Field(min_length=1)]

_url_adapter: TypeAdapter[AnyUrl] = TypeAdapter(AnyUrl)


def current_year() -> int:
    return datetime.now(timezone.utc).year


class BookSchema(BaseModel):
    """Every field a book must carry on create and on full replace.

    Types are strict: JSON strings are never coerced into integers and
    integers are never coerced into strings. Unknown keys are dropped.
    """

    model_config = ConfigDict(extra="ignore")

    isbn: StrictStr = Field(
        ..., min_length=ISBN_MIN_LENGTH, max_length=ISBN_MAX_LENGTH
    )
    amazon_url: StrictStr
    author: NonEmptyStr
    language: NonEmptyStr
    pages: StrictInt = Field(..., ge=MIN_PAGES, le=MAX_PAGES)
    publisher: NonEmptyStr
    title: NonEmptyStr
    year: StrictInt = Field(..., ge=MIN_YEAR)

    @field_validator("amazon_url")
    @classmethod
    def validate_amazon_url(cls, v: str) -> str:
        try:
            url = _url_adapter.validate_python(v)
        except ValidationError:
            raise ValueError("must be a valid absolute URL") from None

        if not url.host:
            raise ValueError("must be a valid absolute URL")

        # keep the caller's spelling, AnyUrl normalizes trailing slashes
        return v

    @field_validator("year")
    @classmethod
    def validate_year(cls, v: int) -> int:
        latest = current_year()
        if v > latest:
            raise ValueError(f"must not be later than {latest}")
        return v


class BookRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    isbn: str
    amazon_url: str
    author: str
    language: str
    pages: int
    publisher: str
    title: str
    year: int


class BookResponse(BaseModel):
    book: BookRead


class BookListResponse(BaseModel):
    books: list[BookRead]


class MessageResponse(BaseModel):
    message: str
