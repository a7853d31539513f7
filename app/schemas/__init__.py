from .book import (
    BookListResponse,
    BookRead,
    BookResponse,
    BookSchema,
    MessageResponse,
)
from .common import ErrorDetail, ErrorResponse

__all__ = [
    "BookSchema",
    "BookRead",
    "BookResponse",
    "BookListResponse",
    "MessageResponse",
    "ErrorDetail",
    "ErrorResponse",
]
