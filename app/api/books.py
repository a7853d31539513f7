from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import BookValidationError
from app.core.logging import AuditLogger
from app.database import get_db
from app.schemas.book import (
    BookListResponse,
    BookRead,
    BookResponse,
    BookSchema,
    MessageResponse,
)
from app.schemas.common import ErrorResponse
from app.services.book_service import BookService
from app.services.validation import Violation, validate_book

router = APIRouter()

ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
    status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
}


def _validated_book(payload: object, path_isbn: str | None = None) -> BookSchema:
    result = validate_book(payload)
    violations = list(result.violations)

    if path_isbn is not None and isinstance(payload, dict):
        body_isbn = payload.get("isbn")
        if isinstance(body_isbn, str) and body_isbn != path_isbn:
            violations.append(
                Violation("isbn", "constraint", "must match the isbn in the URL")
            )

    if violations or result.book is None:
        raise BookValidationError(violations)

    return result.book


@router.get("", response_model=BookListResponse)
async def list_books(db: Annotated[AsyncSession, Depends(get_db)]):
    books = await BookService(db).fetch_all()
    return BookListResponse(books=[BookRead.model_validate(book) for book in books])


@router.get("/{isbn}", response_model=BookResponse, responses=ERROR_RESPONSES)
async def get_book(isbn: str, db: Annotated[AsyncSession, Depends(get_db)]):
    book = await BookService(db).fetch_by_isbn(isbn)
    return BookResponse(book=BookRead.model_validate(book))


@router.post(
    "",
    response_model=BookResponse,
    status_code=status.HTTP_201_CREATED,
    responses={**ERROR_RESPONSES, status.HTTP_409_CONFLICT: {"model": ErrorResponse}},
)
async def create_book(
    request: Request,
    payload: Annotated[Any, Body()],
    db: Annotated[AsyncSession, Depends(get_db)],
):
    record = _validated_book(payload)
    book = await BookService(db).create(record)

    AuditLogger.log_book_change(request, action="created", isbn=book.isbn)
    return BookResponse(book=BookRead.model_validate(book))


@router.put("/{isbn}", response_model=BookResponse, responses=ERROR_RESPONSES)
async def replace_book(
    request: Request,
    isbn: str,
    payload: Annotated[Any, Body()],
    db: Annotated[AsyncSession, Depends(get_db)],
):
    record = _validated_book(payload, path_isbn=isbn)
    book = await BookService(db).replace(isbn, record)

    AuditLogger.log_book_change(request, action="replaced", isbn=isbn)
    return BookResponse(book=BookRead.model_validate(book))


@router.delete("/{isbn}", response_model=MessageResponse, responses=ERROR_RESPONSES)
async def delete_book(
    request: Request,
    isbn: str,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    await BookService(db).delete(isbn)

    AuditLogger.log_book_change(request, action="deleted", isbn=isbn)
    return MessageResponse(message="Book deleted")
