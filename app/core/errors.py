import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.logging import AuditLogger
from app.schemas.common import ErrorResponse
from app.services.validation import Violation

logger = logging.getLogger(__name__)


class BookstoreError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    @property
    def detail(self) -> str | list[str]:
        return self.message


class BookValidationError(BookstoreError):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, violations: list[Violation]):
        super().__init__(f"{len(violations)} validation error(s)")
        self.violations = violations

    @property
    def detail(self) -> list[str]:
        return [str(violation) for violation in self.violations]


class BookNotFoundError(BookstoreError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, isbn: str):
        super().__init__(f"There is no book with an isbn '{isbn}'")
        self.isbn = isbn


class BookConflictError(BookstoreError):
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, isbn: str):
        super().__init__(f"A book with isbn '{isbn}' already exists")
        self.isbn = isbn


def error_response(
    message: str | list[str],
    status_code: int,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    body = ErrorResponse.build(message=message, status=status_code)
    return JSONResponse(
        status_code=status_code, content=body.model_dump(), headers=headers
    )


async def bookstore_error_handler(request: Request, exc: BookstoreError) -> JSONResponse:
    if isinstance(exc, BookValidationError):
        AuditLogger.log_rejected_payload(request, exc.detail)
    elif isinstance(exc, BookConflictError):
        AuditLogger.log_conflict(request, exc.isbn)
    return error_response(exc.detail, exc.status_code)


async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    messages = [str(error.get("msg", "Invalid request")) for error in exc.errors()]
    AuditLogger.log_rejected_payload(request, messages)
    return error_response(messages, status.HTTP_400_BAD_REQUEST)


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    return error_response(
        str(exc.detail), exc.status_code, headers=getattr(exc, "headers", None)
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"Unhandled exception on {request.method} {request.url.path}: {exc}",
        exc_info=True,
    )
    return error_response(
        "Internal Server Error", status.HTTP_500_INTERNAL_SERVER_ERROR
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BookstoreError, bookstore_error_handler)  # type: ignore
    app.add_exception_handler(
        RequestValidationError, request_validation_error_handler  # type: ignore
    )
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)  # type: ignore
    app.add_exception_handler(Exception, unhandled_exception_handler)
