import logging
from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import BookConflictError, BookNotFoundError
from app.models.book import Book
from app.schemas.book import BookSchema

logger = logging.getLogger(__name__)


class BookService:
    """Persistence for validated books, keyed by isbn.

    Takes records that already passed validation. Conflicts are detected by
    the database's primary key, never by a read-then-write check.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, record: BookSchema) -> Book:
        book = Book(**record.model_dump())
        self.db.add(book)

        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            logger.info(f"Insert rejected, isbn {record.isbn} already exists")
            raise BookConflictError(record.isbn) from e

        logger.info(f"Book created: {book.isbn}")
        return book

    async def fetch_all(self) -> Sequence[Book]:
        result = await self.db.execute(select(Book).order_by(Book.title, Book.isbn))
        return result.scalars().all()

    async def fetch_by_isbn(self, isbn: str) -> Book:
        book = await self.db.get(Book, isbn)
        if not book:
            raise BookNotFoundError(isbn)
        return book

    async def replace(self, isbn: str, record: BookSchema) -> Book:
        book = await self.db.get(Book, isbn, with_for_update=True)
        if not book:
            await self.db.rollback()
            raise BookNotFoundError(isbn)

        for field, value in record.model_dump(exclude={"isbn"}).items():
            setattr(book, field, value)

        await self.db.commit()
        logger.info(f"Book replaced: {isbn}")
        return book

    async def delete(self, isbn: str) -> None:
        book = await self.db.get(Book, isbn, with_for_update=True)
        if not book:
            await self.db.rollback()
            raise BookNotFoundError(isbn)

        await self.db.delete(book)
        await self.db.commit()
        logger.info(f"Book deleted: {isbn}")
