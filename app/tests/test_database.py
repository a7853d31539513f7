import pytest
from sqlalchemy import text

from app.database import Database
from app.models import Book

class TestDatabaseLifecycle:

    @pytest.mark.asyncio
    async def test_session_before_connect_fails(self, tmp_path):
        database = Database(f"sqlite+aiosqlite:///{tmp_path / 'books.db'}")

        with pytest.raises(RuntimeError):
            async with database.session():
                pass

        with pytest.raises(RuntimeError):
            _ = database.engine

    @pytest.mark.asyncio
    async def test_connect_create_and_dispose(self, tmp_path):
        database = Database(f"sqlite+aiosqlite:///{tmp_path / 'books.db'}")
        database.connect()
        try:
            await database.create_all()

            async with database.session() as session:
                session.add(Book(
                    isbn="1111111111",
                    amazon_url="http://hostname.co/asdf",
                    author="Arthur Author",
                    language="english",
                    pages=123,
                    publisher="Publisher",
                    title="Book Title",
                    year=2017,
                ))
                await session.commit()

            async with database.session() as session:
                result = await session.execute(text("SELECT COUNT(*) FROM books"))
                assert result.scalar() == 1
        finally:
            await database.dispose()

        with pytest.raises(RuntimeError):
            _ = database.engine

    @pytest.mark.asyncio
    async def test_dispose_is_safe_twice(self, tmp_path):
        database = Database(f"sqlite+aiosqlite:///{tmp_path / 'books.db'}")
        database.connect()

        await database.dispose()
        await database.dispose()

class TestApplicationLifespan:

    @pytest.mark.asyncio
    async def test_lifespan_opens_and_disposes_store(self, tmp_path, monkeypatch, book1_data):
        from httpx import AsyncClient, ASGITransport
        from app.config import settings
        from app.main import app

        monkeypatch.setattr(settings, "DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'books.db'}")
        monkeypatch.setattr(settings, "DB_AUTO_CREATE", True)

        async with app.router.lifespan_context(app):
            database = app.state.database
            assert isinstance(database, Database)

            async with AsyncClient(
                transport=ASGITransport(app=app),
                base_url="http://test"
            ) as client:
                created = await client.post("/books", json=book1_data)
                missing = await client.get("/books/doesnotexist")
                fetched = await client.get(f"/books/{book1_data['isbn']}")

        assert created.status_code == 201
        assert missing.status_code == 404
        assert fetched.status_code == 200
        assert fetched.json() == {"book": book1_data}

        with pytest.raises(RuntimeError):
            _ = database.engine
