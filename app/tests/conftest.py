import pytest
import pytest_asyncio
import os
from typing import AsyncGenerator
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test.db")
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("SKIP_CONFIG_VALIDATION", "true")

os.environ["RATE_LIMIT_ENABLED"] = "false"

import sys
from pathlib import Path
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

from app.main import app
from app.database import get_db
from app.models.base import Base

TEST_DATABASE_URL = "sqlite+aiosqlite:///./test.db"

@pytest_asyncio.fixture
async def async_engine():
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False}
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
        await engine.dispose()

        db_file = "./test.db"
        if os.path.exists(db_file):
            os.remove(db_file)

    except Exception as e:
        print(f"Test cleanup warning: {e}")

@pytest_asyncio.fixture
async def async_session(async_engine) -> AsyncGenerator[AsyncSession, None]:
    async_session_maker = async_sessionmaker(
        bind=async_engine,
        class_=AsyncSession,
        expire_on_commit=False
    )

    async with async_session_maker() as session:
        yield session
        await session.rollback()

@pytest_asyncio.fixture
async def async_client(async_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    async def override_get_db():
        yield async_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        timeout=30.0
    ) as ac:
        yield ac

    app.dependency_overrides.clear()

@pytest.fixture
def book1_data():
    return {
        "isbn": "1111111111",
        "amazon_url": "http://hostname.co/asdf",
        "author": "Arthur Author",
        "language": "english",
        "pages": 123,
        "publisher": "Publisher",
        "title": "Book Title",
        "year": 2017
    }

@pytest.fixture
def book2_data():
    return {
        "isbn": "2222222222222",
        "amazon_url": "http://hostname.co/qwerty",
        "author": "Bea Aruthur",
        "language": "spanish",
        "pages": 9,
        "publisher": "Another Publisher",
        "title": "Some Words",
        "year": 2020
    }

@pytest.fixture
def book3_data():
    return {
        "isbn": "3333333333",
        "amazon_url": "http://hostname.co/asdf",
        "author": "Unknown Author",
        "language": "a langauge",
        "pages": 420,
        "publisher": "the world",
        "title": "a picture book",
        "year": 1969
    }

@pytest_asyncio.fixture
async def seeded_client(async_client: AsyncClient, book1_data, book2_data) -> AsyncClient:
    for data in (book1_data, book2_data):
        response = await async_client.post("/books", json=data)
        assert response.status_code == 201

    return async_client
