from fastapi import FastAPI
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from dotenv import load_dotenv
from pathlib import Path
import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.starlette import StarletteIntegration
from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration

env_path = Path(__file__).resolve().parent.parent / ".env"
_ = load_dotenv(dotenv_path=env_path)

from app.config import settings
from app.database import Database
from app.core.errors import register_exception_handlers
from app.core.logging import setup_logging
from app.core.middleware import setup_middleware
from app.api import books

setup_logging(settings.LOG_LEVEL)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("🚀 Bookstore API starting up")

    database = Database(settings.DATABASE_URL, echo=settings.DB_ECHO)
    try:
        database.connect()
        if settings.DB_AUTO_CREATE:
            await database.create_all()
            logger.info("✅ Database tables ensured")
    except Exception as e:
        logger.error(f"❌ Startup failed: {e}")
        await database.dispose()
        raise

    app.state.database = database

    try:
        yield
    finally:
        logger.info("🛑 Bookstore API shutting down")
        await database.dispose()
        logger.info("✅ Database connections closed")


if settings.SENTRY_DSN:
    _ = sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        traces_sample_rate=1.0 if settings.DEBUG else 0.1,
        environment=settings.ENVIRONMENT,
        release=f"bookstore-api@{settings.VERSION}",
        integrations=[
            FastApiIntegration(transaction_style="endpoint"),
            StarletteIntegration(transaction_style="endpoint"),
            SqlalchemyIntegration(),
        ],
        ignore_errors=[
            KeyboardInterrupt,
        ],
        send_default_pii=False,
        attach_stacktrace=True,
    )

    logger.info(f"✅ Sentry initialized for environment: {settings.ENVIRONMENT}")
else:
    logger.info("⚠️  Sentry DSN not configured - error tracking disabled")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.VERSION,
    openapi_url="/api/openapi.json" if settings.DEBUG else None,
    lifespan=lifespan,
)

setup_middleware(app)
register_exception_handlers(app)

app.include_router(books.router, prefix="/books", tags=["books"])


@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "version": settings.VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
