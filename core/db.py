"""
Async database engine, pool and session management.

Purpose:
- Own the SQLAlchemy async engine (aiomysql driver in production)
- Provide per-request AsyncSession via a FastAPI dependency
- Provide Base declarative class for ORM models
- Health check for readiness probes

Lifecycle:
- A Database is created by the application lifespan, stored on
  app.state.database and disposed on shutdown. Handlers never reach for a
  module-level connection; they receive a session from get_db_session.

Production notes:
- pool_pre_ping drops stale connections before use
- pool_recycle keeps connections under MySQL's wait_timeout
"""
import logging
from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import StaticPool

from config.settings import Settings

logger = logging.getLogger(__name__)

Base = declarative_base()


def _engine_kwargs(url: str, settings: Settings) -> dict:
    if make_url(url).get_backend_name() == "sqlite":
        # one shared connection so in-memory databases survive across sessions
        return {
            "poolclass": StaticPool,
            "connect_args": {"check_same_thread": False},
        }
    return {
        "pool_size": settings.DB_POOL_SIZE,
        "max_overflow": settings.DB_MAX_OVERFLOW,
        "pool_pre_ping": True,
        "pool_recycle": settings.DB_POOL_RECYCLE,
    }


class Database:
    """Owns the async engine and session factory for one application."""

    def __init__(self, settings: Settings):
        self.url = settings.database_url
        self.engine: AsyncEngine = create_async_engine(
            self.url,
            echo=settings.DEBUG,
            **_engine_kwargs(self.url, settings),
        )
        self.session_maker = async_sessionmaker(
            self.engine, expire_on_commit=False, class_=AsyncSession
        )
        logger.info("Async DB engine created: %s", make_url(self.url).render_as_string(hide_password=True))

    async def create_all(self) -> None:
        """Create tables for all registered models (dev convenience)."""
        # make sure the models are registered on Base.metadata
        from models import db_models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def health_check(self) -> bool:
        """Run SELECT 1; True when the database answers."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error("DB health check failed: %s", e)
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()
        logger.info("Database connections closed")


def get_database(request: Request) -> Database:
    database = getattr(request.app.state, "database", None)
    if database is None:
        raise RuntimeError("Database not initialized")
    return database


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    Yield an AsyncSession bound to the application's Database.
    The session is closed when the request finishes.
    """
    database = get_database(request)
    async with database.session_maker() as session:
        yield session
