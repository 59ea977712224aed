"""Database session management."""

from typing import AsyncGenerator, Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from mediahub.config import Settings, get_settings

_async_session_maker: Optional[async_sessionmaker[AsyncSession]] = None
_engine: Optional[AsyncEngine] = None


def _connect_args(settings: Settings) -> dict:
    """Driver arguments bounding how long a storage call may block."""
    if settings.database_is_sqlite:
        return {"timeout": settings.storage_timeout_seconds}
    if settings.database_is_postgres:
        return {
            "timeout": settings.storage_timeout_seconds,
            "command_timeout": settings.storage_timeout_seconds,
        }
    return {}


def get_engine() -> AsyncEngine:
    """Get or create the database engine."""
    global _engine
    if _engine is None:
        settings = get_settings()
        _engine = create_async_engine(
            settings.database_url,
            echo=settings.debug,
            pool_pre_ping=True,
            connect_args=_connect_args(settings),
        )
    return _engine


def get_session_maker() -> async_sessionmaker[AsyncSession]:
    """Get or create the session maker."""
    global _async_session_maker
    if _async_session_maker is None:
        _async_session_maker = async_sessionmaker(
            get_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
        )
    return _async_session_maker


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Get database session for dependency injection.

    Commits when the request succeeds and rolls back on any error.

    Yields:
        AsyncSession: Database session
    """
    session_maker = get_session_maker()
    async with session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def close_db_connections():
    """Close all database connections."""
    global _engine, _async_session_maker
    if _engine:
        await _engine.dispose()
        _engine = None
    _async_session_maker = None
