"""Database initialization utilities."""

import logging
from typing import Optional

from sqlalchemy import func, select, text
from sqlalchemy.ext.asyncio import AsyncEngine

from mediahub.core.services.auth.models import AccountModel
from mediahub.core.services.engagement.models import LikeModel, SubscriptionModel
from mediahub.core.services.media.models import (
    CommentModel,
    PlaylistEntryModel,
    PlaylistModel,
    TweetModel,
    VideoModel,
    WatchHistoryModel,
)
from mediahub.infrastructure.database.connection import Base
from mediahub.infrastructure.database.session import get_engine, get_session_maker

logger = logging.getLogger(__name__)

COUNTED_MODELS = (
    AccountModel,
    VideoModel,
    TweetModel,
    CommentModel,
    PlaylistModel,
    PlaylistEntryModel,
    LikeModel,
    SubscriptionModel,
    WatchHistoryModel,
)


async def create_tables(engine: Optional[AsyncEngine] = None) -> None:
    """
    Create all tables that do not exist yet.

    Args:
        engine: Engine to use, defaults to the application engine
    """
    engine = engine or get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def init_database() -> None:
    """Initialize database schema."""
    try:
        logger.info("Creating database tables...")
        await create_tables()
        logger.info("Database tables are ready")
    except Exception as e:
        logger.error(f"Failed to initialize database: {e}")
        raise


async def check_database_health() -> bool:
    """Check database connectivity and health."""
    try:
        session_maker = get_session_maker()
        async with session_maker() as session:
            await session.execute(text("SELECT 1"))
            return True
    except Exception as e:
        logger.warning(f"Database health check failed: {e}")
        return False


async def get_database_info() -> dict:
    """Get database information and statistics."""
    try:
        session_maker = get_session_maker()
        async with session_maker() as session:
            tables = {}
            for model in COUNTED_MODELS:
                result = await session.execute(select(func.count()).select_from(model))
                tables[model.__tablename__] = result.scalar()

            return {
                "healthy": True,
                "tables": tables,
                "engine_info": get_engine().url.render_as_string(hide_password=True),
            }
    except Exception as e:
        return {
            "healthy": False,
            "error": str(e),
        }
