"""SQLAlchemy implementation of watch history repository."""

from typing import List

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from mediahub.core.services.media.models import WatchHistoryModel
from .interfaces import WatchHistoryRepositoryInterface


class SqlWatchHistoryRepository(WatchHistoryRepositoryInterface):
    """
    SQLAlchemy-based implementation of watch history.

    Rows carry no uniqueness constraint: two concurrent viewings of the same
    video may both insert, and listing collapses them to one entry.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def record(self, account_id: int, video_id: int) -> None:
        await self.session.execute(
            delete(WatchHistoryModel)
            .where(
                WatchHistoryModel.account_id == account_id,
                WatchHistoryModel.video_id == video_id,
            )
            .execution_options(synchronize_session=False)
        )
        self.session.add(WatchHistoryModel(account_id=account_id, video_id=video_id))
        await self.session.flush()

    async def list_video_ids(self, account_id: int) -> List[int]:
        result = await self.session.execute(
            select(WatchHistoryModel.video_id)
            .where(WatchHistoryModel.account_id == account_id)
            .group_by(WatchHistoryModel.video_id)
            .order_by(func.max(WatchHistoryModel.id).desc())
        )
        return list(result.scalars().all())
