"""SQLAlchemy implementation of like repository."""

import logging
from typing import List, Optional, Sequence

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from mediahub.core.domain.entities import Like, LikeKey, ParentRef
from mediahub.core.domain.enums import ResourceType
from mediahub.core.exceptions import ConflictException
from mediahub.core.services.engagement.models import LikeModel
from .interfaces import LikeRepositoryInterface

logger = logging.getLogger(__name__)

_TARGET_COLUMNS = {
    ResourceType.VIDEO: LikeModel.video_id,
    ResourceType.COMMENT: LikeModel.comment_id,
    ResourceType.TWEET: LikeModel.tweet_id,
}


class SqlLikeRepository(LikeRepositoryInterface):
    """
    SQLAlchemy-based implementation of like repository.

    Each like has exactly one target column set; the ``(liked_by, target)``
    unique constraints make a second insert for the same key fail.
    """

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize repository with database session.

        Args:
            session: Async SQLAlchemy session
        """
        self.session = session

    async def find_by_key(self, key: LikeKey) -> Optional[Like]:
        """
        Get the like matching the key.

        Args:
            key: Liking account and target

        Returns:
            The like, or None if the account has not liked the target
        """
        column = _TARGET_COLUMNS[key.target.kind]
        stmt = select(LikeModel).where(
            LikeModel.liked_by == key.liked_by, column == key.target.id
        )
        result = await self.session.execute(stmt)
        model = result.scalar_one_or_none()

        return self._model_to_entity(model) if model else None

    async def delete_by_id(self, record_id: int) -> bool:
        """
        Delete a like previously read by identifier.

        Returns:
            False when another request removed it first
        """
        stmt = (
            delete(LikeModel)
            .where(LikeModel.id == record_id)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1

    async def insert(self, key: LikeKey) -> Like:
        """
        Insert a like for the key.

        Args:
            key: Liking account and target

        Returns:
            Created like

        Raises:
            ConflictException: If a like for the same key already exists
        """
        column = _TARGET_COLUMNS[key.target.kind]
        model = LikeModel(liked_by=key.liked_by, **{column.key: key.target.id})

        try:
            self.session.add(model)
            await self.session.flush()
            await self.session.refresh(model)
        except IntegrityError:
            await self.session.rollback()
            logger.info(
                "Concurrent like insert lost for account %s on %s %s",
                key.liked_by, key.target.kind.value, key.target.id,
            )
            raise ConflictException(
                "Like already exists",
                f"{key.target.kind.value} id: {key.target.id}",
            )

        return self._model_to_entity(model)

    async def delete_by_targets(self, kind: ResourceType, target_ids: Sequence[int]) -> int:
        """
        Delete every like on any of the given targets.

        Args:
            kind: Target type
            target_ids: Target identifiers

        Returns:
            Number of likes removed
        """
        if not target_ids:
            return 0

        column = _TARGET_COLUMNS[kind]
        stmt = (
            delete(LikeModel)
            .where(column.in_(list(target_ids)))
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()

        return result.rowcount

    async def list_liked_video_ids(self, liked_by: int) -> List[int]:
        stmt = (
            select(LikeModel.video_id)
            .where(LikeModel.liked_by == liked_by, LikeModel.video_id.is_not(None))
            .order_by(LikeModel.created_at.desc(), LikeModel.id.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    def _model_to_entity(self, model: LikeModel) -> Like:
        """Convert database model to domain entity."""
        if model.video_id is not None:
            target = ParentRef.video(model.video_id)
        elif model.comment_id is not None:
            target = ParentRef.comment(model.comment_id)
        else:
            target = ParentRef.tweet(model.tweet_id)

        return Like(
            id=model.id,
            liked_by=model.liked_by,
            target=target,
            created_at=model.created_at,
        )
