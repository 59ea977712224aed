"""SQLAlchemy implementation of comment repository."""

from typing import List, Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from mediahub.core.domain.entities import Comment, Page, ParentRef
from mediahub.core.domain.enums import ResourceType
from mediahub.core.services.media.models import CommentModel
from .interfaces import CommentRepositoryInterface


def _parent_column(parent: ParentRef):
    """Column holding references to parents of the given kind."""
    if parent.kind == ResourceType.VIDEO:
        return CommentModel.video_id
    if parent.kind == ResourceType.TWEET:
        return CommentModel.tweet_id
    raise ValueError(f"Comments cannot be attached to a {parent.kind.value}")


class SqlCommentRepository(CommentRepositoryInterface):
    """
    SQLAlchemy-based implementation of comment repository.

    The parent is stored as one of two nullable columns and surfaced as a
    ``ParentRef`` on the entity.
    """

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize repository with database session.

        Args:
            session: Async SQLAlchemy session
        """
        self.session = session

    async def get(self, resource_id: int) -> Optional[Comment]:
        stmt = select(CommentModel).where(CommentModel.id == resource_id)
        result = await self.session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            return None

        return self._model_to_entity(model)

    async def create(self, owner_id: int, parent: ParentRef, content: str) -> Comment:
        """
        Attach a new comment to a parent.

        Args:
            owner_id: Commenting account
            parent: Video or tweet the comment belongs to
            content: Comment text

        Returns:
            Created comment with ID
        """
        column = _parent_column(parent)
        model = CommentModel(owner_id=owner_id, content=content, **{column.key: parent.id})
        self.session.add(model)
        await self.session.flush()
        await self.session.refresh(model)

        return self._model_to_entity(model)

    async def list_by_parent(self, parent: ParentRef, page: int, limit: int) -> Page[Comment]:
        """
        List one page of comments on a parent, newest first.

        Args:
            parent: Video or tweet
            page: 1-based page number
            limit: Page size

        Returns:
            Page of comments
        """
        column = _parent_column(parent)

        count_stmt = select(func.count(CommentModel.id)).where(column == parent.id)
        total = (await self.session.execute(count_stmt)).scalar_one()

        stmt = (
            select(CommentModel)
            .where(column == parent.id)
            .order_by(CommentModel.created_at.desc(), CommentModel.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        result = await self.session.execute(stmt)

        return Page(
            items=[self._model_to_entity(m) for m in result.scalars().all()],
            total=total,
            page=page,
            limit=limit,
        )

    async def update_owned(self, comment_id: int, owner_id: int, content: str) -> Optional[Comment]:
        stmt = (
            update(CommentModel)
            .where(CommentModel.id == comment_id, CommentModel.owner_id == owner_id)
            .values(content=content)
            .returning(CommentModel.id)
        )
        result = await self.session.execute(stmt)
        if result.scalar_one_or_none() is None:
            return None

        stmt = (
            select(CommentModel)
            .where(CommentModel.id == comment_id)
            .execution_options(populate_existing=True)
        )
        model = (await self.session.execute(stmt)).scalar_one()
        return self._model_to_entity(model)

    async def delete_owned(self, comment_id: int, owner_id: int) -> Optional[Comment]:
        comment = await self.get(comment_id)
        if not comment or comment.owner_id != owner_id:
            return None

        stmt = delete(CommentModel).where(
            CommentModel.id == comment_id, CommentModel.owner_id == owner_id
        )
        result = await self.session.execute(stmt)
        await self.session.flush()

        return comment if result.rowcount > 0 else None

    async def list_ids_by_parent(self, parent: ParentRef) -> List[int]:
        column = _parent_column(parent)
        result = await self.session.execute(
            select(CommentModel.id).where(column == parent.id)
        )
        return list(result.scalars().all())

    async def delete_by_parent(self, parent: ParentRef) -> int:
        column = _parent_column(parent)
        result = await self.session.execute(
            delete(CommentModel)
            .where(column == parent.id)
            .execution_options(synchronize_session=False)
        )
        await self.session.flush()
        return result.rowcount

    def _model_to_entity(self, model: CommentModel) -> Comment:
        """Convert database model to domain entity."""
        if model.video_id is not None:
            parent = ParentRef.video(model.video_id)
        else:
            parent = ParentRef.tweet(model.tweet_id)

        return Comment(
            id=model.id,
            owner_id=model.owner_id,
            content=model.content,
            parent=parent,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
