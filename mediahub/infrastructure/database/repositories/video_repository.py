"""SQLAlchemy implementation of video repository."""

from typing import List, Optional, Sequence

from sqlalchemy import delete, func, not_, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from mediahub.core.domain.entities import Page, Video
from mediahub.core.domain.enums import SortOrder, VideoSortField
from mediahub.core.services.media.models import VideoModel
from .interfaces import VideoRepositoryInterface

_SORT_COLUMNS = {
    VideoSortField.CREATED_AT: VideoModel.created_at,
    VideoSortField.TITLE: VideoModel.title,
    VideoSortField.VIEWS: VideoModel.views,
    VideoSortField.DURATION: VideoModel.duration,
}


def visible_to(viewer_id: Optional[int]):
    """SQL form of the published-or-owner rule."""
    if viewer_id is None:
        return VideoModel.is_published.is_(True)
    return or_(VideoModel.is_published.is_(True), VideoModel.owner_id == viewer_id)


def escape_like(value: str) -> str:
    """Make LIKE wildcards in user input match literally."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class SqlVideoRepository(VideoRepositoryInterface):
    """
    SQLAlchemy-based implementation of video repository.

    Owner-scoped writes carry ``owner_id`` in their WHERE clause and report
    a miss as None.
    """

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize repository with database session.

        Args:
            session: Async SQLAlchemy session
        """
        self.session = session

    async def get(self, resource_id: int) -> Optional[Video]:
        """
        Retrieve a single video by ID.

        Args:
            resource_id: Video identifier

        Returns:
            Video entity if found, None otherwise
        """
        stmt = select(VideoModel).where(VideoModel.id == resource_id)
        result = await self.session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            return None

        return self._model_to_entity(model)

    async def get_many(self, video_ids: Sequence[int]) -> List[Video]:
        """
        Retrieve videos by IDs, preserving the requested order.

        Args:
            video_ids: Video identifiers

        Returns:
            Existing videos; unknown IDs are skipped
        """
        if not video_ids:
            return []

        stmt = select(VideoModel).where(VideoModel.id.in_(list(video_ids)))
        result = await self.session.execute(stmt)
        by_id = {model.id: model for model in result.scalars().all()}

        return [self._model_to_entity(by_id[i]) for i in video_ids if i in by_id]

    async def list_videos(
        self,
        viewer_id: Optional[int],
        page: int,
        limit: int,
        query: Optional[str] = None,
        sort_by: VideoSortField = VideoSortField.CREATED_AT,
        sort_order: SortOrder = SortOrder.DESC,
        owner_id: Optional[int] = None,
    ) -> Page[Video]:
        """
        List one page of videos visible to the viewer.

        Args:
            viewer_id: Requesting account, None for anonymous
            page: 1-based page number
            limit: Page size
            query: Case-insensitive match on title or description
            sort_by: Sort column
            sort_order: Sort direction
            owner_id: Restrict to one channel

        Returns:
            Page of videos
        """
        conditions = [visible_to(viewer_id)]
        if owner_id is not None:
            conditions.append(VideoModel.owner_id == owner_id)
        if query:
            pattern = f"%{escape_like(query)}%"
            conditions.append(
                or_(
                    VideoModel.title.ilike(pattern, escape="\\"),
                    VideoModel.description.ilike(pattern, escape="\\"),
                )
            )

        count_stmt = select(func.count(VideoModel.id)).where(*conditions)
        total = (await self.session.execute(count_stmt)).scalar_one()

        column = _SORT_COLUMNS[sort_by]
        order = column.asc() if sort_order == SortOrder.ASC else column.desc()
        stmt = (
            select(VideoModel)
            .where(*conditions)
            .order_by(order, VideoModel.id.desc())
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

    async def create(self, video: Video) -> Video:
        """
        Persist a new video.

        Args:
            video: Video entity; its ``id`` is ignored

        Returns:
            Created video with ID
        """
        model = VideoModel(
            owner_id=video.owner_id,
            title=video.title,
            description=video.description,
            video_url=video.video_url,
            thumbnail_url=video.thumbnail_url,
            duration=video.duration,
            views=video.views,
            is_published=video.is_published,
        )
        self.session.add(model)
        await self.session.flush()
        await self.session.refresh(model)

        return self._model_to_entity(model)

    async def update_owned(
        self,
        video_id: int,
        owner_id: int,
        title: Optional[str] = None,
        description: Optional[str] = None,
        thumbnail_url: Optional[str] = None,
    ) -> Optional[Video]:
        """
        Update video fields if the video belongs to the owner.

        Returns:
            Updated video, or None if no owned video matched
        """
        values = {}
        if title is not None:
            values["title"] = title
        if description is not None:
            values["description"] = description
        if thumbnail_url is not None:
            values["thumbnail_url"] = thumbnail_url

        if not values:
            video = await self.get(video_id)
            return video if video and video.owner_id == owner_id else None

        stmt = (
            update(VideoModel)
            .where(VideoModel.id == video_id, VideoModel.owner_id == owner_id)
            .values(**values)
            .returning(VideoModel.id)
        )
        result = await self.session.execute(stmt)
        if result.scalar_one_or_none() is None:
            return None

        return await self._get_fresh(video_id)

    async def delete_owned(self, video_id: int, owner_id: int) -> Optional[Video]:
        """
        Delete video if it belongs to the owner.

        Returns:
            The removed video, or None if no owned video matched
        """
        video = await self.get(video_id)
        if not video or video.owner_id != owner_id:
            return None

        stmt = delete(VideoModel).where(
            VideoModel.id == video_id, VideoModel.owner_id == owner_id
        )
        result = await self.session.execute(stmt)
        await self.session.flush()

        return video if result.rowcount > 0 else None

    async def toggle_published(self, video_id: int, owner_id: int) -> Optional[Video]:
        """
        Flip the publish flag in a single conditional statement.

        Returns:
            Video with its new state, or None if no owned video matched
        """
        stmt = (
            update(VideoModel)
            .where(VideoModel.id == video_id, VideoModel.owner_id == owner_id)
            .values(is_published=not_(VideoModel.is_published))
            .returning(VideoModel.id)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        if result.scalar_one_or_none() is None:
            return None

        return await self._get_fresh(video_id)

    async def record_view(self, video_id: int) -> Optional[int]:
        """Increment the view counter without reading it first."""
        stmt = (
            update(VideoModel)
            .where(VideoModel.id == video_id)
            .values(views=VideoModel.views + 1)
            .returning(VideoModel.views)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def _get_fresh(self, video_id: int) -> Optional[Video]:
        """Reload a video bypassing the identity map."""
        stmt = (
            select(VideoModel)
            .where(VideoModel.id == video_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._model_to_entity(model) if model else None

    def _model_to_entity(self, model: VideoModel) -> Video:
        """Convert database model to domain entity."""
        return Video(
            id=model.id,
            owner_id=model.owner_id,
            title=model.title,
            description=model.description,
            video_url=model.video_url,
            thumbnail_url=model.thumbnail_url,
            duration=model.duration,
            views=model.views,
            is_published=model.is_published,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
