"""Video service implementation."""

import logging
from dataclasses import replace
from typing import List, Optional

from mediahub.config import Settings, get_settings
from mediahub.core.access.guard import OwnershipGuard
from mediahub.core.access.visibility import VisibilityFilter
from mediahub.core.auth.entities import Principal
from mediahub.core.domain.entities import MediaAsset, MediaUpload, Page, Video
from mediahub.core.domain.enums import ResourceType, SortOrder, VideoSortField
from mediahub.core.exceptions import (
    ResourceNotFoundException,
    UpstreamFailureException,
    ValidationException,
)
from mediahub.infrastructure.database.repositories.interfaces import (
    UnitOfWorkInterface,
    VideoRepositoryInterface,
    WatchHistoryRepositoryInterface,
)
from .interfaces import MediaStorageInterface
from .media_transfer import MediaTransfer
from .pagination import normalize_page

logger = logging.getLogger(__name__)


class VideoService:
    """
    Video lifecycle operations.

    Media uploads finish before any record is written, and stored media is
    only removed after the record change is committed.
    """

    def __init__(
        self,
        video_repository: VideoRepositoryInterface,
        media_storage: MediaStorageInterface,
        guard: OwnershipGuard,
        visibility: VisibilityFilter,
        unit_of_work: UnitOfWorkInterface,
        watch_history: WatchHistoryRepositoryInterface,
        settings: Optional[Settings] = None,
    ) -> None:
        """
        Initialize video service with dependencies.

        Args:
            video_repository: Repository for video persistence
            media_storage: Binary media store
            guard: Ownership checks
            visibility: Published-or-owner rules
            unit_of_work: Transaction boundary
            watch_history: Per-account record of watched videos
            settings: Application settings, defaults to the cached instance
        """
        self._videos = video_repository
        self._guard = guard
        self._visibility = visibility
        self._unit_of_work = unit_of_work
        self._history = watch_history
        self._transfer = MediaTransfer(
            media_storage, (settings or get_settings()).media_upload_timeout_seconds
        )

    async def list_videos(
        self,
        principal: Optional[Principal],
        page: int = 1,
        limit: int = 10,
        query: Optional[str] = None,
        sort_by: VideoSortField = VideoSortField.CREATED_AT,
        sort_order: SortOrder = SortOrder.DESC,
        owner_id: Optional[int] = None,
    ) -> Page[Video]:
        """
        List one page of videos visible to the principal.

        Args:
            principal: Viewer, None for anonymous
            page: 1-based page number
            limit: Page size, clamped to 1..20
            query: Text matched against title and description
            sort_by: Sort column
            sort_order: Sort direction
            owner_id: Restrict to one channel

        Returns:
            Page of visible videos
        """
        page, limit = normalize_page(page, limit)
        result = await self._videos.list_videos(
            viewer_id=principal.id if principal else None,
            page=page,
            limit=limit,
            query=query.strip() if query else None,
            sort_by=sort_by,
            sort_order=sort_order,
            owner_id=owner_id,
        )
        return Page(
            items=self._visibility.filter_visible(result.items, principal),
            total=result.total,
            page=result.page,
            limit=result.limit,
        )

    async def publish_video(
        self,
        principal: Principal,
        title: str,
        description: str,
        video: Optional[MediaUpload],
        thumbnail: Optional[MediaUpload],
    ) -> Video:
        """
        Upload a video with its thumbnail and create the record.

        Args:
            principal: Publishing account
            title: Video title
            description: Video description
            video: Media file
            thumbnail: Thumbnail image

        Returns:
            Created video

        Raises:
            ValidationException: If a field or file is missing
            UpstreamFailureException: If an upload fails or times out
        """
        title = (title or "").strip()
        description = (description or "").strip()
        if not title or not description:
            raise ValidationException("Title and description are required")
        if not video or not video.content:
            raise ValidationException("Video file is required")
        if not thumbnail or not thumbnail.content:
            raise ValidationException("Thumbnail file is required")

        video_asset = await self._transfer.upload(video)
        try:
            thumbnail_asset = await self._transfer.upload(thumbnail)
        except UpstreamFailureException:
            await self._transfer.discard(video_asset.url)
            raise

        created = await self._videos.create(
            Video(
                id=0,
                owner_id=principal.id,
                title=title,
                description=description,
                video_url=video_asset.url,
                thumbnail_url=thumbnail_asset.url,
                duration=video_asset.duration_seconds,
            )
        )
        logger.info("Account %s published video %s", principal.id, created.id)
        return created

    async def get_video(self, video_id: int, principal: Optional[Principal]) -> Video:
        """
        Get a video the principal may see.

        Raises:
            ResourceNotFoundException: If the video is absent or unpublished and not owned
        """
        video = await self._videos.get(video_id)
        return self._visibility.require_visible(video, principal, ResourceType.VIDEO, video_id)

    async def watch_video(self, video_id: int, principal: Optional[Principal]) -> Video:
        """
        Get a video for playback, counting the view.

        Signed-in viewers also get the video added to their watch history.

        Raises:
            ResourceNotFoundException: If the video is absent or unpublished and not owned
        """
        video = await self.get_video(video_id, principal)

        views = await self._videos.record_view(video_id)
        if views is None:
            raise ResourceNotFoundException(ResourceType.VIDEO.value, video_id)
        if principal is not None:
            await self._history.record(principal.id, video_id)

        return replace(video, views=views)

    async def list_watch_history(self, principal: Principal) -> List[Video]:
        """Watched videos still visible to the principal, most recent first."""
        video_ids = await self._history.list_video_ids(principal.id)
        videos = await self._videos.get_many(video_ids)
        return self._visibility.filter_visible(videos, principal)

    async def update_video(
        self,
        video_id: int,
        principal: Principal,
        title: Optional[str] = None,
        description: Optional[str] = None,
        thumbnail: Optional[MediaUpload] = None,
    ) -> Video:
        """
        Update video details, optionally replacing the thumbnail.

        Raises:
            ValidationException: If nothing to update was given
            ResourceNotFoundException: If the video does not exist
            ForbiddenException: If the principal does not own the video
            UpstreamFailureException: If the thumbnail upload fails
        """
        title = title.strip() if title is not None else None
        description = description.strip() if description is not None else None
        if title == "":
            raise ValidationException("Title cannot be empty")
        if title is None and description is None and thumbnail is None:
            raise ValidationException("Nothing to update")

        current = await self._guard.require_owner(ResourceType.VIDEO, video_id, principal.id)

        new_thumbnail: Optional[MediaAsset] = None
        if thumbnail is not None:
            if not thumbnail.content:
                raise ValidationException("Thumbnail file is empty")
            new_thumbnail = await self._transfer.upload(thumbnail)

        try:
            updated = await self._videos.update_owned(
                video_id,
                principal.id,
                title=title,
                description=description,
                thumbnail_url=new_thumbnail.url if new_thumbnail else None,
            )
            if updated is None:
                raise ResourceNotFoundException(ResourceType.VIDEO.value, video_id)
            if new_thumbnail:
                await self._unit_of_work.commit()
        except Exception:
            # The new thumbnail is referenced by nothing unless the commit went through
            if new_thumbnail:
                await self._transfer.discard(new_thumbnail.url)
            raise

        if new_thumbnail:
            await self._transfer.discard(current.thumbnail_url)

        return updated

    async def delete_video(self, video_id: int, principal: Principal) -> Video:
        """
        Delete a video owned by the principal.

        Comments, likes and playlist entries are left for lazy cleanup.

        Raises:
            ResourceNotFoundException: If the video does not exist
            ForbiddenException: If the principal does not own the video
        """
        await self._guard.require_owner(ResourceType.VIDEO, video_id, principal.id)

        deleted = await self._videos.delete_owned(video_id, principal.id)
        if deleted is None:
            raise ResourceNotFoundException(ResourceType.VIDEO.value, video_id)

        await self._unit_of_work.commit()
        logger.info("Account %s deleted video %s", principal.id, video_id)

        await self._transfer.discard(deleted.video_url)
        await self._transfer.discard(deleted.thumbnail_url)
        return deleted

    async def toggle_publish_status(self, video_id: int, principal: Principal) -> Video:
        """
        Flip the publish flag of a video owned by the principal.

        Raises:
            ResourceNotFoundException: If the video does not exist
            ForbiddenException: If the principal does not own the video
        """
        await self._guard.require_owner(ResourceType.VIDEO, video_id, principal.id)

        video = await self._videos.toggle_published(video_id, principal.id)
        if video is None:
            raise ResourceNotFoundException(ResourceType.VIDEO.value, video_id)
        return video

