"""Like service implementation."""

from typing import List

from mediahub.core.access.cascade import CascadeCoordinator
from mediahub.core.access.toggle import ToggleProtocol
from mediahub.core.access.visibility import VisibilityFilter
from mediahub.core.auth.entities import Principal
from mediahub.core.domain.entities import Like, LikeKey, ParentRef, ToggleResult, Video
from mediahub.infrastructure.database.repositories.interfaces import (
    LikeRepositoryInterface,
    VideoRepositoryInterface,
)


class LikeService:
    """
    Like toggles on videos, comments and tweets.

    The target is resolved through the cascade coordinator and must be
    visible to the principal before the like is flipped.
    """

    def __init__(
        self,
        like_repository: LikeRepositoryInterface,
        video_repository: VideoRepositoryInterface,
        cascade: CascadeCoordinator,
        visibility: VisibilityFilter,
    ) -> None:
        """
        Initialize like service with dependencies.

        Args:
            like_repository: Repository for like persistence
            video_repository: Video lookup for liked-video listings
            cascade: Target resolution and orphan cleanup
            visibility: Published-or-owner rules
        """
        self._likes = like_repository
        self._videos = video_repository
        self._cascade = cascade
        self._visibility = visibility
        self._toggle = ToggleProtocol(like_repository)

    async def toggle_video_like(self, video_id: int, principal: Principal) -> ToggleResult[Like]:
        """
        Like or unlike a video.

        Raises:
            ParentGoneException: If the video vanished and its dependents were removed
            ResourceNotFoundException: If the video is absent or hidden
            ConflictException: If a concurrent request liked it first
        """
        return await self._toggle_on(ParentRef.video(video_id), principal)

    async def toggle_tweet_like(self, tweet_id: int, principal: Principal) -> ToggleResult[Like]:
        return await self._toggle_on(ParentRef.tweet(tweet_id), principal)

    async def toggle_comment_like(self, comment_id: int, principal: Principal) -> ToggleResult[Like]:
        """
        Like or unlike a comment.

        Both the comment and the video or tweet it belongs to must still
        exist; a vanished parent triggers the cascade for that parent.
        """
        target = ParentRef.comment(comment_id)
        comment = await self._cascade.ensure_parent(target)

        parent = await self._cascade.ensure_parent(comment.parent)
        self._visibility.require_visible(parent, principal, comment.parent.kind, comment.parent.id)

        return await self._toggle.toggle(LikeKey(liked_by=principal.id, target=target))

    async def list_liked_videos(self, principal: Principal) -> List[Video]:
        """Videos liked by the principal that still exist and are visible, newest like first."""
        video_ids = await self._likes.list_liked_video_ids(principal.id)
        videos = await self._videos.get_many(video_ids)
        return self._visibility.filter_visible(videos, principal)

    async def _toggle_on(self, target: ParentRef, principal: Principal) -> ToggleResult[Like]:
        resource = await self._cascade.ensure_parent(target)
        self._visibility.require_visible(resource, principal, target.kind, target.id)
        return await self._toggle.toggle(LikeKey(liked_by=principal.id, target=target))
