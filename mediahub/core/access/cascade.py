"""Lazy removal of dependents whose parent has disappeared."""

import logging
from typing import Any

from sqlalchemy.exc import SQLAlchemyError

from mediahub.core.domain.entities import COMMENT_PARENT_TYPES, ParentRef
from mediahub.core.domain.enums import ResourceType
from mediahub.core.exceptions import ParentGoneException, ResourceNotFoundException
from mediahub.infrastructure.database.repositories.interfaces import (
    CommentRepositoryInterface,
    LikeRepositoryInterface,
    PlaylistRepositoryInterface,
    TweetRepositoryInterface,
    UnitOfWorkInterface,
    VideoRepositoryInterface,
)

logger = logging.getLogger(__name__)


class CascadeCoordinator:
    """
    Keeps dependents from outliving their parent.

    Parents are deleted without touching their dependents. The first
    operation that resolves a missing parent removes everything still
    referencing it and commits that repair on its own, so the cleanup
    persists even though the operation itself then fails.
    """

    def __init__(
        self,
        videos: VideoRepositoryInterface,
        tweets: TweetRepositoryInterface,
        comments: CommentRepositoryInterface,
        likes: LikeRepositoryInterface,
        playlists: PlaylistRepositoryInterface,
        unit_of_work: UnitOfWorkInterface,
    ) -> None:
        """
        Initialize cascade coordinator.

        Args:
            videos: Video lookup
            tweets: Tweet lookup
            comments: Comment lookup and bulk removal
            likes: Like bulk removal
            playlists: Playlist entry removal
            unit_of_work: Transaction boundary for the repair
        """
        self._comments = comments
        self._likes = likes
        self._playlists = playlists
        self._unit_of_work = unit_of_work
        self._parents = {
            ResourceType.VIDEO: videos,
            ResourceType.TWEET: tweets,
            ResourceType.COMMENT: comments,
        }

    async def reconcile_on_missing_parent(self, parent: ParentRef) -> int:
        """
        Delete every record that depends on a missing parent.

        Removes comments on the parent and their likes, likes on the parent,
        and playlist entries when the parent is a video, then commits.

        Args:
            parent: The parent that no longer exists

        Returns:
            Number of dependent records removed
        """
        removed = 0

        if parent.kind in COMMENT_PARENT_TYPES:
            comment_ids = await self._comments.list_ids_by_parent(parent)
            removed += await self._likes.delete_by_targets(ResourceType.COMMENT, comment_ids)
            removed += await self._comments.delete_by_parent(parent)

        removed += await self._likes.delete_by_targets(parent.kind, [parent.id])

        if parent.kind == ResourceType.VIDEO:
            removed += await self._playlists.remove_video_everywhere(parent.id)

        await self._unit_of_work.commit()

        if removed:
            logger.info(
                "Removed %d orphaned record(s) of %s %s",
                removed, parent.kind.value, parent.id,
            )
        return removed

    async def ensure_parent(self, parent: ParentRef) -> Any:
        """
        Resolve a parent, repairing its dependents if it is gone.

        Args:
            parent: Parent the current operation depends on

        Returns:
            The parent resource

        Raises:
            ParentGoneException: If the parent is missing and dependents were removed
            ResourceNotFoundException: If the parent is missing and nothing referenced it,
                or if the repair itself failed
        """
        resource = await self._parents[parent.kind].get(parent.id)
        if resource is not None:
            return resource

        try:
            removed = await self.reconcile_on_missing_parent(parent)
        except SQLAlchemyError:
            logger.exception(
                "Cascade repair failed for %s %s", parent.kind.value, parent.id
            )
            await self._unit_of_work.rollback()
            raise ResourceNotFoundException(parent.kind.value, parent.id)

        if removed:
            raise ParentGoneException(parent.kind.value, parent.id, removed)
        raise ResourceNotFoundException(parent.kind.value, parent.id)
