"""Playlist service implementation."""

import logging
from typing import List, Optional, Sequence, Tuple

from mediahub.core.access.guard import OwnershipGuard
from mediahub.core.access.visibility import VisibilityFilter
from mediahub.core.auth.entities import Principal
from mediahub.core.auth.interfaces import CredentialStoreInterface
from mediahub.core.domain.entities import Playlist, Video
from mediahub.core.domain.enums import ResourceType
from mediahub.core.exceptions import ResourceNotFoundException, ValidationException
from mediahub.infrastructure.database.repositories.interfaces import (
    PlaylistRepositoryInterface,
    VideoRepositoryInterface,
)
from .validation import require_text

logger = logging.getLogger(__name__)


class PlaylistService:
    """
    Playlist operations.

    Playlists themselves follow the published-or-owner rule. Their video
    lists are filtered per video on every read, so an unpublished video in
    someone else's playlist is silently left out.
    """

    def __init__(
        self,
        playlist_repository: PlaylistRepositoryInterface,
        video_repository: VideoRepositoryInterface,
        credential_store: CredentialStoreInterface,
        guard: OwnershipGuard,
        visibility: VisibilityFilter,
    ) -> None:
        """
        Initialize playlist service with dependencies.

        Args:
            playlist_repository: Repository for playlist persistence
            video_repository: Video lookup for entries
            credential_store: Account lookup for user listings
            guard: Ownership checks
            visibility: Published-or-owner rules
        """
        self._playlists = playlist_repository
        self._videos = video_repository
        self._accounts = credential_store
        self._guard = guard
        self._visibility = visibility

    async def create_playlist(
        self,
        principal: Principal,
        name: str,
        description: str = "",
        video_ids: Sequence[int] = (),
    ) -> Playlist:
        """
        Create a playlist, keeping only videos the principal may see.

        Raises:
            ValidationException: If name is blank
        """
        name = require_text(name, "Name")
        videos = await self._visible_videos(video_ids, principal)

        playlist = await self._playlists.create(
            principal.id, name, (description or "").strip(), [v.id for v in videos]
        )
        return self._visibility.visible_playlist(playlist, principal)

    async def list_user_playlists(
        self, user_id: int, principal: Optional[Principal]
    ) -> List[Playlist]:
        """
        List playlists of an account visible to the principal.

        Raises:
            ResourceNotFoundException: If the account does not exist
        """
        if not await self._accounts.get_account_by_id(user_id):
            raise ResourceNotFoundException("user", user_id)

        playlists = await self._playlists.list_by_owner(user_id)
        return [
            self._visibility.visible_playlist(p, principal)
            for p in self._visibility.filter_visible(playlists, principal)
        ]

    async def get_playlist(self, playlist_id: int, principal: Optional[Principal]) -> Playlist:
        """
        Get a playlist the principal may see.

        Raises:
            ResourceNotFoundException: If the playlist is absent or hidden
        """
        playlist = await self._playlists.get(playlist_id)
        playlist = self._visibility.require_visible(
            playlist, principal, ResourceType.PLAYLIST, playlist_id
        )
        return self._visibility.visible_playlist(playlist, principal)

    async def add_videos(
        self, playlist_id: int, principal: Principal, video_ids: Sequence[int]
    ) -> Tuple[Playlist, int]:
        """
        Add videos to a playlist owned by the principal.

        Returns:
            Updated playlist and the number of entries added

        Raises:
            ValidationException: If no video IDs were given
            ResourceNotFoundException: If the playlist does not exist or no
                given video exists and is visible
            ForbiddenException: If the principal does not own the playlist
        """
        if not video_ids:
            raise ValidationException("At least one video ID is required")

        await self._guard.require_owner(ResourceType.PLAYLIST, playlist_id, principal.id)

        videos = await self._visible_videos(video_ids, principal)
        if not videos:
            raise ResourceNotFoundException(ResourceType.VIDEO.value)

        added = await self._playlists.add_videos(playlist_id, [v.id for v in videos])
        return await self._reload(playlist_id, principal), added

    async def remove_videos(
        self, playlist_id: int, principal: Principal, video_ids: Sequence[int]
    ) -> Tuple[Playlist, int]:
        """
        Remove videos from a playlist owned by the principal.

        Returns:
            Updated playlist and the number of entries removed
        """
        if not video_ids:
            raise ValidationException("At least one video ID is required")

        await self._guard.require_owner(ResourceType.PLAYLIST, playlist_id, principal.id)

        removed = await self._playlists.remove_videos(playlist_id, list(video_ids))
        return await self._reload(playlist_id, principal), removed

    async def update_playlist(
        self,
        playlist_id: int,
        principal: Principal,
        name: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Playlist:
        """
        Rename or re-describe a playlist owned by the principal.

        Raises:
            ValidationException: If neither field is given or name is blank
        """
        if name is None and description is None:
            raise ValidationException("Name or description is required")
        if name is not None:
            name = require_text(name, "Name")

        await self._guard.require_owner(ResourceType.PLAYLIST, playlist_id, principal.id)

        updated = await self._playlists.update_owned(
            playlist_id,
            principal.id,
            name=name,
            description=description.strip() if description is not None else None,
        )
        if updated is None:
            raise ResourceNotFoundException(ResourceType.PLAYLIST.value, playlist_id)
        return self._visibility.visible_playlist(updated, principal)

    async def delete_playlist(self, playlist_id: int, principal: Principal) -> Playlist:
        await self._guard.require_owner(ResourceType.PLAYLIST, playlist_id, principal.id)

        deleted = await self._playlists.delete_owned(playlist_id, principal.id)
        if deleted is None:
            raise ResourceNotFoundException(ResourceType.PLAYLIST.value, playlist_id)

        logger.info("Account %s deleted playlist %s", principal.id, playlist_id)
        return self._visibility.visible_playlist(deleted, principal)

    async def _visible_videos(
        self, video_ids: Sequence[int], principal: Principal
    ) -> List[Video]:
        videos = await self._videos.get_many(list(dict.fromkeys(video_ids)))
        return self._visibility.filter_visible(videos, principal)

    async def _reload(self, playlist_id: int, principal: Principal) -> Playlist:
        playlist = await self._playlists.get(playlist_id)
        if playlist is None:
            raise ResourceNotFoundException(ResourceType.PLAYLIST.value, playlist_id)
        return self._visibility.visible_playlist(playlist, principal)
