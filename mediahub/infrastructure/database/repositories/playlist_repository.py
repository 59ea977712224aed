"""SQLAlchemy implementation of playlist repository."""

from collections import defaultdict
from typing import Dict, List, Optional, Sequence

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from mediahub.core.domain.entities import Playlist, Video
from mediahub.core.exceptions import ConflictException
from mediahub.core.services.media.models import PlaylistEntryModel, PlaylistModel
from .interfaces import PlaylistRepositoryInterface
from .video_repository import SqlVideoRepository


class SqlPlaylistRepository(PlaylistRepositoryInterface):
    """
    SQLAlchemy-based implementation of playlist repository.

    Entries live in their own table and are resolved to videos on read.
    Entries pointing at deleted videos are skipped, not returned.
    """

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize repository with database session.

        Args:
            session: Async SQLAlchemy session
        """
        self.session = session
        self._videos = SqlVideoRepository(session)

    async def get(self, resource_id: int) -> Optional[Playlist]:
        """
        Retrieve a playlist with its resolved videos.

        Args:
            resource_id: Playlist identifier

        Returns:
            Playlist entity if found, None otherwise
        """
        stmt = select(PlaylistModel).where(PlaylistModel.id == resource_id)
        result = await self.session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            return None

        videos = await self._resolve_videos([model.id])
        return self._model_to_entity(model, videos.get(model.id, []))

    async def create(
        self,
        owner_id: int,
        name: str,
        description: str,
        video_ids: Sequence[int],
    ) -> Playlist:
        """
        Create a playlist with initial entries.

        Args:
            owner_id: Owning account
            name: Playlist name
            description: Playlist description
            video_ids: Videos to list, in order

        Returns:
            Created playlist
        """
        model = PlaylistModel(owner_id=owner_id, name=name, description=description)
        self.session.add(model)
        await self.session.flush()
        await self.session.refresh(model)

        await self.add_videos(model.id, video_ids)

        return await self.get(model.id)

    async def list_by_owner(self, owner_id: int) -> List[Playlist]:
        """Playlists of one account, newest first, with resolved videos."""
        stmt = (
            select(PlaylistModel)
            .where(PlaylistModel.owner_id == owner_id)
            .order_by(PlaylistModel.created_at.desc(), PlaylistModel.id.desc())
        )
        result = await self.session.execute(stmt)
        models = result.scalars().all()

        videos = await self._resolve_videos([m.id for m in models])
        return [self._model_to_entity(m, videos.get(m.id, [])) for m in models]

    async def update_owned(
        self,
        playlist_id: int,
        owner_id: int,
        name: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Optional[Playlist]:
        values = {}
        if name is not None:
            values["name"] = name
        if description is not None:
            values["description"] = description

        if values:
            stmt = (
                update(PlaylistModel)
                .where(PlaylistModel.id == playlist_id, PlaylistModel.owner_id == owner_id)
                .values(**values)
                .returning(PlaylistModel.id)
            )
            result = await self.session.execute(stmt)
            if result.scalar_one_or_none() is None:
                return None

        stmt = (
            select(PlaylistModel)
            .where(PlaylistModel.id == playlist_id, PlaylistModel.owner_id == owner_id)
            .execution_options(populate_existing=True)
        )
        model = (await self.session.execute(stmt)).scalar_one_or_none()
        if not model:
            return None

        videos = await self._resolve_videos([model.id])
        return self._model_to_entity(model, videos.get(model.id, []))

    async def delete_owned(self, playlist_id: int, owner_id: int) -> Optional[Playlist]:
        """
        Delete a playlist and its entries if it belongs to the owner.

        Returns:
            The removed playlist, or None if no owned playlist matched
        """
        playlist = await self.get(playlist_id)
        if not playlist or playlist.owner_id != owner_id:
            return None

        result = await self.session.execute(
            delete(PlaylistModel).where(
                PlaylistModel.id == playlist_id, PlaylistModel.owner_id == owner_id
            )
        )
        if result.rowcount == 0:
            return None

        await self.session.execute(
            delete(PlaylistEntryModel)
            .where(PlaylistEntryModel.playlist_id == playlist_id)
            .execution_options(synchronize_session=False)
        )
        await self.session.flush()

        return playlist

    async def add_videos(self, playlist_id: int, video_ids: Sequence[int]) -> int:
        """
        Append videos that are not yet listed.

        Raises:
            ConflictException: If a concurrent request listed the same video first
        """
        if not video_ids:
            return 0

        existing = await self.session.execute(
            select(PlaylistEntryModel.video_id).where(
                PlaylistEntryModel.playlist_id == playlist_id,
                PlaylistEntryModel.video_id.in_(list(video_ids)),
            )
        )
        listed = set(existing.scalars().all())

        added = 0
        for video_id in dict.fromkeys(video_ids):
            if video_id in listed:
                continue
            self.session.add(PlaylistEntryModel(playlist_id=playlist_id, video_id=video_id))
            added += 1

        try:
            await self.session.flush()
        except IntegrityError:
            await self.session.rollback()
            raise ConflictException("Video is already in the playlist", f"playlist id: {playlist_id}")

        return added

    async def remove_videos(self, playlist_id: int, video_ids: Sequence[int]) -> int:
        if not video_ids:
            return 0

        result = await self.session.execute(
            delete(PlaylistEntryModel)
            .where(
                PlaylistEntryModel.playlist_id == playlist_id,
                PlaylistEntryModel.video_id.in_(list(video_ids)),
            )
            .execution_options(synchronize_session=False)
        )
        await self.session.flush()
        return result.rowcount

    async def remove_video_everywhere(self, video_id: int) -> int:
        result = await self.session.execute(
            delete(PlaylistEntryModel)
            .where(PlaylistEntryModel.video_id == video_id)
            .execution_options(synchronize_session=False)
        )
        await self.session.flush()
        return result.rowcount

    async def _resolve_videos(self, playlist_ids: List[int]) -> Dict[int, List[Video]]:
        """Map playlist IDs to their existing videos in insertion order."""
        if not playlist_ids:
            return {}

        result = await self.session.execute(
            select(PlaylistEntryModel.playlist_id, PlaylistEntryModel.video_id)
            .where(PlaylistEntryModel.playlist_id.in_(playlist_ids))
            .order_by(PlaylistEntryModel.added_at, PlaylistEntryModel.id)
        )
        entries = result.all()

        videos = await self._videos.get_many(list(dict.fromkeys(e.video_id for e in entries)))
        by_id = {video.id: video for video in videos}

        resolved: Dict[int, List[Video]] = defaultdict(list)
        for entry in entries:
            if entry.video_id in by_id:
                resolved[entry.playlist_id].append(by_id[entry.video_id])
        return resolved

    def _model_to_entity(self, model: PlaylistModel, videos: List[Video]) -> Playlist:
        """Convert database model to domain entity."""
        return Playlist(
            id=model.id,
            owner_id=model.owner_id,
            name=model.name,
            description=model.description,
            is_published=model.is_published,
            videos=videos,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
