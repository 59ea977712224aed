"""Repository interface definitions.

Every mutation of an owned resource takes the owner as part of its
precondition (``*_owned`` methods), so a write can never land on a record the
caller does not own even if ownership changed after it was checked.
"""

from abc import ABC, abstractmethod
from typing import Generic, List, Optional, Sequence, TypeVar

from mediahub.core.domain.entities import (
    Comment,
    Like,
    LikeKey,
    Page,
    ParentRef,
    Playlist,
    Subscription,
    SubscriptionKey,
    Tweet,
    Video,
)
from mediahub.core.domain.enums import ResourceType, SortOrder, VideoSortField

K = TypeVar("K")
R = TypeVar("R")


class UnitOfWorkInterface(ABC):
    """Explicit transaction boundary for work that must outlive a failing request."""

    @abstractmethod
    async def commit(self) -> None:
        pass

    @abstractmethod
    async def rollback(self) -> None:
        pass


class ResourceRepositoryInterface(ABC, Generic[R]):
    """Lookup of an owned resource by identifier."""

    @abstractmethod
    async def get(self, resource_id: int) -> Optional[R]:
        """
        Retrieve a single resource.

        Args:
            resource_id: Resource identifier

        Returns:
            Entity if found, None otherwise
        """
        pass


class ToggleRepositoryInterface(ABC, Generic[K, R]):
    """
    Storage half of the toggle protocol.

    Writes are single statements conditioned on what was read: the unique
    constraint on the natural key decides racing inserts, and a delete only
    matches the record id that was observed.
    """

    @abstractmethod
    async def find_by_key(self, key: K) -> Optional[R]:
        """
        Read the relation matching the key.

        Returns:
            The current record, or None if there is none
        """
        pass

    @abstractmethod
    async def delete_by_id(self, record_id: int) -> bool:
        """
        Delete the relation with the given identifier.

        Returns:
            True if a row was removed, False if it was already gone
        """
        pass

    @abstractmethod
    async def insert(self, key: K) -> R:
        """
        Insert a relation for the key.

        Raises:
            ConflictException: If a record with the same key already exists
        """
        pass


class VideoRepositoryInterface(ResourceRepositoryInterface[Video]):
    """Abstract interface for video persistence."""

    @abstractmethod
    async def get_many(self, video_ids: Sequence[int]) -> List[Video]:
        """Retrieve all existing videos among the given identifiers."""
        pass

    @abstractmethod
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
        List videos visible to the viewer.

        A video is listed when it is published or owned by ``viewer_id``.
        """
        pass

    @abstractmethod
    async def create(self, video: Video) -> Video:
        """Persist a new video and return it with its identifier."""
        pass

    @abstractmethod
    async def update_owned(
        self,
        video_id: int,
        owner_id: int,
        title: Optional[str] = None,
        description: Optional[str] = None,
        thumbnail_url: Optional[str] = None,
    ) -> Optional[Video]:
        """Update fields if the video exists and belongs to ``owner_id``."""
        pass

    @abstractmethod
    async def delete_owned(self, video_id: int, owner_id: int) -> Optional[Video]:
        """Delete the video if it belongs to ``owner_id``."""
        pass

    @abstractmethod
    async def toggle_published(self, video_id: int, owner_id: int) -> Optional[Video]:
        """Flip the publish flag in one statement if the video belongs to ``owner_id``."""
        pass

    @abstractmethod
    async def record_view(self, video_id: int) -> Optional[int]:
        """Increment the view counter in one statement; the new count, or None if absent."""
        pass


class TweetRepositoryInterface(ResourceRepositoryInterface[Tweet]):
    """Abstract interface for tweet persistence."""

    @abstractmethod
    async def create(self, owner_id: int, content: str) -> Tweet:
        pass

    @abstractmethod
    async def list_by_owner(self, owner_id: int) -> List[Tweet]:
        pass

    @abstractmethod
    async def update_owned(self, tweet_id: int, owner_id: int, content: str) -> Optional[Tweet]:
        pass

    @abstractmethod
    async def delete_owned(self, tweet_id: int, owner_id: int) -> Optional[Tweet]:
        pass


class CommentRepositoryInterface(ResourceRepositoryInterface[Comment]):
    """Abstract interface for comment persistence."""

    @abstractmethod
    async def create(self, owner_id: int, parent: ParentRef, content: str) -> Comment:
        pass

    @abstractmethod
    async def list_by_parent(self, parent: ParentRef, page: int, limit: int) -> Page[Comment]:
        pass

    @abstractmethod
    async def update_owned(self, comment_id: int, owner_id: int, content: str) -> Optional[Comment]:
        pass

    @abstractmethod
    async def delete_owned(self, comment_id: int, owner_id: int) -> Optional[Comment]:
        pass

    @abstractmethod
    async def list_ids_by_parent(self, parent: ParentRef) -> List[int]:
        """Identifiers of all comments attached to the parent."""
        pass

    @abstractmethod
    async def delete_by_parent(self, parent: ParentRef) -> int:
        """
        Delete all comments attached to the parent.

        Returns:
            Number of comments removed
        """
        pass


class LikeRepositoryInterface(ToggleRepositoryInterface[LikeKey, Like]):
    """Abstract interface for like persistence."""

    @abstractmethod
    async def delete_by_targets(self, kind: ResourceType, target_ids: Sequence[int]) -> int:
        """
        Delete every like on any of the given targets.

        Returns:
            Number of likes removed
        """
        pass

    @abstractmethod
    async def list_liked_video_ids(self, liked_by: int) -> List[int]:
        """Identifiers of videos liked by the account, newest like first."""
        pass


class SubscriptionRepositoryInterface(ToggleRepositoryInterface[SubscriptionKey, Subscription]):
    """Abstract interface for subscription persistence."""

    @abstractmethod
    async def list_by_channel(self, channel_id: int) -> List[Subscription]:
        pass

    @abstractmethod
    async def list_by_subscriber(self, subscriber_id: int) -> List[Subscription]:
        pass

    @abstractmethod
    async def count_by_channel(self, channel_id: int) -> int:
        pass

    @abstractmethod
    async def count_by_subscriber(self, subscriber_id: int) -> int:
        pass

    @abstractmethod
    async def exists(self, key: SubscriptionKey) -> bool:
        pass


class PlaylistRepositoryInterface(ResourceRepositoryInterface[Playlist]):
    """
    Abstract interface for playlist persistence.

    Returned playlists carry every listed video that still exists, without
    any visibility filtering.
    """

    @abstractmethod
    async def create(
        self,
        owner_id: int,
        name: str,
        description: str,
        video_ids: Sequence[int],
    ) -> Playlist:
        pass

    @abstractmethod
    async def list_by_owner(self, owner_id: int) -> List[Playlist]:
        pass

    @abstractmethod
    async def update_owned(
        self,
        playlist_id: int,
        owner_id: int,
        name: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Optional[Playlist]:
        pass

    @abstractmethod
    async def delete_owned(self, playlist_id: int, owner_id: int) -> Optional[Playlist]:
        pass

    @abstractmethod
    async def add_videos(self, playlist_id: int, video_ids: Sequence[int]) -> int:
        """
        Append videos that are not yet listed.

        Returns:
            Number of entries added
        """
        pass

    @abstractmethod
    async def remove_videos(self, playlist_id: int, video_ids: Sequence[int]) -> int:
        """
        Remove listed videos.

        Returns:
            Number of entries removed
        """
        pass

    @abstractmethod
    async def remove_video_everywhere(self, video_id: int) -> int:
        """
        Drop a video from every playlist.

        Returns:
            Number of entries removed
        """
        pass


class WatchHistoryRepositoryInterface(ABC):
    """Abstract interface for per-account watch history."""

    @abstractmethod
    async def record(self, account_id: int, video_id: int) -> None:
        """Mark the video as the account's most recently watched."""
        pass

    @abstractmethod
    async def list_video_ids(self, account_id: int) -> List[int]:
        """
        Watched video identifiers, most recent first, each listed once.

        Identifiers of videos deleted since are included; callers resolve
        them and skip the missing ones.
        """
        pass
