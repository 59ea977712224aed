"""Domain entities for the media service."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Generic, List, Optional, Protocol, TypeVar

from .enums import ResourceType

T = TypeVar("T")

COMMENT_PARENT_TYPES = frozenset({ResourceType.VIDEO, ResourceType.TWEET})
LIKE_TARGET_TYPES = frozenset({ResourceType.VIDEO, ResourceType.COMMENT, ResourceType.TWEET})


class OwnedResource(Protocol):
    """Anything with a single owning account and a visibility state."""

    id: int
    owner_id: int

    @property
    def is_published(self) -> bool:
        ...


@dataclass(frozen=True)
class ParentRef:
    """
    Reference from a dependent record to exactly one parent.

    Resolved once where a request enters the service layer; downstream code
    switches on ``kind`` instead of probing optional columns.
    """

    kind: ResourceType
    id: int

    def __post_init__(self) -> None:
        """Validate parent reference."""
        if self.kind == ResourceType.PLAYLIST:
            raise ValueError("Playlists cannot be referenced as a parent")
        if self.id <= 0:
            raise ValueError("Parent ID must be positive")

    @classmethod
    def video(cls, video_id: int) -> "ParentRef":
        return cls(ResourceType.VIDEO, video_id)

    @classmethod
    def tweet(cls, tweet_id: int) -> "ParentRef":
        return cls(ResourceType.TWEET, tweet_id)

    @classmethod
    def comment(cls, comment_id: int) -> "ParentRef":
        return cls(ResourceType.COMMENT, comment_id)


@dataclass(frozen=True)
class Video:
    """
    Video entity.

    Attributes:
        id: Unique video identifier
        owner_id: Account that published the video
        title: Video title
        description: Video description
        video_url: Public URL of the media file
        thumbnail_url: Public URL of the thumbnail
        duration: Length in seconds, when the media store reports it
        views: View counter
        is_published: Whether non-owners may see the video
    """

    id: int
    owner_id: int
    title: str
    description: str
    video_url: str
    thumbnail_url: str
    duration: Optional[float] = None
    views: int = 0
    is_published: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        """Validate video data after initialization."""
        if not self.title:
            raise ValueError("Video title cannot be empty")
        if not self.video_url:
            raise ValueError("Video URL cannot be empty")


@dataclass(frozen=True)
class Tweet:
    """Short text post owned by an account. Always public."""

    id: int
    owner_id: int
    content: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        if not self.content:
            raise ValueError("Tweet content cannot be empty")

    @property
    def is_published(self) -> bool:
        return True


@dataclass(frozen=True)
class Comment:
    """Comment attached to a video or a tweet."""

    id: int
    owner_id: int
    content: str
    parent: ParentRef
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        if not self.content:
            raise ValueError("Comment content cannot be empty")
        if self.parent.kind not in COMMENT_PARENT_TYPES:
            raise ValueError("Comments can only be attached to videos or tweets")

    @property
    def is_published(self) -> bool:
        return True


@dataclass(frozen=True)
class Playlist:
    """
    Playlist entity.

    ``videos`` holds the resolved entries; visibility of each entry is the
    entry's own publish flag, independent of the playlist's.
    """

    id: int
    owner_id: int
    name: str
    description: str = ""
    is_published: bool = True
    videos: List[Video] = field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Playlist name cannot be empty")


@dataclass(frozen=True)
class Like:
    """Like relation between an account and a video, comment or tweet."""

    id: int
    liked_by: int
    target: ParentRef
    created_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        if self.target.kind not in LIKE_TARGET_TYPES:
            raise ValueError("Likes can only target videos, comments or tweets")


@dataclass(frozen=True)
class Subscription:
    """Subscription relation between a subscriber and a channel account."""

    id: int
    subscriber_id: int
    channel_id: int
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class LikeKey:
    """Natural key of a like."""

    liked_by: int
    target: ParentRef


@dataclass(frozen=True)
class SubscriptionKey:
    """Natural key of a subscription."""

    subscriber_id: int
    channel_id: int

    def __post_init__(self) -> None:
        if self.subscriber_id == self.channel_id:
            raise ValueError("Accounts cannot subscribe to themselves")


@dataclass(frozen=True)
class ToggleResult(Generic[T]):
    """
    Outcome of a toggle.

    Attributes:
        created: True if the relation now exists, False if it was removed
        record: The created or removed relation record
    """

    created: bool
    record: T


@dataclass(frozen=True)
class Page(Generic[T]):
    """One page of a listing."""

    items: List[T]
    total: int
    page: int
    limit: int

    @property
    def has_next(self) -> bool:
        return self.page * self.limit < self.total


@dataclass(frozen=True)
class ChannelProfile:
    """Public profile of an account with subscription counters."""

    id: int
    username: str
    full_name: str
    avatar_url: Optional[str]
    subscribers_count: int
    subscribed_to_count: int
    is_subscribed: bool
    cover_image_url: Optional[str] = None


@dataclass(frozen=True)
class MediaAsset:
    """Result of a media upload."""

    url: str
    duration_seconds: Optional[float] = None


@dataclass(frozen=True)
class MediaUpload:
    """File received from a client, ready to hand to the media store."""

    filename: str
    content: bytes
    content_type: Optional[str] = None


@dataclass(frozen=True)
class SubscriptionEntry:
    """One side of a subscription, resolved to the account's public profile."""

    account_id: int
    username: str
    full_name: str
    avatar_url: Optional[str]
    subscribed_at: Optional[datetime] = None
