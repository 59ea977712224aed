"""Domain enums for the media service."""

from enum import Enum


class ResourceType(str, Enum):
    """Owned resource types known to the access layer."""

    VIDEO = "video"
    TWEET = "tweet"
    COMMENT = "comment"
    PLAYLIST = "playlist"


class SortOrder(str, Enum):
    """Sort direction for listings."""

    ASC = "asc"
    DESC = "desc"


class VideoSortField(str, Enum):
    """Video fields a listing can be sorted by."""

    CREATED_AT = "created_at"
    TITLE = "title"
    VIEWS = "views"
    DURATION = "duration"
