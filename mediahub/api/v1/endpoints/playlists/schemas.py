"""Playlist API schemas."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from mediahub.api.v1.endpoints.videos.schemas import VideoResponse


class PlaylistCreateRequest(BaseModel):
    """Playlist creation request schema."""

    name: str = Field(
        ...,
        min_length=1,
        max_length=100,
        examples=["Road trip"]
    )
    description: str = Field(default="", max_length=1000, examples=["Clips from the coast"])
    video_ids: List[int] = Field(
        default_factory=list,
        description="Videos to start with; hidden or missing ones are skipped",
        examples=[[1, 2]]
    )


class PlaylistUpdateRequest(BaseModel):
    """Playlist update request schema."""

    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=1000)


class PlaylistVideosRequest(BaseModel):
    """Videos to add to or remove from a playlist."""

    video_ids: List[int] = Field(..., min_length=1, examples=[[3]])


class PlaylistResponse(BaseModel):
    """Playlist response schema."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., examples=[1])
    owner_id: int = Field(..., examples=[1])
    name: str = Field(..., examples=["Road trip"])
    description: str = Field(default="", examples=["Clips from the coast"])
    videos: List[VideoResponse] = Field(
        default_factory=list,
        description="Entries visible to the caller, in insertion order"
    )
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PlaylistListResponse(BaseModel):
    """Playlist list response schema."""

    playlists: List[PlaylistResponse]
    total: int = Field(..., examples=[1])


class PlaylistVideosResponse(BaseModel):
    """Playlist after an entry change."""

    playlist: PlaylistResponse
    changed: int = Field(..., description="Entries added or removed", examples=[1])
