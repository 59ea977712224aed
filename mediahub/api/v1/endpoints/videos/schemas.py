"""Video API schemas."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class VideoResponse(BaseModel):
    """Video response schema."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(
        ...,
        description="Video unique identifier",
        examples=[1]
    )
    owner_id: int = Field(
        ...,
        description="Account that published the video",
        examples=[1]
    )
    title: str = Field(..., examples=["Sunset timelapse"])
    description: str = Field(default="", examples=["Two hours in thirty seconds"])
    video_url: str = Field(..., examples=["/media/3f2a9c.mp4"])
    thumbnail_url: str = Field(..., examples=["/media/8b1e44.png"])
    duration: Optional[float] = Field(
        None,
        description="Length in seconds, when known",
        examples=[31.5]
    )
    views: int = Field(default=0, examples=[0])
    is_published: bool = Field(
        ...,
        description="Whether non-owners may see the video",
        examples=[True]
    )
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class VideoListResponse(BaseModel):
    """Paginated video list response schema."""

    items: List[VideoResponse] = Field(..., description="Videos on this page")
    total: int = Field(..., description="Total number of matching videos", examples=[42])
    page: int = Field(..., examples=[1])
    limit: int = Field(..., examples=[10])
    has_next: bool = Field(..., description="Whether another page follows", examples=[True])
