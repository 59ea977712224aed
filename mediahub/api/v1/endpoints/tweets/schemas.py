"""Tweet API schemas."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class TweetContentRequest(BaseModel):
    """Tweet create/update request schema."""

    content: str = Field(
        ...,
        min_length=1,
        max_length=1000,
        description="Tweet text",
        examples=["Uploading a new video tonight"]
    )


class TweetResponse(BaseModel):
    """Tweet response schema."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., examples=[1])
    owner_id: int = Field(..., examples=[1])
    content: str = Field(..., examples=["Uploading a new video tonight"])
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class TweetListResponse(BaseModel):
    """Tweet list response schema."""

    tweets: List[TweetResponse]
    total: int = Field(..., examples=[3])
