"""Like API schemas."""

from typing import List

from pydantic import BaseModel, Field

from mediahub.api.v1.endpoints.videos.schemas import VideoResponse
from mediahub.core.domain.entities import Like, ToggleResult


class LikeToggleResponse(BaseModel):
    """Outcome of a like toggle."""

    liked: bool = Field(
        ...,
        description="True when the like was created, false when it was removed",
        examples=[True]
    )
    target_type: str = Field(..., examples=["video"])
    target_id: int = Field(..., examples=[1])

    @classmethod
    def from_result(cls, result: ToggleResult[Like]) -> "LikeToggleResponse":
        return cls(
            liked=result.created,
            target_type=result.record.target.kind.value,
            target_id=result.record.target.id,
        )


class LikedVideosResponse(BaseModel):
    """Videos liked by the current account."""

    videos: List[VideoResponse]
    total: int = Field(..., examples=[2])
