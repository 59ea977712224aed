"""Comment API schemas."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from mediahub.core.domain.entities import Comment


class CommentContentRequest(BaseModel):
    """Comment create/update request schema."""

    content: str = Field(
        ...,
        min_length=1,
        max_length=2000,
        description="Comment text",
        examples=["Great shot!"]
    )


class CommentResponse(BaseModel):
    """Comment response schema."""

    id: int = Field(..., examples=[1])
    owner_id: int = Field(..., examples=[2])
    content: str = Field(..., examples=["Great shot!"])
    parent_type: str = Field(..., description="video or tweet", examples=["video"])
    parent_id: int = Field(..., examples=[1])
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, comment: Comment) -> "CommentResponse":
        return cls(
            id=comment.id,
            owner_id=comment.owner_id,
            content=comment.content,
            parent_type=comment.parent.kind.value,
            parent_id=comment.parent.id,
            created_at=comment.created_at,
            updated_at=comment.updated_at,
        )


class CommentListResponse(BaseModel):
    """Paginated comment list response schema."""

    items: List[CommentResponse]
    total: int = Field(..., examples=[5])
    page: int = Field(..., examples=[1])
    limit: int = Field(..., examples=[10])
    has_next: bool = Field(..., examples=[False])
