"""Response schemas shared across endpoints."""

from typing import Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Error response schema."""

    error: str = Field(
        ...,
        description="Error message",
        examples=["Video not found"]
    )
    type: str = Field(
        ...,
        description="Stable error code",
        examples=["NotFound"]
    )


class ParentGoneResponse(ErrorResponse):
    """Error returned when a dependent operation cleaned up after a vanished parent."""

    parent_type: str = Field(..., examples=["video"])
    parent_id: int = Field(..., examples=[42])
    removed: int = Field(..., description="Dependent records removed", examples=[3])


class MessageResponse(BaseModel):
    """Plain acknowledgement."""

    message: str = Field(..., examples=["Logged out"])
    detail: Optional[str] = None


AUTH_RESPONSES = {
    401: {"model": ErrorResponse, "description": "Authentication required"},
}

OWNER_RESPONSES = {
    **AUTH_RESPONSES,
    403: {"model": ErrorResponse, "description": "Not the owner"},
    404: {"model": ErrorResponse, "description": "Resource not found"},
}

DEPENDENT_RESPONSES = {
    404: {"model": ErrorResponse, "description": "Resource or parent not found"},
    410: {"model": ParentGoneResponse, "description": "Parent no longer exists"},
}
