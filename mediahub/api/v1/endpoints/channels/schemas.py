"""Channel API schemas."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ChannelProfileResponse(BaseModel):
    """Public channel profile."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., examples=[1])
    username: str = Field(..., examples=["alice"])
    full_name: str = Field(default="", examples=["Alice Liddell"])
    avatar_url: Optional[str] = None
    cover_image_url: Optional[str] = None
    subscribers_count: int = Field(..., description="Accounts subscribed to this channel", examples=[12])
    subscribed_to_count: int = Field(..., description="Channels this account subscribes to", examples=[3])
    is_subscribed: bool = Field(..., description="Whether the viewer is subscribed", examples=[False])
