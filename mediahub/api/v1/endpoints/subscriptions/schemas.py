"""Subscription API schemas."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class SubscriptionToggleResponse(BaseModel):
    """Outcome of a subscription toggle."""

    subscribed: bool = Field(
        ...,
        description="True when the subscription was created, false when it was removed",
        examples=[True]
    )
    channel_id: int = Field(..., examples=[2])


class SubscriptionEntryResponse(BaseModel):
    """Account on the other side of a subscription."""

    model_config = ConfigDict(from_attributes=True)

    account_id: int = Field(..., examples=[2])
    username: str = Field(..., examples=["bob"])
    full_name: str = Field(default="", examples=["Bob Example"])
    avatar_url: Optional[str] = None
    subscribed_at: Optional[datetime] = None


class SubscriptionListResponse(BaseModel):
    """Subscription list response schema."""

    accounts: List[SubscriptionEntryResponse]
    total: int = Field(..., examples=[1])
