"""Subscription API routes."""

from typing import List

from fastapi import APIRouter, Depends, Path

from mediahub.api.dependencies import get_current_principal, get_subscription_service
from mediahub.api.v1.schemas import AUTH_RESPONSES, ErrorResponse
from mediahub.core.auth.entities import Principal
from mediahub.core.domain.entities import SubscriptionEntry
from mediahub.core.services.subscription_service import SubscriptionService
from .schemas import (
    SubscriptionEntryResponse,
    SubscriptionListResponse,
    SubscriptionToggleResponse,
)

router = APIRouter(prefix="/subscriptions", tags=["Subscriptions"])

NOT_FOUND = {404: {"model": ErrorResponse, "description": "Account not found"}}


def _list_response(entries: List[SubscriptionEntry]) -> SubscriptionListResponse:
    return SubscriptionListResponse(
        accounts=[SubscriptionEntryResponse.model_validate(e) for e in entries],
        total=len(entries),
    )


@router.post(
    "/channel/{channel_id}",
    response_model=SubscriptionToggleResponse,
    summary="Toggle subscription",
    responses={
        **AUTH_RESPONSES,
        **NOT_FOUND,
        400: {"model": ErrorResponse, "description": "Own channel"},
        409: {"model": ErrorResponse, "description": "Concurrent toggle won the race"},
    },
)
async def toggle_subscription(
    channel_id: int = Path(..., gt=0),
    principal: Principal = Depends(get_current_principal),
    subscription_service: SubscriptionService = Depends(get_subscription_service),
) -> SubscriptionToggleResponse:
    result = await subscription_service.toggle_subscription(channel_id, principal)
    return SubscriptionToggleResponse(subscribed=result.created, channel_id=channel_id)


@router.get(
    "/channel/{channel_id}/subscribers",
    response_model=SubscriptionListResponse,
    summary="List channel subscribers",
    responses=NOT_FOUND,
)
async def list_channel_subscribers(
    channel_id: int = Path(..., gt=0),
    subscription_service: SubscriptionService = Depends(get_subscription_service),
) -> SubscriptionListResponse:
    entries = await subscription_service.list_channel_subscribers(channel_id)
    return _list_response(entries)


@router.get(
    "/user/{user_id}/channels",
    response_model=SubscriptionListResponse,
    summary="List subscribed channels",
    responses=NOT_FOUND,
)
async def list_subscribed_channels(
    user_id: int = Path(..., gt=0),
    subscription_service: SubscriptionService = Depends(get_subscription_service),
) -> SubscriptionListResponse:
    entries = await subscription_service.list_subscribed_channels(user_id)
    return _list_response(entries)
