"""Channel API routes."""

from typing import Optional

from fastapi import APIRouter, Depends

from mediahub.api.dependencies import get_account_service, get_optional_principal
from mediahub.api.v1.schemas import ErrorResponse
from mediahub.core.auth.entities import Principal
from mediahub.core.services.account_service import AccountService
from .schemas import ChannelProfileResponse

router = APIRouter(prefix="/channels", tags=["Channels"])


@router.get(
    "/{username}",
    response_model=ChannelProfileResponse,
    summary="Get channel profile",
    description="Public profile of an account with subscription counters.",
    responses={404: {"model": ErrorResponse, "description": "Channel not found"}},
)
async def get_channel_profile(
    username: str,
    principal: Optional[Principal] = Depends(get_optional_principal),
    account_service: AccountService = Depends(get_account_service),
) -> ChannelProfileResponse:
    profile = await account_service.get_channel_profile(username, principal)
    return ChannelProfileResponse.model_validate(profile)
