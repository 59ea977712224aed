"""Like API routes."""

from fastapi import APIRouter, Depends, Path

from mediahub.api.dependencies import get_current_principal, get_like_service
from mediahub.api.v1.schemas import AUTH_RESPONSES, DEPENDENT_RESPONSES, ErrorResponse
from mediahub.api.v1.endpoints.videos.schemas import VideoResponse
from mediahub.core.auth.entities import Principal
from mediahub.core.services.like_service import LikeService
from .schemas import LikedVideosResponse, LikeToggleResponse

router = APIRouter(prefix="/likes", tags=["Likes"])

TOGGLE_RESPONSES = {
    **AUTH_RESPONSES,
    **DEPENDENT_RESPONSES,
    409: {"model": ErrorResponse, "description": "Concurrent toggle won the race"},
}


@router.post(
    "/video/{video_id}",
    response_model=LikeToggleResponse,
    summary="Toggle video like",
    responses=TOGGLE_RESPONSES,
)
async def toggle_video_like(
    video_id: int = Path(..., gt=0),
    principal: Principal = Depends(get_current_principal),
    like_service: LikeService = Depends(get_like_service),
) -> LikeToggleResponse:
    result = await like_service.toggle_video_like(video_id, principal)
    return LikeToggleResponse.from_result(result)


@router.post(
    "/comment/{comment_id}",
    response_model=LikeToggleResponse,
    summary="Toggle comment like",
    responses=TOGGLE_RESPONSES,
)
async def toggle_comment_like(
    comment_id: int = Path(..., gt=0),
    principal: Principal = Depends(get_current_principal),
    like_service: LikeService = Depends(get_like_service),
) -> LikeToggleResponse:
    """Liking a comment whose video or tweet is gone cleans it up and returns 410."""
    result = await like_service.toggle_comment_like(comment_id, principal)
    return LikeToggleResponse.from_result(result)


@router.post(
    "/tweet/{tweet_id}",
    response_model=LikeToggleResponse,
    summary="Toggle tweet like",
    responses=TOGGLE_RESPONSES,
)
async def toggle_tweet_like(
    tweet_id: int = Path(..., gt=0),
    principal: Principal = Depends(get_current_principal),
    like_service: LikeService = Depends(get_like_service),
) -> LikeToggleResponse:
    result = await like_service.toggle_tweet_like(tweet_id, principal)
    return LikeToggleResponse.from_result(result)


@router.get(
    "/videos",
    response_model=LikedVideosResponse,
    summary="List liked videos",
    responses=AUTH_RESPONSES,
)
async def list_liked_videos(
    principal: Principal = Depends(get_current_principal),
    like_service: LikeService = Depends(get_like_service),
) -> LikedVideosResponse:
    videos = await like_service.list_liked_videos(principal)
    return LikedVideosResponse(
        videos=[VideoResponse.model_validate(v) for v in videos],
        total=len(videos),
    )
