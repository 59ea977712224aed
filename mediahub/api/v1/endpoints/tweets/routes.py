"""Tweet API routes."""

from fastapi import APIRouter, Depends, Path, status

from mediahub.api.dependencies import get_current_principal, get_tweet_service
from mediahub.api.v1.schemas import AUTH_RESPONSES, OWNER_RESPONSES, ErrorResponse
from mediahub.core.auth.entities import Principal
from mediahub.core.services.tweet_service import TweetService
from .schemas import TweetContentRequest, TweetListResponse, TweetResponse

router = APIRouter(prefix="/tweets", tags=["Tweets"])


@router.post(
    "",
    response_model=TweetResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create tweet",
    responses=AUTH_RESPONSES,
)
async def create_tweet(
    payload: TweetContentRequest,
    principal: Principal = Depends(get_current_principal),
    tweet_service: TweetService = Depends(get_tweet_service),
) -> TweetResponse:
    tweet = await tweet_service.create_tweet(principal, payload.content)
    return TweetResponse.model_validate(tweet)


@router.get(
    "/user/{user_id}",
    response_model=TweetListResponse,
    summary="List tweets of an account",
    responses={404: {"model": ErrorResponse, "description": "Account not found"}},
)
async def list_user_tweets(
    user_id: int = Path(..., gt=0),
    tweet_service: TweetService = Depends(get_tweet_service),
) -> TweetListResponse:
    tweets = await tweet_service.list_user_tweets(user_id)
    return TweetListResponse(
        tweets=[TweetResponse.model_validate(t) for t in tweets],
        total=len(tweets),
    )


@router.patch(
    "/{tweet_id}",
    response_model=TweetResponse,
    summary="Update tweet",
    responses=OWNER_RESPONSES,
)
async def update_tweet(
    payload: TweetContentRequest,
    tweet_id: int = Path(..., gt=0),
    principal: Principal = Depends(get_current_principal),
    tweet_service: TweetService = Depends(get_tweet_service),
) -> TweetResponse:
    tweet = await tweet_service.update_tweet(tweet_id, principal, payload.content)
    return TweetResponse.model_validate(tweet)


@router.delete(
    "/{tweet_id}",
    response_model=TweetResponse,
    summary="Delete tweet",
    responses=OWNER_RESPONSES,
)
async def delete_tweet(
    tweet_id: int = Path(..., gt=0),
    principal: Principal = Depends(get_current_principal),
    tweet_service: TweetService = Depends(get_tweet_service),
) -> TweetResponse:
    tweet = await tweet_service.delete_tweet(tweet_id, principal)
    return TweetResponse.model_validate(tweet)
