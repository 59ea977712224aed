"""Comment API routes."""

from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, status

from mediahub.api.dependencies import (
    get_comment_service,
    get_current_principal,
    get_optional_principal,
)
from mediahub.api.v1.schemas import AUTH_RESPONSES, DEPENDENT_RESPONSES, OWNER_RESPONSES
from mediahub.core.auth.entities import Principal
from mediahub.core.domain.entities import Comment, Page, ParentRef
from mediahub.core.services.comment_service import CommentService
from mediahub.core.services.pagination import DEFAULT_PAGE_SIZE
from .schemas import CommentContentRequest, CommentListResponse, CommentResponse

router = APIRouter(prefix="/comments", tags=["Comments"])


def _page_response(page: Page[Comment]) -> CommentListResponse:
    return CommentListResponse(
        items=[CommentResponse.from_entity(c) for c in page.items],
        total=page.total,
        page=page.page,
        limit=page.limit,
        has_next=page.has_next,
    )


@router.get(
    "/video/{video_id}",
    response_model=CommentListResponse,
    summary="List comments on a video",
    responses=DEPENDENT_RESPONSES,
)
async def list_video_comments(
    video_id: int = Path(..., gt=0),
    page: int = Query(1),
    limit: int = Query(DEFAULT_PAGE_SIZE),
    principal: Optional[Principal] = Depends(get_optional_principal),
    comment_service: CommentService = Depends(get_comment_service),
) -> CommentListResponse:
    result = await comment_service.list_comments(ParentRef.video(video_id), principal, page, limit)
    return _page_response(result)


@router.post(
    "/video/{video_id}",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Comment on a video",
    responses={**AUTH_RESPONSES, **DEPENDENT_RESPONSES},
)
async def add_video_comment(
    payload: CommentContentRequest,
    video_id: int = Path(..., gt=0),
    principal: Principal = Depends(get_current_principal),
    comment_service: CommentService = Depends(get_comment_service),
) -> CommentResponse:
    comment = await comment_service.add_comment(ParentRef.video(video_id), principal, payload.content)
    return CommentResponse.from_entity(comment)


@router.get(
    "/tweet/{tweet_id}",
    response_model=CommentListResponse,
    summary="List comments on a tweet",
    responses=DEPENDENT_RESPONSES,
)
async def list_tweet_comments(
    tweet_id: int = Path(..., gt=0),
    page: int = Query(1),
    limit: int = Query(DEFAULT_PAGE_SIZE),
    principal: Optional[Principal] = Depends(get_optional_principal),
    comment_service: CommentService = Depends(get_comment_service),
) -> CommentListResponse:
    result = await comment_service.list_comments(ParentRef.tweet(tweet_id), principal, page, limit)
    return _page_response(result)


@router.post(
    "/tweet/{tweet_id}",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Comment on a tweet",
    responses={**AUTH_RESPONSES, **DEPENDENT_RESPONSES},
)
async def add_tweet_comment(
    payload: CommentContentRequest,
    tweet_id: int = Path(..., gt=0),
    principal: Principal = Depends(get_current_principal),
    comment_service: CommentService = Depends(get_comment_service),
) -> CommentResponse:
    comment = await comment_service.add_comment(ParentRef.tweet(tweet_id), principal, payload.content)
    return CommentResponse.from_entity(comment)


@router.get(
    "/{comment_id}",
    response_model=CommentResponse,
    summary="Get comment",
    responses=DEPENDENT_RESPONSES,
)
async def get_comment(
    comment_id: int = Path(..., gt=0),
    principal: Optional[Principal] = Depends(get_optional_principal),
    comment_service: CommentService = Depends(get_comment_service),
) -> CommentResponse:
    """A comment whose video or tweet is gone is removed and reported with 410."""
    comment = await comment_service.get_comment(comment_id, principal)
    return CommentResponse.from_entity(comment)


@router.patch(
    "/{comment_id}",
    response_model=CommentResponse,
    summary="Update comment",
    responses={**OWNER_RESPONSES, **DEPENDENT_RESPONSES},
)
async def update_comment(
    payload: CommentContentRequest,
    comment_id: int = Path(..., gt=0),
    principal: Principal = Depends(get_current_principal),
    comment_service: CommentService = Depends(get_comment_service),
) -> CommentResponse:
    comment = await comment_service.update_comment(comment_id, principal, payload.content)
    return CommentResponse.from_entity(comment)


@router.delete(
    "/{comment_id}",
    response_model=CommentResponse,
    summary="Delete comment",
    responses={**OWNER_RESPONSES, **DEPENDENT_RESPONSES},
)
async def delete_comment(
    comment_id: int = Path(..., gt=0),
    principal: Principal = Depends(get_current_principal),
    comment_service: CommentService = Depends(get_comment_service),
) -> CommentResponse:
    comment = await comment_service.delete_comment(comment_id, principal)
    return CommentResponse.from_entity(comment)
