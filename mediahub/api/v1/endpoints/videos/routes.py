"""Video API routes."""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Path, Query, UploadFile, status

from mediahub.api.dependencies import (
    get_current_principal,
    get_optional_principal,
    get_video_service,
)
from mediahub.api.v1.schemas import AUTH_RESPONSES, OWNER_RESPONSES, ErrorResponse
from mediahub.api.v1.uploads import read_upload
from mediahub.core.auth.entities import Principal
from mediahub.core.domain.enums import SortOrder, VideoSortField
from mediahub.core.services.pagination import DEFAULT_PAGE_SIZE
from mediahub.core.services.video_service import VideoService
from .schemas import VideoListResponse, VideoResponse

router = APIRouter(prefix="/videos", tags=["Videos"])


@router.get(
    "",
    response_model=VideoListResponse,
    summary="List videos",
    description="Paginated list of published videos, plus the viewer's own unpublished ones.",
)
async def list_videos(
    page: int = Query(1, description="1-based page number"),
    limit: int = Query(DEFAULT_PAGE_SIZE, description="Page size, clamped to 1..20"),
    query: Optional[str] = Query(None, description="Text matched against title and description"),
    sort_by: VideoSortField = Query(VideoSortField.CREATED_AT),
    sort_type: SortOrder = Query(SortOrder.DESC),
    user_id: Optional[int] = Query(None, description="Only videos of this channel"),
    principal: Optional[Principal] = Depends(get_optional_principal),
    video_service: VideoService = Depends(get_video_service),
) -> VideoListResponse:
    result = await video_service.list_videos(
        principal,
        page=page,
        limit=limit,
        query=query,
        sort_by=sort_by,
        sort_order=sort_type,
        owner_id=user_id,
    )
    return VideoListResponse(
        items=[VideoResponse.model_validate(v) for v in result.items],
        total=result.total,
        page=result.page,
        limit=result.limit,
        has_next=result.has_next,
    )


@router.post(
    "",
    response_model=VideoResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Publish video",
    description="Upload a video file with its thumbnail.",
    responses={
        **AUTH_RESPONSES,
        400: {"model": ErrorResponse, "description": "Missing field or file"},
        502: {"model": ErrorResponse, "description": "Media upload failed"},
    },
)
async def publish_video(
    title: str = Form(...),
    description: str = Form(...),
    video_file: UploadFile = File(...),
    thumbnail: UploadFile = File(...),
    principal: Principal = Depends(get_current_principal),
    video_service: VideoService = Depends(get_video_service),
) -> VideoResponse:
    """
    Publish a new video.

    Both files are uploaded before the record is written; a failed upload
    leaves no record behind.
    """
    video = await video_service.publish_video(
        principal,
        title=title,
        description=description,
        video=await read_upload(video_file),
        thumbnail=await read_upload(thumbnail),
    )
    return VideoResponse.model_validate(video)


@router.get(
    "/{video_id}",
    response_model=VideoResponse,
    summary="Get video",
    responses={404: {"model": ErrorResponse, "description": "Video not found"}},
)
async def get_video(
    video_id: int = Path(..., gt=0),
    principal: Optional[Principal] = Depends(get_optional_principal),
    video_service: VideoService = Depends(get_video_service),
) -> VideoResponse:
    """
    Get a video for playback.

    Counts a view and, for signed-in viewers, records the video in their
    watch history. Unpublished videos are only returned to their owner.
    """
    video = await video_service.watch_video(video_id, principal)
    return VideoResponse.model_validate(video)


@router.patch(
    "/{video_id}",
    response_model=VideoResponse,
    summary="Update video",
    responses=OWNER_RESPONSES,
)
async def update_video(
    video_id: int = Path(..., gt=0),
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    thumbnail: Optional[UploadFile] = File(None),
    principal: Principal = Depends(get_current_principal),
    video_service: VideoService = Depends(get_video_service),
) -> VideoResponse:
    video = await video_service.update_video(
        video_id,
        principal,
        title=title,
        description=description,
        thumbnail=await read_upload(thumbnail),
    )
    return VideoResponse.model_validate(video)


@router.delete(
    "/{video_id}",
    response_model=VideoResponse,
    summary="Delete video",
    responses=OWNER_RESPONSES,
)
async def delete_video(
    video_id: int = Path(..., gt=0),
    principal: Principal = Depends(get_current_principal),
    video_service: VideoService = Depends(get_video_service),
) -> VideoResponse:
    video = await video_service.delete_video(video_id, principal)
    return VideoResponse.model_validate(video)


@router.patch(
    "/{video_id}/publish",
    response_model=VideoResponse,
    summary="Toggle publish status",
    responses=OWNER_RESPONSES,
)
async def toggle_publish_status(
    video_id: int = Path(..., gt=0),
    principal: Principal = Depends(get_current_principal),
    video_service: VideoService = Depends(get_video_service),
) -> VideoResponse:
    video = await video_service.toggle_publish_status(video_id, principal)
    return VideoResponse.model_validate(video)
