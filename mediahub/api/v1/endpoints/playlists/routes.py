"""Playlist API routes."""

from typing import Optional

from fastapi import APIRouter, Depends, Path, status

from mediahub.api.dependencies import (
    get_current_principal,
    get_optional_principal,
    get_playlist_service,
)
from mediahub.api.v1.schemas import AUTH_RESPONSES, OWNER_RESPONSES, ErrorResponse
from mediahub.core.auth.entities import Principal
from mediahub.core.services.playlist_service import PlaylistService
from .schemas import (
    PlaylistCreateRequest,
    PlaylistListResponse,
    PlaylistResponse,
    PlaylistUpdateRequest,
    PlaylistVideosRequest,
    PlaylistVideosResponse,
)

router = APIRouter(prefix="/playlists", tags=["Playlists"])


@router.post(
    "",
    response_model=PlaylistResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create playlist",
    responses=AUTH_RESPONSES,
)
async def create_playlist(
    payload: PlaylistCreateRequest,
    principal: Principal = Depends(get_current_principal),
    playlist_service: PlaylistService = Depends(get_playlist_service),
) -> PlaylistResponse:
    playlist = await playlist_service.create_playlist(
        principal,
        name=payload.name,
        description=payload.description,
        video_ids=payload.video_ids,
    )
    return PlaylistResponse.model_validate(playlist)


@router.get(
    "/user/{user_id}",
    response_model=PlaylistListResponse,
    summary="List playlists of an account",
    responses={404: {"model": ErrorResponse, "description": "Account not found"}},
)
async def list_user_playlists(
    user_id: int = Path(..., gt=0),
    principal: Optional[Principal] = Depends(get_optional_principal),
    playlist_service: PlaylistService = Depends(get_playlist_service),
) -> PlaylistListResponse:
    playlists = await playlist_service.list_user_playlists(user_id, principal)
    return PlaylistListResponse(
        playlists=[PlaylistResponse.model_validate(p) for p in playlists],
        total=len(playlists),
    )


@router.get(
    "/{playlist_id}",
    response_model=PlaylistResponse,
    summary="Get playlist",
    responses={404: {"model": ErrorResponse, "description": "Playlist not found"}},
)
async def get_playlist(
    playlist_id: int = Path(..., gt=0),
    principal: Optional[Principal] = Depends(get_optional_principal),
    playlist_service: PlaylistService = Depends(get_playlist_service),
) -> PlaylistResponse:
    """Videos the caller may not see are left out of the entry list."""
    playlist = await playlist_service.get_playlist(playlist_id, principal)
    return PlaylistResponse.model_validate(playlist)


@router.patch(
    "/{playlist_id}",
    response_model=PlaylistResponse,
    summary="Update playlist",
    responses=OWNER_RESPONSES,
)
async def update_playlist(
    payload: PlaylistUpdateRequest,
    playlist_id: int = Path(..., gt=0),
    principal: Principal = Depends(get_current_principal),
    playlist_service: PlaylistService = Depends(get_playlist_service),
) -> PlaylistResponse:
    playlist = await playlist_service.update_playlist(
        playlist_id,
        principal,
        name=payload.name,
        description=payload.description,
    )
    return PlaylistResponse.model_validate(playlist)


@router.delete(
    "/{playlist_id}",
    response_model=PlaylistResponse,
    summary="Delete playlist",
    responses=OWNER_RESPONSES,
)
async def delete_playlist(
    playlist_id: int = Path(..., gt=0),
    principal: Principal = Depends(get_current_principal),
    playlist_service: PlaylistService = Depends(get_playlist_service),
) -> PlaylistResponse:
    playlist = await playlist_service.delete_playlist(playlist_id, principal)
    return PlaylistResponse.model_validate(playlist)


@router.post(
    "/{playlist_id}/videos",
    response_model=PlaylistVideosResponse,
    summary="Add videos to playlist",
    responses=OWNER_RESPONSES,
)
async def add_videos(
    payload: PlaylistVideosRequest,
    playlist_id: int = Path(..., gt=0),
    principal: Principal = Depends(get_current_principal),
    playlist_service: PlaylistService = Depends(get_playlist_service),
) -> PlaylistVideosResponse:
    playlist, added = await playlist_service.add_videos(playlist_id, principal, payload.video_ids)
    return PlaylistVideosResponse(
        playlist=PlaylistResponse.model_validate(playlist),
        changed=added,
    )


@router.delete(
    "/{playlist_id}/videos",
    response_model=PlaylistVideosResponse,
    summary="Remove videos from playlist",
    responses=OWNER_RESPONSES,
)
async def remove_videos(
    payload: PlaylistVideosRequest,
    playlist_id: int = Path(..., gt=0),
    principal: Principal = Depends(get_current_principal),
    playlist_service: PlaylistService = Depends(get_playlist_service),
) -> PlaylistVideosResponse:
    playlist, removed = await playlist_service.remove_videos(
        playlist_id, principal, payload.video_ids
    )
    return PlaylistVideosResponse(
        playlist=PlaylistResponse.model_validate(playlist),
        changed=removed,
    )
