"""Authentication API routes."""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Request, Response, UploadFile, status
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from mediahub.api.dependencies import (
    ACCESS_TOKEN_COOKIE,
    REFRESH_TOKEN_COOKIE,
    get_account_service,
    get_current_principal,
    get_session_manager,
    get_video_service,
)
from mediahub.api.v1.endpoints.videos.schemas import VideoResponse
from mediahub.api.v1.schemas import AUTH_RESPONSES, ErrorResponse, MessageResponse
from mediahub.api.v1.uploads import read_upload
from mediahub.config import get_settings
from mediahub.core.auth.entities import Principal, TokenPair
from mediahub.core.auth.services import SessionManager
from mediahub.core.services.account_service import AccountService
from mediahub.core.services.video_service import VideoService
from .schemas import (
    AccountResponse,
    ChangePasswordRequest,
    LoginRequest,
    LoginResponse,
    PrincipalResponse,
    RefreshTokenRequest,
    RegisterRequest,
    TokenResponse,
    UpdateAccountRequest,
)

router = APIRouter(prefix="/auth", tags=["Authentication"])


def _set_session_cookies(response: Response, token_pair: TokenPair) -> None:
    settings = get_settings()
    response.set_cookie(
        ACCESS_TOKEN_COOKIE,
        token_pair.access_token,
        max_age=settings.access_token_expire_minutes * 60,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
    )
    response.set_cookie(
        REFRESH_TOKEN_COOKIE,
        token_pair.refresh_token,
        max_age=settings.refresh_token_expire_days * 24 * 3600,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
    )


def _clear_session_cookies(response: Response) -> None:
    settings = get_settings()
    for name in (ACCESS_TOKEN_COOKIE, REFRESH_TOKEN_COOKIE):
        response.delete_cookie(name, httponly=True, secure=settings.cookie_secure, samesite="lax")


@router.post(
    "/register",
    response_model=AccountResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register new account",
    description="Create a new account from form fields, with optional avatar and cover image files.",
    responses={
        201: {"description": "Account successfully created"},
        400: {"model": ErrorResponse, "description": "Invalid input data"},
        409: {"model": ErrorResponse, "description": "Account already exists"},
        502: {"model": ErrorResponse, "description": "Image upload failed"},
    },
)
async def register(
    username: str = Form(...),
    email: str = Form(...),
    password: str = Form(...),
    full_name: str = Form(""),
    avatar: Optional[UploadFile] = File(None),
    cover_image: Optional[UploadFile] = File(None),
    account_service: AccountService = Depends(get_account_service),
) -> AccountResponse:
    """
    Register a new account.

    Username and email must be unique; both are stored lower-case. The
    optional images are uploaded before the account is created.
    """
    try:
        payload = RegisterRequest(
            username=username, email=email, password=password, full_name=full_name
        )
    except ValidationError as e:
        raise RequestValidationError(e.errors())

    account = await account_service.register(
        username=payload.username,
        email=payload.email,
        password=payload.password,
        full_name=payload.full_name,
        avatar=await read_upload(avatar),
        cover_image=await read_upload(cover_image),
    )
    return AccountResponse.model_validate(account)


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Log in",
    description="Authenticate and receive access and refresh tokens, also set as cookies.",
    responses={
        200: {"description": "Login successful"},
        401: {"model": ErrorResponse, "description": "Invalid credentials"},
    },
)
async def login(
    payload: LoginRequest,
    response: Response,
    session_manager: SessionManager = Depends(get_session_manager),
) -> LoginResponse:
    """
    Authenticate with username or email and password.

    Unknown accounts and wrong passwords are reported identically.
    """
    result = await session_manager.login(payload.login_identifier, payload.password)
    _set_session_cookies(response, result.token_pair)

    return LoginResponse(
        access_token=result.token_pair.access_token,
        refresh_token=result.token_pair.refresh_token,
        token_type=result.token_pair.token_type,
        expires_in=result.token_pair.expires_in,
        user=PrincipalResponse.model_validate(result.principal),
    )


@router.post(
    "/refresh",
    response_model=TokenResponse,
    summary="Rotate session tokens",
    description="Exchange a refresh token for a new token pair. The old refresh token stops working.",
    responses={
        200: {"description": "Tokens rotated"},
        401: {"model": ErrorResponse, "description": "Missing, invalid, or stale refresh token"},
    },
)
async def refresh(
    request: Request,
    response: Response,
    payload: Optional[RefreshTokenRequest] = None,
    session_manager: SessionManager = Depends(get_session_manager),
) -> TokenResponse:
    """
    Rotate the session.

    The refresh token is taken from the body, falling back to the
    ``refreshToken`` cookie.
    """
    presented = payload.refresh_token if payload and payload.refresh_token else None
    presented = presented or request.cookies.get(REFRESH_TOKEN_COOKIE)

    token_pair = await session_manager.refresh(presented)
    _set_session_cookies(response, token_pair)

    return TokenResponse(
        access_token=token_pair.access_token,
        refresh_token=token_pair.refresh_token,
        token_type=token_pair.token_type,
        expires_in=token_pair.expires_in,
    )


@router.post(
    "/logout",
    response_model=MessageResponse,
    summary="Log out",
    responses=AUTH_RESPONSES,
)
async def logout(
    response: Response,
    principal: Principal = Depends(get_current_principal),
    session_manager: SessionManager = Depends(get_session_manager),
) -> MessageResponse:
    """Revoke the stored refresh token and clear session cookies."""
    await session_manager.logout(principal.id)
    _clear_session_cookies(response)
    return MessageResponse(message="Logged out")


@router.get(
    "/me",
    response_model=AccountResponse,
    summary="Get current account",
    responses=AUTH_RESPONSES,
)
async def get_me(
    principal: Principal = Depends(get_current_principal),
    account_service: AccountService = Depends(get_account_service),
) -> AccountResponse:
    account = await account_service.get_account(principal)
    return AccountResponse.model_validate(account)


@router.post(
    "/change-password",
    response_model=MessageResponse,
    summary="Change password",
    description="Change the password. Existing refresh tokens stop working.",
    responses=AUTH_RESPONSES,
)
async def change_password(
    payload: ChangePasswordRequest,
    response: Response,
    principal: Principal = Depends(get_current_principal),
    account_service: AccountService = Depends(get_account_service),
) -> MessageResponse:
    await account_service.change_password(principal, payload.old_password, payload.new_password)
    _clear_session_cookies(response)
    return MessageResponse(message="Password changed")


@router.patch(
    "/account",
    response_model=AccountResponse,
    summary="Update account details",
    responses={
        **AUTH_RESPONSES,
        400: {"model": ErrorResponse, "description": "Nothing to update"},
        409: {"model": ErrorResponse, "description": "Email already in use"},
    },
)
async def update_account(
    payload: UpdateAccountRequest,
    principal: Principal = Depends(get_current_principal),
    account_service: AccountService = Depends(get_account_service),
) -> AccountResponse:
    account = await account_service.update_account(
        principal, full_name=payload.full_name, email=payload.email
    )
    return AccountResponse.model_validate(account)


@router.patch(
    "/avatar",
    response_model=AccountResponse,
    summary="Replace avatar",
    description="Upload a new avatar image. The previous image is removed afterwards.",
    responses={
        **AUTH_RESPONSES,
        400: {"model": ErrorResponse, "description": "Missing image file"},
        409: {"model": ErrorResponse, "description": "Avatar changed concurrently"},
        502: {"model": ErrorResponse, "description": "Image upload failed"},
    },
)
async def update_avatar(
    avatar: UploadFile = File(...),
    principal: Principal = Depends(get_current_principal),
    account_service: AccountService = Depends(get_account_service),
) -> AccountResponse:
    account = await account_service.update_avatar(principal, await read_upload(avatar))
    return AccountResponse.model_validate(account)


@router.patch(
    "/cover-image",
    response_model=AccountResponse,
    summary="Replace cover image",
    description="Upload a new channel cover image. The previous image is removed afterwards.",
    responses={
        **AUTH_RESPONSES,
        400: {"model": ErrorResponse, "description": "Missing image file"},
        409: {"model": ErrorResponse, "description": "Cover image changed concurrently"},
        502: {"model": ErrorResponse, "description": "Image upload failed"},
    },
)
async def update_cover_image(
    cover_image: UploadFile = File(...),
    principal: Principal = Depends(get_current_principal),
    account_service: AccountService = Depends(get_account_service),
) -> AccountResponse:
    account = await account_service.update_cover_image(principal, await read_upload(cover_image))
    return AccountResponse.model_validate(account)


@router.get(
    "/history",
    response_model=List[VideoResponse],
    summary="Get watch history",
    description="Videos the current account watched, most recent first.",
    responses=AUTH_RESPONSES,
)
async def get_watch_history(
    principal: Principal = Depends(get_current_principal),
    video_service: VideoService = Depends(get_video_service),
) -> List[VideoResponse]:
    """Deleted videos and videos unpublished by other owners are left out."""
    videos = await video_service.list_watch_history(principal)
    return [VideoResponse.model_validate(v) for v in videos]
