"""FastAPI dependency injection setup.

Everything below the session is built per request, so repositories and
services never outlive the session they were created with.
"""

from typing import AsyncGenerator, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from mediahub.core.access.cascade import CascadeCoordinator
from mediahub.core.access.guard import OwnershipGuard
from mediahub.core.access.visibility import VisibilityFilter
from mediahub.core.auth.entities import Principal
from mediahub.core.auth.exceptions import UnauthenticatedException
from mediahub.core.auth.services import PasswordService, SessionManager, TokenService
from mediahub.core.domain.enums import ResourceType
from mediahub.core.services.account_service import AccountService
from mediahub.core.services.comment_service import CommentService
from mediahub.core.services.interfaces import MediaStorageInterface
from mediahub.core.services.like_service import LikeService
from mediahub.core.services.playlist_service import PlaylistService
from mediahub.core.services.subscription_service import SubscriptionService
from mediahub.core.services.tweet_service import TweetService
from mediahub.core.services.video_service import VideoService
from mediahub.infrastructure.database.repositories.account_repository import SqlAccountRepository
from mediahub.infrastructure.database.repositories.comment_repository import SqlCommentRepository
from mediahub.infrastructure.database.repositories.like_repository import SqlLikeRepository
from mediahub.infrastructure.database.repositories.playlist_repository import SqlPlaylistRepository
from mediahub.infrastructure.database.repositories.subscription_repository import (
    SqlSubscriptionRepository,
)
from mediahub.infrastructure.database.repositories.tweet_repository import SqlTweetRepository
from mediahub.infrastructure.database.repositories.video_repository import SqlVideoRepository
from mediahub.infrastructure.database.repositories.watch_history_repository import (
    SqlWatchHistoryRepository,
)
from mediahub.infrastructure.database.session import get_session
from mediahub.infrastructure.database.unit_of_work import SqlUnitOfWork
from mediahub.infrastructure.services.media_storage import LocalMediaStorage

ACCESS_TOKEN_COOKIE = "accessToken"
REFRESH_TOKEN_COOKIE = "refreshToken"

security = HTTPBearer(auto_error=False)


async def get_database_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Provide database session for dependency injection.

    Yields:
        AsyncSession: Database session
    """
    async for session in get_session():
        yield session


def get_media_storage() -> MediaStorageInterface:
    """Provide the media store."""
    return LocalMediaStorage()


def get_account_repository(
    session: AsyncSession = Depends(get_database_session),
) -> SqlAccountRepository:
    return SqlAccountRepository(session)


def get_video_repository(
    session: AsyncSession = Depends(get_database_session),
) -> SqlVideoRepository:
    return SqlVideoRepository(session)


def get_tweet_repository(
    session: AsyncSession = Depends(get_database_session),
) -> SqlTweetRepository:
    return SqlTweetRepository(session)


def get_comment_repository(
    session: AsyncSession = Depends(get_database_session),
) -> SqlCommentRepository:
    return SqlCommentRepository(session)


def get_like_repository(
    session: AsyncSession = Depends(get_database_session),
) -> SqlLikeRepository:
    return SqlLikeRepository(session)


def get_subscription_repository(
    session: AsyncSession = Depends(get_database_session),
) -> SqlSubscriptionRepository:
    return SqlSubscriptionRepository(session)


def get_playlist_repository(
    session: AsyncSession = Depends(get_database_session),
) -> SqlPlaylistRepository:
    return SqlPlaylistRepository(session)


def get_watch_history_repository(
    session: AsyncSession = Depends(get_database_session),
) -> SqlWatchHistoryRepository:
    return SqlWatchHistoryRepository(session)


def get_unit_of_work(
    session: AsyncSession = Depends(get_database_session),
) -> SqlUnitOfWork:
    return SqlUnitOfWork(session)


def get_session_manager(
    accounts: SqlAccountRepository = Depends(get_account_repository),
) -> SessionManager:
    """
    Provide session manager for dependency injection.

    Args:
        accounts: Credential store bound to the request session

    Returns:
        SessionManager: Session manager instance
    """
    return SessionManager(accounts, PasswordService(), TokenService())


def get_account_service(
    accounts: SqlAccountRepository = Depends(get_account_repository),
    subscriptions: SqlSubscriptionRepository = Depends(get_subscription_repository),
    media_storage: MediaStorageInterface = Depends(get_media_storage),
    unit_of_work: SqlUnitOfWork = Depends(get_unit_of_work),
) -> AccountService:
    return AccountService(accounts, PasswordService(), subscriptions, media_storage, unit_of_work)


def get_ownership_guard(
    videos: SqlVideoRepository = Depends(get_video_repository),
    tweets: SqlTweetRepository = Depends(get_tweet_repository),
    comments: SqlCommentRepository = Depends(get_comment_repository),
    playlists: SqlPlaylistRepository = Depends(get_playlist_repository),
) -> OwnershipGuard:
    return OwnershipGuard(
        {
            ResourceType.VIDEO: videos,
            ResourceType.TWEET: tweets,
            ResourceType.COMMENT: comments,
            ResourceType.PLAYLIST: playlists,
        }
    )


def get_visibility_filter() -> VisibilityFilter:
    return VisibilityFilter()


def get_cascade_coordinator(
    videos: SqlVideoRepository = Depends(get_video_repository),
    tweets: SqlTweetRepository = Depends(get_tweet_repository),
    comments: SqlCommentRepository = Depends(get_comment_repository),
    likes: SqlLikeRepository = Depends(get_like_repository),
    playlists: SqlPlaylistRepository = Depends(get_playlist_repository),
    unit_of_work: SqlUnitOfWork = Depends(get_unit_of_work),
) -> CascadeCoordinator:
    return CascadeCoordinator(videos, tweets, comments, likes, playlists, unit_of_work)


def get_video_service(
    videos: SqlVideoRepository = Depends(get_video_repository),
    media_storage: MediaStorageInterface = Depends(get_media_storage),
    guard: OwnershipGuard = Depends(get_ownership_guard),
    visibility: VisibilityFilter = Depends(get_visibility_filter),
    unit_of_work: SqlUnitOfWork = Depends(get_unit_of_work),
    watch_history: SqlWatchHistoryRepository = Depends(get_watch_history_repository),
) -> VideoService:
    return VideoService(videos, media_storage, guard, visibility, unit_of_work, watch_history)


def get_tweet_service(
    tweets: SqlTweetRepository = Depends(get_tweet_repository),
    accounts: SqlAccountRepository = Depends(get_account_repository),
    guard: OwnershipGuard = Depends(get_ownership_guard),
) -> TweetService:
    return TweetService(tweets, accounts, guard)


def get_comment_service(
    comments: SqlCommentRepository = Depends(get_comment_repository),
    cascade: CascadeCoordinator = Depends(get_cascade_coordinator),
    guard: OwnershipGuard = Depends(get_ownership_guard),
    visibility: VisibilityFilter = Depends(get_visibility_filter),
) -> CommentService:
    return CommentService(comments, cascade, guard, visibility)


def get_like_service(
    likes: SqlLikeRepository = Depends(get_like_repository),
    videos: SqlVideoRepository = Depends(get_video_repository),
    cascade: CascadeCoordinator = Depends(get_cascade_coordinator),
    visibility: VisibilityFilter = Depends(get_visibility_filter),
) -> LikeService:
    return LikeService(likes, videos, cascade, visibility)


def get_subscription_service(
    subscriptions: SqlSubscriptionRepository = Depends(get_subscription_repository),
    accounts: SqlAccountRepository = Depends(get_account_repository),
) -> SubscriptionService:
    return SubscriptionService(subscriptions, accounts)


def get_playlist_service(
    playlists: SqlPlaylistRepository = Depends(get_playlist_repository),
    videos: SqlVideoRepository = Depends(get_video_repository),
    accounts: SqlAccountRepository = Depends(get_account_repository),
    guard: OwnershipGuard = Depends(get_ownership_guard),
    visibility: VisibilityFilter = Depends(get_visibility_filter),
) -> PlaylistService:
    return PlaylistService(playlists, videos, accounts, guard, visibility)


def _access_token(
    request: Request, credentials: Optional[HTTPAuthorizationCredentials]
) -> Optional[str]:
    if credentials and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(ACCESS_TOKEN_COOKIE)


async def get_current_principal(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    session_manager: SessionManager = Depends(get_session_manager),
) -> Principal:
    """
    Get current authenticated principal from the access token.

    The token is read from the ``Authorization: Bearer`` header, falling
    back to the ``accessToken`` cookie.

    Raises:
        UnauthenticatedException: If token is missing, invalid or expired
    """
    return await session_manager.validate_access_token(_access_token(request, credentials))


async def get_optional_principal(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    session_manager: SessionManager = Depends(get_session_manager),
) -> Optional[Principal]:
    """
    Get current principal if a valid token is provided, None otherwise.

    Returns:
        Principal or None: Current principal if authenticated
    """
    token = _access_token(request, credentials)
    if not token:
        return None

    try:
        return await session_manager.validate_access_token(token)
    except UnauthenticatedException:
        return None
