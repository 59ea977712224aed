"""Account management service implementation."""

import logging
from dataclasses import replace
from typing import Optional

from mediahub.config import Settings, get_settings
from mediahub.core.auth.entities import Account, Principal
from mediahub.core.auth.exceptions import (
    AccountNotFoundException,
    InvalidCredentialsException,
    UserAlreadyExistsException,
)
from mediahub.core.auth.interfaces import CredentialStoreInterface, PasswordServiceInterface
from mediahub.core.domain.entities import ChannelProfile, MediaAsset, MediaUpload, SubscriptionKey
from mediahub.core.exceptions import (
    ConflictException,
    ResourceNotFoundException,
    ValidationException,
)
from mediahub.infrastructure.database.repositories.interfaces import (
    SubscriptionRepositoryInterface,
    UnitOfWorkInterface,
)
from .interfaces import MediaStorageInterface
from .media_transfer import MediaTransfer
from .validation import require_text

logger = logging.getLogger(__name__)

_IMAGE_LABELS = {"avatar_url": "avatar", "cover_image_url": "cover image"}


class AccountService:
    """
    Registration and profile management.

    Session handling lives in ``SessionManager``; this service only touches
    the stored refresh token to revoke it when the password changes.
    """

    def __init__(
        self,
        credential_store: CredentialStoreInterface,
        password_service: PasswordServiceInterface,
        subscription_repository: SubscriptionRepositoryInterface,
        media_storage: MediaStorageInterface,
        unit_of_work: UnitOfWorkInterface,
        settings: Optional[Settings] = None,
    ) -> None:
        """
        Initialize account service with dependencies.

        Args:
            credential_store: Account persistence
            password_service: Password hashing service
            subscription_repository: Subscription counters for channel profiles
            media_storage: Store for avatar and cover images
            unit_of_work: Transaction boundary
            settings: Application settings, defaults to the cached instance
        """
        self._accounts = credential_store
        self._password_service = password_service
        self._subscriptions = subscription_repository
        self._unit_of_work = unit_of_work
        self._transfer = MediaTransfer(
            media_storage, (settings or get_settings()).media_upload_timeout_seconds
        )

    async def register(
        self,
        username: str,
        email: str,
        password: str,
        full_name: str = "",
        avatar: Optional[MediaUpload] = None,
        cover_image: Optional[MediaUpload] = None,
    ) -> Account:
        """
        Register new account.

        Images are uploaded before the account is created and discarded
        again if the account cannot be created.

        Args:
            username: Desired username, stored lower-case
            email: Email address, stored lower-case
            password: Plain text password
            full_name: Display name
            avatar: Optional avatar image
            cover_image: Optional channel cover image

        Returns:
            Created account

        Raises:
            ValidationException: If a required field is blank
            UserAlreadyExistsException: If username or email is taken
            UpstreamFailureException: If an image upload fails or times out
        """
        username = require_text(username, "Username").lower()
        email = require_text(email, "Email").lower()
        password = require_text(password, "Password")

        if await self._accounts.get_account_by_username(username):
            raise UserAlreadyExistsException(username)
        if await self._accounts.get_account_by_email(email):
            raise UserAlreadyExistsException(email)

        try:
            account = Account(
                id=0,
                username=username,
                email=email,
                hashed_password=self._password_service.hash_password(password),
                full_name=(full_name or "").strip(),
            )
        except ValueError as e:
            raise ValidationException(str(e))

        avatar_asset = await self._upload_image(avatar)
        try:
            cover_asset = await self._upload_image(cover_image)
        except Exception:
            await self._discard_asset(avatar_asset)
            raise

        try:
            created = await self._accounts.create_account(
                replace(
                    account,
                    avatar_url=avatar_asset.url if avatar_asset else None,
                    cover_image_url=cover_asset.url if cover_asset else None,
                )
            )
        except Exception:
            await self._discard_asset(avatar_asset)
            await self._discard_asset(cover_asset)
            raise

        logger.info("Registered account %s", created.id)
        return created

    async def get_account(self, principal: Principal) -> Account:
        account = await self._accounts.get_account_by_id(principal.id)
        if not account:
            raise AccountNotFoundException(str(principal.id))
        return account

    async def change_password(
        self, principal: Principal, old_password: str, new_password: str
    ) -> None:
        """
        Change the password and revoke the stored refresh token.

        Raises:
            InvalidCredentialsException: If the old password is wrong
        """
        new_password = require_text(new_password, "New password")
        account = await self.get_account(principal)

        if not self._password_service.verify_password(old_password or "", account.hashed_password):
            raise InvalidCredentialsException()

        await self._accounts.update_password(
            account.id, self._password_service.hash_password(new_password)
        )
        await self._accounts.clear_refresh_token(account.id)
        logger.info("Account %s changed password", account.id)

    async def update_account(
        self,
        principal: Principal,
        full_name: Optional[str] = None,
        email: Optional[str] = None,
    ) -> Account:
        """
        Update display name and/or email.

        Raises:
            ValidationException: If no field is given or a field is blank
            UserAlreadyExistsException: If the email is taken by another account
        """
        if full_name is None and email is None:
            raise ValidationException("Full name or email is required")

        if full_name is not None:
            full_name = require_text(full_name, "Full name")
        if email is not None:
            email = require_text(email, "Email").lower()
            if "@" not in email:
                raise ValidationException("Invalid email format")
            existing = await self._accounts.get_account_by_email(email)
            if existing and existing.id != principal.id:
                raise UserAlreadyExistsException(email)

        updated = await self._accounts.update_profile(principal.id, full_name=full_name, email=email)
        if updated is None:
            raise AccountNotFoundException(str(principal.id))
        return updated

    async def update_avatar(self, principal: Principal, image: Optional[MediaUpload]) -> Account:
        """
        Replace the avatar image.

        The old image is removed once the new URL is committed.

        Raises:
            ValidationException: If no image was given
            ConflictException: If the avatar changed while the image uploaded
            UpstreamFailureException: If the upload fails or times out
        """
        return await self._replace_image(principal, image, "avatar_url")

    async def update_cover_image(
        self, principal: Principal, image: Optional[MediaUpload]
    ) -> Account:
        """Replace the channel cover image, like ``update_avatar``."""
        return await self._replace_image(principal, image, "cover_image_url")

    async def get_channel_profile(
        self, username: str, viewer: Optional[Principal]
    ) -> ChannelProfile:
        """
        Public channel profile with subscription counters.

        Raises:
            ResourceNotFoundException: If no account has the username
        """
        username = (username or "").strip().lower()
        account = await self._accounts.get_account_by_username(username) if username else None
        if not account:
            raise ResourceNotFoundException("channel")

        is_subscribed = False
        if viewer is not None and viewer.id != account.id:
            is_subscribed = await self._subscriptions.exists(
                SubscriptionKey(subscriber_id=viewer.id, channel_id=account.id)
            )

        return ChannelProfile(
            id=account.id,
            username=account.username,
            full_name=account.full_name,
            avatar_url=account.avatar_url,
            cover_image_url=account.cover_image_url,
            subscribers_count=await self._subscriptions.count_by_channel(account.id),
            subscribed_to_count=await self._subscriptions.count_by_subscriber(account.id),
            is_subscribed=is_subscribed,
        )

    async def _replace_image(
        self, principal: Principal, image: Optional[MediaUpload], field: str
    ) -> Account:
        label = _IMAGE_LABELS[field]
        if image is None or not image.content:
            raise ValidationException(f"{label.capitalize()} file is required")

        account = await self.get_account(principal)
        old_url = getattr(account, field)
        swap = (
            self._accounts.replace_avatar if field == "avatar_url"
            else self._accounts.replace_cover_image
        )

        asset = await self._transfer.upload(image)
        try:
            if not await swap(account.id, old_url, asset.url):
                raise ConflictException(f"The {label} changed concurrently")
            await self._unit_of_work.commit()
        except Exception:
            await self._transfer.discard(asset.url)
            raise

        await self._transfer.discard(old_url)
        logger.info("Account %s replaced its %s", account.id, label)

        return replace(account, **{field: asset.url})

    async def _upload_image(self, image: Optional[MediaUpload]) -> Optional[MediaAsset]:
        if image is None or not image.content:
            return None
        return await self._transfer.upload(image)

    async def _discard_asset(self, asset: Optional[MediaAsset]) -> None:
        if asset is not None:
            await self._transfer.discard(asset.url)
