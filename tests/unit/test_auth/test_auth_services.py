"""Tests for authentication services."""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, patch

import pytest
from jose import jwt

from mediahub.config import Settings
from mediahub.core.auth.entities import Account, Principal, TokenPair
from mediahub.core.auth.exceptions import (
    AccountNotFoundException,
    InvalidCredentialsException,
    InvalidTokenException,
    MissingTokenException,
    StaleTokenException,
    UnauthenticatedException,
)
from mediahub.core.auth.interfaces import CredentialStoreInterface
from mediahub.core.auth.services import PasswordService, SessionManager, TokenService


@pytest.fixture
def settings():
    """Settings with fixed secrets."""
    return Settings(
        jwt_secret_key="access-secret",
        jwt_refresh_secret_key="refresh-secret",
        access_token_expire_minutes=30,
        refresh_token_expire_days=10,
    )


@pytest.fixture
def password_service():
    """Create password service."""
    return PasswordService()


@pytest.fixture
def token_service(settings):
    """Create token service."""
    return TokenService(settings)


@pytest.fixture
def account(password_service):
    """Create an account whose password is password123."""
    return Account(
        id=1,
        username="alice",
        email="alice@example.com",
        hashed_password=password_service.hash_password("password123"),
    )


@pytest.fixture
def credential_store():
    """Create mock credential store."""
    return AsyncMock(spec=CredentialStoreInterface)


@pytest.fixture
def session_manager(credential_store, password_service, token_service):
    """Create session manager with mocked store."""
    return SessionManager(credential_store, password_service, token_service)


class TestPasswordService:
    """Test cases for PasswordService."""

    def test_hash_password(self, password_service):
        """Test password hashing."""
        hashed = password_service.hash_password("test_password_123")

        assert hashed != "test_password_123"
        assert hashed.startswith("$2b$")

    def test_verify_password(self, password_service):
        hashed = password_service.hash_password("test_password_123")

        assert password_service.verify_password("test_password_123", hashed) is True
        assert password_service.verify_password("wrong_password", hashed) is False

    def test_dummy_verify(self, password_service):
        assert password_service.dummy_verify() is None


class TestTokenService:
    """Test cases for TokenService."""

    def test_access_token_round_trip(self, token_service, account):
        """Test access token carries the profile claims."""
        token = token_service.create_access_token(account)
        payload = token_service.decode_access_token(token)

        assert payload.sub == "1"
        assert payload.username == "alice"
        assert payload.email == "alice@example.com"
        assert payload.token_type == "access"

    def test_refresh_tokens_are_unique(self, token_service, account):
        """Test two refresh tokens minted back to back differ."""
        assert token_service.create_refresh_token(account) != token_service.create_refresh_token(account)

    def test_token_pair_expiry(self, token_service, account):
        pair = token_service.create_token_pair(account)

        assert isinstance(pair, TokenPair)
        assert pair.expires_in == 1800

    def test_refresh_token_rejected_as_access_token(self, token_service, account):
        """Test tokens signed with one secret do not verify with the other."""
        refresh = token_service.create_refresh_token(account)

        with pytest.raises(InvalidTokenException):
            token_service.decode_access_token(refresh)

    def test_wrong_token_type_claim(self, token_service, settings):
        """Test a correctly signed token with the wrong type claim."""
        now = datetime.now(timezone.utc)
        token = jwt.encode(
            {"sub": "1", "iat": now, "exp": now + timedelta(minutes=5), "token_type": "refresh"},
            settings.jwt_secret_key,
            algorithm=settings.jwt_algorithm,
        )

        with pytest.raises(InvalidTokenException, match="Expected access token"):
            token_service.decode_access_token(token)

    def test_expired_token(self, token_service, settings):
        now = datetime.now(timezone.utc)
        token = jwt.encode(
            {
                "sub": "1",
                "iat": now - timedelta(hours=2),
                "exp": now - timedelta(hours=1),
                "token_type": "access",
            },
            settings.jwt_secret_key,
            algorithm=settings.jwt_algorithm,
        )

        with pytest.raises(InvalidTokenException, match="expired"):
            token_service.decode_access_token(token)

    def test_garbage_token(self, token_service):
        with pytest.raises(InvalidTokenException):
            token_service.decode_refresh_token("invalid.jwt.token")


class TestSessionManager:
    """Test cases for SessionManager."""

    @pytest.mark.asyncio
    async def test_login_by_username(self, session_manager, credential_store, account):
        """Test login stores the issued refresh token."""
        # Setup mock
        credential_store.get_account_by_username.return_value = account

        result = await session_manager.login("Alice", "password123")

        # Verify
        assert result.principal == Principal(id=1, username="alice", email="alice@example.com")
        credential_store.get_account_by_username.assert_called_once_with("alice")
        credential_store.set_refresh_token.assert_called_once_with(
            1, result.token_pair.refresh_token
        )

    @pytest.mark.asyncio
    async def test_login_by_email(self, session_manager, credential_store, account):
        credential_store.get_account_by_email.return_value = account

        await session_manager.login("ALICE@example.com", "password123")

        credential_store.get_account_by_email.assert_called_once_with("alice@example.com")
        credential_store.get_account_by_username.assert_not_called()

    @pytest.mark.asyncio
    async def test_login_wrong_password(self, session_manager, credential_store, account):
        credential_store.get_account_by_username.return_value = account

        with pytest.raises(InvalidCredentialsException):
            await session_manager.login("alice", "wrong")
        credential_store.set_refresh_token.assert_not_called()

    @pytest.mark.asyncio
    async def test_login_unknown_account(self, session_manager, credential_store):
        credential_store.get_account_by_username.return_value = None

        with pytest.raises(InvalidCredentialsException):
            await session_manager.login("nobody", "password123")


    @pytest.mark.asyncio
    async def test_login_unknown_account_still_hashes(self, session_manager, credential_store):
        """Test an unknown account costs one password verification like a wrong password."""
        credential_store.get_account_by_username.return_value = None

        with patch.object(PasswordService, "dummy_verify") as dummy_verify:
            with pytest.raises(InvalidCredentialsException):
                await session_manager.login("nobody", "password123")

        dummy_verify.assert_called_once_with()

    @pytest.mark.asyncio
    async def test_refresh_rotates(self, session_manager, credential_store, token_service, account):
        """Test refresh swaps the stored token for a new one."""
        # Setup mock
        presented = token_service.create_refresh_token(account)
        credential_store.get_account_by_id.return_value = Account(
            id=1,
            username="alice",
            email="alice@example.com",
            hashed_password=account.hashed_password,
            refresh_token=presented,
        )
        credential_store.replace_refresh_token.return_value = True

        pair = await session_manager.refresh(presented)

        # Verify
        assert pair.refresh_token != presented
        credential_store.replace_refresh_token.assert_called_once_with(
            1, presented, pair.refresh_token
        )

    @pytest.mark.asyncio
    async def test_refresh_stale_token(self, session_manager, credential_store, token_service, account):
        """Test a token that is no longer the stored one is rejected."""
        presented = token_service.create_refresh_token(account)
        credential_store.get_account_by_id.return_value = Account(
            id=1,
            username="alice",
            email="alice@example.com",
            hashed_password=account.hashed_password,
            refresh_token="something-newer",
        )

        with pytest.raises(StaleTokenException):
            await session_manager.refresh(presented)
        credential_store.replace_refresh_token.assert_not_called()

    @pytest.mark.asyncio
    async def test_refresh_lost_race(self, session_manager, credential_store, token_service, account):
        """Test a concurrent rotation that wins the compare-and-swap."""
        presented = token_service.create_refresh_token(account)
        credential_store.get_account_by_id.return_value = Account(
            id=1,
            username="alice",
            email="alice@example.com",
            hashed_password=account.hashed_password,
            refresh_token=presented,
        )
        credential_store.replace_refresh_token.return_value = False

        with pytest.raises(StaleTokenException):
            await session_manager.refresh(presented)

    @pytest.mark.asyncio
    async def test_refresh_missing_token(self, session_manager):
        with pytest.raises(MissingTokenException):
            await session_manager.refresh("  ")

    @pytest.mark.asyncio
    async def test_refresh_deleted_account(self, session_manager, credential_store, token_service, account):
        credential_store.get_account_by_id.return_value = None

        with pytest.raises(AccountNotFoundException):
            await session_manager.refresh(token_service.create_refresh_token(account))

    @pytest.mark.asyncio
    async def test_logout_clears_token(self, session_manager, credential_store):
        await session_manager.logout(5)

        credential_store.clear_refresh_token.assert_called_once_with(5)

    @pytest.mark.asyncio
    async def test_validate_access_token(self, session_manager, credential_store, token_service, account):
        credential_store.get_account_by_id.return_value = account

        principal = await session_manager.validate_access_token(
            token_service.create_access_token(account)
        )

        assert principal.id == 1

    @pytest.mark.asyncio
    async def test_validate_missing_token(self, session_manager):
        with pytest.raises(UnauthenticatedException):
            await session_manager.validate_access_token(None)

    @pytest.mark.asyncio
    async def test_validate_token_of_deleted_account(
        self, session_manager, credential_store, token_service, account
    ):
        credential_store.get_account_by_id.return_value = None

        with pytest.raises(UnauthenticatedException, match="no longer exists"):
            await session_manager.validate_access_token(token_service.create_access_token(account))
