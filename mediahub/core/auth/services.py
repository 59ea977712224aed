"""Authentication service implementations."""

import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from mediahub.config import Settings, get_settings
from .entities import Account, LoginResult, Principal, TokenPair, TokenPayload
from .exceptions import (
    AccountNotFoundException,
    InvalidCredentialsException,
    InvalidTokenException,
    MissingTokenException,
    StaleTokenException,
    UnauthenticatedException,
)
from .interfaces import (
    CredentialStoreInterface,
    PasswordServiceInterface,
    TokenServiceInterface,
)

logger = logging.getLogger(__name__)

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


class PasswordService(PasswordServiceInterface):
    """
    BCrypt-based password hashing service.

    Provides secure password hashing and verification using bcrypt algorithm.
    """

    def __init__(self) -> None:
        """Initialize password context with bcrypt."""
        self._pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

    def hash_password(self, password: str) -> str:
        """
        Hash a password securely using bcrypt.

        Args:
            password: Plain text password

        Returns:
            Hashed password string
        """
        return self._pwd_context.hash(password)

    def verify_password(self, password: str, hashed_password: str) -> bool:
        """
        Verify password against bcrypt hash.

        Args:
            password: Plain text password
            hashed_password: Stored password hash

        Returns:
            True if password matches, False otherwise
        """
        return self._pwd_context.verify(password, hashed_password)

    def dummy_verify(self) -> None:
        """
        Run a verification against passlib's internal dummy hash.

        Called when no account matches a login, so the failure takes as
        long as a wrong password.
        """
        self._pwd_context.dummy_verify()


class TokenService(TokenServiceInterface):
    """
    JWT-based token service.

    Access tokens carry the principal's profile claims and are signed with
    the access secret. Refresh tokens carry only the subject and a random
    ``jti`` and are signed with a separate secret, so one can never be
    presented as the other.
    """

    def __init__(self, settings: Optional[Settings] = None) -> None:
        """
        Initialize token service.

        Args:
            settings: Application settings, defaults to the cached instance
        """
        self._settings = settings or get_settings()

        self._secret_key = self._settings.jwt_secret_key
        self._refresh_secret_key = self._settings.jwt_refresh_secret_key
        self._algorithm = self._settings.jwt_algorithm
        self._access_token_expire_minutes = self._settings.access_token_expire_minutes
        self._refresh_token_expire_days = self._settings.refresh_token_expire_days

    def create_access_token(self, account: Account) -> str:
        """
        Create JWT access token for account.

        Args:
            account: Account entity

        Returns:
            JWT access token string
        """
        now = datetime.now(timezone.utc)
        expire = now + timedelta(minutes=self._access_token_expire_minutes)

        payload = {
            "sub": str(account.id),
            "username": account.username,
            "email": account.email,
            "exp": expire,
            "iat": now,
            "token_type": ACCESS_TOKEN_TYPE,
        }

        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

    def create_refresh_token(self, account: Account) -> str:
        """
        Create refresh token for account.

        The random ``jti`` makes every issued token distinct, even when two
        are minted for the same account within one second.
        """
        now = datetime.now(timezone.utc)
        expire = now + timedelta(days=self._refresh_token_expire_days)

        payload = {
            "sub": str(account.id),
            "jti": secrets.token_urlsafe(16),
            "exp": expire,
            "iat": now,
            "token_type": REFRESH_TOKEN_TYPE,
        }

        return jwt.encode(payload, self._refresh_secret_key, algorithm=self._algorithm)

    def create_token_pair(self, account: Account) -> TokenPair:
        """
        Create access and refresh token pair for account.

        Args:
            account: Account entity

        Returns:
            Token pair with access and refresh tokens
        """
        return TokenPair(
            access_token=self.create_access_token(account),
            refresh_token=self.create_refresh_token(account),
            expires_in=self._access_token_expire_minutes * 60,
        )

    def decode_access_token(self, token: str) -> TokenPayload:
        """Decode and validate an access token."""
        return self._decode(token, self._secret_key, ACCESS_TOKEN_TYPE)

    def decode_refresh_token(self, token: str) -> TokenPayload:
        """Decode and validate a refresh token."""
        return self._decode(token, self._refresh_secret_key, REFRESH_TOKEN_TYPE)

    def _decode(self, token: str, key: str, expected_type: str) -> TokenPayload:
        """
        Decode token and check its type claim.

        Raises:
            InvalidTokenException: If token is malformed, expired or of the wrong type
        """
        try:
            payload = jwt.decode(token, key, algorithms=[self._algorithm])
        except ExpiredSignatureError:
            raise InvalidTokenException("Token has expired")
        except JWTError as e:
            raise InvalidTokenException(f"Token decode error: {e}")

        if payload.get("token_type") != expected_type:
            raise InvalidTokenException(f"Expected {expected_type} token")

        try:
            return TokenPayload(
                sub=payload["sub"],
                exp=payload["exp"],
                iat=payload["iat"],
                token_type=payload["token_type"],
                username=payload.get("username"),
                email=payload.get("email"),
            )
        except (KeyError, ValueError) as e:
            raise InvalidTokenException(f"Malformed token payload: {e}")


class SessionManager:
    """
    Issues, validates and rotates session tokens.

    Only the current refresh token value is stored per account. Rotation
    overwrites it through a compare-and-swap, so a token that was already
    rotated out can never be exchanged again.
    """

    def __init__(
        self,
        credential_store: CredentialStoreInterface,
        password_service: PasswordServiceInterface,
        token_service: TokenServiceInterface,
    ) -> None:
        """
        Initialize session manager.

        Args:
            credential_store: Account and refresh token persistence
            password_service: Password hashing service
            token_service: Token management service
        """
        self._credential_store = credential_store
        self._password_service = password_service
        self._token_service = token_service

    async def login(self, identifier: str, password: str) -> LoginResult:
        """
        Authenticate account and open a session.

        Args:
            identifier: Username or email
            password: Plain text password

        Returns:
            Principal together with a fresh token pair

        Raises:
            InvalidCredentialsException: If the identifier is unknown or the password is wrong
        """
        account = await self._find_account(identifier)

        if not account:
            self._password_service.dummy_verify()
            raise InvalidCredentialsException()

        if not self._password_service.verify_password(password, account.hashed_password):
            raise InvalidCredentialsException()

        token_pair = self._token_service.create_token_pair(account)
        await self._credential_store.set_refresh_token(account.id, token_pair.refresh_token)

        logger.info("Account %s logged in", account.id)
        return LoginResult(principal=account.to_principal(), token_pair=token_pair)

    async def refresh(self, presented_refresh_token: Optional[str]) -> TokenPair:
        """
        Exchange a refresh token for a new token pair.

        Args:
            presented_refresh_token: Refresh token sent by the client

        Returns:
            New token pair; the presented refresh token is no longer valid

        Raises:
            MissingTokenException: If no token was presented
            InvalidTokenException: If signature, expiry or type verification fails
            AccountNotFoundException: If the token subject no longer exists
            StaleTokenException: If the token was already rotated out or revoked
        """
        if not presented_refresh_token or not presented_refresh_token.strip():
            raise MissingTokenException()

        payload = self._token_service.decode_refresh_token(presented_refresh_token)

        try:
            account_id = int(payload.sub)
        except ValueError:
            raise InvalidTokenException("Malformed token subject")

        account = await self._credential_store.get_account_by_id(account_id)
        if not account:
            raise AccountNotFoundException(payload.sub)

        if account.refresh_token != presented_refresh_token:
            logger.warning("Stale refresh token presented for account %s", account.id)
            raise StaleTokenException()

        token_pair = self._token_service.create_token_pair(account)

        swapped = await self._credential_store.replace_refresh_token(
            account.id, presented_refresh_token, token_pair.refresh_token
        )
        if not swapped:
            logger.warning("Refresh token rotation lost a race for account %s", account.id)
            raise StaleTokenException()

        return token_pair

    async def logout(self, principal_id: int) -> None:
        """
        Close the session of an account.

        Args:
            principal_id: Account identifier
        """
        await self._credential_store.clear_refresh_token(principal_id)
        logger.info("Account %s logged out", principal_id)

    async def validate_access_token(self, token: Optional[str]) -> Principal:
        """
        Resolve the principal behind an access token.

        Args:
            token: JWT access token

        Returns:
            Principal of the current request

        Raises:
            UnauthenticatedException: If token is missing, invalid, expired
                or its account no longer exists
        """
        if not token:
            raise UnauthenticatedException()

        try:
            payload = self._token_service.decode_access_token(token)
            account_id = int(payload.sub)
        except InvalidTokenException as e:
            raise UnauthenticatedException(e.message)
        except ValueError:
            raise UnauthenticatedException("Malformed token subject")

        account = await self._credential_store.get_account_by_id(account_id)
        if not account:
            raise UnauthenticatedException("Account no longer exists")

        return account.to_principal()

    async def _find_account(self, identifier: str) -> Optional[Account]:
        """Get account by username or email."""
        identifier = (identifier or "").strip()
        if not identifier:
            return None
        if "@" in identifier:
            return await self._credential_store.get_account_by_email(identifier.lower())
        return await self._credential_store.get_account_by_username(identifier.lower())
