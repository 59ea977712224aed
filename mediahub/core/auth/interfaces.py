"""Authentication service interfaces."""

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from .entities import Account, TokenPair, TokenPayload


class PasswordServiceInterface(ABC):
    """Interface for password hashing and verification."""

    @abstractmethod
    def hash_password(self, password: str) -> str:
        """
        Hash a password securely.

        Args:
            password: Plain text password

        Returns:
            Hashed password string
        """
        pass

    @abstractmethod
    def verify_password(self, password: str, hashed_password: str) -> bool:
        """
        Verify password against hash.

        Args:
            password: Plain text password
            hashed_password: Stored password hash

        Returns:
            True if password matches, False otherwise
        """
        pass

    @abstractmethod
    def dummy_verify(self) -> None:
        """Spend the time of one verification without a stored hash."""
        pass


class TokenServiceInterface(ABC):
    """Interface for JWT token operations."""

    @abstractmethod
    def create_access_token(self, account: Account) -> str:
        """Create short-lived access token carrying profile claims."""
        pass

    @abstractmethod
    def create_refresh_token(self, account: Account) -> str:
        """Create long-lived refresh token bound to the account."""
        pass

    @abstractmethod
    def create_token_pair(self, account: Account) -> TokenPair:
        """
        Create access and refresh token pair.

        Args:
            account: Account entity

        Returns:
            Token pair with access and refresh tokens
        """
        pass

    @abstractmethod
    def decode_access_token(self, token: str) -> TokenPayload:
        """
        Decode and validate an access token.

        Raises:
            InvalidTokenException: If token is invalid, expired or not an access token
        """
        pass

    @abstractmethod
    def decode_refresh_token(self, token: str) -> TokenPayload:
        """
        Decode and validate a refresh token.

        Raises:
            InvalidTokenException: If token is invalid, expired or not a refresh token
        """
        pass


class CredentialStoreInterface(ABC):
    """
    Interface for account and refresh token persistence.

    The stored refresh token value is the only piece of session state; every
    write to it is either unconditional (login, logout) or conditional on the
    value previously read (rotation).
    """

    @abstractmethod
    async def get_account_by_id(self, account_id: int) -> Optional[Account]:
        """Get account by ID."""
        pass

    @abstractmethod
    async def get_account_by_username(self, username: str) -> Optional[Account]:
        """Get account by username."""
        pass

    @abstractmethod
    async def get_account_by_email(self, email: str) -> Optional[Account]:
        """Get account by email."""
        pass

    @abstractmethod
    async def get_accounts(self, account_ids: Sequence[int]) -> List[Account]:
        """Get all existing accounts among the given IDs."""
        pass

    @abstractmethod
    async def create_account(self, account: Account) -> Account:
        """
        Create new account.

        Raises:
            UserAlreadyExistsException: If username or email already exists
        """
        pass

    @abstractmethod
    async def update_profile(
        self,
        account_id: int,
        full_name: Optional[str] = None,
        email: Optional[str] = None,
    ) -> Optional[Account]:
        """Update profile fields, returning the updated account or None if absent."""
        pass

    @abstractmethod
    async def replace_avatar(
        self, account_id: int, expected: Optional[str], new: str
    ) -> bool:
        """
        Compare-and-swap the avatar URL.

        Returns:
            True if the stored URL still equaled ``expected`` and was replaced
        """
        pass

    @abstractmethod
    async def replace_cover_image(
        self, account_id: int, expected: Optional[str], new: str
    ) -> bool:
        """Compare-and-swap the cover image URL, like ``replace_avatar``."""
        pass

    @abstractmethod
    async def update_password(self, account_id: int, hashed_password: str) -> bool:
        """Replace the stored password hash."""
        pass

    @abstractmethod
    async def set_refresh_token(self, account_id: int, token: str) -> bool:
        """
        Store a refresh token unconditionally.

        Returns:
            True if the account exists and was updated
        """
        pass

    @abstractmethod
    async def replace_refresh_token(
        self, account_id: int, expected: str, new: str
    ) -> bool:
        """
        Compare-and-swap the stored refresh token.

        Args:
            account_id: Account identifier
            expected: Value the caller read and validated
            new: Replacement value

        Returns:
            True if the stored value still equaled ``expected`` and was replaced
        """
        pass

    @abstractmethod
    async def clear_refresh_token(self, account_id: int) -> None:
        """Unset the stored refresh token; no error if already unset."""
        pass
