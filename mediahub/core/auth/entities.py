"""Authentication domain entities."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Account:
    """
    Account entity held by the credential store.

    Attributes:
        id: Unique account identifier
        username: Unique lower-case username
        email: Account email address
        hashed_password: Securely hashed password
        full_name: Display name
        avatar_url: Public URL of the avatar image
        cover_image_url: Public URL of the channel cover image
        refresh_token: The single refresh token currently recognized
        created_at: Account creation timestamp
        updated_at: Last update timestamp
    """

    id: int
    username: str
    email: str
    hashed_password: str
    full_name: str = ""
    avatar_url: Optional[str] = None
    cover_image_url: Optional[str] = None
    refresh_token: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        """Validate account data after initialization."""
        if not self.username:
            raise ValueError("Username cannot be empty")
        if not self.email:
            raise ValueError("Email cannot be empty")
        if not self.hashed_password:
            raise ValueError("Hashed password cannot be empty")
        if "@" not in self.email:
            raise ValueError("Invalid email format")

    def to_principal(self) -> "Principal":
        """Project the account onto the identity used for access checks."""
        return Principal(id=self.id, username=self.username, email=self.email)


@dataclass(frozen=True)
class Principal:
    """
    Authenticated actor making a request.

    Rebuilt on every request from access token claims and a store lookup;
    never persisted.
    """

    id: int
    username: str
    email: str


@dataclass(frozen=True)
class TokenPair:
    """
    Access and refresh token pair.

    Attributes:
        access_token: JWT access token
        refresh_token: Refresh token string
        token_type: Token type (typically "bearer")
        expires_in: Access token expiration time in seconds
    """

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int = 1800

    def __post_init__(self) -> None:
        """Validate token pair data."""
        if not self.access_token:
            raise ValueError("Access token cannot be empty")
        if not self.refresh_token:
            raise ValueError("Refresh token cannot be empty")


@dataclass(frozen=True)
class TokenPayload:
    """
    JWT token payload data.

    Attributes:
        sub: Subject (account ID)
        exp: Expiration timestamp
        iat: Issued at timestamp
        token_type: Type of token (access/refresh)
        username: Username claim, access tokens only
        email: Email claim, access tokens only
    """

    sub: str
    exp: int
    iat: int
    token_type: str = "access"
    username: Optional[str] = None
    email: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate token payload data."""
        if not self.sub:
            raise ValueError("Subject cannot be empty")
        if self.exp <= self.iat:
            raise ValueError("Expiration must be after issued time")


@dataclass(frozen=True)
class LoginResult:
    """Outcome of a successful login."""

    principal: Principal
    token_pair: TokenPair
