"""Authentication exceptions."""

from mediahub.core.exceptions import ConflictException, DomainException


class AuthenticationException(DomainException):
    """Base exception for authentication errors."""

    code = "Unauthenticated"
    status_code = 401


class UnauthenticatedException(AuthenticationException):
    """Raised when an access token is missing, invalid or expired."""

    def __init__(self, reason: str = "Authentication required") -> None:
        super().__init__(reason)


class InvalidCredentialsException(AuthenticationException):
    """Raised when login credentials are invalid."""

    code = "InvalidCredentials"

    def __init__(self) -> None:
        super().__init__("Invalid username or password")


class MissingTokenException(AuthenticationException):
    """Raised when no refresh token was presented."""

    code = "MissingToken"

    def __init__(self) -> None:
        super().__init__("Refresh token is required")


class InvalidTokenException(AuthenticationException):
    """Raised when token signature, expiry or type verification fails."""

    code = "InvalidToken"

    def __init__(self, reason: str = "Invalid token") -> None:
        super().__init__(reason)


class StaleTokenException(AuthenticationException):
    """Raised when a refresh token was already rotated out or revoked."""

    code = "StaleToken"

    def __init__(self) -> None:
        super().__init__("Refresh token is expired or used")


class AccountNotFoundException(AuthenticationException):
    """Raised when the token subject no longer exists."""

    code = "AccountNotFound"

    def __init__(self, identifier: str) -> None:
        super().__init__(f"Account not found: {identifier}")
        self.identifier = identifier


class UserAlreadyExistsException(ConflictException):
    """Raised when trying to create user that already exists."""

    def __init__(self, username: str) -> None:
        super().__init__(f"User already exists: {username}")
        self.username = username
