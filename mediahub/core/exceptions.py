"""Domain exceptions for the media service."""

from typing import Any, Dict, Optional


class DomainException(Exception):
    """
    Base exception for domain-related errors.

    Every subclass carries a stable ``code`` and the HTTP status it maps to,
    so the API layer can render any domain failure without inspecting it.
    """

    code = "DomainError"
    status_code = 400

    def __init__(self, message: str, details: Optional[str] = None) -> None:
        """
        Initialize domain exception.

        Args:
            message: Human-readable error message
            details: Additional error details
        """
        super().__init__(message)
        self.message = message
        self.details = details

    def to_payload(self) -> Dict[str, Any]:
        """Render the exception as a response body."""
        return {"error": self.message, "type": self.code}


class ValidationException(DomainException):
    """Raised when input is missing or malformed."""

    code = "ValidationError"
    status_code = 400


class ForbiddenException(DomainException):
    """Raised when an authenticated principal does not own the resource."""

    code = "Forbidden"
    status_code = 403

    def __init__(self, resource_type: str, resource_id: int) -> None:
        """
        Initialize forbidden exception.

        Args:
            resource_type: Type of the protected resource
            resource_id: Identifier of the protected resource
        """
        super().__init__(
            "Unauthorized access",
            f"{resource_type} {resource_id} is owned by another account",
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class ResourceNotFoundException(DomainException):
    """Raised when a resource is absent or not visible to the principal."""

    code = "NotFound"
    status_code = 404

    def __init__(self, resource_type: str, resource_id: Optional[int] = None) -> None:
        """
        Initialize not found exception.

        Args:
            resource_type: Type of the missing resource
            resource_id: Identifier of the missing resource
        """
        label = resource_type.capitalize()
        super().__init__(f"{label} not found", f"{resource_type} id: {resource_id}")
        self.resource_type = resource_type
        self.resource_id = resource_id


class ParentGoneException(DomainException):
    """Raised when a dependent operation found its parent missing and cleaned up."""

    code = "ParentGone"
    status_code = 410

    def __init__(self, parent_type: str, parent_id: int, removed: int) -> None:
        """
        Initialize parent gone exception.

        Args:
            parent_type: Type of the vanished parent
            parent_id: Identifier of the vanished parent
            removed: Number of dependent records removed by the repair
        """
        super().__init__(
            f"{parent_type.capitalize()} no longer exists. "
            f"{removed} associated record(s) have been deleted",
            f"{parent_type} id: {parent_id}",
        )
        self.parent_type = parent_type
        self.parent_id = parent_id
        self.removed = removed

    def to_payload(self) -> Dict[str, Any]:
        payload = super().to_payload()
        payload.update(
            parent_type=self.parent_type,
            parent_id=self.parent_id,
            removed=self.removed,
        )
        return payload


class ConflictException(DomainException):
    """Raised when a unique key is already taken, e.g. a lost toggle race."""

    code = "Conflict"
    status_code = 409


class UpstreamFailureException(DomainException):
    """Raised when the storage or media collaborator fails or times out."""

    code = "UpstreamFailure"
    status_code = 502

    def __init__(self, collaborator: str, reason: str) -> None:
        """
        Initialize upstream failure exception.

        Args:
            collaborator: Name of the failing collaborator
            reason: What went wrong
        """
        super().__init__(f"{collaborator} failed: {reason}", reason)
        self.collaborator = collaborator
