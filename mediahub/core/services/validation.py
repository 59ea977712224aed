"""Input checks shared by resource services."""

from mediahub.core.exceptions import ValidationException


def require_text(value: str, field: str = "Content") -> str:
    """Strip a text field, rejecting blank values."""
    value = (value or "").strip()
    if not value:
        raise ValidationException(f"{field} is required")
    return value
