"""Authentication API schemas."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator


class RegisterRequest(BaseModel):
    """Account registration request schema."""

    username: str = Field(
        ...,
        min_length=3,
        max_length=50,
        description="Username (3-50 characters)",
        examples=["alice"]
    )
    email: EmailStr = Field(
        ...,
        description="Account email address",
        examples=["alice@example.com"]
    )
    password: str = Field(
        ...,
        min_length=8,
        max_length=128,
        description="Password (8-128 characters)",
        examples=["p@ss1234"]
    )
    full_name: str = Field(
        default="",
        max_length=255,
        description="Display name",
        examples=["Alice Liddell"]
    )

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        v = v.strip().lower()
        if not v.replace("_", "").replace(".", "").isalnum():
            raise ValueError("Username may only contain letters, digits, dots and underscores")
        return v


class LoginRequest(BaseModel):
    """
    Login request schema.

    The account is identified by ``identifier``, ``username`` or ``email``,
    whichever is given first.
    """

    identifier: Optional[str] = Field(
        None,
        description="Username or email",
        examples=["alice"]
    )
    username: Optional[str] = Field(None, examples=["alice"])
    email: Optional[str] = Field(None, examples=["alice@example.com"])
    password: str = Field(
        ...,
        min_length=1,
        description="Password",
        examples=["p@ss1234"]
    )

    @model_validator(mode="after")
    def require_identifier(self) -> "LoginRequest":
        if not self.login_identifier:
            raise ValueError("Username or email is required")
        return self

    @property
    def login_identifier(self) -> str:
        for value in (self.identifier, self.username, self.email):
            if value and value.strip():
                return value.strip()
        return ""


class TokenResponse(BaseModel):
    """Token response schema."""

    access_token: str = Field(
        ...,
        description="JWT access token",
        examples=["eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9..."]
    )
    refresh_token: str = Field(
        ...,
        description="Refresh token for obtaining a new token pair",
        examples=["eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9..."]
    )
    token_type: str = Field(
        default="bearer",
        description="Token type",
        examples=["bearer"]
    )
    expires_in: int = Field(
        ...,
        description="Access token expiration time in seconds",
        examples=[1800]
    )


class PrincipalResponse(BaseModel):
    """Authenticated identity."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., examples=[1])
    username: str = Field(..., examples=["alice"])
    email: str = Field(..., examples=["alice@example.com"])


class LoginResponse(TokenResponse):
    """Login response schema."""

    user: PrincipalResponse


class RefreshTokenRequest(BaseModel):
    """Refresh token request schema. The ``refreshToken`` cookie is used when omitted."""

    refresh_token: Optional[str] = Field(
        None,
        description="Refresh token",
        examples=["eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9..."]
    )


class AccountResponse(BaseModel):
    """Account response schema."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(
        ...,
        description="Account unique identifier",
        examples=[1]
    )
    username: str = Field(..., examples=["alice"])
    email: str = Field(..., examples=["alice@example.com"])
    full_name: str = Field(default="", examples=["Alice Liddell"])
    avatar_url: Optional[str] = None
    cover_image_url: Optional[str] = None
    created_at: Optional[datetime] = Field(
        None,
        description="Account creation timestamp",
        examples=["2024-01-01T12:00:00Z"]
    )
    updated_at: Optional[datetime] = Field(
        None,
        description="Last account update timestamp",
        examples=["2024-01-01T12:00:00Z"]
    )


class ChangePasswordRequest(BaseModel):
    """Password change request schema."""

    old_password: str = Field(..., min_length=1)
    new_password: str = Field(
        ...,
        min_length=8,
        max_length=128,
        description="New password (8-128 characters)"
    )


class UpdateAccountRequest(BaseModel):
    """Account details update request schema."""

    full_name: Optional[str] = Field(None, max_length=255, examples=["Alice L."])
    email: Optional[EmailStr] = Field(None, examples=["alice@example.org"])
