"""Account database models."""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from mediahub.infrastructure.database.connection import Base


class AccountModel(Base):
    """
    Database model for accounts.

    Holds credentials and the single refresh token currently recognized for
    the account.
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
        doc="Unique account identifier"
    )

    username: Mapped[str] = mapped_column(
        String(50),
        unique=True,
        nullable=False,
        index=True,
        doc="Unique lower-case username"
    )

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
        doc="Account email address"
    )

    full_name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        default="",
        doc="Display name"
    )

    avatar_url: Mapped[Optional[str]] = mapped_column(
        String(1024),
        nullable=True,
        doc="Public URL of the avatar image"
    )

    cover_image_url: Mapped[Optional[str]] = mapped_column(
        String(1024),
        nullable=True,
        doc="Public URL of the channel cover image"
    )

    hashed_password: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        doc="Bcrypt hashed password"
    )

    refresh_token: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        doc="Current refresh token, unset when logged out"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        doc="Account creation timestamp"
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
        doc="Last account update timestamp"
    )

    def __repr__(self) -> str:
        """String representation of account model."""
        return f"<AccountModel(id={self.id}, username='{self.username}', email='{self.email}')>"
