"""Toggle relation database models.

Uniqueness of each relation's natural key is enforced here, so concurrent
toggles cannot create duplicates.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import CheckConstraint, DateTime, Integer, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from mediahub.infrastructure.database.connection import Base


class LikeModel(Base):
    """
    Database model for likes.

    Exactly one of ``video_id``, ``comment_id`` and ``tweet_id`` is set.
    """

    __tablename__ = "likes"
    __table_args__ = (
        CheckConstraint(
            "(CASE WHEN video_id IS NULL THEN 0 ELSE 1 END)"
            " + (CASE WHEN comment_id IS NULL THEN 0 ELSE 1 END)"
            " + (CASE WHEN tweet_id IS NULL THEN 0 ELSE 1 END) = 1",
            name="single_target",
        ),
        UniqueConstraint("liked_by", "video_id"),
        UniqueConstraint("liked_by", "comment_id"),
        UniqueConstraint("liked_by", "tweet_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    liked_by: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        index=True,
        doc="Account that placed the like"
    )

    video_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, index=True)
    comment_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, index=True)
    tweet_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, index=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    def __repr__(self) -> str:
        return (
            f"<LikeModel(id={self.id}, liked_by={self.liked_by}, video_id={self.video_id}, "
            f"comment_id={self.comment_id}, tweet_id={self.tweet_id})>"
        )


class SubscriptionModel(Base):
    """Database model for channel subscriptions."""

    __tablename__ = "subscriptions"
    __table_args__ = (UniqueConstraint("subscriber_id", "channel_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    subscriber_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    channel_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    def __repr__(self) -> str:
        return f"<SubscriptionModel(subscriber_id={self.subscriber_id}, channel_id={self.channel_id})>"
