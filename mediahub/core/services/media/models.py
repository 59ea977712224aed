"""Owned media resource database models.

Parent references (``owner_id``, ``video_id``, ``tweet_id``) are plain indexed
columns without foreign keys: dependents may outlive a parent until the next
request that touches them repairs the store.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    Float,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from mediahub.infrastructure.database.connection import Base


class VideoModel(Base):
    """Database model for videos."""

    __tablename__ = "videos"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    owner_id: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        index=True,
        doc="Account that published the video"
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False, doc="Video title")

    description: Mapped[str] = mapped_column(Text, nullable=False, default="")

    video_url: Mapped[str] = mapped_column(
        String(1024),
        nullable=False,
        doc="Public URL of the media file"
    )

    thumbnail_url: Mapped[str] = mapped_column(String(1024), nullable=False)

    duration: Mapped[Optional[float]] = mapped_column(
        Float,
        nullable=True,
        doc="Length in seconds"
    )

    views: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    is_published: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        index=True,
        doc="Whether non-owners may see the video"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    def __repr__(self) -> str:
        return f"<VideoModel(id={self.id}, owner_id={self.owner_id}, published={self.is_published})>"


class TweetModel(Base):
    """Database model for tweets."""

    __tablename__ = "tweets"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    owner_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now()
    )

    def __repr__(self) -> str:
        return f"<TweetModel(id={self.id}, owner_id={self.owner_id})>"


class CommentModel(Base):
    """
    Database model for comments.

    Exactly one of ``video_id`` and ``tweet_id`` is set.
    """

    __tablename__ = "comments"
    __table_args__ = (
        CheckConstraint(
            "(CASE WHEN video_id IS NULL THEN 0 ELSE 1 END)"
            " + (CASE WHEN tweet_id IS NULL THEN 0 ELSE 1 END) = 1",
            name="single_parent",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    owner_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    video_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, index=True)
    tweet_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now()
    )

    def __repr__(self) -> str:
        return (
            f"<CommentModel(id={self.id}, video_id={self.video_id}, "
            f"tweet_id={self.tweet_id})>"
        )


class PlaylistModel(Base):
    """Database model for playlists."""

    __tablename__ = "playlists"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    owner_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    is_published: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now()
    )

    def __repr__(self) -> str:
        return f"<PlaylistModel(id={self.id}, name='{self.name}')>"


class PlaylistEntryModel(Base):
    """Database model for a video listed in a playlist."""

    __tablename__ = "playlist_entries"
    __table_args__ = (UniqueConstraint("playlist_id", "video_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    playlist_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    video_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    added_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    def __repr__(self) -> str:
        return f"<PlaylistEntryModel(playlist_id={self.playlist_id}, video_id={self.video_id})>"


class WatchHistoryModel(Base):
    """
    Database model for one viewing of a video.

    Watching again replaces the account's earlier row for the video, so the
    row with the highest ``id`` is the most recent viewing.
    """

    __tablename__ = "watch_history"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    account_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    video_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    watched_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    def __repr__(self) -> str:
        return f"<WatchHistoryModel(account_id={self.account_id}, video_id={self.video_id})>"
