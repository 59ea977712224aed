"""Tests for comment, like, subscription and playlist services."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from mediahub.core.access.guard import OwnershipGuard
from mediahub.core.access.visibility import VisibilityFilter
from mediahub.core.auth.entities import Account, Principal
from mediahub.core.auth.interfaces import CredentialStoreInterface
from mediahub.core.domain.entities import (
    Comment,
    Like,
    ParentRef,
    Playlist,
    Subscription,
    SubscriptionKey,
    Video,
)
from mediahub.core.domain.enums import ResourceType
from mediahub.core.exceptions import (
    ForbiddenException,
    ParentGoneException,
    ResourceNotFoundException,
    ValidationException,
)
from mediahub.core.services.comment_service import CommentService
from mediahub.core.services.like_service import LikeService
from mediahub.core.services.playlist_service import PlaylistService
from mediahub.core.services.subscription_service import SubscriptionService
from mediahub.infrastructure.database.repositories.interfaces import (
    CommentRepositoryInterface,
    LikeRepositoryInterface,
    PlaylistRepositoryInterface,
    SubscriptionRepositoryInterface,
    VideoRepositoryInterface,
)

ALICE = Principal(id=1, username="alice", email="alice@example.com")
BOB = Principal(id=2, username="bob", email="bob@example.com")


def make_video(video_id=1, owner_id=1, is_published=True):
    return Video(
        id=video_id,
        owner_id=owner_id,
        title=f"Video {video_id}",
        description="",
        video_url=f"/media/{video_id}.mp4",
        thumbnail_url=f"/media/{video_id}.png",
        is_published=is_published,
    )


def make_account(account_id, username):
    return Account(
        id=account_id,
        username=username,
        email=f"{username}@example.com",
        hashed_password="h",
    )


@pytest.fixture
def cascade():
    """Mock cascade coordinator."""
    return AsyncMock()


class TestCommentService:
    """Test cases for CommentService."""

    @pytest.fixture
    def comment_repository(self):
        return AsyncMock(spec=CommentRepositoryInterface)

    @pytest.fixture
    def comment_service(self, comment_repository, cascade):
        guard = OwnershipGuard({ResourceType.COMMENT: comment_repository})
        return CommentService(comment_repository, cascade, guard, VisibilityFilter())

    @pytest.mark.asyncio
    async def test_add_comment(self, comment_service, comment_repository, cascade):
        cascade.ensure_parent.return_value = make_video()
        comment_repository.create.return_value = Comment(
            id=1, owner_id=2, content="Nice", parent=ParentRef.video(1)
        )

        comment = await comment_service.add_comment(ParentRef.video(1), BOB, "  Nice ")

        assert comment.id == 1
        comment_repository.create.assert_called_once_with(2, ParentRef.video(1), "Nice")

    @pytest.mark.asyncio
    async def test_add_blank_comment(self, comment_service, cascade):
        with pytest.raises(ValidationException, match="Content is required"):
            await comment_service.add_comment(ParentRef.video(1), BOB, "   ")
        cascade.ensure_parent.assert_not_called()

    @pytest.mark.asyncio
    async def test_add_comment_to_hidden_video(self, comment_service, comment_repository, cascade):
        cascade.ensure_parent.return_value = make_video(owner_id=1, is_published=False)

        with pytest.raises(ResourceNotFoundException):
            await comment_service.add_comment(ParentRef.video(1), BOB, "Hi")
        comment_repository.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_get_comment_with_vanished_parent(self, comment_service, comment_repository, cascade):
        """Test the parent-gone outcome propagates from the cascade."""
        comment_repository.get.return_value = Comment(
            id=4, owner_id=2, content="c", parent=ParentRef.video(1)
        )
        cascade.ensure_parent.side_effect = ParentGoneException("video", 1, 1)

        with pytest.raises(ParentGoneException):
            await comment_service.get_comment(4, BOB)

    @pytest.mark.asyncio
    async def test_update_by_non_owner(self, comment_service, comment_repository, cascade):
        comment_repository.get.return_value = Comment(
            id=4, owner_id=2, content="c", parent=ParentRef.video(1)
        )
        cascade.ensure_parent.return_value = make_video()

        with pytest.raises(ForbiddenException):
            await comment_service.update_comment(4, ALICE, "edited")
        comment_repository.update_owned.assert_not_called()

    @pytest.mark.asyncio
    async def test_delete_reconciles_likes(self, comment_service, comment_repository, cascade):
        comment = Comment(id=4, owner_id=2, content="c", parent=ParentRef.tweet(3))
        comment_repository.get.return_value = comment
        comment_repository.delete_owned.return_value = comment
        cascade.ensure_parent.return_value = MagicMock(is_published=True, owner_id=1)

        await comment_service.delete_comment(4, BOB)

        cascade.reconcile_on_missing_parent.assert_called_once_with(ParentRef.comment(4))


class TestLikeService:
    """Test cases for LikeService."""

    @pytest.fixture
    def like_repository(self):
        return AsyncMock(spec=LikeRepositoryInterface)

    @pytest.fixture
    def video_repository(self):
        return AsyncMock(spec=VideoRepositoryInterface)

    @pytest.fixture
    def like_service(self, like_repository, video_repository, cascade):
        return LikeService(like_repository, video_repository, cascade, VisibilityFilter())

    @pytest.mark.asyncio
    async def test_toggle_video_like(self, like_service, like_repository, cascade):
        cascade.ensure_parent.return_value = make_video()
        like_repository.find_by_key.return_value = None
        like_repository.insert.return_value = Like(id=1, liked_by=2, target=ParentRef.video(1))

        result = await like_service.toggle_video_like(1, BOB)

        assert result.created is True

    @pytest.mark.asyncio
    async def test_like_hidden_video(self, like_service, like_repository, cascade):
        cascade.ensure_parent.return_value = make_video(owner_id=1, is_published=False)

        with pytest.raises(ResourceNotFoundException):
            await like_service.toggle_video_like(1, BOB)
        like_repository.find_by_key.assert_not_called()

    @pytest.mark.asyncio
    async def test_comment_like_checks_both_parents(self, like_service, like_repository, cascade):
        """Test the comment and the video it belongs to are both resolved."""
        comment = Comment(id=4, owner_id=2, content="c", parent=ParentRef.video(1))
        cascade.ensure_parent.side_effect = [comment, make_video()]
        like_repository.find_by_key.return_value = Like(
            id=9, liked_by=1, target=ParentRef.comment(4)
        )
        like_repository.delete_by_id.return_value = True

        result = await like_service.toggle_comment_like(4, ALICE)

        assert result.created is False
        assert [c.args[0] for c in cascade.ensure_parent.call_args_list] == [
            ParentRef.comment(4),
            ParentRef.video(1),
        ]

    @pytest.mark.asyncio
    async def test_liked_videos_filtered(self, like_service, like_repository, video_repository):
        like_repository.list_liked_video_ids.return_value = [2, 1]
        video_repository.get_many.return_value = [
            make_video(2, owner_id=1, is_published=False),
            make_video(1),
        ]

        videos = await like_service.list_liked_videos(BOB)

        assert [v.id for v in videos] == [1]


class TestSubscriptionService:
    """Test cases for SubscriptionService."""

    @pytest.fixture
    def subscription_repository(self):
        return AsyncMock(spec=SubscriptionRepositoryInterface)

    @pytest.fixture
    def credential_store(self):
        return AsyncMock(spec=CredentialStoreInterface)

    @pytest.fixture
    def subscription_service(self, subscription_repository, credential_store):
        return SubscriptionService(subscription_repository, credential_store)

    @pytest.mark.asyncio
    async def test_subscribe(self, subscription_service, subscription_repository, credential_store):
        credential_store.get_account_by_id.return_value = make_account(1, "alice")
        subscription_repository.find_by_key.return_value = None
        subscription_repository.insert.return_value = Subscription(id=1, subscriber_id=2, channel_id=1)

        result = await subscription_service.toggle_subscription(1, BOB)

        assert result.created is True
        subscription_repository.insert.assert_called_once_with(
            SubscriptionKey(subscriber_id=2, channel_id=1)
        )

    @pytest.mark.asyncio
    async def test_subscribe_to_self(self, subscription_service, credential_store):
        with pytest.raises(ValidationException):
            await subscription_service.toggle_subscription(1, ALICE)
        credential_store.get_account_by_id.assert_not_called()

    @pytest.mark.asyncio
    async def test_subscribe_to_missing_channel(self, subscription_service, credential_store):
        credential_store.get_account_by_id.return_value = None

        with pytest.raises(ResourceNotFoundException):
            await subscription_service.toggle_subscription(9, BOB)

    @pytest.mark.asyncio
    async def test_list_subscribers(self, subscription_service, subscription_repository, credential_store):
        """Test entries follow subscription order and skip vanished accounts."""
        credential_store.get_account_by_id.return_value = make_account(1, "alice")
        subscription_repository.list_by_channel.return_value = [
            Subscription(id=2, subscriber_id=3, channel_id=1),
            Subscription(id=1, subscriber_id=2, channel_id=1),
            Subscription(id=3, subscriber_id=4, channel_id=1),
        ]
        credential_store.get_accounts.return_value = [make_account(2, "bob"), make_account(3, "carol")]

        entries = await subscription_service.list_channel_subscribers(1)

        assert [e.username for e in entries] == ["carol", "bob"]


class TestPlaylistService:
    """Test cases for PlaylistService."""

    @pytest.fixture
    def playlist_repository(self):
        return AsyncMock(spec=PlaylistRepositoryInterface)

    @pytest.fixture
    def video_repository(self):
        return AsyncMock(spec=VideoRepositoryInterface)

    @pytest.fixture
    def playlist_service(self, playlist_repository, video_repository):
        return PlaylistService(
            playlist_repository,
            video_repository,
            AsyncMock(spec=CredentialStoreInterface),
            OwnershipGuard({ResourceType.PLAYLIST: playlist_repository}),
            VisibilityFilter(),
        )

    @pytest.mark.asyncio
    async def test_create_keeps_visible_videos(self, playlist_service, playlist_repository, video_repository):
        """Test hidden videos of other accounts are dropped on create."""
        video_repository.get_many.return_value = [make_video(1), make_video(2, owner_id=1, is_published=False)]
        playlist_repository.create.return_value = Playlist(id=1, owner_id=2, name="Mix", videos=[make_video(1)])

        await playlist_service.create_playlist(BOB, "Mix", video_ids=[1, 2, 1])

        video_repository.get_many.assert_called_once_with([1, 2])
        playlist_repository.create.assert_called_once_with(2, "Mix", "", [1])

    @pytest.mark.asyncio
    async def test_add_videos_forbidden(self, playlist_service, playlist_repository):
        playlist_repository.get.return_value = Playlist(id=1, owner_id=1, name="Mix")

        with pytest.raises(ForbiddenException):
            await playlist_service.add_videos(1, BOB, [3])
        playlist_repository.add_videos.assert_not_called()

    @pytest.mark.asyncio
    async def test_add_no_visible_videos(self, playlist_service, playlist_repository, video_repository):
        playlist_repository.get.return_value = Playlist(id=1, owner_id=2, name="Mix")
        video_repository.get_many.return_value = []

        with pytest.raises(ResourceNotFoundException):
            await playlist_service.add_videos(1, BOB, [3])

    @pytest.mark.asyncio
    async def test_add_videos(self, playlist_service, playlist_repository, video_repository):
        playlist_repository.get.return_value = Playlist(id=1, owner_id=2, name="Mix")
        video_repository.get_many.return_value = [make_video(3)]
        playlist_repository.add_videos.return_value = 1

        playlist, added = await playlist_service.add_videos(1, BOB, [3])

        assert added == 1
        playlist_repository.add_videos.assert_called_once_with(1, [3])

    @pytest.mark.asyncio
    async def test_update_requires_a_field(self, playlist_service):
        with pytest.raises(ValidationException):
            await playlist_service.update_playlist(1, BOB)

    @pytest.mark.asyncio
    async def test_get_filters_entries(self, playlist_service, playlist_repository):
        playlist_repository.get.return_value = Playlist(
            id=1,
            owner_id=2,
            name="Mix",
            videos=[make_video(1), make_video(2, owner_id=1, is_published=False)],
        )

        playlist = await playlist_service.get_playlist(1, BOB)

        assert [v.id for v in playlist.videos] == [1]
