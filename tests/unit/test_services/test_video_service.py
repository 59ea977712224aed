"""Tests for video service."""

import asyncio
from unittest.mock import AsyncMock, MagicMock, call

import pytest
from sqlalchemy.exc import OperationalError

from mediahub.config import Settings
from mediahub.core.access.guard import OwnershipGuard
from mediahub.core.access.visibility import VisibilityFilter
from mediahub.core.auth.entities import Principal
from mediahub.core.domain.entities import MediaAsset, MediaUpload, Page, Video
from mediahub.core.domain.enums import ResourceType
from mediahub.core.exceptions import (
    ForbiddenException,
    ResourceNotFoundException,
    UpstreamFailureException,
    ValidationException,
)
from mediahub.core.services.interfaces import MediaStorageInterface
from mediahub.core.services.video_service import VideoService
from mediahub.infrastructure.database.repositories.interfaces import (
    UnitOfWorkInterface,
    VideoRepositoryInterface,
    WatchHistoryRepositoryInterface,
)

ALICE = Principal(id=1, username="alice", email="alice@example.com")
BOB = Principal(id=2, username="bob", email="bob@example.com")

VIDEO_FILE = MediaUpload(filename="clip.mp4", content=b"video")
THUMBNAIL = MediaUpload(filename="thumb.png", content=b"png")


def make_video(video_id=1, owner_id=1, is_published=True, thumbnail_url="/media/t.png"):
    return Video(
        id=video_id,
        owner_id=owner_id,
        title="Sunset",
        description="Timelapse",
        video_url="/media/v.mp4",
        thumbnail_url=thumbnail_url,
        is_published=is_published,
    )


@pytest.fixture
def video_repository():
    """Create mock video repository."""
    return AsyncMock(spec=VideoRepositoryInterface)


@pytest.fixture
def media_storage():
    """Create mock media storage."""
    return AsyncMock(spec=MediaStorageInterface)


@pytest.fixture
def unit_of_work():
    return AsyncMock(spec=UnitOfWorkInterface)


@pytest.fixture
def watch_history():
    return AsyncMock(spec=WatchHistoryRepositoryInterface)


@pytest.fixture
def video_service(video_repository, media_storage, unit_of_work, watch_history):
    """Create video service with a short upload timeout."""
    return VideoService(
        video_repository,
        media_storage,
        OwnershipGuard({ResourceType.VIDEO: video_repository}),
        VisibilityFilter(),
        unit_of_work,
        watch_history,
        settings=Settings(media_upload_timeout_seconds=0.05),
    )


class TestPublishVideo:
    """Test cases for publishing."""

    @pytest.mark.asyncio
    async def test_publish_success(self, video_service, video_repository, media_storage):
        """Test both uploads happen before the record is created."""
        # Setup mock
        media_storage.upload.side_effect = [
            MediaAsset(url="/media/v.mp4", duration_seconds=31.5),
            MediaAsset(url="/media/t.png"),
        ]
        video_repository.create.side_effect = lambda video: Video(
            id=5,
            owner_id=video.owner_id,
            title=video.title,
            description=video.description,
            video_url=video.video_url,
            thumbnail_url=video.thumbnail_url,
            duration=video.duration,
        )

        result = await video_service.publish_video(ALICE, " Sunset ", "Timelapse", VIDEO_FILE, THUMBNAIL)

        # Verify
        assert result.id == 5
        assert result.title == "Sunset"
        assert result.duration == 31.5
        assert media_storage.upload.call_args_list == [
            call("clip.mp4", b"video"),
            call("thumb.png", b"png"),
        ]

    @pytest.mark.asyncio
    async def test_publish_requires_fields(self, video_service, media_storage):
        with pytest.raises(ValidationException, match="Title and description are required"):
            await video_service.publish_video(ALICE, "  ", "d", VIDEO_FILE, THUMBNAIL)
        with pytest.raises(ValidationException, match="Thumbnail file is required"):
            await video_service.publish_video(ALICE, "t", "d", VIDEO_FILE, None)
        media_storage.upload.assert_not_called()

    @pytest.mark.asyncio
    async def test_thumbnail_failure_discards_video(self, video_service, video_repository, media_storage):
        """Test a failed thumbnail upload removes the uploaded video file and writes nothing."""
        media_storage.upload.side_effect = [
            MediaAsset(url="/media/v.mp4"),
            UpstreamFailureException("Media storage", "disk full"),
        ]

        with pytest.raises(UpstreamFailureException):
            await video_service.publish_video(ALICE, "t", "d", VIDEO_FILE, THUMBNAIL)

        media_storage.delete.assert_called_once_with("/media/v.mp4")
        video_repository.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_upload_timeout(self, video_service, video_repository, media_storage):
        """Test an upload exceeding the timeout is an upstream failure."""

        async def slow_upload(filename, content):
            await asyncio.sleep(1)

        media_storage.upload.side_effect = slow_upload

        with pytest.raises(UpstreamFailureException, match="timed out"):
            await video_service.publish_video(ALICE, "t", "d", VIDEO_FILE, THUMBNAIL)
        video_repository.create.assert_not_called()


class TestReadVideos:
    """Test cases for reads."""

    @pytest.mark.asyncio
    async def test_get_unpublished_by_other(self, video_service, video_repository):
        video_repository.get.return_value = make_video(is_published=False)

        with pytest.raises(ResourceNotFoundException):
            await video_service.get_video(1, BOB)
        with pytest.raises(ResourceNotFoundException):
            await video_service.get_video(1, None)
        assert (await video_service.get_video(1, ALICE)).id == 1

    @pytest.mark.asyncio
    async def test_watch_counts_view_and_records_history(
        self, video_service, video_repository, watch_history
    ):
        video_repository.get.return_value = make_video()
        video_repository.record_view.return_value = 8

        video = await video_service.watch_video(1, BOB)

        assert video.views == 8
        video_repository.record_view.assert_called_once_with(1)
        watch_history.record.assert_called_once_with(2, 1)

    @pytest.mark.asyncio
    async def test_anonymous_watch_has_no_history(
        self, video_service, video_repository, watch_history
    ):
        video_repository.get.return_value = make_video()
        video_repository.record_view.return_value = 1

        await video_service.watch_video(1, None)

        watch_history.record.assert_not_called()

    @pytest.mark.asyncio
    async def test_hidden_video_is_not_counted(
        self, video_service, video_repository, watch_history
    ):
        video_repository.get.return_value = make_video(is_published=False)

        with pytest.raises(ResourceNotFoundException):
            await video_service.watch_video(1, BOB)
        video_repository.record_view.assert_not_called()
        watch_history.record.assert_not_called()

    @pytest.mark.asyncio
    async def test_video_deleted_while_watching(self, video_service, video_repository):
        video_repository.get.return_value = make_video()
        video_repository.record_view.return_value = None

        with pytest.raises(ResourceNotFoundException):
            await video_service.watch_video(1, BOB)

    @pytest.mark.asyncio
    async def test_watch_history_keeps_order_and_skips_hidden(
        self, video_service, video_repository, watch_history
    ):
        """Test deleted and foreign unpublished videos drop out of the history."""
        watch_history.list_video_ids.return_value = [3, 9, 1]
        video_repository.get_many.return_value = [
            make_video(3, owner_id=1, is_published=False),
            make_video(1),
        ]

        videos = await video_service.list_watch_history(BOB)

        assert [v.id for v in videos] == [1]
        watch_history.list_video_ids.assert_called_once_with(2)
        video_repository.get_many.assert_called_once_with([3, 9, 1])

    @pytest.mark.asyncio
    async def test_list_normalizes_paging(self, video_service, video_repository):
        video_repository.list_videos.return_value = Page(items=[make_video()], total=1, page=1, limit=20)

        result = await video_service.list_videos(None, page=0, limit=100, query="  sun ")

        kwargs = video_repository.list_videos.call_args.kwargs
        assert kwargs["page"] == 1
        assert kwargs["limit"] == 20
        assert kwargs["query"] == "sun"
        assert kwargs["viewer_id"] is None
        assert result.total == 1


class TestMutateVideo:
    """Test cases for owner-only mutations."""

    @pytest.mark.asyncio
    async def test_delete_commits_before_discarding_media(
        self, video_service, video_repository, media_storage, unit_of_work
    ):
        """Test media removal happens only after the deletion is committed."""
        video = make_video()
        video_repository.get.return_value = video
        video_repository.delete_owned.return_value = video

        order = MagicMock()
        unit_of_work.commit.side_effect = lambda: order("commit")
        media_storage.delete.side_effect = lambda url: order("delete", url)

        await video_service.delete_video(1, ALICE)

        assert order.call_args_list == [
            call("commit"),
            call("delete", "/media/v.mp4"),
            call("delete", "/media/t.png"),
        ]

    @pytest.mark.asyncio
    async def test_delete_by_non_owner(self, video_service, video_repository):
        video_repository.get.return_value = make_video(owner_id=1)

        with pytest.raises(ForbiddenException):
            await video_service.delete_video(1, BOB)
        video_repository.delete_owned.assert_not_called()

    @pytest.mark.asyncio
    async def test_media_delete_failure_is_logged_only(
        self, video_service, video_repository, media_storage
    ):
        video = make_video()
        video_repository.get.return_value = video
        video_repository.delete_owned.return_value = video
        media_storage.delete.side_effect = UpstreamFailureException("Media storage", "gone")

        assert await video_service.delete_video(1, ALICE) == video

    @pytest.mark.asyncio
    async def test_update_replaces_thumbnail(
        self, video_service, video_repository, media_storage, unit_of_work
    ):
        video_repository.get.return_value = make_video(thumbnail_url="/media/old.png")
        video_repository.update_owned.return_value = make_video(thumbnail_url="/media/new.png")
        media_storage.upload.return_value = MediaAsset(url="/media/new.png")

        result = await video_service.update_video(1, ALICE, thumbnail=THUMBNAIL)

        assert result.thumbnail_url == "/media/new.png"
        video_repository.update_owned.assert_called_once_with(
            1, 1, title=None, description=None, thumbnail_url="/media/new.png"
        )
        unit_of_work.commit.assert_called_once()
        media_storage.delete.assert_called_once_with("/media/old.png")

    @pytest.mark.asyncio
    async def test_update_nothing(self, video_service):
        with pytest.raises(ValidationException, match="Nothing to update"):
            await video_service.update_video(1, ALICE)

    @pytest.mark.asyncio
    async def test_update_lost_to_concurrent_delete(self, video_service, video_repository, media_storage):
        """Test the new thumbnail is discarded when the video vanished meanwhile."""
        video_repository.get.return_value = make_video()
        video_repository.update_owned.return_value = None
        media_storage.upload.return_value = MediaAsset(url="/media/new.png")

        with pytest.raises(ResourceNotFoundException):
            await video_service.update_video(1, ALICE, title="x", thumbnail=THUMBNAIL)
        media_storage.delete.assert_called_once_with("/media/new.png")

    @pytest.mark.asyncio
    async def test_update_storage_error_discards_new_thumbnail(
        self, video_service, video_repository, media_storage, unit_of_work
    ):
        """Test a failing update keeps the old thumbnail and removes the uploaded one."""
        video_repository.get.return_value = make_video(thumbnail_url="/media/old.png")
        video_repository.update_owned.side_effect = OperationalError(
            "UPDATE", {}, Exception("database is locked")
        )
        media_storage.upload.return_value = MediaAsset(url="/media/new.png")

        with pytest.raises(OperationalError):
            await video_service.update_video(1, ALICE, thumbnail=THUMBNAIL)

        media_storage.delete.assert_called_once_with("/media/new.png")
        unit_of_work.commit.assert_not_called()

    @pytest.mark.asyncio
    async def test_toggle_publish(self, video_service, video_repository):
        video_repository.get.return_value = make_video()
        video_repository.toggle_published.return_value = make_video(is_published=False)

        result = await video_service.toggle_publish_status(1, ALICE)

        assert result.is_published is False
        video_repository.toggle_published.assert_called_once_with(1, 1)
