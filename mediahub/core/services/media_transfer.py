"""Timed media uploads and best-effort removal shared by the services."""

import asyncio
import logging
from typing import Optional

from mediahub.core.domain.entities import MediaAsset, MediaUpload
from mediahub.core.exceptions import UpstreamFailureException
from .interfaces import MediaStorageInterface

logger = logging.getLogger(__name__)

MEDIA_STORAGE = "Media storage"


class MediaTransfer:
    """
    Wraps the media store with the upload timeout.

    Callers upload before writing a record and discard only after the
    record change is committed.
    """

    def __init__(self, media_storage: MediaStorageInterface, timeout: float) -> None:
        self._media = media_storage
        self._timeout = timeout

    async def upload(self, upload: MediaUpload) -> MediaAsset:
        """
        Upload one file within the timeout.

        Raises:
            UpstreamFailureException: If the store fails or the timeout expires
        """
        try:
            return await asyncio.wait_for(
                self._media.upload(upload.filename, upload.content),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError:
            raise UpstreamFailureException(
                MEDIA_STORAGE, f"upload of {upload.filename} timed out"
            )

    async def discard(self, url: Optional[str]) -> None:
        """Best-effort media removal; failures are logged only."""
        if not url:
            return
        try:
            await asyncio.wait_for(self._media.delete(url), timeout=self._timeout)
        except (UpstreamFailureException, asyncio.TimeoutError) as e:
            logger.warning("Could not delete media %s: %s", url, e)
