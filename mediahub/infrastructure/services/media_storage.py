"""Local filesystem media storage."""

import logging
import uuid
from pathlib import Path
from typing import Optional

from mediahub.config import Settings, get_settings
from mediahub.core.domain.entities import MediaAsset
from mediahub.core.exceptions import UpstreamFailureException
from mediahub.core.services.interfaces import MediaStorageInterface
from mediahub.utils.async_helpers import sync_to_async

logger = logging.getLogger(__name__)

COLLABORATOR = "Media storage"


class LocalMediaStorage(MediaStorageInterface):
    """
    Stores media files under ``media_root`` and serves them from ``media_base_url``.

    Files get random names; only the original extension is kept. Duration
    is not measured, so uploaded assets report none.
    """

    def __init__(self, settings: Optional[Settings] = None) -> None:
        """
        Initialize media storage.

        Args:
            settings: Application settings, defaults to the cached instance
        """
        settings = settings or get_settings()
        self._root = Path(settings.media_root)
        self._base_url = settings.media_base_url.rstrip("/")

    async def upload(self, filename: str, content: bytes) -> MediaAsset:
        suffix = Path(filename or "").suffix.lower()[:10]
        name = f"{uuid.uuid4().hex}{suffix}"

        try:
            await self._write(self._root / name, content)
        except OSError as e:
            raise UpstreamFailureException(COLLABORATOR, f"could not store {filename}: {e}")

        logger.debug("Stored media %s (%d bytes)", name, len(content))
        return MediaAsset(url=f"{self._base_url}/{name}")

    async def delete(self, url: str) -> bool:
        path = self._path_for(url)
        if path is None:
            return False

        try:
            return await self._remove(path)
        except OSError as e:
            raise UpstreamFailureException(COLLABORATOR, f"could not delete {url}: {e}")

    def _path_for(self, url: str) -> Optional[Path]:
        prefix = f"{self._base_url}/"
        if not url or not url.startswith(prefix):
            return None
        name = url[len(prefix):]
        if not name or "/" in name or name.startswith("."):
            return None
        return self._root / name

    @staticmethod
    @sync_to_async
    def _write(path: Path, content: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)

    @staticmethod
    @sync_to_async
    def _remove(path: Path) -> bool:
        if not path.exists():
            return False
        path.unlink()
        return True
