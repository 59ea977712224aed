"""Service interfaces for external collaborators."""

from abc import ABC, abstractmethod

from mediahub.core.domain.entities import MediaAsset


class MediaStorageInterface(ABC):
    """
    Interface for binary media storage.

    Implementations raise ``UpstreamFailureException`` when the backing
    store fails; callers bound every call with a timeout.
    """

    @abstractmethod
    async def upload(self, filename: str, content: bytes) -> MediaAsset:
        """
        Store a media file.

        Args:
            filename: Original client file name, used for the extension
            content: File bytes

        Returns:
            Public URL and, when known, duration in seconds
        """
        pass

    @abstractmethod
    async def delete(self, url: str) -> bool:
        """
        Remove a stored media file.

        Args:
            url: URL previously returned by ``upload``

        Returns:
            True if a file was removed
        """
        pass
