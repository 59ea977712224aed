"""Create-if-absent / delete-if-present for relation records."""

import logging
from typing import Generic, TypeVar

from mediahub.core.domain.entities import ToggleResult
from mediahub.core.exceptions import ConflictException
from mediahub.infrastructure.database.repositories.interfaces import ToggleRepositoryInterface

logger = logging.getLogger(__name__)

K = TypeVar("K")
R = TypeVar("R")


class ToggleProtocol(Generic[K, R]):
    """
    Flips a relation between absent and present.

    The write is conditioned on the state read first. When the relation was
    absent the insert is guarded by the unique constraint; when it was
    present only the observed record id is deleted. If another toggle on
    the same key got there first, either write fails and surfaces as
    ``ConflictException``, so every toggle that reports success moved the
    relation exactly once.
    """

    def __init__(self, repository: ToggleRepositoryInterface[K, R]) -> None:
        self._repository = repository

    async def toggle(self, key: K) -> ToggleResult[R]:
        """
        Toggle the relation identified by the key.

        Args:
            key: Natural key of the relation

        Returns:
            ``created=True`` with the new record, or ``created=False`` with
            the removed one

        Raises:
            ConflictException: If a concurrent toggle changed the same key
        """
        existing = await self._repository.find_by_key(key)

        if existing is None:
            record = await self._repository.insert(key)
            logger.debug("Toggle created %s", key)
            return ToggleResult(created=True, record=record)

        if not await self._repository.delete_by_id(existing.id):
            logger.info("Concurrent toggle already removed %s", key)
            raise ConflictException("Relation changed concurrently", str(key))

        logger.debug("Toggle removed %s", key)
        return ToggleResult(created=False, record=existing)
