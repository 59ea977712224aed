"""Resource ownership checks."""

from typing import Any, Mapping

from mediahub.core.domain.enums import ResourceType
from mediahub.core.exceptions import ForbiddenException, ResourceNotFoundException
from mediahub.infrastructure.database.repositories.interfaces import ResourceRepositoryInterface


def owns(resource: Any, principal_id: int) -> bool:
    """Strict identity check on the owner field."""
    return resource.owner_id == principal_id


class OwnershipGuard:
    """
    Answers whether a principal owns a resource.

    A missing resource is always reported as not found, never as forbidden,
    so callers can tell "absent" from "someone else's".
    """

    def __init__(self, repositories: Mapping[ResourceType, ResourceRepositoryInterface]) -> None:
        """
        Initialize ownership guard.

        Args:
            repositories: Lookup repository per owned resource type
        """
        self._repositories = dict(repositories)

    async def is_owner(
        self, resource_type: ResourceType, resource_id: int, principal_id: int
    ) -> bool:
        """
        Check ownership of a resource.

        Args:
            resource_type: Type of the resource
            resource_id: Resource identifier
            principal_id: Requesting account

        Returns:
            True if the principal owns the resource

        Raises:
            ResourceNotFoundException: If the resource does not exist
        """
        resource = await self._lookup(resource_type, resource_id)
        return owns(resource, principal_id)

    async def require_owner(
        self, resource_type: ResourceType, resource_id: int, principal_id: int
    ) -> Any:
        """
        Load a resource the principal must own.

        Returns:
            The resource

        Raises:
            ResourceNotFoundException: If the resource does not exist
            ForbiddenException: If another account owns it
        """
        resource = await self._lookup(resource_type, resource_id)
        if not owns(resource, principal_id):
            raise ForbiddenException(resource_type.value, resource_id)
        return resource

    async def _lookup(self, resource_type: ResourceType, resource_id: int) -> Any:
        repository = self._repositories.get(resource_type)
        if repository is None:
            raise ValueError(f"No repository registered for {resource_type.value}")

        resource = await repository.get(resource_id)
        if resource is None:
            raise ResourceNotFoundException(resource_type.value, resource_id)
        return resource
