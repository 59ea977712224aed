"""Published-or-owner visibility rules."""

from dataclasses import replace
from typing import Iterable, List, Optional, TypeVar

from mediahub.core.auth.entities import Principal
from mediahub.core.domain.entities import OwnedResource, Playlist
from mediahub.core.domain.enums import ResourceType
from mediahub.core.exceptions import ResourceNotFoundException
from .guard import owns

T = TypeVar("T", bound=OwnedResource)


class VisibilityFilter:
    """
    Decides which resources a viewer may see.

    A resource is visible when it is published or owned by the viewer.
    Anonymous viewers only see published resources.
    """

    def is_visible(self, resource: OwnedResource, principal: Optional[Principal]) -> bool:
        if resource.is_published:
            return True
        return principal is not None and owns(resource, principal.id)

    def filter_visible(
        self, resources: Iterable[T], principal: Optional[Principal]
    ) -> List[T]:
        """Drop invisible resources, keeping order. Never raises."""
        return [r for r in resources if self.is_visible(r, principal)]

    def require_visible(
        self,
        resource: Optional[T],
        principal: Optional[Principal],
        resource_type: ResourceType,
        resource_id: Optional[int] = None,
    ) -> T:
        """
        Return the resource if the viewer may see it.

        Args:
            resource: Loaded resource, or None if absent
            principal: Viewer, None for anonymous
            resource_type: Type used in the error
            resource_id: Identifier used in the error

        Raises:
            ResourceNotFoundException: If the resource is absent or hidden
        """
        if resource is None or not self.is_visible(resource, principal):
            raise ResourceNotFoundException(resource_type.value, resource_id)
        return resource

    def visible_playlist(self, playlist: Playlist, principal: Optional[Principal]) -> Playlist:
        """Copy of the playlist whose video list only holds visible videos."""
        return replace(playlist, videos=self.filter_visible(playlist.videos, principal))
