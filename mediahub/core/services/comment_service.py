"""Comment service implementation."""

import logging
from typing import Optional

from mediahub.core.access.cascade import CascadeCoordinator
from mediahub.core.access.guard import OwnershipGuard
from mediahub.core.access.visibility import VisibilityFilter
from mediahub.core.auth.entities import Principal
from mediahub.core.domain.entities import COMMENT_PARENT_TYPES, Comment, Page, ParentRef
from mediahub.core.domain.enums import ResourceType
from mediahub.core.exceptions import ResourceNotFoundException, ValidationException
from mediahub.infrastructure.database.repositories.interfaces import CommentRepositoryInterface
from .pagination import normalize_page
from .validation import require_text

logger = logging.getLogger(__name__)


class CommentService:
    """
    Comment operations on videos and tweets.

    Every operation first resolves the comment's parent through the cascade
    coordinator, so a comment whose video or tweet is gone is cleaned up and
    reported as such instead of being served.
    """

    def __init__(
        self,
        comment_repository: CommentRepositoryInterface,
        cascade: CascadeCoordinator,
        guard: OwnershipGuard,
        visibility: VisibilityFilter,
    ) -> None:
        """
        Initialize comment service with dependencies.

        Args:
            comment_repository: Repository for comment persistence
            cascade: Parent resolution and orphan cleanup
            guard: Ownership checks
            visibility: Published-or-owner rules
        """
        self._comments = comment_repository
        self._cascade = cascade
        self._guard = guard
        self._visibility = visibility

    async def list_comments(
        self,
        parent: ParentRef,
        principal: Optional[Principal],
        page: int = 1,
        limit: int = 10,
    ) -> Page[Comment]:
        """
        List comments on a video or tweet the principal may see.

        Raises:
            ParentGoneException: If the parent vanished and its comments were removed
            ResourceNotFoundException: If the parent is absent or hidden
        """
        await self._require_parent(parent, principal)
        page, limit = normalize_page(page, limit)
        return await self._comments.list_by_parent(parent, page, limit)

    async def add_comment(self, parent: ParentRef, principal: Principal, content: str) -> Comment:
        """
        Comment on a video or tweet the principal may see.

        Raises:
            ValidationException: If content is blank
            ParentGoneException: If the parent vanished and its dependents were removed
            ResourceNotFoundException: If the parent is absent or hidden
        """
        content = require_text(content)
        await self._require_parent(parent, principal)
        return await self._comments.create(principal.id, parent, content)

    async def get_comment(self, comment_id: int, principal: Optional[Principal]) -> Comment:
        """
        Get a comment whose parent still exists and is visible.

        Raises:
            ParentGoneException: If the parent vanished; the comment is removed
            ResourceNotFoundException: If the comment is absent or its parent hidden
        """
        comment = await self._comments.get(comment_id)
        if comment is None:
            raise ResourceNotFoundException(ResourceType.COMMENT.value, comment_id)

        await self._require_parent(comment.parent, principal)
        return comment

    async def update_comment(self, comment_id: int, principal: Principal, content: str) -> Comment:
        """
        Replace the content of a comment owned by the principal.

        Raises:
            ValidationException: If content is blank
            ParentGoneException: If the parent vanished; the comment is removed
            ResourceNotFoundException: If the comment does not exist
            ForbiddenException: If the principal does not own the comment
        """
        content = require_text(content)
        await self.get_comment(comment_id, principal)
        await self._guard.require_owner(ResourceType.COMMENT, comment_id, principal.id)

        updated = await self._comments.update_owned(comment_id, principal.id, content)
        if updated is None:
            raise ResourceNotFoundException(ResourceType.COMMENT.value, comment_id)
        return updated

    async def delete_comment(self, comment_id: int, principal: Principal) -> Comment:
        """
        Delete a comment owned by the principal together with its likes.

        Raises:
            ParentGoneException: If the parent vanished; the comment is removed
            ResourceNotFoundException: If the comment does not exist
            ForbiddenException: If the principal does not own the comment
        """
        await self.get_comment(comment_id, principal)
        await self._guard.require_owner(ResourceType.COMMENT, comment_id, principal.id)

        deleted = await self._comments.delete_owned(comment_id, principal.id)
        if deleted is None:
            raise ResourceNotFoundException(ResourceType.COMMENT.value, comment_id)

        await self._cascade.reconcile_on_missing_parent(ParentRef.comment(comment_id))
        logger.info("Account %s deleted comment %s", principal.id, comment_id)
        return deleted

    async def _require_parent(self, parent: ParentRef, principal: Optional[Principal]):
        if parent.kind not in COMMENT_PARENT_TYPES:
            raise ValidationException("Comments can only be attached to videos or tweets")

        resource = await self._cascade.ensure_parent(parent)
        return self._visibility.require_visible(resource, principal, parent.kind, parent.id)
