"""Tweet service implementation."""

import logging
from typing import List

from mediahub.core.access.guard import OwnershipGuard
from mediahub.core.auth.entities import Principal
from mediahub.core.auth.interfaces import CredentialStoreInterface
from mediahub.core.domain.entities import Tweet
from mediahub.core.domain.enums import ResourceType
from mediahub.core.exceptions import ResourceNotFoundException
from mediahub.infrastructure.database.repositories.interfaces import TweetRepositoryInterface
from .validation import require_text

logger = logging.getLogger(__name__)


class TweetService:
    """Tweet CRUD with owner-only writes."""

    def __init__(
        self,
        tweet_repository: TweetRepositoryInterface,
        credential_store: CredentialStoreInterface,
        guard: OwnershipGuard,
    ) -> None:
        self._tweets = tweet_repository
        self._accounts = credential_store
        self._guard = guard

    async def create_tweet(self, principal: Principal, content: str) -> Tweet:
        content = require_text(content)
        return await self._tweets.create(principal.id, content)

    async def list_user_tweets(self, user_id: int) -> List[Tweet]:
        """
        List tweets of an account, newest first.

        Raises:
            ResourceNotFoundException: If the account does not exist
        """
        if not await self._accounts.get_account_by_id(user_id):
            raise ResourceNotFoundException("user", user_id)
        return await self._tweets.list_by_owner(user_id)

    async def update_tweet(self, tweet_id: int, principal: Principal, content: str) -> Tweet:
        """
        Replace the content of a tweet owned by the principal.

        Raises:
            ValidationException: If content is blank
            ResourceNotFoundException: If the tweet does not exist
            ForbiddenException: If the principal does not own the tweet
        """
        content = require_text(content)
        await self._guard.require_owner(ResourceType.TWEET, tweet_id, principal.id)

        updated = await self._tweets.update_owned(tweet_id, principal.id, content)
        if updated is None:
            raise ResourceNotFoundException(ResourceType.TWEET.value, tweet_id)
        return updated

    async def delete_tweet(self, tweet_id: int, principal: Principal) -> Tweet:
        """
        Delete a tweet owned by the principal.

        Its comments and likes are left for lazy cleanup.
        """
        await self._guard.require_owner(ResourceType.TWEET, tweet_id, principal.id)

        deleted = await self._tweets.delete_owned(tweet_id, principal.id)
        if deleted is None:
            raise ResourceNotFoundException(ResourceType.TWEET.value, tweet_id)

        logger.info("Account %s deleted tweet %s", principal.id, tweet_id)
        return deleted
