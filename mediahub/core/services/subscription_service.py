"""Subscription service implementation."""

import logging
from typing import List

from mediahub.core.access.toggle import ToggleProtocol
from mediahub.core.auth.entities import Principal
from mediahub.core.auth.interfaces import CredentialStoreInterface
from mediahub.core.domain.entities import (
    Subscription,
    SubscriptionEntry,
    SubscriptionKey,
    ToggleResult,
)
from mediahub.core.exceptions import ResourceNotFoundException, ValidationException
from mediahub.infrastructure.database.repositories.interfaces import (
    SubscriptionRepositoryInterface,
)

logger = logging.getLogger(__name__)


class SubscriptionService:
    """Channel subscriptions between accounts."""

    def __init__(
        self,
        subscription_repository: SubscriptionRepositoryInterface,
        credential_store: CredentialStoreInterface,
    ) -> None:
        """
        Initialize subscription service with dependencies.

        Args:
            subscription_repository: Repository for subscription persistence
            credential_store: Account lookup for channels and subscribers
        """
        self._subscriptions = subscription_repository
        self._accounts = credential_store
        self._toggle = ToggleProtocol(subscription_repository)

    async def toggle_subscription(
        self, channel_id: int, principal: Principal
    ) -> ToggleResult[Subscription]:
        """
        Subscribe to or unsubscribe from a channel.

        Raises:
            ValidationException: If the principal targets its own channel
            ResourceNotFoundException: If the channel does not exist
            ConflictException: If a concurrent request subscribed first
        """
        if channel_id == principal.id:
            raise ValidationException("Cannot subscribe to your own channel")

        await self._require_account(channel_id, "channel")

        result = await self._toggle.toggle(
            SubscriptionKey(subscriber_id=principal.id, channel_id=channel_id)
        )
        logger.info(
            "Account %s %s channel %s",
            principal.id, "subscribed to" if result.created else "unsubscribed from", channel_id,
        )
        return result

    async def list_channel_subscribers(self, channel_id: int) -> List[SubscriptionEntry]:
        """Accounts subscribed to a channel, most recent first."""
        await self._require_account(channel_id, "channel")
        subscriptions = await self._subscriptions.list_by_channel(channel_id)
        return await self._entries(subscriptions, lambda s: s.subscriber_id)

    async def list_subscribed_channels(self, subscriber_id: int) -> List[SubscriptionEntry]:
        """Channels an account is subscribed to, most recent first."""
        await self._require_account(subscriber_id, "user")
        subscriptions = await self._subscriptions.list_by_subscriber(subscriber_id)
        return await self._entries(subscriptions, lambda s: s.channel_id)

    async def _require_account(self, account_id: int, label: str) -> None:
        if not await self._accounts.get_account_by_id(account_id):
            raise ResourceNotFoundException(label, account_id)

    async def _entries(self, subscriptions, pick) -> List[SubscriptionEntry]:
        accounts = await self._accounts.get_accounts([pick(s) for s in subscriptions])
        by_id = {account.id: account for account in accounts}

        entries = []
        for subscription in subscriptions:
            account = by_id.get(pick(subscription))
            if account is None:
                continue
            entries.append(
                SubscriptionEntry(
                    account_id=account.id,
                    username=account.username,
                    full_name=account.full_name,
                    avatar_url=account.avatar_url,
                    subscribed_at=subscription.created_at,
                )
            )
        return entries
