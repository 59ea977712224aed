"""SQLAlchemy implementation of subscription repository."""

from typing import List, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from mediahub.core.domain.entities import Subscription, SubscriptionKey
from mediahub.core.exceptions import ConflictException
from mediahub.core.services.engagement.models import SubscriptionModel
from .interfaces import SubscriptionRepositoryInterface


class SqlSubscriptionRepository(SubscriptionRepositoryInterface):
    """SQLAlchemy-based implementation of subscription repository."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def find_by_key(self, key: SubscriptionKey) -> Optional[Subscription]:
        stmt = select(SubscriptionModel).where(
            SubscriptionModel.subscriber_id == key.subscriber_id,
            SubscriptionModel.channel_id == key.channel_id,
        )
        model = (await self.session.execute(stmt)).scalar_one_or_none()
        return self._model_to_entity(model) if model else None

    async def delete_by_id(self, record_id: int) -> bool:
        """
        Delete a subscription previously read by identifier.

        Returns:
            False when another request removed it first
        """
        stmt = (
            delete(SubscriptionModel)
            .where(SubscriptionModel.id == record_id)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1

    async def insert(self, key: SubscriptionKey) -> Subscription:
        """
        Insert a subscription for the key.

        Raises:
            ConflictException: If the subscription already exists
        """
        model = SubscriptionModel(subscriber_id=key.subscriber_id, channel_id=key.channel_id)

        try:
            self.session.add(model)
            await self.session.flush()
            await self.session.refresh(model)
        except IntegrityError:
            await self.session.rollback()
            raise ConflictException(
                "Subscription already exists", f"channel id: {key.channel_id}"
            )

        return self._model_to_entity(model)

    async def list_by_channel(self, channel_id: int) -> List[Subscription]:
        stmt = (
            select(SubscriptionModel)
            .where(SubscriptionModel.channel_id == channel_id)
            .order_by(SubscriptionModel.created_at.desc(), SubscriptionModel.id.desc())
        )
        result = await self.session.execute(stmt)
        return [self._model_to_entity(m) for m in result.scalars().all()]

    async def list_by_subscriber(self, subscriber_id: int) -> List[Subscription]:
        stmt = (
            select(SubscriptionModel)
            .where(SubscriptionModel.subscriber_id == subscriber_id)
            .order_by(SubscriptionModel.created_at.desc(), SubscriptionModel.id.desc())
        )
        result = await self.session.execute(stmt)
        return [self._model_to_entity(m) for m in result.scalars().all()]

    async def count_by_channel(self, channel_id: int) -> int:
        stmt = select(func.count(SubscriptionModel.id)).where(
            SubscriptionModel.channel_id == channel_id
        )
        return (await self.session.execute(stmt)).scalar_one()

    async def count_by_subscriber(self, subscriber_id: int) -> int:
        stmt = select(func.count(SubscriptionModel.id)).where(
            SubscriptionModel.subscriber_id == subscriber_id
        )
        return (await self.session.execute(stmt)).scalar_one()

    async def exists(self, key: SubscriptionKey) -> bool:
        return await self.find_by_key(key) is not None

    def _model_to_entity(self, model: SubscriptionModel) -> Subscription:
        return Subscription(
            id=model.id,
            subscriber_id=model.subscriber_id,
            channel_id=model.channel_id,
            created_at=model.created_at,
        )
