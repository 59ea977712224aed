"""SQLAlchemy implementation of tweet repository."""

from typing import List, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from mediahub.core.domain.entities import Tweet
from mediahub.core.services.media.models import TweetModel
from .interfaces import TweetRepositoryInterface


class SqlTweetRepository(TweetRepositoryInterface):
    """SQLAlchemy-based implementation of tweet repository."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, resource_id: int) -> Optional[Tweet]:
        stmt = select(TweetModel).where(TweetModel.id == resource_id)
        result = await self.session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            return None

        return self._model_to_entity(model)

    async def create(self, owner_id: int, content: str) -> Tweet:
        model = TweetModel(owner_id=owner_id, content=content)
        self.session.add(model)
        await self.session.flush()
        await self.session.refresh(model)

        return self._model_to_entity(model)

    async def list_by_owner(self, owner_id: int) -> List[Tweet]:
        """Tweets of one account, newest first."""
        stmt = (
            select(TweetModel)
            .where(TweetModel.owner_id == owner_id)
            .order_by(TweetModel.created_at.desc(), TweetModel.id.desc())
        )
        result = await self.session.execute(stmt)

        return [self._model_to_entity(m) for m in result.scalars().all()]

    async def update_owned(self, tweet_id: int, owner_id: int, content: str) -> Optional[Tweet]:
        stmt = (
            update(TweetModel)
            .where(TweetModel.id == tweet_id, TweetModel.owner_id == owner_id)
            .values(content=content)
            .returning(TweetModel.id)
        )
        result = await self.session.execute(stmt)
        if result.scalar_one_or_none() is None:
            return None

        stmt = (
            select(TweetModel)
            .where(TweetModel.id == tweet_id)
            .execution_options(populate_existing=True)
        )
        model = (await self.session.execute(stmt)).scalar_one()
        return self._model_to_entity(model)

    async def delete_owned(self, tweet_id: int, owner_id: int) -> Optional[Tweet]:
        tweet = await self.get(tweet_id)
        if not tweet or tweet.owner_id != owner_id:
            return None

        stmt = delete(TweetModel).where(
            TweetModel.id == tweet_id, TweetModel.owner_id == owner_id
        )
        result = await self.session.execute(stmt)
        await self.session.flush()

        return tweet if result.rowcount > 0 else None

    def _model_to_entity(self, model: TweetModel) -> Tweet:
        return Tweet(
            id=model.id,
            owner_id=model.owner_id,
            content=model.content,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
