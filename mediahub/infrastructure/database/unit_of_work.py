"""Transaction boundary over the request session."""

from sqlalchemy.ext.asyncio import AsyncSession

from mediahub.infrastructure.database.repositories.interfaces import UnitOfWorkInterface


class SqlUnitOfWork(UnitOfWorkInterface):
    """
    Commits or rolls back the request session on demand.

    Used for repairs that must persist even though the request that
    triggered them ends in an error, after which the session dependency
    rolls back whatever is still pending.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def commit(self) -> None:
        await self._session.commit()

    async def rollback(self) -> None:
        await self._session.rollback()
