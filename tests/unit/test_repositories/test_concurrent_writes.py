"""Concurrent writers on a shared SQLite file, one session each."""

import asyncio

import pytest
import pytest_asyncio
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from mediahub.config import Settings
from mediahub.core.access.toggle import ToggleProtocol
from mediahub.core.auth.entities import Account
from mediahub.core.auth.exceptions import StaleTokenException
from mediahub.core.auth.services import PasswordService, SessionManager, TokenService
from mediahub.core.domain.entities import LikeKey, ParentRef
from mediahub.core.exceptions import ConflictException
from mediahub.core.services.engagement.models import LikeModel
from mediahub.infrastructure.database.init_db import create_tables
from mediahub.infrastructure.database.repositories.account_repository import SqlAccountRepository
from mediahub.infrastructure.database.repositories.like_repository import SqlLikeRepository


class ReadBarrier:
    """Holds every caller until all parties have finished their read."""

    def __init__(self, parties: int = 2) -> None:
        self._parties = parties
        self._arrived = 0
        self._released = asyncio.Event()

    async def wait(self) -> None:
        self._arrived += 1
        if self._arrived >= self._parties:
            self._released.set()
        await self._released.wait()


class PausingLikeRepository(SqlLikeRepository):
    def __init__(self, session, barrier: ReadBarrier) -> None:
        super().__init__(session)
        self._barrier = barrier

    async def find_by_key(self, key):
        found = await super().find_by_key(key)
        await self._barrier.wait()
        return found


class PausingAccountRepository(SqlAccountRepository):
    def __init__(self, session, barrier: ReadBarrier) -> None:
        super().__init__(session)
        self._barrier = barrier

    async def get_account_by_id(self, account_id):
        found = await super().get_account_by_id(account_id)
        await self._barrier.wait()
        return found


@pytest_asyncio.fixture
async def session_maker(tmp_path):
    """Session factory on a fresh SQLite file."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'writers.db'}",
        connect_args={"timeout": 10},
    )
    await create_tables(engine)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest.fixture
def key():
    return LikeKey(liked_by=2, target=ParentRef.video(1))


async def count_likes(session_maker) -> int:
    async with session_maker() as session:
        result = await session.execute(select(func.count()).select_from(LikeModel))
        return result.scalar()


async def toggle_like(session_maker, barrier, key):
    async with session_maker() as session:
        try:
            result = await ToggleProtocol(PausingLikeRepository(session, barrier)).toggle(key)
            await session.commit()
            return result.created
        except ConflictException:
            await session.rollback()
            return "conflict"


class TestConcurrentToggle:
    """Two toggles of one key that both read before either writes."""

    @pytest.mark.asyncio
    async def test_two_likes_from_absent_leave_one(self, session_maker, key):
        barrier = ReadBarrier()

        results = await asyncio.gather(
            toggle_like(session_maker, barrier, key),
            toggle_like(session_maker, barrier, key),
        )

        assert results.count(True) == 1
        assert results.count("conflict") == 1
        assert await count_likes(session_maker) == 1

    @pytest.mark.asyncio
    async def test_two_unlikes_from_present_remove_once(self, session_maker, key):
        async with session_maker() as session:
            await SqlLikeRepository(session).insert(key)
            await session.commit()
        barrier = ReadBarrier()

        results = await asyncio.gather(
            toggle_like(session_maker, barrier, key),
            toggle_like(session_maker, barrier, key),
        )

        assert results.count(False) == 1
        assert results.count("conflict") == 1
        assert await count_likes(session_maker) == 0


class TestConcurrentRefresh:
    """Two refreshes presenting the same token at the same time."""

    @pytest.fixture
    def token_service(self):
        return TokenService(
            Settings(jwt_secret_key="access-secret", jwt_refresh_secret_key="refresh-secret")
        )

    @pytest.mark.asyncio
    async def test_only_one_rotation_wins(self, session_maker, token_service):
        async with session_maker() as session:
            repository = SqlAccountRepository(session)
            account = await repository.create_account(
                Account(id=0, username="alice", email="alice@example.com", hashed_password="x")
            )
            presented = token_service.create_refresh_token(account)
            await repository.set_refresh_token(account.id, presented)
            await session.commit()

        barrier = ReadBarrier()

        async def refresh():
            async with session_maker() as session:
                manager = SessionManager(
                    PausingAccountRepository(session, barrier), PasswordService(), token_service
                )
                try:
                    pair = await manager.refresh(presented)
                    await session.commit()
                    return pair
                except StaleTokenException:
                    await session.rollback()
                    return "stale"

        results = await asyncio.gather(refresh(), refresh())

        winners = [r for r in results if r != "stale"]
        assert len(winners) == 1
        assert results.count("stale") == 1

        async with session_maker() as session:
            stored = await SqlAccountRepository(session).get_account_by_id(account.id)
        assert stored.refresh_token == winners[0].refresh_token
