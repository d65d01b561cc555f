"""
Unit tests for per-user locks and the rollback decorator.
"""

import asyncio
from unittest.mock import AsyncMock

import pytest

from app.utils.db_decorators import with_rollback_on_error
from app.utils.user_locks import UserLockRegistry


class TestUserLockRegistry:
    """Test per-user lock registry."""

    def test_same_user_same_lock(self):
        registry = UserLockRegistry()

        assert registry.get("SA10001") is registry.get("SA10001")
        assert registry.get("SA10001") is not registry.get("SA10002")
        assert len(registry) == 2

    @pytest.mark.asyncio
    async def test_hold_serializes_same_user(self):
        """Two holders of one user's lock never interleave."""
        registry = UserLockRegistry()
        events = []

        async def worker(tag):
            async with registry.hold("SA10001"):
                events.append(f"{tag}-start")
                await asyncio.sleep(0)
                events.append(f"{tag}-end")

        await asyncio.gather(worker("a"), worker("b"))

        assert events == ["a-start", "a-end", "b-start", "b-end"]

    @pytest.mark.asyncio
    async def test_different_users_do_not_block(self):
        """Holding one user's lock leaves other users free."""
        registry = UserLockRegistry()

        async with registry.hold("SA10001"):
            assert registry.get("SA10002").locked() is False

    @pytest.mark.asyncio
    async def test_released_locks_are_dropped(self):
        """Idle users leave no lock behind."""
        registry = UserLockRegistry()

        async def worker():
            async with registry.hold("SA10001"):
                assert len(registry) == 1
                await asyncio.sleep(0)

        await asyncio.gather(worker(), worker())
        async with registry.hold("SA10002"):
            pass

        assert len(registry) == 0


class _Service:
    def __init__(self, session):
        self.session = session

    @with_rollback_on_error
    async def ok(self):
        return "done"

    @with_rollback_on_error
    async def fail(self):
        raise RuntimeError("boom")


class TestWithRollbackOnError:
    """Test the rollback decorator."""

    @pytest.mark.asyncio
    async def test_success_does_not_roll_back(self, mock_session):
        service = _Service(mock_session)

        assert await service.ok() == "done"
        mock_session.rollback.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_failure_rolls_back_and_reraises(self, mock_session):
        service = _Service(mock_session)

        with pytest.raises(RuntimeError, match="boom"):
            await service.fail()

        mock_session.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_session_keyword_argument(self):
        session = AsyncMock()

        @with_rollback_on_error
        async def task(session):
            raise ValueError("bad")

        with pytest.raises(ValueError):
            await task(session=session)

        session.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_without_session_runs_function(self):
        @with_rollback_on_error
        async def task(value):
            return value * 2

        assert await task(21) == 42
