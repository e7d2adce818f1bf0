# tests/infra/test_database.py
"""
Тесты для менеджера базы данных.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from src.infra import database
from src.infra.database import SCHEMA_LOCK_ID, DatabaseManager, affected_rows, retry_on_connection_error


@pytest.fixture(autouse=True)
def no_sleep():
    """Повторы подключения без реальных пауз."""
    with patch("src.infra.database.asyncio.sleep", new_callable=AsyncMock) as sleep:
        yield sleep


@pytest.fixture
def db_manager() -> DatabaseManager:
    """Свежий DatabaseManager (синглтон сбрасывается)."""
    DatabaseManager._instance = None
    return DatabaseManager()


def pool_with(conn: MagicMock) -> MagicMock:
    pool = MagicMock()
    pool.acquire.return_value.__aenter__.return_value = conn
    pool.acquire.return_value.__aexit__.return_value = None
    return pool


class TestRetryOnConnectionError:
    """Тесты для декоратора retry_on_connection_error."""

    @pytest.mark.asyncio
    async def test_retries_until_success(self, no_sleep: AsyncMock) -> None:
        calls = 0

        @retry_on_connection_error(max_attempts=3, delay=0.5)
        async def flaky() -> str:
            nonlocal calls
            calls += 1
            if calls < 3:
                raise ConnectionRefusedError("refused")
            return "ok"

        assert await flaky() == "ok"
        assert calls == 3
        # Линейный рост паузы
        assert [call.args[0] for call in no_sleep.await_args_list] == [0.5, 1.0]

    @pytest.mark.asyncio
    async def test_gives_up(self) -> None:
        @retry_on_connection_error(max_attempts=2, delay=0.1)
        async def broken() -> None:
            raise OSError("network unreachable")

        with pytest.raises(OSError):
            await broken()

    @pytest.mark.asyncio
    async def test_query_errors_are_not_retried(self) -> None:
        calls = 0

        @retry_on_connection_error(max_attempts=3, delay=0.1)
        async def bad_query() -> None:
            nonlocal calls
            calls += 1
            raise ValueError("syntax")

        with pytest.raises(ValueError):
            await bad_query()
        assert calls == 1


class TestDatabaseManager:
    """Тесты для DatabaseManager."""

    def test_singleton(self, db_manager: DatabaseManager) -> None:
        assert DatabaseManager() is db_manager

    def test_pool_not_initialized(self, db_manager: DatabaseManager) -> None:
        with pytest.raises(RuntimeError, match="Пул соединений не инициализирован"):
            _ = db_manager.pool

    @pytest.mark.asyncio
    async def test_connect_once(self, db_manager: DatabaseManager) -> None:
        with patch("asyncpg.create_pool", new_callable=AsyncMock, return_value=MagicMock()) as create_pool:
            await db_manager.connect(dsn="postgresql://u:p@localhost/social", min_size=1, max_size=2)
            await db_manager.connect(dsn="postgresql://u:p@localhost/social")

        create_pool.assert_awaited_once()
        assert create_pool.await_args.kwargs["max_size"] == 2

    @pytest.mark.asyncio
    async def test_disconnect(self, db_manager: DatabaseManager) -> None:
        pool = AsyncMock()
        db_manager._pool = pool

        await db_manager.disconnect()
        await db_manager.disconnect()

        pool.close.assert_awaited_once()
        assert db_manager._pool is None

    @pytest.mark.asyncio
    async def test_execute_returns_status(self, db_manager: DatabaseManager) -> None:
        conn = AsyncMock()
        conn.execute.return_value = "DELETE 2"
        db_manager._pool = pool_with(conn)

        status = await db_manager.execute("DELETE FROM likes_schema.likes WHERE post_id = $1", 10)

        assert status == "DELETE 2"
        conn.execute.assert_awaited_once_with("DELETE FROM likes_schema.likes WHERE post_id = $1", 10)

    @pytest.mark.asyncio
    async def test_fetchrow_and_fetchval(self, db_manager: DatabaseManager) -> None:
        conn = AsyncMock()
        conn.fetchrow.return_value = {"post_id": 10}
        conn.fetchval.return_value = 3
        db_manager._pool = pool_with(conn)

        assert (await db_manager.fetchrow("SELECT 1"))["post_id"] == 10
        assert await db_manager.fetchval("SELECT COUNT(*)") == 3

    @pytest.mark.asyncio
    async def test_health_check(self, db_manager: DatabaseManager) -> None:
        conn = AsyncMock()
        conn.fetchval.return_value = 1
        db_manager._pool = pool_with(conn)

        assert await db_manager.health_check() is True

    @pytest.mark.asyncio
    async def test_health_check_without_pool(self, db_manager: DatabaseManager) -> None:
        assert await db_manager.health_check() is False

    @pytest.mark.asyncio
    async def test_transaction(self, db_manager: DatabaseManager) -> None:
        conn = MagicMock()
        conn.transaction.return_value.__aenter__.return_value = None
        conn.transaction.return_value.__aexit__.return_value = None
        db_manager._pool = pool_with(conn)

        async with db_manager.transaction() as acquired:
            assert acquired is conn
        conn.transaction.assert_called_once()


class TestAffectedRows:

    @pytest.mark.parametrize(
        ("status", "expected"),
        [("DELETE 3", 3), ("UPDATE 0", 0), ("INSERT 0 1", 1), ("", 0), (None, 0)],
    )
    def test_parse(self, status, expected: int) -> None:
        assert affected_rows(status) == expected


class TestInitSchema:
    """Применение migrations/init.sql."""

    @pytest.mark.asyncio
    async def test_schema_applied_under_lock(self, db_manager: DatabaseManager) -> None:
        conn = MagicMock()
        conn.execute = AsyncMock()
        conn.transaction.return_value.__aenter__.return_value = None
        conn.transaction.return_value.__aexit__.return_value = None
        db_manager._pool = pool_with(conn)

        await database._init_schema(db_manager)

        first, second = conn.execute.await_args_list
        assert first.args == ("SELECT pg_advisory_xact_lock($1)", SCHEMA_LOCK_ID)
        assert "statistics_schema.post_statistics" in second.args[0]
