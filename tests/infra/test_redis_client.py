# tests/infra/test_redis_client.py
"""
Тесты для клиента Redis.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from src.infra.redis_client import RedisClient


async def scan(*keys: str):
    for key in keys:
        yield key


class TestRedisClient:
    """Тесты для RedisClient."""

    @pytest.fixture
    def redis_client(self) -> RedisClient:
        """Свежий RedisClient с замоканным соединением."""
        RedisClient._instance = None
        client = RedisClient()
        client._client = AsyncMock()
        return client

    def test_singleton(self, redis_client: RedisClient) -> None:
        assert RedisClient() is redis_client

    def test_client_not_initialized(self) -> None:
        RedisClient._instance = None
        with pytest.raises(RuntimeError, match="Redis клиент не инициализирован"):
            _ = RedisClient().client

    def test_namespace(self, redis_client: RedisClient) -> None:
        assert redis_client._make_key("cache:postById:10") == "social:cache:postById:10"

    @pytest.mark.asyncio
    async def test_set_with_ttl(self, redis_client: RedisClient) -> None:
        redis_client._client.set.return_value = True

        assert await redis_client.set("cache:users:1", "{}", ttl=600) is True
        redis_client._client.set.assert_awaited_once_with("social:cache:users:1", "{}", ex=600)

    @pytest.mark.asyncio
    async def test_set_nx(self, redis_client: RedisClient) -> None:
        """SET NX возвращает None, если ключ уже есть."""
        redis_client._client.set.side_effect = [True, None]

        assert await redis_client.set_nx("dedupe:g:e", "1", ttl=60) is True
        assert await redis_client.set_nx("dedupe:g:e", "1", ttl=60) is False
        assert redis_client._client.set.await_args.kwargs == {"ex": 60, "nx": True}

    @pytest.mark.asyncio
    async def test_delete_pattern_uses_scan(self, redis_client: RedisClient) -> None:
        redis_client._client.scan_iter = MagicMock(
            return_value=scan("social:cache:comments:1", "social:cache:comments:2")
        )
        redis_client._client.delete.return_value = 2

        deleted = await redis_client.delete_pattern("cache:comments:*")

        assert deleted == 2
        redis_client._client.scan_iter.assert_called_once_with(match="social:cache:comments:*", count=500)
        redis_client._client.delete.assert_awaited_once_with("social:cache:comments:1", "social:cache:comments:2")

    @pytest.mark.asyncio
    async def test_delete_pattern_nothing_found(self, redis_client: RedisClient) -> None:
        redis_client._client.scan_iter = MagicMock(return_value=scan())

        assert await redis_client.delete_pattern("cache:none:*") == 0
        redis_client._client.delete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_health_check_failure(self, redis_client: RedisClient) -> None:
        redis_client._client.ping.side_effect = ConnectionError("down")

        assert await redis_client.health_check() is False

    @pytest.mark.asyncio
    async def test_connect_sets_namespace(self) -> None:
        RedisClient._instance = None
        client = RedisClient()
        fake = AsyncMock()

        with patch("src.infra.redis_client.redis.from_url", return_value=fake) as from_url:
            await client.connect(url="redis://localhost:6379/1", max_connections=5, namespace="social_test")

        from_url.assert_called_once_with("redis://localhost:6379/1", max_connections=5, decode_responses=True)
        fake.ping.assert_awaited_once()
        assert client._make_key("k") == "social_test:k"

    @pytest.mark.asyncio
    async def test_disconnect(self, redis_client: RedisClient) -> None:
        connection = redis_client._client

        await redis_client.disconnect()

        connection.aclose.assert_awaited_once()
        assert redis_client._client is None
