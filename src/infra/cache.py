# src/infra/cache.py
"""
Кэш чтения поверх Redis.

Значения лежат по ключу cache:<регион>:<ключ> с TTL (CACHE_TTL, 10 минут).
Промах вычисляет значение загрузчиком и сохраняет его. Запись в
сервисах всегда сначала коммитит изменение, потом вызывает evict.

Недоступность Redis не ломает чтение: значение загружается напрямую.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Awaitable, Callable, TypeVar

from pydantic import TypeAdapter, ValidationError
from redis.exceptions import RedisError

from src.common.constants import TypeMsg
from src.common.logger import log_info, log_warning
from src.infra.redis_client import RedisClient

T = TypeVar("T")


@lru_cache(maxsize=None)
def _adapter(value_type: Any) -> TypeAdapter:
    return TypeAdapter(value_type)


class ReadThroughCache:
    """Регионный read-through кэш."""

    def __init__(self, redis: RedisClient, ttl: int = 600) -> None:
        self._redis = redis
        self._ttl = ttl

    @staticmethod
    def make_key(region: str, key: Any) -> str:
        return f"cache:{region}:{key}"

    async def get_or_load(
        self,
        region: str,
        key: Any,
        loader: Callable[[], Awaitable[T]],
        value_type: Any,
        cache_if: Callable[[T], bool] | None = None,
    ) -> T:
        """
        Возвращает значение из кэша или вычисляет его.

        Args:
            region: Регион кэша (postById, comments, ...)
            key: Ключ внутри региона
            loader: Загрузчик значения при промахе (исключения пробрасываются)
            value_type: Тип значения для (де)сериализации
            cache_if: Условие сохранения результата (по умолчанию сохраняется всегда)
        """
        cache_key = self.make_key(region, key)
        adapter = _adapter(value_type)

        try:
            raw = await self._redis.get(cache_key)
        except RedisError as e:
            await log_warning(f"Кэш {region} недоступен, читаем напрямую: {e}")
            return await loader()

        if raw is not None:
            try:
                return adapter.validate_json(raw)
            except ValidationError as e:
                await log_warning(f"Битое значение в кэше {cache_key}, перезагружаем: {e}")

        value = await loader()
        if cache_if is None or cache_if(value):
            await self._store(cache_key, adapter, value)
        return value

    async def put(self, region: str, key: Any, value: Any, value_type: Any) -> None:
        """Сохраняет значение в кэш."""
        await self._store(self.make_key(region, key), _adapter(value_type), value)

    async def _store(self, cache_key: str, adapter: TypeAdapter, value: Any) -> None:
        try:
            await self._redis.set(cache_key, adapter.dump_json(value).decode(), ttl=self._ttl)
        except RedisError as e:
            await log_warning(f"Не удалось сохранить {cache_key} в кэш: {e}")

    async def evict(self, region: str, key: Any) -> None:
        """Удаляет одну запись региона."""
        try:
            await self._redis.delete(self.make_key(region, key))
        except RedisError as e:
            await log_warning(f"Не удалось удалить {region}:{key} из кэша: {e}")
            return
        await log_info(f"Кэш очищен: {region}:{key}", type_msg=TypeMsg.DEBUG)

    async def evict_region(self, region: str) -> None:
        """Удаляет все записи региона."""
        try:
            deleted = await self._redis.delete_pattern(self.make_key(region, "*"))
        except RedisError as e:
            await log_warning(f"Не удалось очистить регион кэша {region}: {e}")
            return
        await log_info(f"Регион кэша {region} очищен ({deleted} ключей)", type_msg=TypeMsg.DEBUG)
