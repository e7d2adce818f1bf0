# src/infra/dedupe.py
"""
Окно обработанных событий.

Консьюмер захватывает id события перед обработкой (SET NX EX) на
короткую аренду. После успешной обработки отметка продлевается до
окна дедупликации, при любом сбое обработчика (включая отмену) она
снимается. Отметка «в обработке», оставшаяся после падения процесса,
не блокирует повторную доставку: её перехватывает следующая попытка.
Пропускаются только доставки уже обработанных событий.
"""

from __future__ import annotations

from redis.exceptions import RedisError

from src.common.logger import log_warning
from src.infra.redis_client import RedisClient

IN_FLIGHT = "processing"
DONE = "done"


class ProcessedEventWindow:
    """Дедупликация доставок на группу потребителей."""

    def __init__(
        self,
        redis: RedisClient,
        ttl: int = 86400,
        enabled: bool = True,
        lease: int = 60,
    ) -> None:
        """
        Args:
            redis: Клиент Redis
            ttl: Окно дедупликации обработанных событий (секунды)
            enabled: False - каждая доставка обрабатывается
            lease: Аренда события на время обработки (секунды)
        """
        self._redis = redis
        self._ttl = ttl
        self._lease = lease
        self.enabled = enabled

    @staticmethod
    def _key(group: str, event_id: str) -> str:
        return f"dedupe:{group}:{event_id}"

    async def claim(self, group: str, event_id: str) -> bool:
        """
        Захватывает событие для обработки.

        Returns:
            False если событие уже обработано этой группой
        """
        if not self.enabled:
            return True
        key = self._key(group, event_id)
        try:
            if await self._redis.set_nx(key, IN_FLIGHT, ttl=self._lease):
                return True
            if await self._redis.get(key) == DONE:
                return False
            # Прошлая попытка не завершилась (падение процесса)
            await self._redis.set(key, IN_FLIGHT, ttl=self._lease)
            await log_warning(f"Событие {event_id} ({group}) перехвачено после незавершённой попытки")
            return True
        except RedisError as e:
            # Без Redis обрабатываем: лучше повтор, чем потеря
            await log_warning(f"Окно дедупликации недоступно ({group}): {e}")
            return True

    async def confirm(self, group: str, event_id: str) -> None:
        """Отмечает событие обработанным на всё окно."""
        if not self.enabled:
            return
        try:
            await self._redis.set(self._key(group, event_id), DONE, ttl=self._ttl)
        except RedisError as e:
            await log_warning(f"Не удалось отметить событие {event_id} ({group}): {e}")

    async def release(self, group: str, event_id: str) -> None:
        """Отпускает событие после неудачной обработки."""
        if not self.enabled:
            return
        try:
            await self._redis.delete(self._key(group, event_id))
        except RedisError as e:
            await log_warning(f"Не удалось освободить событие {event_id} ({group}): {e}")
