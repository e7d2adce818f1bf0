# src/worker/base.py
"""
Базовый класс для консьюмеров событий.

Консьюмер принадлежит сервису и подписывается своей группой на топики.
Payload декодируется по типу топика, затем вызывается ровно один
обработчик. Классификация ошибок для шины:
- битый payload, NotFound -> NonRetryableDeliveryFailure (dead-letter)
- TransientDependencyFailure -> RetryableDeliveryFailure (повтор)
- остальные исключения пробрасываются как есть (повтор)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable

from src.common.constants import TypeMsg
from src.common.exceptions import (
    NonRetryableDeliveryFailure,
    NotFound,
    RetryableDeliveryFailure,
    TransientDependencyFailure,
)
from src.common.logger import log_info
from src.infra.dedupe import ProcessedEventWindow
from src.infra.event_bus import BaseEventBus, EventRecord
from src.shared.events import TOPIC_PAYLOADS, decode_event

# Обработчик типизированного события
EventCallback = Callable[[Any], Awaitable[None]]


class BaseConsumer(ABC):
    """Базовый класс для всех консьюмеров."""

    def __init__(
        self,
        event_bus: BaseEventBus,
        dedupe: ProcessedEventWindow | None = None,
    ) -> None:
        """
        Args:
            event_bus: Шина событий
            dedupe: Окно обработанных событий (None - без дедупликации)
        """
        self.event_bus = event_bus
        self.dedupe = dedupe
        self._handlers: dict[str, EventCallback] = {}
        self._running = False

    @property
    @abstractmethod
    def name(self) -> str:
        """Имя консьюмера."""

    @property
    @abstractmethod
    def group(self) -> str:
        """Группа потребителей (одна на сервис)."""

    @abstractmethod
    def handlers(self) -> dict[str, EventCallback]:
        """Обработчики по топикам."""

    async def start(self) -> None:
        if self._running:
            return

        handlers = self.handlers()
        unknown = [topic for topic in handlers if topic not in TOPIC_PAYLOADS]
        if unknown:
            raise ValueError(f"Консьюмер {self.name}: неизвестные топики {unknown}")

        self._handlers = handlers
        for topic in handlers:
            await self.event_bus.subscribe(topic, self.group, self._on_record)

        self._running = True
        await log_info(f"Консьюмер {self.name} запущен ({len(handlers)} топиков)", type_msg=TypeMsg.INFO)

    async def stop(self) -> None:
        """Отписывает группу: недоставленные сообщения остаются в очередях."""
        if not self._running:
            return
        for topic in self._handlers:
            await self.event_bus.unsubscribe(topic, self.group)
        self._running = False
        await log_info(f"Консьюмер {self.name} остановлен", type_msg=TypeMsg.INFO)

    async def _on_record(self, record: EventRecord) -> None:
        """Декодирует сообщение и вызывает обработчик топика."""
        event = decode_event(record.topic, record.value)
        handler = self._handlers[record.topic]
        event_id = event.event_id(record.topic)

        if self.dedupe is not None and not await self.dedupe.claim(self.group, event_id):
            await log_info(
                f"Консьюмер {self.name}: повторная доставка {record.topic} (key={record.key}) пропущена",
                type_msg=TypeMsg.DEBUG,
            )
            return

        await log_info(
            f"Консьюмер {self.name} получил {record.topic} (key={record.key}, попытка {record.attempt})",
            type_msg=TypeMsg.DEBUG,
        )
        try:
            try:
                await handler(event)
            except NotFound as e:
                raise NonRetryableDeliveryFailure(str(e)) from e
            except TransientDependencyFailure as e:
                raise RetryableDeliveryFailure(str(e)) from e
        except BaseException:
            # Включая отмену задачи: иначе повторная доставка будет пропущена
            await self._release(event_id)
            raise

        if self.dedupe is not None:
            await self.dedupe.confirm(self.group, event_id)

    async def _release(self, event_id: str) -> None:
        if self.dedupe is not None:
            await self.dedupe.release(self.group, event_id)
