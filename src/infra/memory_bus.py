# src/infra/memory_bus.py
"""
Шина событий в памяти процесса.

Используется в dev-режиме (EVENT_BUS_BACKEND=memory) и в тестах.
Повторяет семантику брокера: лог на каждую партицию топика, закоммиченные
смещения на каждую группу потребителей, обработка партиции строго по
порядку, повторная доставка через seek().

Два режима доставки:
- background=True: публикация сразу запускает обработку в фоне
- background=False: сообщения копятся до явного drain()
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Awaitable, Callable

from src.common.constants import TypeMsg
from src.common.logger import log_info, log_warning
from src.infra.event_bus import (
    BaseEventBus,
    EventRecord,
    RecordHandler,
    RetryPolicy,
    handle_with_retry,
)


@dataclass(frozen=True)
class DeadLetter:
    """Сообщение в dead-letter топике."""
    topic: str
    record: EventRecord
    error: str


@dataclass
class _Subscription:
    group: str
    topic: str
    handler: RecordHandler
    committed: dict[int, int] = field(default_factory=dict)
    locks: dict[int, asyncio.Lock] = field(default_factory=dict)
    active: bool = True


class InMemoryEventBus(BaseEventBus):
    """
    Партиционированная шина в памяти.

    Example:
        bus = InMemoryEventBus(partitions=3)
        await bus.subscribe("post.deleted", "comments", handler)
        await bus.publish("post.deleted", 10, event)
        await bus.drain()
    """

    def __init__(
        self,
        partitions: int = 3,
        policy: RetryPolicy | None = None,
        background: bool = False,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        super().__init__(partitions=partitions, policy=policy)
        self._background = background
        self._sleep = sleep
        self._logs: dict[str, list[list[EventRecord]]] = {}
        self._history: list[EventRecord] = []
        self._subscriptions: dict[tuple[str, str], _Subscription] = {}
        self._dead_letters: list[DeadLetter] = []
        self._tasks: set[asyncio.Task] = set()
        self._connected = False

    async def connect(self) -> None:
        self._connected = True
        await log_info("Шина событий в памяти запущена", type_msg=TypeMsg.INFO)

    async def disconnect(self) -> None:
        for task in list(self._tasks):
            task.cancel()
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks.clear()
        self._connected = False

    async def health_check(self) -> bool:
        return self._connected

    def _partition_log(self, topic: str, partition: int) -> list[EventRecord]:
        logs = self._logs.setdefault(topic, [[] for _ in range(self.partitions)])
        return logs[partition]

    async def _send(self, topic: str, partition: int, key: int, value: str, message_id: str) -> None:
        log = self._partition_log(topic, partition)
        record = EventRecord(topic=topic, partition=partition, offset=len(log), key=key, value=value)
        log.append(record)
        self._history.append(record)

        if self._background:
            for subscription in self._subscriptions.values():
                if subscription.topic == topic and subscription.active:
                    self._schedule(subscription, partition)

    async def subscribe(self, topic: str, group: str, handler: RecordHandler) -> None:
        existing = self._subscriptions.get((group, topic))
        if existing is not None and existing.active:
            raise ValueError(f"Группа {group} уже подписана на {topic}")
        if existing is not None:
            # Группа возвращается: читает с закоммиченных смещений
            existing.handler = handler
            existing.active = True
            await log_info(f"Группа {group} снова подписана на {topic}", type_msg=TypeMsg.DEBUG)
            if self._background:
                for partition in range(self.partitions):
                    self._schedule(existing, partition)
            return

        subscription = _Subscription(group=group, topic=topic, handler=handler)
        # Новая группа читает с конца лога
        for partition in range(self.partitions):
            subscription.committed[partition] = len(self._partition_log(topic, partition))
            subscription.locks[partition] = asyncio.Lock()
        self._subscriptions[(group, topic)] = subscription

        await log_info(f"Группа {group} подписана на {topic}", type_msg=TypeMsg.DEBUG)

    async def unsubscribe(self, topic: str, group: str) -> None:
        """Останавливает доставку группе. Смещения сохраняются до повторной подписки."""
        subscription = self._subscriptions.get((group, topic))
        if subscription is None or not subscription.active:
            return
        subscription.active = False
        await log_info(f"Группа {group} отписана от {topic}", type_msg=TypeMsg.DEBUG)

    def _schedule(self, subscription: _Subscription, partition: int) -> None:
        task = asyncio.create_task(self._pump(subscription, partition))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _pump(self, subscription: _Subscription, partition: int) -> None:
        """Обрабатывает все непрочитанные сообщения партиции по порядку."""
        async with subscription.locks[partition]:
            log = self._partition_log(subscription.topic, partition)
            while subscription.active and subscription.committed[partition] < len(log):
                record = log[subscription.committed[partition]]
                await handle_with_retry(
                    subscription.handler,
                    record,
                    self.policy,
                    self._dead_letter,
                    sleep=self._sleep,
                )
                subscription.committed[partition] += 1

    def _pending(self) -> list[tuple[_Subscription, int]]:
        return [
            (subscription, partition)
            for subscription in self._subscriptions.values()
            if subscription.active
            for partition in range(self.partitions)
            if subscription.committed[partition] < len(self._partition_log(subscription.topic, partition))
        ]

    async def drain(self) -> None:
        """
        Доставляет сообщения, пока шина не затихнет.
        Сообщения, опубликованные обработчиками, тоже доставляются.
        """
        while True:
            if self._tasks:
                await asyncio.gather(*list(self._tasks))
                continue

            pending = self._pending()
            if not pending:
                return
            await asyncio.gather(*(self._pump(subscription, partition) for subscription, partition in pending))

    def seek(self, group: str, topic: str, partition: int, offset: int) -> None:
        """Переставляет смещение группы: следующий drain() доставит сообщения заново."""
        subscription = self._subscriptions[(group, topic)]
        subscription.committed[partition] = offset

    def committed(self, group: str, topic: str, partition: int) -> int:
        """Закоммиченное смещение группы в партиции."""
        return self._subscriptions[(group, topic)].committed[partition]

    async def _dead_letter(self, record: EventRecord, error: Exception) -> None:
        dlt = self.policy.dead_letter_topic(record.topic)
        self._dead_letters.append(DeadLetter(topic=dlt, record=record, error=f"{type(error).__name__}: {error}"))
        await log_warning(f"Сообщение отправлено в {dlt}: {record.topic}[{record.partition}]@{record.offset}")

    def published(self, topic: str | None = None) -> list[EventRecord]:
        """Опубликованные сообщения (все или одного топика) в порядке публикации."""
        if topic is None:
            return list(self._history)
        return [record for record in self._history if record.topic == topic]

    def dead_letters(self) -> list[DeadLetter]:
        """Сообщения, ушедшие в dead-letter."""
        return list(self._dead_letters)
