# src/infra/event_bus.py
"""
Шина событий.

Топик разбит на партиции по ключу (id изменившейся сущности):
сообщения одной партиции обрабатываются строго по порядку, разные
партиции обрабатываются параллельно. Доставка at-least-once.

Ошибки обработчика:
- NonRetryableDeliveryFailure сразу уходит в dead-letter топик <topic>.DLT
- любое другое исключение повторяется (DELIVERY_RETRIES раз с паузой
  DELIVERY_BACKOFF_SECONDS), после чего сообщение тоже уходит в dead-letter

Публикация fire-and-forget: ошибка логируется, вызывающий получает False.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Awaitable, Callable

import aio_pika
from aio_pika import ExchangeType, Message
from aio_pika.abc import AbstractChannel, AbstractConnection, AbstractExchange, AbstractQueue

from src.common.constants import TypeMsg
from src.common.exceptions import NonRetryableDeliveryFailure
from src.common.logger import log_error, log_info, log_warning
from src.shared.events.base import DomainEvent, Topics


@dataclass(frozen=True)
class EventRecord:
    """Доставленное сообщение: payload и его позиция в топике."""
    topic: str
    partition: int
    offset: int
    key: int
    value: str
    attempt: int = 1


# Обработчик сообщений шины
RecordHandler = Callable[[EventRecord], Awaitable[None]]

# Получатель сообщений, которые не удалось обработать
DeadLetterSink = Callable[[EventRecord, Exception], Awaitable[None]]


@dataclass(frozen=True)
class RetryPolicy:
    """Политика повторной доставки."""
    max_retries: int = 3
    backoff_seconds: float = 3.0
    dead_letter_suffix: str = ".DLT"

    @classmethod
    def from_settings(cls) -> RetryPolicy:
        from src.config import settings

        return cls(
            max_retries=settings.rabbitmq.DELIVERY_RETRIES,
            backoff_seconds=settings.rabbitmq.DELIVERY_BACKOFF_SECONDS,
            dead_letter_suffix=settings.rabbitmq.DEAD_LETTER_SUFFIX,
        )

    def dead_letter_topic(self, topic: str) -> str:
        return Topics.dead_letter(topic, self.dead_letter_suffix)


def partition_for(key: int, partitions: int) -> int:
    """Номер партиции для ключа."""
    return abs(key) % partitions


async def handle_with_retry(
    handler: RecordHandler,
    record: EventRecord,
    policy: RetryPolicy,
    dead_letter: DeadLetterSink,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> bool:
    """
    Вызывает обработчик с повторами по политике.

    Returns:
        True если обработчик завершился успешно, False если сообщение
        ушло в dead-letter
    """
    attempt = record.attempt
    while True:
        current = replace(record, attempt=attempt)
        try:
            await handler(current)
            return True
        except NonRetryableDeliveryFailure as e:
            await log_warning(
                f"Сообщение {record.topic}[{record.partition}]@{record.offset} не подлежит повтору: {e}",
                extra={"topic": record.topic, "partition": record.partition, "offset": record.offset},
            )
            await dead_letter(current, e)
            return False
        except Exception as e:
            if attempt > policy.max_retries:
                await log_error(
                    f"Сообщение {record.topic}[{record.partition}]@{record.offset} "
                    f"не обработано после {policy.max_retries} повторов: {e}",
                    extra={"topic": record.topic, "partition": record.partition, "offset": record.offset},
                    exc_info=True,
                )
                await dead_letter(current, e)
                return False

            await log_warning(
                f"Ошибка обработки {record.topic}[{record.partition}]@{record.offset} "
                f"(попытка {attempt}/{policy.max_retries + 1}): {e}"
            )
            attempt += 1
            if policy.backoff_seconds > 0:
                await sleep(policy.backoff_seconds)


class BaseEventBus(ABC):
    """
    Общий контракт шины событий.
    Подклассы реализуют транспорт: _send, subscribe, connect/disconnect.
    """

    def __init__(self, partitions: int = 3, policy: RetryPolicy | None = None) -> None:
        self.partitions = partitions
        self.policy = policy or RetryPolicy()

    @abstractmethod
    async def connect(self) -> None:
        ...

    @abstractmethod
    async def disconnect(self) -> None:
        ...

    @abstractmethod
    async def health_check(self) -> bool:
        ...

    @abstractmethod
    async def _send(self, topic: str, partition: int, key: int, value: str, message_id: str) -> None:
        """Передаёт сообщение транспорту (исключения пробрасываются)."""

    @abstractmethod
    async def subscribe(self, topic: str, group: str, handler: RecordHandler) -> None:
        """
        Подписывает группу потребителей на все партиции топика.
        Каждая группа получает свою копию каждого сообщения.
        """

    @abstractmethod
    async def unsubscribe(self, topic: str, group: str) -> None:
        """Останавливает доставку группе. Недоставленные сообщения сохраняются."""

    async def publish(self, topic: str, key: int, event: DomainEvent) -> bool:
        """
        Публикует событие. Не бросает исключений.

        Args:
            topic: Имя топика
            key: Ключ партиции (id изменившейся сущности)
            event: Доменное событие

        Returns:
            True если транспорт принял сообщение
        """
        partition = partition_for(key, self.partitions)
        try:
            await self._send(topic, partition, key, event.to_json(), event.event_id(topic))
        except Exception as e:
            await log_error(
                f"Ошибка публикации события {topic} (key={key}): {e}",
                extra={"topic": topic, "key": key},
            )
            return False

        await log_info(f"Событие опубликовано: {topic} (key={key}, partition={partition})", type_msg=TypeMsg.DEBUG)
        return True


class EventBus(BaseEventBus):
    """
    Шина событий на базе RabbitMQ.

    - один durable TOPIC exchange
    - routing key <topic>.<partition>
    - durable очередь на (группа, топик, партиция)
    - ack после завершения обработчика (или dead-letter)
    """

    _instance: EventBus | None = None

    def __new__(cls, *args, **kwargs) -> EventBus:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self, partitions: int = 3, policy: RetryPolicy | None = None) -> None:
        if hasattr(self, "_initialized"):
            return
        super().__init__(partitions=partitions, policy=policy)
        self._initialized = True
        self._connection: AbstractConnection | None = None
        self._channel: AbstractChannel | None = None
        self._exchange: AbstractExchange | None = None
        self._exchange_name = "social.events"
        self._queues: dict[str, AbstractQueue] = {}
        self._locks: dict[str, asyncio.Lock] = {}
        self._consumer_tags: dict[str, str] = {}

    @property
    def is_connected(self) -> bool:
        """Проверяет, активно ли соединение."""
        return self._connection is not None and not self._connection.is_closed

    async def connect(
        self,
        url: str | None = None,
        exchange_name: str | None = None,
        prefetch_count: int = 10,
    ) -> None:
        """
        Подключается к RabbitMQ.

        Args:
            url: URL RabbitMQ (если None, берётся из конфига)
            exchange_name: Имя exchange
            prefetch_count: Количество сообщений для prefetch
        """
        if self.is_connected:
            return

        if url is None:
            from src.config import settings
            url = settings.rabbitmq.url
            exchange_name = settings.rabbitmq.RABBITMQ_EXCHANGE
            prefetch_count = settings.rabbitmq.RABBITMQ_PREFETCH_COUNT

        if exchange_name:
            self._exchange_name = exchange_name

        await log_info("Подключение к RabbitMQ...", type_msg=TypeMsg.INFO)

        self._connection = await aio_pika.connect_robust(url)
        self._channel = await self._connection.channel()
        await self._channel.set_qos(prefetch_count=prefetch_count)

        self._exchange = await self._channel.declare_exchange(
            self._exchange_name,
            ExchangeType.TOPIC,
            durable=True,
        )

        await log_info("Подключение к RabbitMQ установлено", type_msg=TypeMsg.INFO)

    async def disconnect(self) -> None:
        """Закрывает соединение с RabbitMQ."""
        if self._connection is not None:
            await self._connection.close()
            self._connection = None
            self._channel = None
            self._exchange = None
            self._queues = {}
            self._locks = {}
            self._consumer_tags = {}
            await log_info("Соединение с RabbitMQ закрыто", type_msg=TypeMsg.INFO)

    async def _send(self, topic: str, partition: int, key: int, value: str, message_id: str) -> None:
        if not self.is_connected or self._exchange is None:
            raise ConnectionError("нет соединения с RabbitMQ")

        message = Message(
            body=value.encode(),
            content_type="application/json",
            message_id=message_id,
            timestamp=datetime.now(timezone.utc),
            headers={"key": key, "topic": topic},
            delivery_mode=aio_pika.DeliveryMode.PERSISTENT,
        )
        await self._exchange.publish(message, routing_key=f"{topic}.{partition}")

    async def subscribe(self, topic: str, group: str, handler: RecordHandler) -> None:
        if not self.is_connected or self._channel is None or self._exchange is None:
            raise ConnectionError("Не удалось подписаться: нет соединения с RabbitMQ")

        await self._declare_dead_letter_queue(topic)

        for partition in range(self.partitions):
            queue_name = f"{group}.{topic}.{partition}"
            if queue_name in self._consumer_tags:
                continue

            queue = self._queues.get(queue_name)
            if queue is None:
                queue = await self._channel.declare_queue(queue_name, durable=True)
                await queue.bind(self._exchange, routing_key=f"{topic}.{partition}")
                self._queues[queue_name] = queue
                self._locks[queue_name] = asyncio.Lock()

            self._consumer_tags[queue_name] = await queue.consume(
                self._make_consumer(queue_name, topic, partition, handler)
            )

        await log_info(
            f"Группа {group} подписана на {topic} ({self.partitions} партиций)",
            type_msg=TypeMsg.DEBUG,
        )

    async def unsubscribe(self, topic: str, group: str) -> None:
        """Отменяет consumer'ы группы. Очереди durable: сообщения ждут повторной подписки."""
        for partition in range(self.partitions):
            queue_name = f"{group}.{topic}.{partition}"
            tag = self._consumer_tags.pop(queue_name, None)
            # Без соединения consumer'ы уже сняты брокером
            if tag is None or not self.is_connected:
                continue
            await self._queues[queue_name].cancel(tag)

        await log_info(f"Группа {group} отписана от {topic}", type_msg=TypeMsg.DEBUG)

    async def _declare_dead_letter_queue(self, topic: str) -> None:
        dlt = self.policy.dead_letter_topic(topic)
        if dlt in self._queues:
            return
        queue = await self._channel.declare_queue(dlt, durable=True)
        await queue.bind(self._exchange, routing_key=dlt)
        self._queues[dlt] = queue

    def _make_consumer(
        self,
        queue_name: str,
        topic: str,
        partition: int,
        handler: RecordHandler,
    ) -> Callable[[aio_pika.abc.AbstractIncomingMessage], Awaitable[None]]:
        """Создаёт consumer, обрабатывающий сообщения очереди по одному."""
        lock = self._locks[queue_name]

        async def consumer(message: aio_pika.abc.AbstractIncomingMessage) -> None:
            async with lock:
                async with message.process(requeue=True):
                    record = EventRecord(
                        topic=topic,
                        partition=partition,
                        offset=message.delivery_tag or 0,
                        key=int((message.headers or {}).get("key", 0)),
                        value=message.body.decode(),
                        attempt=1,
                    )
                    await handle_with_retry(handler, record, self.policy, self._dead_letter)

        return consumer

    async def _dead_letter(self, record: EventRecord, error: Exception) -> None:
        dlt = self.policy.dead_letter_topic(record.topic)
        message = Message(
            body=record.value.encode(),
            content_type="application/json",
            timestamp=datetime.now(timezone.utc),
            headers={
                "key": record.key,
                "topic": record.topic,
                "partition": record.partition,
                "offset": record.offset,
                "error": f"{type(error).__name__}: {error}",
            },
            delivery_mode=aio_pika.DeliveryMode.PERSISTENT,
        )
        await self._exchange.publish(message, routing_key=dlt)
        await log_warning(f"Сообщение отправлено в {dlt}: {record.topic}[{record.partition}]@{record.offset}")

    async def health_check(self) -> bool:
        """Проверяет здоровье подключения к RabbitMQ."""
        return self.is_connected


# Глобальный экземпляр
_event_bus: BaseEventBus | None = None


def get_event_bus() -> BaseEventBus:
    """
    Возвращает глобальную шину событий.
    Backend выбирается настройкой EVENT_BUS_BACKEND (rabbitmq | memory).
    """
    global _event_bus
    if _event_bus is None:
        from src.config import settings

        policy = RetryPolicy.from_settings()
        partitions = settings.rabbitmq.TOPIC_PARTITIONS
        if settings.rabbitmq.EVENT_BUS_BACKEND == "memory":
            from src.infra.memory_bus import InMemoryEventBus
            _event_bus = InMemoryEventBus(partitions=partitions, policy=policy, background=True)
        else:
            _event_bus = EventBus(partitions=partitions, policy=policy)
    return _event_bus


async def init_event_bus() -> None:
    """Подключает шину событий по настройкам."""
    from src.config import settings

    await get_event_bus().connect()
    await log_info(f"Шина событий подключена: {settings.rabbitmq.EVENT_BUS_BACKEND}", type_msg=TypeMsg.INFO)


async def close_event_bus() -> None:
    """Закрывает шину событий."""
    global _event_bus
    if _event_bus is not None:
        await _event_bus.disconnect()
        _event_bus = None
    await log_info("Шина событий отключена", type_msg=TypeMsg.INFO)
