# tests/worker/test_base.py
"""
Unit тесты для базового класса консьюмера (src/worker/base.py).
"""

import asyncio

import pytest
from typing import List
from unittest.mock import AsyncMock, MagicMock

from src.common.exceptions import (
    NonRetryableDeliveryFailure,
    PostNotFound,
    RetryableDeliveryFailure,
    TransientDependencyFailure,
)
from src.infra.dedupe import ProcessedEventWindow
from src.infra.event_bus import EventRecord
from src.infra.memory_bus import InMemoryEventBus
from src.shared.events import PostEvent, Topics
from src.worker.base import BaseConsumer


class ConcreteConsumer(BaseConsumer):
    """Конкретная реализация консьюмера для тестирования."""

    def __init__(self, *args, error: Exception | None = None, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.handled: List[PostEvent] = []
        self.error = error

    @property
    def name(self) -> str:
        return "test_consumer"

    @property
    def group(self) -> str:
        return "test-service"

    def handlers(self):
        return {Topics.POST_DELETED: self._on_post_deleted}

    async def _on_post_deleted(self, event: PostEvent) -> None:
        """Сохраняем обработанное событие для проверки."""
        self.handled.append(event)
        if self.error is not None:
            raise self.error


@pytest.fixture
def mock_event_bus() -> MagicMock:
    """Мок шины событий."""
    bus = MagicMock()
    bus.subscribe = AsyncMock()
    bus.unsubscribe = AsyncMock()
    bus.publish = AsyncMock()
    return bus


def make_record(raw: str | None = None, topic: str = Topics.POST_DELETED) -> EventRecord:
    return EventRecord(
        topic=topic,
        partition=1,
        offset=0,
        key=10,
        value=raw if raw is not None else PostEvent(post_id=10, user_id=1).to_json(),
    )


class TestLifecycle:
    """Тесты запуска и остановки."""

    @pytest.mark.asyncio
    async def test_start_subscribes_group(self, mock_event_bus: MagicMock) -> None:
        consumer = ConcreteConsumer(mock_event_bus)

        await consumer.start()

        mock_event_bus.subscribe.assert_awaited_once_with(Topics.POST_DELETED, "test-service", consumer._on_record)

    @pytest.mark.asyncio
    async def test_start_is_idempotent(self, mock_event_bus: MagicMock) -> None:
        consumer = ConcreteConsumer(mock_event_bus)

        await consumer.start()
        await consumer.start()
        await consumer.stop()
        await consumer.stop()

        assert mock_event_bus.subscribe.await_count == 1
        mock_event_bus.unsubscribe.assert_awaited_once_with(Topics.POST_DELETED, "test-service")

    @pytest.mark.asyncio
    async def test_stopped_consumer_gets_messages_after_restart(self, memory_bus: InMemoryEventBus) -> None:
        """Остановленный консьюмер не обрабатывает сообщения, и они не уходят в dead-letter."""
        consumer = ConcreteConsumer(memory_bus)
        await consumer.start()
        await consumer.stop()

        await memory_bus.publish(Topics.POST_DELETED, 10, PostEvent(post_id=10, user_id=1))
        await memory_bus.drain()

        assert consumer.handled == []
        assert memory_bus.dead_letters() == []

        await consumer.start()
        await memory_bus.drain()

        assert consumer.handled == [PostEvent(post_id=10, user_id=1)]

    @pytest.mark.asyncio
    async def test_unknown_topic_rejected(self, mock_event_bus: MagicMock) -> None:
        consumer = ConcreteConsumer(mock_event_bus)
        consumer.handlers = lambda: {"order.created": consumer._on_post_deleted}

        with pytest.raises(ValueError, match="order.created"):
            await consumer.start()
        mock_event_bus.subscribe.assert_not_awaited()


class TestDispatch:
    """Декодирование и классификация ошибок."""

    @pytest.mark.asyncio
    async def test_decodes_by_topic(self, mock_event_bus: MagicMock) -> None:
        consumer = ConcreteConsumer(mock_event_bus)
        await consumer.start()

        await consumer._on_record(make_record())

        assert consumer.handled == [PostEvent(post_id=10, user_id=1)]

    @pytest.mark.asyncio
    async def test_malformed_payload_is_non_retryable(self, mock_event_bus: MagicMock) -> None:
        consumer = ConcreteConsumer(mock_event_bus)
        await consumer.start()

        with pytest.raises(NonRetryableDeliveryFailure):
            await consumer._on_record(make_record("{broken"))
        assert consumer.handled == []

    @pytest.mark.asyncio
    async def test_not_found_is_non_retryable(self, mock_event_bus: MagicMock) -> None:
        consumer = ConcreteConsumer(mock_event_bus, error=PostNotFound(10))
        await consumer.start()

        with pytest.raises(NonRetryableDeliveryFailure, match="Post with id = 10 not found"):
            await consumer._on_record(make_record())

    @pytest.mark.asyncio
    async def test_transient_is_retryable(self, mock_event_bus: MagicMock) -> None:
        consumer = ConcreteConsumer(mock_event_bus, error=TransientDependencyFailure("HTTP 503"))
        await consumer.start()

        with pytest.raises(RetryableDeliveryFailure):
            await consumer._on_record(make_record())

    @pytest.mark.asyncio
    async def test_other_errors_propagate(self, mock_event_bus: MagicMock) -> None:
        consumer = ConcreteConsumer(mock_event_bus, error=RuntimeError("db"))
        await consumer.start()

        with pytest.raises(RuntimeError):
            await consumer._on_record(make_record())


class TestDeduplication:
    """Окно обработанных событий."""

    @pytest.mark.asyncio
    async def test_redelivery_skipped(self, mock_event_bus: MagicMock, fake_redis) -> None:
        consumer = ConcreteConsumer(mock_event_bus, dedupe=ProcessedEventWindow(fake_redis))
        await consumer.start()

        await consumer._on_record(make_record())
        await consumer._on_record(make_record())

        assert len(consumer.handled) == 1

    @pytest.mark.asyncio
    async def test_failure_releases_claim(self, mock_event_bus: MagicMock, fake_redis) -> None:
        consumer = ConcreteConsumer(
            mock_event_bus,
            dedupe=ProcessedEventWindow(fake_redis),
            error=TransientDependencyFailure("timeout"),
        )
        await consumer.start()

        with pytest.raises(RetryableDeliveryFailure):
            await consumer._on_record(make_record())
        consumer.error = None
        await consumer._on_record(make_record())

        assert len(consumer.handled) == 2

    @pytest.mark.asyncio
    async def test_cancelled_handler_redelivery_is_processed(self, mock_event_bus: MagicMock, fake_redis) -> None:
        """Отмена обработчика снимает захват: повторная доставка обрабатывается."""
        consumer = ConcreteConsumer(
            mock_event_bus,
            dedupe=ProcessedEventWindow(fake_redis),
            error=asyncio.CancelledError(),
        )
        await consumer.start()

        with pytest.raises(asyncio.CancelledError):
            await consumer._on_record(make_record())
        consumer.error = None
        await consumer._on_record(make_record())

        assert len(consumer.handled) == 2

    @pytest.mark.asyncio
    async def test_unfinished_claim_is_taken_over(self, mock_event_bus: MagicMock, fake_redis) -> None:
        """Захват, оставшийся после падения процесса, не блокирует повторную доставку."""
        window = ProcessedEventWindow(fake_redis)
        consumer = ConcreteConsumer(mock_event_bus, dedupe=window)
        await consumer.start()
        event_id = PostEvent(post_id=10, user_id=1).event_id(Topics.POST_DELETED)
        assert await window.claim("test-service", event_id) is True

        await consumer._on_record(make_record())
        await consumer._on_record(make_record())

        assert len(consumer.handled) == 1

    @pytest.mark.asyncio
    async def test_seek_redelivery_is_idempotent(self, memory_bus: InMemoryEventBus, fake_redis) -> None:
        """Повторная доставка того же сообщения после seek() не обрабатывается дважды."""
        consumer = ConcreteConsumer(memory_bus, dedupe=ProcessedEventWindow(fake_redis))
        await consumer.start()
        await memory_bus.publish(Topics.POST_DELETED, 10, PostEvent(post_id=10, user_id=1))
        await memory_bus.drain()

        memory_bus.seek("test-service", Topics.POST_DELETED, 1, 0)
        await memory_bus.drain()

        assert len(consumer.handled) == 1
        assert memory_bus.dead_letters() == []
