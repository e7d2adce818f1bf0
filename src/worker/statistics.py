# src/worker/statistics.py
"""
Консьюмер статистики: каждое событие из таблицы правил двигает
счётчики за текущую дату.
"""

from __future__ import annotations

from functools import partial

from src.core.statistics import COUNTER_RULES, StatisticService
from src.infra.dedupe import ProcessedEventWindow
from src.infra.event_bus import BaseEventBus
from src.shared.events import DomainEvent
from src.worker.base import BaseConsumer, EventCallback


class StatisticsConsumer(BaseConsumer):

    def __init__(
        self,
        event_bus: BaseEventBus,
        statistics: StatisticService,
        dedupe: ProcessedEventWindow | None = None,
    ) -> None:
        super().__init__(event_bus, dedupe)
        self._statistics = statistics

    @property
    def name(self) -> str:
        return "StatisticsConsumer"

    @property
    def group(self) -> str:
        return "statistics-service"

    def handlers(self) -> dict[str, EventCallback]:
        return {topic: partial(self._record, topic) for topic in COUNTER_RULES}

    async def _record(self, topic: str, event: DomainEvent) -> None:
        await self._statistics.record(topic, event)
