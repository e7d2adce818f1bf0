# src/worker/subscriptions.py
"""
Консьюмер сервиса подписок: удаляет подписки удалённого пользователя
в обе стороны.
"""

from __future__ import annotations

from src.core.subscriptions import SubscriptionService
from src.infra.dedupe import ProcessedEventWindow
from src.infra.event_bus import BaseEventBus
from src.shared.events import Topics, UserEvent
from src.worker.base import BaseConsumer, EventCallback


class SubscriptionsConsumer(BaseConsumer):

    def __init__(
        self,
        event_bus: BaseEventBus,
        subscriptions: SubscriptionService,
        dedupe: ProcessedEventWindow | None = None,
    ) -> None:
        super().__init__(event_bus, dedupe)
        self._subscriptions = subscriptions

    @property
    def name(self) -> str:
        return "SubscriptionsConsumer"

    @property
    def group(self) -> str:
        return "subscriptions-service"

    def handlers(self) -> dict[str, EventCallback]:
        return {Topics.USER_DELETED: self._on_user_deleted}

    async def _on_user_deleted(self, event: UserEvent) -> None:
        await self._subscriptions.delete_all_by_user_id(event.user_id)
