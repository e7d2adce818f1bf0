# src/worker/media.py
"""
Консьюмер медиа-сервиса: удаляет файлы удалённого пользователя.
"""

from __future__ import annotations

from src.core.media import MediaService
from src.infra.dedupe import ProcessedEventWindow
from src.infra.event_bus import BaseEventBus
from src.shared.events import Topics, UserEvent
from src.worker.base import BaseConsumer, EventCallback


class MediaConsumer(BaseConsumer):

    def __init__(
        self,
        event_bus: BaseEventBus,
        media: MediaService,
        dedupe: ProcessedEventWindow | None = None,
    ) -> None:
        super().__init__(event_bus, dedupe)
        self._media = media

    @property
    def name(self) -> str:
        return "MediaConsumer"

    @property
    def group(self) -> str:
        return "media-service"

    def handlers(self) -> dict[str, EventCallback]:
        return {Topics.USER_DELETED: self._on_user_deleted}

    async def _on_user_deleted(self, event: UserEvent) -> None:
        await self._media.delete_all_by_user_id(event.user_id)
