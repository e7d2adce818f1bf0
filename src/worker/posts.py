# src/worker/posts.py
"""
Консьюмер сервиса постов: удаляет посты удалённого пользователя.
"""

from __future__ import annotations

from src.core.posts import PostService
from src.infra.dedupe import ProcessedEventWindow
from src.infra.event_bus import BaseEventBus
from src.shared.events import Topics, UserEvent
from src.worker.base import BaseConsumer, EventCallback


class PostsConsumer(BaseConsumer):

    def __init__(
        self,
        event_bus: BaseEventBus,
        posts: PostService,
        dedupe: ProcessedEventWindow | None = None,
    ) -> None:
        super().__init__(event_bus, dedupe)
        self._posts = posts

    @property
    def name(self) -> str:
        return "PostsConsumer"

    @property
    def group(self) -> str:
        return "posts-service"

    def handlers(self) -> dict[str, EventCallback]:
        return {Topics.USER_DELETED: self._on_user_deleted}

    async def _on_user_deleted(self, event: UserEvent) -> None:
        await self._posts.delete_all_by_user_id(event.user_id)
