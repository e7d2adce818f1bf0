# src/worker/comments.py
"""
Консьюмер сервиса комментариев: каскад по удалению поста и пользователя.
"""

from __future__ import annotations

from src.core.comments import CommentService
from src.infra.dedupe import ProcessedEventWindow
from src.infra.event_bus import BaseEventBus
from src.shared.events import PostEvent, Topics, UserEvent
from src.worker.base import BaseConsumer, EventCallback


class CommentsConsumer(BaseConsumer):

    def __init__(
        self,
        event_bus: BaseEventBus,
        comments: CommentService,
        dedupe: ProcessedEventWindow | None = None,
    ) -> None:
        super().__init__(event_bus, dedupe)
        self._comments = comments

    @property
    def name(self) -> str:
        return "CommentsConsumer"

    @property
    def group(self) -> str:
        return "comments-service"

    def handlers(self) -> dict[str, EventCallback]:
        return {
            Topics.POST_DELETED: self._on_post_deleted,
            Topics.USER_DELETED: self._on_user_deleted,
        }

    async def _on_post_deleted(self, event: PostEvent) -> None:
        await self._comments.delete_all_by_post_id(event.post_id)

    async def _on_user_deleted(self, event: UserEvent) -> None:
        await self._comments.delete_all_by_user_id(event.user_id)
