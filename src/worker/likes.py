# src/worker/likes.py
"""
Консьюмер сервиса лайков: удаляет лайки удалённых постов,
комментариев и пользователей.
"""

from __future__ import annotations

from src.core.likes import LikeService
from src.infra.dedupe import ProcessedEventWindow
from src.infra.event_bus import BaseEventBus
from src.shared.events import CommentEvent, PostEvent, Topics, UserEvent
from src.worker.base import BaseConsumer, EventCallback


class LikesConsumer(BaseConsumer):

    def __init__(
        self,
        event_bus: BaseEventBus,
        likes: LikeService,
        dedupe: ProcessedEventWindow | None = None,
    ) -> None:
        super().__init__(event_bus, dedupe)
        self._likes = likes

    @property
    def name(self) -> str:
        return "LikesConsumer"

    @property
    def group(self) -> str:
        return "likes-service"

    def handlers(self) -> dict[str, EventCallback]:
        return {
            Topics.POST_DELETED: self._on_post_deleted,
            Topics.COMMENT_DELETED: self._on_comment_deleted,
            Topics.USER_DELETED: self._on_user_deleted,
        }

    async def _on_post_deleted(self, event: PostEvent) -> None:
        await self._likes.delete_all_by_post_id(event.post_id)

    async def _on_comment_deleted(self, event: CommentEvent) -> None:
        await self._likes.delete_all_by_comment_id(event.comment_id)

    async def _on_user_deleted(self, event: UserEvent) -> None:
        await self._likes.delete_all_by_user_id(event.user_id)
