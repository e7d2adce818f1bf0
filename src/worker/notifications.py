# src/worker/notifications.py
"""
Консьюмер уведомлений.

Превращает события других сервисов в SMS-уведомления. Получатель
реакции на комментарий или лайк - владелец поста/комментария, его
ищем через клиенты постов и комментариев. Если цель уже удалена
(404), повтор не поможет и событие уходит в dead-letter.
"""

from __future__ import annotations

from typing import Any

from src.core.notifications import NotificationService, messages
from src.infra.dedupe import ProcessedEventWindow
from src.infra.event_bus import BaseEventBus
from src.shared.events import (
    CommentEvent,
    LikeEvent,
    MediaEvent,
    PostEvent,
    SubscriptionEvent,
    Topics,
    UserEvent,
)
from src.worker.base import BaseConsumer, EventCallback


class NotificationsConsumer(BaseConsumer):
    """Реакции сервиса уведомлений."""

    def __init__(
        self,
        event_bus: BaseEventBus,
        notifications: NotificationService,
        posts_client: Any,
        comments_client: Any,
        dedupe: ProcessedEventWindow | None = None,
    ) -> None:
        """
        Args:
            event_bus: Шина событий
            notifications: Сервис уведомлений
            posts_client: Клиент постов (владелец поста)
            comments_client: Клиент комментариев (автор комментария)
            dedupe: Окно обработанных событий
        """
        super().__init__(event_bus, dedupe)
        self._notifications = notifications
        self._posts = posts_client
        self._comments = comments_client

    @property
    def name(self) -> str:
        return "NotificationsConsumer"

    @property
    def group(self) -> str:
        return "notifications-service"

    def handlers(self) -> dict[str, EventCallback]:
        return {
            Topics.USER_CREATED: self._on_user_created,
            Topics.USER_UPDATED: self._on_user_updated,
            Topics.USER_DELETED: self._on_user_deleted,
            Topics.POST_CREATED: self._on_post_created,
            Topics.POST_UPDATED: self._on_post_updated,
            Topics.POST_DELETED: self._on_post_deleted,
            Topics.COMMENT_CREATED: self._on_comment_created,
            Topics.POST_LIKE_CREATED: self._on_post_liked,
            Topics.COMMENT_LIKE_CREATED: self._on_comment_liked,
            Topics.MEDIA_UPLOAD: self._on_media_uploaded,
            Topics.MEDIA_DELETED: self._on_media_deleted,
            Topics.SUBSCRIPTION_CREATED: self._on_subscribed,
            Topics.SUBSCRIPTION_DELETED: self._on_unsubscribed,
        }

    # =========================================================================
    # ПОЛЬЗОВАТЕЛИ
    # =========================================================================

    async def _on_user_created(self, event: UserEvent) -> None:
        await self._notifications.notify(event.user_id, messages.USER_CREATED)

    async def _on_user_updated(self, event: UserEvent) -> None:
        await self._notifications.notify(event.user_id, messages.USER_UPDATED)

    async def _on_user_deleted(self, event: UserEvent) -> None:
        await self._notifications.delete_all_by_user_id(event.user_id)

    # =========================================================================
    # ПОСТЫ И КОММЕНТАРИИ
    # =========================================================================

    async def _on_post_created(self, event: PostEvent) -> None:
        await self._notifications.notify(event.user_id, messages.POST_CREATED.format(post_id=event.post_id))

    async def _on_post_updated(self, event: PostEvent) -> None:
        await self._notifications.notify(event.user_id, messages.POST_UPDATED.format(post_id=event.post_id))

    async def _on_post_deleted(self, event: PostEvent) -> None:
        await self._notifications.notify(event.user_id, messages.POST_DELETED.format(post_id=event.post_id))

    async def _on_comment_created(self, event: CommentEvent) -> None:
        owner_id = await self._posts.get_user_id(event.post_id)
        await self._notifications.notify(
            owner_id,
            messages.COMMENT_CREATED.format(user_id=event.user_id, post_id=event.post_id),
        )

    # =========================================================================
    # ЛАЙКИ
    # =========================================================================

    async def _on_post_liked(self, event: LikeEvent) -> None:
        owner_id = await self._posts.get_user_id(event.post_id)
        await self._notifications.notify(
            owner_id,
            messages.POST_LIKED.format(user_id=event.user_id, post_id=event.post_id),
        )

    async def _on_comment_liked(self, event: LikeEvent) -> None:
        owner_id = await self._comments.get_user_id(event.comment_id)
        await self._notifications.notify(
            owner_id,
            messages.COMMENT_LIKED.format(user_id=event.user_id, comment_id=event.comment_id),
        )

    # =========================================================================
    # МЕДИА И ПОДПИСКИ
    # =========================================================================

    async def _on_media_uploaded(self, event: MediaEvent) -> None:
        await self._notifications.notify(event.user_id, messages.MEDIA_UPLOADED.format(url=event.url))

    async def _on_media_deleted(self, event: MediaEvent) -> None:
        await self._notifications.notify(event.user_id, messages.MEDIA_DELETED.format(url=event.url))

    async def _on_subscribed(self, event: SubscriptionEvent) -> None:
        await self._notifications.notify(
            event.following_id, messages.NEW_FOLLOWER.format(follower_id=event.follower_id)
        )

    async def _on_unsubscribed(self, event: SubscriptionEvent) -> None:
        await self._notifications.notify(
            event.following_id, messages.UNFOLLOWED.format(follower_id=event.follower_id)
        )
