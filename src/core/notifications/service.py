# src/core/notifications/service.py
"""
Сервис уведомлений.
Уведомления создаются реакциями на события других сервисов.
"""

from __future__ import annotations

from src.common.constants import CacheRegion, NotificationType, TypeMsg
from src.common.exceptions import NotificationNotFound
from src.common.logger import log_info
from src.core.notifications.models import Notification, NotificationCreateDTO
from src.core.notifications.repository import NotificationRepository
from src.infra.cache import ReadThroughCache


class NotificationService:
    """Сервис уведомлений."""

    def __init__(self, repo: NotificationRepository, cache: ReadThroughCache) -> None:
        self._repo = repo
        self._cache = cache

    async def create_notification(self, dto: NotificationCreateDTO) -> Notification:
        notification = await self._repo.create(dto)
        await self._cache.evict(CacheRegion.NOTIFICATIONS, dto.user_id)
        await log_info(
            f"Уведомление {notification.notification_id} для пользователя {dto.user_id}: {dto.message}",
            type_msg=TypeMsg.DEBUG,
        )
        return notification

    async def notify(self, user_id: int, message: str) -> Notification:
        """Создаёт SMS-уведомление."""
        return await self.create_notification(
            NotificationCreateDTO(user_id=user_id, message=message, type=NotificationType.SMS)
        )

    async def get_by_user_id(self, user_id: int) -> list[Notification]:
        """
        Raises:
            NotificationNotFound: у пользователя нет уведомлений
        """
        async def load() -> list[Notification]:
            notifications = await self._repo.get_by_user_id(user_id)
            if not notifications:
                raise NotificationNotFound(
                    user_id,
                    f"Notifications for user with id = {user_id} is not found",
                )
            return notifications

        return await self._cache.get_or_load(CacheRegion.NOTIFICATIONS, user_id, load, list[Notification])

    async def get_by_id(self, notification_id: int) -> Notification:
        async def load() -> Notification:
            notification = await self._repo.get_by_id(notification_id)
            if notification is None:
                raise NotificationNotFound(notification_id)
            return notification

        return await self._cache.get_or_load(CacheRegion.NOTIFICATION, notification_id, load, Notification)

    async def update_status(self, notification_id: int, read: bool) -> Notification:
        notification = await self._repo.set_read(notification_id, read)
        if notification is None:
            raise NotificationNotFound(notification_id)

        await self._cache.put(CacheRegion.NOTIFICATION, notification_id, notification, Notification)
        await self._cache.evict(CacheRegion.NOTIFICATIONS, notification.user_id)
        return notification

    async def delete_all_by_user_id(self, user_id: int) -> int:
        deleted_ids = await self._repo.delete_all_by_user_id(user_id)
        for notification_id in deleted_ids:
            await self._cache.evict(CacheRegion.NOTIFICATION, notification_id)
        await self._cache.evict(CacheRegion.NOTIFICATIONS, user_id)
        return len(deleted_ids)
