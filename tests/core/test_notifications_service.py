# tests/core/test_notifications_service.py
"""
Тесты для сервиса уведомлений.
"""

from __future__ import annotations

import pytest

from src.common.constants import NotificationType
from src.common.exceptions import NotificationNotFound
from src.core.notifications import NotificationCreateDTO, NotificationService
from src.infra.cache import ReadThroughCache
from tests.fakes import FakeNotificationRepository, FakeRedis


class TestNotificationService:
    """Тесты для сервиса уведомлений."""

    @pytest.fixture
    def repo(self) -> FakeNotificationRepository:
        return FakeNotificationRepository()

    @pytest.fixture
    def service(self, repo: FakeNotificationRepository, fake_redis: FakeRedis) -> NotificationService:
        return NotificationService(repo, ReadThroughCache(fake_redis, ttl=600))

    @pytest.mark.asyncio
    async def test_notify_creates_sms(self, service: NotificationService) -> None:
        """Проверяет, что notify создаёт непрочитанное SMS-уведомление."""
        notification = await service.notify(1, "User created")

        assert notification.type is NotificationType.SMS
        assert notification.read is False
        assert notification.message == "User created"

    @pytest.mark.asyncio
    async def test_empty_list_is_not_found(self, service: NotificationService) -> None:
        with pytest.raises(NotificationNotFound, match="Notifications for user with id = 1 is not found"):
            await service.get_by_user_id(1)

    @pytest.mark.asyncio
    async def test_list_refreshes_after_create(self, service: NotificationService) -> None:
        await service.notify(1, "first")
        assert len(await service.get_by_user_id(1)) == 1

        await service.create_notification(NotificationCreateDTO(user_id=1, message="second"))

        assert [n.message for n in await service.get_by_user_id(1)] == ["first", "second"]

    @pytest.mark.asyncio
    async def test_update_status(self, service: NotificationService, repo: FakeNotificationRepository) -> None:
        notification = await service.notify(1, "hello")
        await service.get_by_id(notification.notification_id)
        await service.get_by_user_id(1)

        updated = await service.update_status(notification.notification_id, True)

        assert updated.read is True
        assert (await service.get_by_id(notification.notification_id)).read is True
        assert (await service.get_by_user_id(1))[0].read is True

    @pytest.mark.asyncio
    async def test_update_missing(self, service: NotificationService) -> None:
        with pytest.raises(NotificationNotFound):
            await service.update_status(99, True)

    @pytest.mark.asyncio
    async def test_delete_all_by_user(self, service: NotificationService) -> None:
        await service.notify(1, "a")
        await service.notify(1, "b")
        await service.notify(2, "c")
        await service.get_by_user_id(1)

        assert await service.delete_all_by_user_id(1) == 2

        with pytest.raises(NotificationNotFound):
            await service.get_by_user_id(1)
        assert len(await service.get_by_user_id(2)) == 1

    @pytest.mark.asyncio
    async def test_delete_all_evicts_cached_notification(self, service: NotificationService) -> None:
        """После удаления закэшированное уведомление не отдаётся по id."""
        notification = await service.notify(1, "a")
        await service.update_status(notification.notification_id, True)
        assert (await service.get_by_id(notification.notification_id)).read is True

        await service.delete_all_by_user_id(1)

        with pytest.raises(NotificationNotFound):
            await service.get_by_id(notification.notification_id)
