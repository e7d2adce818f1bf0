# src/core/notifications/repository.py
"""
Репозиторий уведомлений (notifications_schema).
"""

from __future__ import annotations

from typing import Optional

from src.core.notifications.models import Notification, NotificationCreateDTO
from src.infra.database import DatabaseManager

_COLUMNS = "notification_id, user_id, type, message, read, created_at"


class NotificationRepository:
    """Репозиторий уведомлений."""

    def __init__(self, db: DatabaseManager) -> None:
        self._db = db

    async def get_by_id(self, notification_id: int) -> Optional[Notification]:
        row = await self._db.fetchrow(
            f"SELECT {_COLUMNS} FROM notifications_schema.notifications WHERE notification_id = $1",
            notification_id,
        )
        return Notification.model_validate(dict(row)) if row else None

    async def get_by_user_id(self, user_id: int) -> list[Notification]:
        rows = await self._db.fetch(
            f"""
            SELECT {_COLUMNS} FROM notifications_schema.notifications
            WHERE user_id = $1
            ORDER BY created_at DESC, notification_id DESC
            """,
            user_id,
        )
        return [Notification.model_validate(dict(row)) for row in rows]

    async def create(self, dto: NotificationCreateDTO) -> Notification:
        row = await self._db.fetchrow(
            f"""
            INSERT INTO notifications_schema.notifications (user_id, type, message)
            VALUES ($1, $2, $3)
            RETURNING {_COLUMNS}
            """,
            dto.user_id,
            dto.type.value,
            dto.message,
        )
        return Notification.model_validate(dict(row))

    async def set_read(self, notification_id: int, read: bool) -> Optional[Notification]:
        row = await self._db.fetchrow(
            f"""
            UPDATE notifications_schema.notifications
            SET read = $2
            WHERE notification_id = $1
            RETURNING {_COLUMNS}
            """,
            notification_id,
            read,
        )
        return Notification.model_validate(dict(row)) if row else None

    async def delete_all_by_user_id(self, user_id: int) -> list[int]:
        """Возвращает id удалённых уведомлений."""
        rows = await self._db.fetch(
            "DELETE FROM notifications_schema.notifications WHERE user_id = $1 RETURNING notification_id",
            user_id,
        )
        return [row["notification_id"] for row in rows]
