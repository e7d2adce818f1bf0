# src/core/notifications/models.py
"""
Модели уведомлений.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from src.common.constants import NotificationType


class Notification(BaseModel):
    """Уведомление пользователя."""

    model_config = ConfigDict(from_attributes=True)

    notification_id: int = Field(..., description="ID уведомления")
    user_id: int = Field(..., description="Получатель")
    type: NotificationType = Field(NotificationType.SMS, description="Канал доставки")
    message: str = Field(..., description="Текст")
    read: bool = Field(False, description="Прочитано")
    created_at: Optional[datetime] = None


class NotificationCreateDTO(BaseModel):
    user_id: int
    message: str = Field(..., min_length=1)
    type: NotificationType = NotificationType.SMS
