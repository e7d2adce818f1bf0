# src/core/notifications/__init__.py
"""
Домен уведомлений.
"""

from src.core.notifications.models import Notification, NotificationCreateDTO
from src.core.notifications.repository import NotificationRepository
from src.core.notifications.service import NotificationService

__all__ = [
    "Notification",
    "NotificationCreateDTO",
    "NotificationRepository",
    "NotificationService",
]
