# src/shared/events/media_events.py
"""
События медиа. Топики media.upload / media.deleted.
"""

from __future__ import annotations

from datetime import datetime

from src.shared.events.base import DomainEvent


class MediaEvent(DomainEvent):
    """Метаданные загруженного файла."""

    entity_field = "media_id"
    timestamp_fields = ("upload_date",)

    media_id: int
    user_id: int
    url: str
    file_name: str | None = None
    file_size: float = 0.0
    file_type: str | None = None
    upload_date: datetime | None = None
