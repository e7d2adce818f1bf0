# src/shared/events/user_events.py
"""
События домена пользователей.
Топики: user.created, user.updated, user.deleted.
"""

from __future__ import annotations

from datetime import datetime

from src.shared.events.base import DomainEvent


class UserEvent(DomainEvent):
    """Снимок профиля пользователя."""

    entity_field = "user_id"

    user_id: int
    username: str
    phone_number: str | None = None
    region: str | None = None
    email: str | None = None
    first_name: str | None = None
    surname: str | None = None
    last_name: str | None = None
    profile_picture_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
