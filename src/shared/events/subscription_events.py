# src/shared/events/subscription_events.py
"""
События подписок. Топики subscription.created / subscription.deleted.
"""

from __future__ import annotations

from datetime import datetime

from src.shared.events.base import DomainEvent


class SubscriptionEvent(DomainEvent):
    """Подписка follower_id на following_id."""

    entity_field = "subscription_id"
    timestamp_fields = ("created_at",)

    subscription_id: int
    follower_id: int
    following_id: int
    created_at: datetime | None = None
