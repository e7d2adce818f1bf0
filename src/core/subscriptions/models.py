# src/core/subscriptions/models.py
"""
Модели подписок.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from src.shared.events import SubscriptionEvent


class Subscription(BaseModel):
    """Подписка follower_id на following_id."""

    model_config = ConfigDict(from_attributes=True)

    subscription_id: int = Field(..., description="ID подписки")
    follower_id: int = Field(..., description="Кто подписался")
    following_id: int = Field(..., description="На кого подписался")
    created_at: Optional[datetime] = None

    def to_event(self) -> SubscriptionEvent:
        return SubscriptionEvent.model_validate(self.model_dump())


class SubscriptionCreateDTO(BaseModel):
    follower_id: int
    following_id: int
