# src/core/subscriptions/__init__.py
"""
Домен подписок.
"""

from src.core.subscriptions.models import Subscription, SubscriptionCreateDTO
from src.core.subscriptions.repository import SubscriptionRepository
from src.core.subscriptions.service import SubscriptionService

__all__ = [
    "Subscription",
    "SubscriptionCreateDTO",
    "SubscriptionRepository",
    "SubscriptionService",
]
