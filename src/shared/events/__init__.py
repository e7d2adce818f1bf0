# src/shared/events/__init__.py
"""
Схемы доменных событий.

События разделены по доменам:
- user_events: пользователи
- content_events: посты, комментарии, лайки
- media_events: файлы
- subscription_events: подписки

registry связывает каждый топик с единственным типом payload.
"""

from src.shared.events.base import DomainEvent, EventT, Topics
from src.shared.events.user_events import UserEvent
from src.shared.events.content_events import PostEvent, CommentEvent, LikeEvent
from src.shared.events.media_events import MediaEvent
from src.shared.events.subscription_events import SubscriptionEvent
from src.shared.events.registry import ALL_TOPICS, TOPIC_PAYLOADS, decode_event, payload_type

__all__ = [
    "DomainEvent",
    "EventT",
    "Topics",
    "UserEvent",
    "PostEvent",
    "CommentEvent",
    "LikeEvent",
    "MediaEvent",
    "SubscriptionEvent",
    "ALL_TOPICS",
    "TOPIC_PAYLOADS",
    "decode_event",
    "payload_type",
]
