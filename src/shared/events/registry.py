# src/shared/events/registry.py
"""
Реестр «топик -> тип payload».

Каждый топик несёт ровно один тип события. Консьюмеры декодируют
сообщение по этому реестру, а не по содержимому.
"""

from __future__ import annotations

from pydantic import ValidationError

from src.common.exceptions import NonRetryableDeliveryFailure
from src.shared.events.base import DomainEvent, Topics
from src.shared.events.content_events import CommentEvent, LikeEvent, PostEvent
from src.shared.events.media_events import MediaEvent
from src.shared.events.subscription_events import SubscriptionEvent
from src.shared.events.user_events import UserEvent


TOPIC_PAYLOADS: dict[str, type[DomainEvent]] = {
    Topics.USER_CREATED: UserEvent,
    Topics.USER_UPDATED: UserEvent,
    Topics.USER_DELETED: UserEvent,
    Topics.POST_CREATED: PostEvent,
    Topics.POST_UPDATED: PostEvent,
    Topics.POST_DELETED: PostEvent,
    Topics.COMMENT_CREATED: CommentEvent,
    Topics.COMMENT_UPDATED: CommentEvent,
    Topics.COMMENT_DELETED: CommentEvent,
    Topics.POST_LIKE_CREATED: LikeEvent,
    Topics.POST_LIKE_DELETED: LikeEvent,
    Topics.COMMENT_LIKE_CREATED: LikeEvent,
    Topics.COMMENT_LIKE_DELETED: LikeEvent,
    Topics.MEDIA_UPLOAD: MediaEvent,
    Topics.MEDIA_DELETED: MediaEvent,
    Topics.SUBSCRIPTION_CREATED: SubscriptionEvent,
    Topics.SUBSCRIPTION_DELETED: SubscriptionEvent,
}

ALL_TOPICS: tuple[str, ...] = tuple(TOPIC_PAYLOADS)


def payload_type(topic: str) -> type[DomainEvent]:
    """Тип события для топика (KeyError для неизвестного топика)."""
    return TOPIC_PAYLOADS[topic]


def decode_event(topic: str, raw: str | bytes) -> DomainEvent:
    """
    Декодирует payload по типу топика.

    Raises:
        NonRetryableDeliveryFailure: неизвестный топик или битый payload
    """
    event_type = TOPIC_PAYLOADS.get(topic)
    if event_type is None:
        raise NonRetryableDeliveryFailure(f"Неизвестный топик: {topic}")
    try:
        return event_type.from_json(raw)
    except ValidationError as e:
        raise NonRetryableDeliveryFailure(f"Не удалось декодировать {topic}: {e}") from e
