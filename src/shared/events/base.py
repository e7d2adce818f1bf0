# src/shared/events/base.py
"""
Базовые классы для доменных событий.

Событие — неизменяемый снимок сущности после коммита локальной записи.
Поля сериализуются в camelCase: это проводной контракт, от которого
зависят другие сервисы. Метаданных доставки (sequence, idempotency key)
в payload нет.
"""

from __future__ import annotations

import hashlib
from datetime import datetime
from typing import ClassVar, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class Topics:
    """Имена топиков: <entity>.<lifecycle>."""
    # Пользователи
    USER_CREATED = "user.created"
    USER_UPDATED = "user.updated"
    USER_DELETED = "user.deleted"

    # Посты
    POST_CREATED = "post.created"
    POST_UPDATED = "post.updated"
    POST_DELETED = "post.deleted"

    # Комментарии
    COMMENT_CREATED = "comment.created"
    COMMENT_UPDATED = "comment.updated"
    COMMENT_DELETED = "comment.deleted"

    # Лайки
    POST_LIKE_CREATED = "post.like.created"
    POST_LIKE_DELETED = "post.like.deleted"
    COMMENT_LIKE_CREATED = "comment.like.created"
    COMMENT_LIKE_DELETED = "comment.like.deleted"

    # Медиа
    MEDIA_UPLOAD = "media.upload"
    MEDIA_DELETED = "media.deleted"

    # Подписки
    SUBSCRIPTION_CREATED = "subscription.created"
    SUBSCRIPTION_DELETED = "subscription.deleted"

    @staticmethod
    def dead_letter(topic: str, suffix: str = ".DLT") -> str:
        """Имя dead-letter топика."""
        return f"{topic}{suffix}"


class DomainEvent(BaseModel):
    """
    Базовый класс для всех доменных событий.

    Подклассы задают:
    - entity_field: имя поля с id изменившейся сущности (ключ партиции)
    - timestamp_fields: поля времени, входящие в идентификатор события
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        extra="ignore",
    )

    entity_field: ClassVar[str] = ""
    timestamp_fields: ClassVar[tuple[str, ...]] = ("created_at", "updated_at")

    @property
    def entity_id(self) -> int:
        """Id сущности, которой принадлежит событие."""
        return getattr(self, self.entity_field)

    @property
    def partition_key(self) -> int:
        """Ключ партиции: всегда id изменившейся сущности."""
        return self.entity_id

    def to_json(self) -> str:
        """Сериализует событие в JSON (camelCase)."""
        return self.model_dump_json(by_alias=True)

    @classmethod
    def from_json(cls, data: str | bytes) -> "DomainEvent":
        """Десериализует событие из JSON."""
        return cls.model_validate_json(data)

    def event_id(self, topic: str) -> str:
        """
        Стабильный идентификатор события для окна дедупликации.
        Хэш топика, id сущности и её временных меток: повторная доставка
        того же факта даёт тот же id.
        """
        parts = [topic, str(self.entity_id)]
        for field_name in self.timestamp_fields:
            value = getattr(self, field_name, None)
            parts.append(value.isoformat() if isinstance(value, datetime) else str(value))
        return hashlib.sha256("|".join(parts).encode()).hexdigest()[:32]


# Тип для generic-событий
EventT = TypeVar("EventT", bound=DomainEvent)
