# src/common/exceptions.py
"""
Иерархия исключений приложения.

Делится на две группы:
- доменные ошибки (NotFound, ValidationFailed, TransientDependencyFailure),
  которые пробрасываются вызывающему коду;
- ошибки доставки (RetryableDeliveryFailure, NonRetryableDeliveryFailure),
  по которым шина событий решает, повторять сообщение или отправить в DLT.
"""

from __future__ import annotations


class SocialNetworkError(Exception):
    """Базовое исключение приложения."""


# =============================================================================
# ДОМЕННЫЕ ОШИБКИ
# =============================================================================

class NotFound(SocialNetworkError):
    """Сущность не найдена."""

    entity: str = "Entity"

    def __init__(self, entity_id: object, message: str | None = None) -> None:
        self.entity_id = entity_id
        super().__init__(message or f"{self.entity} with id = {entity_id} not found")


class UserNotFound(NotFound):
    entity = "User"


class PostNotFound(NotFound):
    entity = "Post"


class CommentNotFound(NotFound):
    entity = "Comment"


class LikeNotFound(NotFound):
    entity = "Like"


class MediaNotFound(NotFound):
    entity = "Media"


class SubscriptionNotFound(NotFound):
    entity = "Subscription"


class NotificationNotFound(NotFound):
    entity = "Notification"


class StatisticNotFound(NotFound):
    entity = "Statistic"


class ValidationFailed(SocialNetworkError):
    """Проверка перед записью не пройдена (например, зависимая сущность отсутствует)."""


class TransientDependencyFailure(SocialNetworkError):
    """Удалённый вызов завершился ошибкой, не означающей «не найдено»."""


# =============================================================================
# ОШИБКИ ДОСТАВКИ
# =============================================================================

class DeliveryFailure(SocialNetworkError):
    """Базовая ошибка обработки сообщения шины."""


class RetryableDeliveryFailure(DeliveryFailure):
    """Сообщение нужно доставить повторно."""


class NonRetryableDeliveryFailure(DeliveryFailure):
    """Сообщение нельзя обработать: сразу в dead-letter топик."""
