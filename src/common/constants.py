# src/common/constants.py
"""
Общие константы и перечисления.
"""

from enum import Enum


class TypeMsg(str, Enum):
    """Типы сообщений для логирования."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class Component(str, Enum):
    """Компоненты системы (сервисы и процессы)."""
    USERS = "users"
    POSTS = "posts"
    COMMENTS = "comments"
    LIKES = "likes"
    MEDIA = "media"
    SUBSCRIPTIONS = "subscriptions"
    NOTIFICATIONS = "notifications"
    STATISTICS = "statistics"


class EntityKind(str, Enum):
    """Типы сущностей, участвующих в каскадном удалении."""
    USER = "user"
    POST = "post"
    COMMENT = "comment"
    LIKE = "like"
    MEDIA = "media"
    SUBSCRIPTION = "subscription"


class NotificationType(str, Enum):
    """Каналы доставки уведомлений."""
    SMS = "SMS"


class CacheRegion:
    """Имена регионов кэша (внутренний контракт сервиса-владельца)."""
    # Users
    USERS = "users"
    USERNAMES = "usernames"

    # Posts
    POST_BY_ID = "postById"
    POSTS_BY_USER_ID = "postsByUserId"
    OPEN_POSTS_BY_USER_ID = "openPostsByUserId"
    POST_COUNT_BY_USER_ID = "postCountByUserId"
    POST_URLS_BY_USER_ID = "postUrlsByUserId"
    ALL_POSTS = "allPosts"

    # Comments
    COMMENTS = "comments"
    COMMENTS_COUNT = "commentsCount"

    # Likes
    POST_LIKE_SUM = "postLikeSum"
    COMMENT_LIKE_SUM = "commentLikeSum"

    # Media
    MEDIA = "mediaCache"
    MEDIA_VERIFICATION = "mediaVerification"

    # Notifications
    NOTIFICATIONS = "notifications"
    NOTIFICATION = "notification"


# Ключ единственной записи в регионах без параметров
ALL_KEY = "all"
