"""
Консьюмеры событий шины: по одному на сервис-подписчик.
"""

from src.worker.base import BaseConsumer
from src.worker.comments import CommentsConsumer
from src.worker.likes import LikesConsumer
from src.worker.media import MediaConsumer
from src.worker.notifications import NotificationsConsumer
from src.worker.posts import PostsConsumer
from src.worker.statistics import StatisticsConsumer
from src.worker.subscriptions import SubscriptionsConsumer

__all__ = [
    "BaseConsumer",
    "CommentsConsumer",
    "LikesConsumer",
    "MediaConsumer",
    "NotificationsConsumer",
    "PostsConsumer",
    "StatisticsConsumer",
    "SubscriptionsConsumer",
]
