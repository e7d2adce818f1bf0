"""
Инфраструктурный слой.
Работа с внешними сервисами: PostgreSQL, Redis, RabbitMQ, HTTP API соседей.
"""

from src.infra.database import DatabaseManager, get_db
from src.infra.redis_client import RedisClient, get_redis
from src.infra.event_bus import BaseEventBus, EventBus, EventRecord, RetryPolicy, get_event_bus
from src.infra.memory_bus import InMemoryEventBus
from src.infra.cache import ReadThroughCache
from src.infra.dedupe import ProcessedEventWindow

__all__ = [
    "DatabaseManager",
    "get_db",
    "RedisClient",
    "get_redis",
    "BaseEventBus",
    "EventBus",
    "EventRecord",
    "RetryPolicy",
    "get_event_bus",
    "InMemoryEventBus",
    "ReadThroughCache",
    "ProcessedEventWindow",
]
