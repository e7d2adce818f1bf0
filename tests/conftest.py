"""
Общие фикстуры и настройки для тестов.
"""

from __future__ import annotations

import json
import os
from datetime import date
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock

import pytest

# Устанавливаем переменные окружения перед импортом модулей
os.environ.setdefault("DB_PASSWORD", "test_password")
os.environ.setdefault("REDIS_PASSWORD", "")
os.environ.setdefault("RUN_CONSUMERS", "false")

from src.common.constants import Component  # noqa: E402
from src.infra.event_bus import RetryPolicy  # noqa: E402
from src.infra.memory_bus import InMemoryEventBus  # noqa: E402
from src.services.dependencies import ServiceContainer  # noqa: E402
from tests.fakes import FakeClock, FakeRedis, fake_repositories  # noqa: E402


# =============================================================================
# ФИКСТУРЫ КОНФИГУРАЦИИ
# =============================================================================

@pytest.fixture(scope="session")
def project_root() -> Path:
    """Корневая директория проекта."""
    return Path(__file__).parent.parent


@pytest.fixture(scope="session")
def config_path(project_root: Path) -> Path:
    """Путь к файлу конфигурации."""
    return project_root / "config" / "config.json"


@pytest.fixture
def mock_config() -> dict[str, Any]:
    """Мок конфигурации для тестов."""
    return {
        "PROJECT_NAME": "social_network_test",
        "VERSION": "1.0.0-test",
        "DEBUG": True,
        "LOG_LEVEL": "DEBUG",
        "ENVIRONMENT": "test",
        "COMPONENT_MODE": "posts",
        "RUN_CONSUMERS": False,
        "USERS_SERVICE_HOST": "users.test",
        "USERS_SERVICE_PORT": 9081,
        "ALL_IN_ONE_PORT": 9080,
        "LOG_TO_FILE": False,
        "LOG_FILE_PATH": "logs/test.log",
        "LOG_FORMAT": "json",
        "DB_HOST": "localhost",
        "DB_PORT": 5432,
        "DB_NAME": "social_network_test",
        "DB_USER": "postgres",
        "DB_MIN_POOL_SIZE": 2,
        "DB_MAX_POOL_SIZE": 5,
        "REDIS_HOST": "localhost",
        "REDIS_PORT": 6379,
        "REDIS_DB": 1,
        "REDIS_NAMESPACE": "social_test",
        "CACHE_TTL": 60,
        "DEDUPE_ENABLED": False,
        "DEDUPE_TTL": 120,
        "RABBITMQ_HOST": "localhost",
        "RABBITMQ_EXCHANGE": "social.test",
        "TOPIC_PARTITIONS": 5,
        "DELIVERY_RETRIES": 2,
        "DELIVERY_BACKOFF_SECONDS": 0.5,
        "DEAD_LETTER_SUFFIX": ".DLT",
        "EVENT_BUS_BACKEND": "memory",
        "HTTP_TIMEOUT": 2.5,
        "MEDIA_BASE_URL": "http://files.test/media",
    }


@pytest.fixture
def temp_config_file(tmp_path: Path, mock_config: dict[str, Any]) -> Path:
    """Создаёт временный файл конфигурации."""
    config_file = tmp_path / "config.json"
    config_file.write_text(json.dumps(mock_config, ensure_ascii=False, indent=2))
    return config_file


# =============================================================================
# ФИКСТУРЫ ИНФРАСТРУКТУРЫ (МОКИ)
# =============================================================================

@pytest.fixture
def mock_db() -> AsyncMock:
    """Мок менеджера базы данных."""
    db = AsyncMock()
    db.fetchrow = AsyncMock(return_value=None)
    db.fetch = AsyncMock(return_value=[])
    db.execute = AsyncMock(return_value="DELETE 1")
    db.fetchval = AsyncMock(return_value=None)
    return db


@pytest.fixture
def mock_redis() -> AsyncMock:
    """Мок клиента Redis."""
    redis = AsyncMock()
    redis.get = AsyncMock(return_value=None)
    redis.set = AsyncMock(return_value=True)
    redis.set_nx = AsyncMock(return_value=True)
    redis.delete = AsyncMock(return_value=1)
    redis.delete_pattern = AsyncMock(return_value=0)
    return redis


@pytest.fixture
def mock_event_bus() -> AsyncMock:
    """Мок шины событий."""
    event_bus = AsyncMock()
    event_bus.publish = AsyncMock(return_value=True)
    event_bus.subscribe = AsyncMock(return_value=None)
    return event_bus


# =============================================================================
# ФИКСТУРЫ В ПАМЯТИ
# =============================================================================

@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fake_redis(clock: FakeClock) -> FakeRedis:
    """Redis в памяти с ручными часами."""
    return FakeRedis(clock)


@pytest.fixture
def memory_bus() -> InMemoryEventBus:
    """Шина в памяти без пауз между повторами."""
    return InMemoryEventBus(partitions=3, policy=RetryPolicy(max_retries=2, backoff_seconds=0))


@pytest.fixture
def container(fake_redis: FakeRedis, memory_bus: InMemoryEventBus) -> ServiceContainer:
    """Все компоненты в одном процессе поверх репозиториев в памяти."""
    return ServiceContainer(
        tuple(Component),
        redis=fake_redis,
        event_bus=memory_bus,
        repositories=fake_repositories(),
    )


@pytest.fixture
def today() -> date:
    return date(2024, 5, 17)
