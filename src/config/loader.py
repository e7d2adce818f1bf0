# src/config/loader.py
"""
Загрузчик конфигурации проекта.
Единственный источник истины — config/config.json.
Секреты и адреса хостов переопределяются из переменных окружения.
"""

from __future__ import annotations

import json
import os
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# =============================================================================
# ОПРЕДЕЛЕНИЕ ПУТЕЙ
# =============================================================================

def get_project_root() -> Path:
    """Возвращает корневую директорию проекта."""
    return Path(__file__).parent.parent.parent


def get_config_path() -> Path:
    """Возвращает путь к файлу конфигурации."""
    return get_project_root() / "config" / "config.json"


def load_config_json() -> dict[str, Any]:
    """Загружает config.json и возвращает словарь."""
    config_path = get_config_path()
    if not config_path.exists():
        raise FileNotFoundError(f"Файл конфигурации не найден: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        return json.load(f)


# =============================================================================
# PYDANTIC МОДЕЛИ КОНФИГУРАЦИИ
# =============================================================================

class SystemSettings(BaseModel):
    """Системные настройки."""
    PROJECT_NAME: str = "social_network"
    VERSION: str = "1.0.0"
    DEBUG: bool = True
    LOG_LEVEL: str = "DEBUG"
    ENVIRONMENT: str = "development"
    RUN_DEV_MODE: bool = True
    COMPONENT_MODE: str = "all"
    RUN_CONSUMERS: bool = True


class DeploymentSettings(BaseModel):
    """Адреса и порты сервисов."""
    USERS_SERVICE_HOST: str = "users_service"
    USERS_SERVICE_PORT: int = 8081
    POSTS_SERVICE_HOST: str = "posts_service"
    POSTS_SERVICE_PORT: int = 8082
    COMMENTS_SERVICE_HOST: str = "comments_service"
    COMMENTS_SERVICE_PORT: int = 8083
    LIKES_SERVICE_HOST: str = "likes_service"
    LIKES_SERVICE_PORT: int = 8084
    MEDIA_SERVICE_HOST: str = "media_service"
    MEDIA_SERVICE_PORT: int = 8085
    SUBSCRIPTIONS_SERVICE_HOST: str = "subscriptions_service"
    SUBSCRIPTIONS_SERVICE_PORT: int = 8086
    NOTIFICATIONS_SERVICE_HOST: str = "notifications_service"
    NOTIFICATIONS_SERVICE_PORT: int = 8087
    STATISTICS_SERVICE_HOST: str = "statistics_service"
    STATISTICS_SERVICE_PORT: int = 8088
    ALL_IN_ONE_PORT: int = 8080

    def host_of(self, component: str) -> str:
        """Хост сервиса по имени компонента."""
        return getattr(self, f"{component.upper()}_SERVICE_HOST")

    def port_of(self, component: str) -> int:
        """Порт сервиса по имени компонента."""
        return getattr(self, f"{component.upper()}_SERVICE_PORT")


class LoggingSettings(BaseModel):
    """Настройки логирования."""
    LOG_LEVEL: str = "DEBUG"
    LOG_TO_FILE: bool = True
    LOG_FILE_PATH: str = "logs/app.log"
    LOG_FORMAT: str = "colored"
    LOG_MAX_BYTES: int = 10485760
    LOG_BACKUP_COUNT: int = 5


class DatabaseSettings(BaseModel):
    """Настройки PostgreSQL."""
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_NAME: str = "social_network"
    DB_USER: str = "postgres"
    DB_PASSWORD: str = ""
    DB_MIN_POOL_SIZE: int = 5
    DB_MAX_POOL_SIZE: int = 20
    DB_COMMAND_TIMEOUT: int = 60
    DB_RETRY_ATTEMPTS: int = 3
    DB_RETRY_DELAY: float = 1.0

    @field_validator("DB_PASSWORD", mode="before")
    @classmethod
    def get_from_env(cls, v: str) -> str:
        """Получает пароль из переменных окружения."""
        if not v:
            return os.getenv("DB_PASSWORD", "")
        return v

    @property
    def dsn(self) -> str:
        """Возвращает DSN для подключения к PostgreSQL."""
        return (
            f"postgresql://{self.DB_USER}:{self.DB_PASSWORD}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        )


class RedisSettings(BaseModel):
    """Настройки Redis."""
    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = 6379
    REDIS_DB: int = 0
    REDIS_PASSWORD: str = ""
    REDIS_NAMESPACE: str = "social"
    REDIS_MAX_CONNECTIONS: int = 50

    @field_validator("REDIS_PASSWORD", mode="before")
    @classmethod
    def get_from_env(cls, v: str) -> str:
        """Получает пароль из переменных окружения."""
        if not v:
            return os.getenv("REDIS_PASSWORD", "")
        return v

    @property
    def url(self) -> str:
        """Возвращает URL для подключения к Redis."""
        auth = f":{self.REDIS_PASSWORD}@" if self.REDIS_PASSWORD else ""
        return f"redis://{auth}{self.REDIS_HOST}:{self.REDIS_PORT}/{self.REDIS_DB}"


class CacheSettings(BaseModel):
    """Настройки кэша чтения и окна дедупликации событий."""
    CACHE_TTL: int = 600
    DEDUPE_ENABLED: bool = True
    DEDUPE_TTL: int = 86400
    DEDUPE_LEASE: int = 60


class RabbitMQSettings(BaseModel):
    """Настройки RabbitMQ и шины событий."""
    RABBITMQ_HOST: str = "localhost"
    RABBITMQ_PORT: int = 5672
    RABBITMQ_USER: str = "guest"
    RABBITMQ_PASSWORD: str = "guest"
    RABBITMQ_VHOST: str = "/"
    RABBITMQ_EXCHANGE: str = "social.events"
    RABBITMQ_PREFETCH_COUNT: int = 10
    TOPIC_PARTITIONS: int = 3
    DELIVERY_RETRIES: int = 3
    DELIVERY_BACKOFF_SECONDS: float = 3.0
    DEAD_LETTER_SUFFIX: str = ".DLT"
    EVENT_BUS_BACKEND: str = "rabbitmq"

    @field_validator("RABBITMQ_PASSWORD", mode="before")
    @classmethod
    def get_from_env(cls, v: str) -> str:
        """Получает пароль из переменных окружения."""
        env_pass = os.getenv("RABBITMQ_PASSWORD", "")
        if env_pass:
            return env_pass
        return v

    @field_validator("EVENT_BUS_BACKEND")
    @classmethod
    def check_backend(cls, v: str) -> str:
        """Допустимы только rabbitmq и memory."""
        if v not in ("rabbitmq", "memory"):
            raise ValueError(f"Неизвестный backend шины событий: {v}")
        return v

    @property
    def url(self) -> str:
        """Возвращает URL для подключения к RabbitMQ."""
        return (
            f"amqp://{self.RABBITMQ_USER}:{self.RABBITMQ_PASSWORD}"
            f"@{self.RABBITMQ_HOST}:{self.RABBITMQ_PORT}{self.RABBITMQ_VHOST}"
        )


class ClientSettings(BaseModel):
    """Настройки синхронных HTTP-вызовов между сервисами."""
    HTTP_TIMEOUT: float = 10.0


class MediaSettings(BaseModel):
    """Настройки хранения медиа."""
    MEDIA_BASE_URL: str = "http://localhost:9000/media"


# =============================================================================
# ГЛАВНЫЙ КЛАСС НАСТРОЕК
# =============================================================================

class Settings(BaseSettings):
    """
    Главный класс настроек приложения.
    Агрегирует все секции конфигурации.
    """
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    system: SystemSettings = Field(default_factory=SystemSettings)
    deployment: DeploymentSettings = Field(default_factory=DeploymentSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    redis: RedisSettings = Field(default_factory=RedisSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    rabbitmq: RabbitMQSettings = Field(default_factory=RabbitMQSettings)
    clients: ClientSettings = Field(default_factory=ClientSettings)
    media: MediaSettings = Field(default_factory=MediaSettings)

    @classmethod
    def from_config_json(cls) -> "Settings":
        """
        Создаёт объект Settings из config.json.
        Секреты и хосты переопределяются из переменных окружения.
        """
        config_data = load_config_json()

        # Фильтруем комментарии (ключи, начинающиеся с _comment_)
        data = {k: v for k, v in config_data.items() if not k.startswith("_comment_")}

        deployment_defaults = DeploymentSettings()
        deployment = {}
        for field_name in DeploymentSettings.model_fields:
            default = getattr(deployment_defaults, field_name)
            value = data.get(field_name, default)
            if field_name.endswith("_HOST"):
                value = os.getenv(field_name, value)
            deployment[field_name] = value

        return cls(
            system=SystemSettings(
                PROJECT_NAME=data.get("PROJECT_NAME", "social_network"),
                VERSION=data.get("VERSION", "1.0.0"),
                DEBUG=data.get("DEBUG", True),
                LOG_LEVEL=data.get("LOG_LEVEL", "DEBUG"),
                ENVIRONMENT=data.get("ENVIRONMENT", "development"),
                RUN_DEV_MODE=data.get("RUN_DEV_MODE", True),
                COMPONENT_MODE=os.getenv("COMPONENT_MODE", data.get("COMPONENT_MODE", "all")),
                RUN_CONSUMERS=os.getenv("RUN_CONSUMERS", str(data.get("RUN_CONSUMERS", True))).lower() in ("1", "true", "yes"),
            ),
            deployment=DeploymentSettings(**deployment),
            logging=LoggingSettings(
                LOG_LEVEL=data.get("LOG_LEVEL", "DEBUG"),
                LOG_TO_FILE=data.get("LOG_TO_FILE", True),
                LOG_FILE_PATH=data.get("LOG_FILE_PATH", "logs/app.log"),
                LOG_FORMAT=data.get("LOG_FORMAT", "json"),
                LOG_MAX_BYTES=data.get("LOG_MAX_BYTES", 10485760),
                LOG_BACKUP_COUNT=data.get("LOG_BACKUP_COUNT", 5),
            ),
            database=DatabaseSettings(
                DB_HOST=os.getenv("DB_HOST", data.get("DB_HOST", "localhost")),
                DB_PORT=int(os.getenv("DB_PORT", data.get("DB_PORT", 5432))),
                DB_NAME=os.getenv("DB_NAME", data.get("DB_NAME", "social_network")),
                DB_USER=os.getenv("DB_USER", data.get("DB_USER", "postgres")),
                DB_PASSWORD=os.getenv("DB_PASSWORD", data.get("DB_PASSWORD", "")),
                DB_MIN_POOL_SIZE=data.get("DB_MIN_POOL_SIZE", 5),
                DB_MAX_POOL_SIZE=data.get("DB_MAX_POOL_SIZE", 20),
                DB_COMMAND_TIMEOUT=data.get("DB_COMMAND_TIMEOUT", 60),
                DB_RETRY_ATTEMPTS=data.get("DB_RETRY_ATTEMPTS", 3),
                DB_RETRY_DELAY=data.get("DB_RETRY_DELAY", 1.0),
            ),
            redis=RedisSettings(
                REDIS_HOST=os.getenv("REDIS_HOST", data.get("REDIS_HOST", "localhost")),
                REDIS_PORT=int(os.getenv("REDIS_PORT", data.get("REDIS_PORT", 6379))),
                REDIS_DB=data.get("REDIS_DB", 0),
                REDIS_PASSWORD=os.getenv("REDIS_PASSWORD", data.get("REDIS_PASSWORD", "")),
                REDIS_NAMESPACE=data.get("REDIS_NAMESPACE", "social"),
                REDIS_MAX_CONNECTIONS=data.get("REDIS_MAX_CONNECTIONS", 50),
            ),
            cache=CacheSettings(
                CACHE_TTL=data.get("CACHE_TTL", 600),
                DEDUPE_ENABLED=data.get("DEDUPE_ENABLED", True),
                DEDUPE_TTL=data.get("DEDUPE_TTL", 86400),
                DEDUPE_LEASE=data.get("DEDUPE_LEASE", 60),
            ),
            rabbitmq=RabbitMQSettings(
                RABBITMQ_HOST=os.getenv("RABBITMQ_HOST", data.get("RABBITMQ_HOST", "localhost")),
                RABBITMQ_PORT=int(os.getenv("RABBITMQ_PORT", data.get("RABBITMQ_PORT", 5672))),
                RABBITMQ_USER=os.getenv("RABBITMQ_USER", data.get("RABBITMQ_USER", "guest")),
                RABBITMQ_PASSWORD=os.getenv("RABBITMQ_PASSWORD", data.get("RABBITMQ_PASSWORD", "guest")),
                RABBITMQ_VHOST=data.get("RABBITMQ_VHOST", "/"),
                RABBITMQ_EXCHANGE=data.get("RABBITMQ_EXCHANGE", "social.events"),
                RABBITMQ_PREFETCH_COUNT=data.get("RABBITMQ_PREFETCH_COUNT", 10),
                TOPIC_PARTITIONS=data.get("TOPIC_PARTITIONS", 3),
                DELIVERY_RETRIES=data.get("DELIVERY_RETRIES", 3),
                DELIVERY_BACKOFF_SECONDS=data.get("DELIVERY_BACKOFF_SECONDS", 3.0),
                DEAD_LETTER_SUFFIX=data.get("DEAD_LETTER_SUFFIX", ".DLT"),
                EVENT_BUS_BACKEND=os.getenv("EVENT_BUS_BACKEND", data.get("EVENT_BUS_BACKEND", "rabbitmq")),
            ),
            clients=ClientSettings(
                HTTP_TIMEOUT=data.get("HTTP_TIMEOUT", 10.0),
            ),
            media=MediaSettings(
                MEDIA_BASE_URL=os.getenv("MEDIA_BASE_URL", data.get("MEDIA_BASE_URL", "http://localhost:9000/media")),
            ),
        )


@lru_cache()
def get_settings() -> Settings:
    """
    Возвращает синглтон настроек приложения.
    Перед чтением config.json подгружает .env, если он есть.
    """
    from dotenv import load_dotenv

    env_path = get_project_root() / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    return Settings.from_config_json()


# Экспорт синглтона для удобного импорта
settings = get_settings()
