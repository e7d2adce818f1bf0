# src/services/dependencies.py
"""
Dependency Injection для сервисов.

Процесс поднимает один или несколько компонентов. Контейнер строит
репозитории и сервисы только для локальных компонентов, а к остальным
ходит по HTTP. Каскадные связи между типами сущностей регистрируются,
только если и родитель, и потомок живут в этом процессе.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterable

from src.common.constants import Component, EntityKind, TypeMsg
from src.common.logger import log_info
from src.core.cascade import CascadeRegistry
from src.core.comments import CommentRepository, CommentService
from src.core.likes import LikeRepository, LikeService
from src.core.media import MediaRepository, MediaService
from src.core.notifications import NotificationRepository, NotificationService
from src.core.posts import PostRepository, PostService
from src.core.statistics import COUNTER_TABLES, CounterRepository, StatisticService
from src.core.subscriptions import SubscriptionRepository, SubscriptionService
from src.core.users import UserRepository, UserService
from src.infra.api_clients import (
    BaseClient,
    CommentsClient,
    LikesClient,
    MediaClient,
    PostsClient,
    SubscriptionsClient,
    UsersClient,
)
from src.infra.cache import ReadThroughCache
from src.infra.dedupe import ProcessedEventWindow

if TYPE_CHECKING:
    from src.infra.database import DatabaseManager
    from src.infra.event_bus import BaseEventBus
    from src.infra.redis_client import RedisClient


# Сервис-владелец каждого типа сущности
KIND_OWNERS: dict[EntityKind, Component] = {
    EntityKind.USER: Component.USERS,
    EntityKind.POST: Component.POSTS,
    EntityKind.COMMENT: Component.COMMENTS,
    EntityKind.LIKE: Component.LIKES,
    EntityKind.MEDIA: Component.MEDIA,
    EntityKind.SUBSCRIPTION: Component.SUBSCRIPTIONS,
}

# (родитель, потомок, метод сервиса потомка для поиска id по id родителя)
CASCADE_RELATIONS: tuple[tuple[EntityKind, EntityKind, str], ...] = (
    (EntityKind.USER, EntityKind.POST, "ids_by_user_id"),
    (EntityKind.USER, EntityKind.COMMENT, "ids_by_user_id"),
    (EntityKind.USER, EntityKind.LIKE, "ids_by_user_id"),
    (EntityKind.USER, EntityKind.MEDIA, "ids_by_user_id"),
    (EntityKind.USER, EntityKind.SUBSCRIPTION, "ids_by_user_id"),
    (EntityKind.POST, EntityKind.COMMENT, "ids_by_post_id"),
    (EntityKind.POST, EntityKind.LIKE, "ids_by_post_id"),
    (EntityKind.COMMENT, EntityKind.LIKE, "ids_by_comment_id"),
)

HTTP_CLIENTS: dict[Component, type[BaseClient]] = {
    Component.USERS: UsersClient,
    Component.POSTS: PostsClient,
    Component.COMMENTS: CommentsClient,
    Component.LIKES: LikesClient,
    Component.MEDIA: MediaClient,
    Component.SUBSCRIPTIONS: SubscriptionsClient,
}

# Имена методов клиента, которые у сервиса называются иначе
LOCAL_ALIASES: dict[Component, dict[str, str]] = {
    Component.POSTS: {"get_user_id": "get_user_id_by_post_id"},
    Component.COMMENTS: {"get_user_id": "get_user_id_by_comment_id"},
}


class LocalClient:
    """Клиент к сервису этого же процесса: вызовы идут прямо в сервис."""

    def __init__(self, container: ServiceContainer, component: Component) -> None:
        self._container = container
        self._component = component
        self._aliases = LOCAL_ALIASES.get(component, {})

    def __getattr__(self, name: str) -> Any:
        service = self._container.service(self._component)
        return getattr(service, self._aliases.get(name, name))


def build_repositories(db: DatabaseManager) -> dict[Component, Any]:
    """Репозитории всех компонентов поверх одного пула."""
    return {
        Component.USERS: UserRepository(db),
        Component.POSTS: PostRepository(db),
        Component.COMMENTS: CommentRepository(db),
        Component.LIKES: LikeRepository(db),
        Component.MEDIA: MediaRepository(db),
        Component.SUBSCRIPTIONS: SubscriptionRepository(db),
        Component.NOTIFICATIONS: NotificationRepository(db),
        Component.STATISTICS: {
            kind: CounterRepository(db, table) for kind, table in COUNTER_TABLES.items()
        },
    }


class ServiceContainer:
    """Сервисы, клиенты и граф каскада одного процесса."""

    def __init__(
        self,
        components: Iterable[Component],
        redis: RedisClient,
        event_bus: BaseEventBus,
        repositories: dict[Component, Any],
        clients: dict[Component, Any] | None = None,
        cache_ttl: int = 600,
        dedupe_enabled: bool = True,
        dedupe_ttl: int = 86400,
        dedupe_lease: int = 60,
        media_base_url: str = "http://localhost:9000/media",
    ) -> None:
        """
        Args:
            components: Компоненты, которые работают в этом процессе
            redis: Клиент Redis (кэш и окно дедупликации)
            event_bus: Шина событий
            repositories: Репозитории по компонентам
            clients: Готовые клиенты удалённых компонентов (иначе HTTP)
        """
        self.components = frozenset(components)
        self.event_bus = event_bus
        self.cache = ReadThroughCache(redis, ttl=cache_ttl)
        self.dedupe = ProcessedEventWindow(redis, ttl=dedupe_ttl, enabled=dedupe_enabled, lease=dedupe_lease)
        self.cascade = CascadeRegistry()
        self._repos = repositories
        self._media_base_url = media_base_url
        self._clients: dict[Component, Any] = dict(clients or {})
        self._http_clients: list[BaseClient] = []
        self._services: dict[Component, Any] = {}

        for component in Component:
            if component in self.components:
                self._services[component] = self._build(component)
        self._relate()

    def is_local(self, component: Component) -> bool:
        return component in self.components

    def service(self, component: Component) -> Any:
        service = self._services.get(component)
        if service is None:
            raise RuntimeError(f"Компонент {component.value} не запущен в этом процессе")
        return service

    def client(self, component: Component) -> Any:
        """Локальный адаптер или HTTP клиент компонента."""
        client = self._clients.get(component)
        if client is None:
            if self.is_local(component):
                client = LocalClient(self, component)
            else:
                client = HTTP_CLIENTS[component]()
                self._http_clients.append(client)
            self._clients[component] = client
        return client

    def _build(self, component: Component) -> Any:
        repo = self._repos[component]
        common = (self.cache, self.event_bus, self.cascade)

        if component is Component.USERS:
            return UserService(
                repo, *common,
                posts_client=self.client(Component.POSTS),
                media_client=self.client(Component.MEDIA),
                subscriptions_client=self.client(Component.SUBSCRIPTIONS),
            )
        if component is Component.POSTS:
            return PostService(
                repo, *common,
                users_client=self.client(Component.USERS),
                media_client=self.client(Component.MEDIA),
                likes_client=self.client(Component.LIKES),
                comments_client=self.client(Component.COMMENTS),
            )
        if component is Component.COMMENTS:
            return CommentService(
                repo, *common,
                users_client=self.client(Component.USERS),
                posts_client=self.client(Component.POSTS),
            )
        if component is Component.LIKES:
            return LikeService(
                repo, *common,
                users_client=self.client(Component.USERS),
                posts_client=self.client(Component.POSTS),
                comments_client=self.client(Component.COMMENTS),
            )
        if component is Component.MEDIA:
            return MediaService(
                repo, *common,
                users_client=self.client(Component.USERS),
                base_url=self._media_base_url,
            )
        if component is Component.SUBSCRIPTIONS:
            return SubscriptionService(
                repo, self.event_bus, self.cascade,
                users_client=self.client(Component.USERS),
            )
        if component is Component.NOTIFICATIONS:
            return NotificationService(repo, self.cache)
        return StatisticService(repo)

    def _relate(self) -> None:
        for parent, child, finder in CASCADE_RELATIONS:
            parent_owner, child_owner = KIND_OWNERS[parent], KIND_OWNERS[child]
            if self.is_local(parent_owner) and self.is_local(child_owner):
                self.cascade.relate(parent, child, getattr(self._services[child_owner], finder))

    async def close(self) -> None:
        for client in self._http_clients:
            await client.close()
        self._http_clients.clear()


# =============================================================================
# ГЛОБАЛЬНЫЙ КОНТЕЙНЕР ПРОЦЕССА
# =============================================================================

_container: ServiceContainer | None = None


async def init_dependencies(
    components: Iterable[Component],
    db: DatabaseManager | None = None,
    redis: RedisClient | None = None,
    event_bus: BaseEventBus | None = None,
) -> ServiceContainer:
    """Строит контейнер процесса поверх уже подключённой инфраструктуры."""
    global _container
    from src.config import settings
    from src.infra.database import get_db
    from src.infra.event_bus import get_event_bus
    from src.infra.redis_client import get_redis

    _container = ServiceContainer(
        components,
        redis=redis or get_redis(),
        event_bus=event_bus or get_event_bus(),
        repositories=build_repositories(db or get_db()),
        cache_ttl=settings.cache.CACHE_TTL,
        dedupe_enabled=settings.cache.DEDUPE_ENABLED,
        dedupe_ttl=settings.cache.DEDUPE_TTL,
        dedupe_lease=settings.cache.DEDUPE_LEASE,
        media_base_url=settings.media.MEDIA_BASE_URL,
    )
    await log_info(
        f"Зависимости инициализированы: {sorted(c.value for c in _container.components)}, "
        f"каскадных связей {len(_container.cascade.relations)}",
        type_msg=TypeMsg.DEBUG,
    )
    return _container


async def cleanup_dependencies() -> None:
    """Закрывает HTTP клиенты и сбрасывает контейнер."""
    global _container
    if _container is not None:
        await _container.close()
        _container = None


def get_container() -> ServiceContainer:
    if _container is None:
        raise RuntimeError("Зависимости не инициализированы. Вызовите init_dependencies()")
    return _container


def get_user_service() -> UserService:
    return get_container().service(Component.USERS)


def get_post_service() -> PostService:
    return get_container().service(Component.POSTS)


def get_comment_service() -> CommentService:
    return get_container().service(Component.COMMENTS)


def get_like_service() -> LikeService:
    return get_container().service(Component.LIKES)


def get_media_service() -> MediaService:
    return get_container().service(Component.MEDIA)


def get_subscription_service() -> SubscriptionService:
    return get_container().service(Component.SUBSCRIPTIONS)


def get_notification_service() -> NotificationService:
    return get_container().service(Component.NOTIFICATIONS)


def get_statistic_service() -> StatisticService:
    return get_container().service(Component.STATISTICS)
