# src/core/users/service.py
"""
Сервис пользователей.
Регистрация, профиль, публичная карточка и корень каскадного удаления.
"""

from __future__ import annotations

from typing import Any

from src.common.constants import CacheRegion, EntityKind, TypeMsg
from src.common.exceptions import UserNotFound, ValidationFailed
from src.common.logger import log_info
from src.core.cascade import CascadeDeleter, CascadeNode, CascadeRegistry, CascadeReport
from src.core.users.models import OpenUser, User, UserCreateDTO
from src.core.users.repository import UserRepository
from src.core.validation import count_or_default, ensure_exists
from src.infra.cache import ReadThroughCache
from src.infra.event_bus import BaseEventBus
from src.shared.events import Topics


class UserService:
    """
    Сервис пользователей.

    Все изменения: запись в БД -> событие в шину -> очистка кэша.
    """

    def __init__(
        self,
        repo: UserRepository,
        cache: ReadThroughCache,
        event_bus: BaseEventBus,
        cascade: CascadeRegistry,
        posts_client: Any,
        media_client: Any,
        subscriptions_client: Any,
    ) -> None:
        """
        Args:
            repo: Репозиторий пользователей
            cache: Кэш чтения
            event_bus: Шина событий
            cascade: Граф каскадного удаления процесса
            posts_client: Клиент сервиса постов (счётчик и медиа постов)
            media_client: Клиент медиа-сервиса (проверка аватара)
            subscriptions_client: Клиент подписок (счётчики)
        """
        self._repo = repo
        self._cache = cache
        self._event_bus = event_bus
        self._posts = posts_client
        self._media = media_client
        self._subscriptions = subscriptions_client

        cascade.register(CascadeNode(EntityKind.USER, self.verify_user, self._remove, UserNotFound))
        self._deleter = CascadeDeleter(cascade)

    # =========================================================================
    # ЧТЕНИЕ
    # =========================================================================

    async def get_user(self, user_id: int) -> User:
        """
        Raises:
            UserNotFound: пользователя нет
        """
        async def load() -> User:
            user = await self._repo.get_by_id(user_id)
            if user is None:
                raise UserNotFound(user_id)
            return user

        return await self._cache.get_or_load(CacheRegion.USERS, user_id, load, User)

    async def get_username(self, user_id: int) -> str:
        async def load() -> str:
            user = await self._repo.get_by_id(user_id)
            if user is None:
                raise UserNotFound(user_id)
            return user.username

        return await self._cache.get_or_load(CacheRegion.USERNAMES, user_id, load, str)

    async def verify_user(self, user_id: int) -> bool:
        return await self._repo.exists(user_id)

    async def get_users_by_ids(self, user_ids: list[int]) -> list[User]:
        if not user_ids:
            return []
        return await self._repo.get_by_ids(user_ids)

    async def open_user(self, user_id: int) -> OpenUser:
        """
        Публичный профиль.
        Агрегаты из других сервисов не ломают ответ: при ошибке 0 или пустой список.
        """
        user = await self._repo.get_by_id(user_id)
        if user is None:
            raise UserNotFound(user_id)

        return OpenUser(
            username=user.username,
            profile_picture_url=user.profile_picture_url,
            media_posts_url=await count_or_default(self._posts.urls_by_user_id(user_id), [], "медиа постов"),
            count_following=await count_or_default(self._subscriptions.count_following(user_id), 0, "число подписок"),
            count_followers=await count_or_default(self._subscriptions.count_followers(user_id), 0, "число подписчиков"),
            count_posts=await count_or_default(self._posts.count_by_user_id(user_id), 0, "число постов"),
        )

    # =========================================================================
    # ЗАПИСЬ
    # =========================================================================

    async def _validate(self, dto: UserCreateDTO, current: User | None = None) -> None:
        if current is None or dto.username != current.username:
            if await self._repo.exists_by_username(dto.username):
                raise ValidationFailed(f"Username {dto.username} is busy")
        if dto.email and (current is None or dto.email != current.email):
            if await self._repo.exists_by_email(dto.email):
                raise ValidationFailed(f"Email {dto.email} is already taken")
        if dto.profile_picture_url and (current is None or dto.profile_picture_url != current.profile_picture_url):
            await ensure_exists(
                self._media.verify_media(dto.profile_picture_url),
                f"Media with url = {dto.profile_picture_url} not found",
            )

    async def register_user(self, dto: UserCreateDTO) -> User:
        """
        Регистрирует пользователя и публикует user.created.

        Raises:
            ValidationFailed: username или email заняты, аватар не найден
        """
        await self._validate(dto)
        user = await self._repo.create(dto)

        await self._event_bus.publish(Topics.USER_CREATED, user.user_id, user.to_event())
        await log_info(f"Пользователь {user.user_id} зарегистрирован", type_msg=TypeMsg.INFO)
        return user

    async def update_user(self, user_id: int, dto: UserCreateDTO) -> User:
        current = await self._repo.get_by_id(user_id)
        if current is None:
            raise UserNotFound(user_id)

        await self._validate(dto, current)
        user = await self._repo.update(user_id, dto)
        if user is None:
            raise UserNotFound(user_id)

        await self._event_bus.publish(Topics.USER_UPDATED, user.user_id, user.to_event())
        await self._evict(user_id)
        return user

    async def delete_user(self, user_id: int) -> CascadeReport:
        """
        Удаляет пользователя вместе с локальными потомками.
        Остальные сервисы чистят свои данные по user.deleted.
        """
        return await self._deleter.delete(EntityKind.USER, user_id)

    async def _remove(self, user_id: int) -> None:
        user = await self._repo.get_by_id(user_id)
        if user is None:
            return
        await self._repo.delete(user_id)

        await self._event_bus.publish(Topics.USER_DELETED, user.user_id, user.to_event())
        await self._evict(user_id)
        await log_info(f"Пользователь {user_id} удалён", type_msg=TypeMsg.INFO)

    async def _evict(self, user_id: int) -> None:
        await self._cache.evict(CacheRegion.USERS, user_id)
        await self._cache.evict(CacheRegion.USERNAMES, user_id)
