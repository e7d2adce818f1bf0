# src/core/posts/service.py
"""
Сервис постов.
"""

from __future__ import annotations

from typing import Any

from src.common.constants import ALL_KEY, CacheRegion, EntityKind, TypeMsg
from src.common.exceptions import PostNotFound
from src.common.logger import log_info
from src.core.cascade import CascadeDeleter, CascadeNode, CascadeRegistry, CascadeReport
from src.core.posts.models import OpenPost, Post, PostCreateDTO, PostUpdateDTO
from src.core.posts.repository import PostRepository
from src.core.validation import count_or_default, ensure_exists
from src.infra.cache import ReadThroughCache
from src.infra.event_bus import BaseEventBus
from src.shared.events import Topics

# Регионы кэша, ключ которых - id автора
_USER_REGIONS = (
    CacheRegion.POSTS_BY_USER_ID,
    CacheRegion.OPEN_POSTS_BY_USER_ID,
    CacheRegion.POST_COUNT_BY_USER_ID,
    CacheRegion.POST_URLS_BY_USER_ID,
)


class PostService:
    """
    Сервис постов.

    Создание проверяет существование автора и, если указан файл,
    его наличие в медиа-сервисе. Счётчики в карточке поста не
    ломают чтение.
    """

    def __init__(
        self,
        repo: PostRepository,
        cache: ReadThroughCache,
        event_bus: BaseEventBus,
        cascade: CascadeRegistry,
        users_client: Any,
        media_client: Any,
        likes_client: Any,
        comments_client: Any,
    ) -> None:
        self._repo = repo
        self._cache = cache
        self._event_bus = event_bus
        self._users = users_client
        self._media = media_client
        self._likes = likes_client
        self._comments = comments_client

        cascade.register(CascadeNode(EntityKind.POST, self.verify_post, self._remove, PostNotFound))
        self._deleter = CascadeDeleter(cascade)

    # =========================================================================
    # ЧТЕНИЕ
    # =========================================================================

    async def _get(self, post_id: int) -> Post:
        post = await self._repo.get_by_id(post_id)
        if post is None:
            raise PostNotFound(post_id)
        return post

    async def verify_post(self, post_id: int) -> bool:
        return await self._repo.exists(post_id)

    async def get_user_id_by_post_id(self, post_id: int) -> int:
        """
        Raises:
            PostNotFound: поста нет
        """
        return (await self._get(post_id)).user_id

    async def ids_by_user_id(self, user_id: int) -> list[int]:
        return await self._repo.ids_by_user_id(user_id)

    async def count_by_user_id(self, user_id: int) -> int:
        return await self._cache.get_or_load(
            CacheRegion.POST_COUNT_BY_USER_ID,
            user_id,
            lambda: self._repo.count_by_user_id(user_id),
            int,
        )

    async def urls_by_user_id(self, user_id: int) -> list[str]:
        return await self._cache.get_or_load(
            CacheRegion.POST_URLS_BY_USER_ID,
            user_id,
            lambda: self._repo.urls_by_user_id(user_id),
            list[str],
        )

    async def _open(self, post: Post) -> OpenPost:
        return OpenPost(
            post_id=post.post_id,
            user_id=post.user_id,
            username=await count_or_default(self._users.get_username(post.user_id), None, "имя автора"),
            content=post.content,
            media_url=post.media_url,
            likes=await count_or_default(self._likes.count_post_likes(post.post_id), 0, "число лайков"),
            comments=await count_or_default(self._comments.count_by_post_id(post.post_id), 0, "число комментариев"),
            created_at=post.created_at,
        )

    async def open_post(self, post_id: int) -> OpenPost:
        async def load() -> OpenPost:
            return await self._open(await self._get(post_id))

        return await self._cache.get_or_load(CacheRegion.POST_BY_ID, post_id, load, OpenPost)

    async def open_posts_by_user_id(self, user_id: int) -> list[OpenPost]:
        async def load() -> list[OpenPost]:
            return [await self._open(post) for post in await self._repo.get_by_user_id(user_id)]

        return await self._cache.get_or_load(CacheRegion.OPEN_POSTS_BY_USER_ID, user_id, load, list[OpenPost])

    async def get_posts_by_user_id(self, user_id: int) -> list[Post]:
        return await self._cache.get_or_load(
            CacheRegion.POSTS_BY_USER_ID,
            user_id,
            lambda: self._repo.get_by_user_id(user_id),
            list[Post],
        )

    async def get_all_posts(self) -> list[Post]:
        return await self._cache.get_or_load(CacheRegion.ALL_POSTS, ALL_KEY, self._repo.get_all, list[Post])

    # =========================================================================
    # ЗАПИСЬ
    # =========================================================================

    async def create_post(self, dto: PostCreateDTO) -> Post:
        """
        Создаёт пост и публикует post.created.

        Raises:
            ValidationFailed: автора или файла нет
        """
        await ensure_exists(self._users.verify_user(dto.user_id), f"User with id = {dto.user_id} not found")
        if dto.media_url:
            await ensure_exists(self._media.verify_media(dto.media_url), f"Media with url = {dto.media_url} not found")

        post = await self._repo.create(dto)

        await self._event_bus.publish(Topics.POST_CREATED, post.post_id, post.to_event())
        await self._evict(post)
        await log_info(f"Пост {post.post_id} создан пользователем {post.user_id}", type_msg=TypeMsg.INFO)
        return post

    async def update_post(self, post_id: int, dto: PostUpdateDTO) -> Post:
        current = await self._get(post_id)
        if dto.media_url and dto.media_url != current.media_url:
            await ensure_exists(self._media.verify_media(dto.media_url), f"Media with url = {dto.media_url} not found")

        post = await self._repo.update(post_id, dto)
        if post is None:
            raise PostNotFound(post_id)

        await self._event_bus.publish(Topics.POST_UPDATED, post.post_id, post.to_event())
        await self._evict(post)
        return post

    async def delete_post(self, post_id: int) -> CascadeReport:
        """Удаляет пост вместе с локальными комментариями и лайками."""
        return await self._deleter.delete(EntityKind.POST, post_id)

    async def delete_all_by_user_id(self, user_id: int) -> int:
        """
        Удаляет все посты пользователя (каждый каскадно).

        Returns:
            Количество удалённых постов
        """
        deleted = 0
        for post_id in await self._repo.ids_by_user_id(user_id):
            if not await self._repo.exists(post_id):
                continue
            await self._deleter.delete(EntityKind.POST, post_id)
            deleted += 1

        for region in _USER_REGIONS:
            await self._cache.evict(region, user_id)
        return deleted

    async def _remove(self, post_id: int) -> None:
        post = await self._repo.get_by_id(post_id)
        if post is None:
            return
        await self._repo.delete(post_id)

        await self._event_bus.publish(Topics.POST_DELETED, post.post_id, post.to_event())
        await self._evict(post)
        await log_info(f"Пост {post_id} удалён", type_msg=TypeMsg.DEBUG)

    async def _evict(self, post: Post) -> None:
        await self._cache.evict(CacheRegion.POST_BY_ID, post.post_id)
        for region in _USER_REGIONS:
            await self._cache.evict(region, post.user_id)
        await self._cache.evict_region(CacheRegion.ALL_POSTS)
