# src/core/likes/service.py
"""
Сервис лайков.
Топик события выбирается по цели лайка: post.like.* или comment.like.*.
"""

from __future__ import annotations

from typing import Any

from src.common.constants import CacheRegion, EntityKind
from src.common.exceptions import LikeNotFound
from src.common.logger import log_info
from src.core.cascade import CascadeDeleter, CascadeNode, CascadeRegistry, CascadeReport
from src.core.likes.models import CommentLikeDTO, Like, PostLikeDTO
from src.core.likes.repository import LikeRepository
from src.core.validation import ensure_exists
from src.infra.cache import ReadThroughCache
from src.infra.event_bus import BaseEventBus


class LikeService:
    """Сервис лайков."""

    def __init__(
        self,
        repo: LikeRepository,
        cache: ReadThroughCache,
        event_bus: BaseEventBus,
        cascade: CascadeRegistry,
        users_client: Any,
        posts_client: Any,
        comments_client: Any,
    ) -> None:
        self._repo = repo
        self._cache = cache
        self._event_bus = event_bus
        self._users = users_client
        self._posts = posts_client
        self._comments = comments_client

        cascade.register(CascadeNode(EntityKind.LIKE, self._repo.exists, self._remove, LikeNotFound))
        self._deleter = CascadeDeleter(cascade)

    async def ids_by_post_id(self, post_id: int) -> list[int]:
        return await self._repo.ids_by_post_id(post_id)

    async def ids_by_comment_id(self, comment_id: int) -> list[int]:
        return await self._repo.ids_by_comment_id(comment_id)

    async def ids_by_user_id(self, user_id: int) -> list[int]:
        return await self._repo.ids_by_user_id(user_id)

    async def count_post_likes(self, post_id: int) -> int:
        return await self._cache.get_or_load(
            CacheRegion.POST_LIKE_SUM,
            post_id,
            lambda: self._repo.count_by_post_id(post_id),
            int,
        )

    async def count_comment_likes(self, comment_id: int) -> int:
        return await self._cache.get_or_load(
            CacheRegion.COMMENT_LIKE_SUM,
            comment_id,
            lambda: self._repo.count_by_comment_id(comment_id),
            int,
        )

    async def like_post(self, dto: PostLikeDTO) -> Like:
        """
        Raises:
            ValidationFailed: пользователя или поста нет
        """
        await ensure_exists(self._users.verify_user(dto.user_id), f"User with id = {dto.user_id} not found")
        await ensure_exists(self._posts.verify_post(dto.post_id), f"Post with id = {dto.post_id} not found")
        return await self._create(dto.user_id, post_id=dto.post_id)

    async def like_comment(self, dto: CommentLikeDTO) -> Like:
        """
        Raises:
            ValidationFailed: пользователя или комментария нет
        """
        await ensure_exists(self._users.verify_user(dto.user_id), f"User with id = {dto.user_id} not found")
        await ensure_exists(
            self._comments.verify_comment(dto.comment_id),
            f"Comment with id = {dto.comment_id} not found",
        )
        return await self._create(dto.user_id, comment_id=dto.comment_id)

    async def _create(self, user_id: int, post_id: int | None = None, comment_id: int | None = None) -> Like:
        like = await self._repo.create(user_id, post_id, comment_id)

        await self._event_bus.publish(like.created_topic, like.like_id, like.to_event())
        await self._evict(like)
        return like

    async def delete_like(self, like_id: int) -> CascadeReport:
        """
        Raises:
            LikeNotFound: лайка нет
        """
        return await self._deleter.delete(EntityKind.LIKE, like_id)

    async def _delete_all(self, like_ids: list[int]) -> int:
        deleted = 0
        for like_id in like_ids:
            if not await self._repo.exists(like_id):
                continue
            await self._remove(like_id)
            deleted += 1
        return deleted

    async def delete_all_by_post_id(self, post_id: int) -> int:
        deleted = await self._delete_all(await self._repo.ids_by_post_id(post_id))
        if deleted:
            await log_info(f"Удалено {deleted} лайков поста {post_id}")
        return deleted

    async def delete_all_by_comment_id(self, comment_id: int) -> int:
        return await self._delete_all(await self._repo.ids_by_comment_id(comment_id))

    async def delete_all_by_user_id(self, user_id: int) -> int:
        return await self._delete_all(await self._repo.ids_by_user_id(user_id))

    async def _remove(self, like_id: int) -> None:
        like = await self._repo.get_by_id(like_id)
        if like is None:
            return
        await self._repo.delete(like_id)

        await self._event_bus.publish(like.deleted_topic, like.like_id, like.to_event())
        await self._evict(like)

    async def _evict(self, like: Like) -> None:
        if like.is_post_like:
            await self._cache.evict(CacheRegion.POST_LIKE_SUM, like.post_id)
        else:
            await self._cache.evict(CacheRegion.COMMENT_LIKE_SUM, like.comment_id)
