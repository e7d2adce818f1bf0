# src/core/comments/service.py
"""
Сервис комментариев.
"""

from __future__ import annotations

from typing import Any

from src.common.constants import CacheRegion, EntityKind, TypeMsg
from src.common.exceptions import CommentNotFound
from src.common.logger import log_info
from src.core.cascade import CascadeDeleter, CascadeNode, CascadeRegistry, CascadeReport
from src.core.comments.models import Comment, CommentCreateDTO, CommentUpdateDTO
from src.core.comments.repository import CommentRepository
from src.core.validation import ensure_exists
from src.infra.cache import ReadThroughCache
from src.infra.event_bus import BaseEventBus
from src.shared.events import Topics


class CommentService:
    """Сервис комментариев."""

    def __init__(
        self,
        repo: CommentRepository,
        cache: ReadThroughCache,
        event_bus: BaseEventBus,
        cascade: CascadeRegistry,
        users_client: Any,
        posts_client: Any,
    ) -> None:
        self._repo = repo
        self._cache = cache
        self._event_bus = event_bus
        self._users = users_client
        self._posts = posts_client

        cascade.register(CascadeNode(EntityKind.COMMENT, self.verify_comment, self._remove, CommentNotFound))
        self._deleter = CascadeDeleter(cascade)

    async def _get(self, comment_id: int) -> Comment:
        comment = await self._repo.get_by_id(comment_id)
        if comment is None:
            raise CommentNotFound(comment_id)
        return comment

    async def verify_comment(self, comment_id: int) -> bool:
        return await self._repo.exists(comment_id)

    async def get_user_id_by_comment_id(self, comment_id: int) -> int:
        return (await self._get(comment_id)).user_id

    async def ids_by_post_id(self, post_id: int) -> list[int]:
        return await self._repo.ids_by_post_id(post_id)

    async def ids_by_user_id(self, user_id: int) -> list[int]:
        return await self._repo.ids_by_user_id(user_id)

    async def count_by_post_id(self, post_id: int) -> int:
        return await self._cache.get_or_load(
            CacheRegion.COMMENTS_COUNT,
            post_id,
            lambda: self._repo.count_by_post_id(post_id),
            int,
        )

    async def get_all_by_post_id(self, post_id: int) -> list[Comment]:
        return await self._cache.get_or_load(
            CacheRegion.COMMENTS,
            post_id,
            lambda: self._repo.get_by_post_id(post_id),
            list[Comment],
        )

    async def add_comment(self, dto: CommentCreateDTO) -> Comment:
        """
        Добавляет комментарий и публикует comment.created.

        Raises:
            ValidationFailed: автора или поста нет
        """
        await ensure_exists(self._users.verify_user(dto.user_id), f"User with id = {dto.user_id} not found")
        await ensure_exists(self._posts.verify_post(dto.post_id), f"Post with id = {dto.post_id} not found")

        comment = await self._repo.create(dto)

        await self._event_bus.publish(Topics.COMMENT_CREATED, comment.comment_id, comment.to_event())
        await self._evict(comment)
        await log_info(
            f"Комментарий {comment.comment_id} добавлен к посту {comment.post_id}",
            type_msg=TypeMsg.INFO,
        )
        return comment

    async def update_comment(self, comment_id: int, dto: CommentUpdateDTO) -> Comment:
        await self._get(comment_id)
        comment = await self._repo.update(comment_id, dto.content)
        if comment is None:
            raise CommentNotFound(comment_id)

        await self._event_bus.publish(Topics.COMMENT_UPDATED, comment.comment_id, comment.to_event())
        await self._evict(comment)
        return comment

    async def delete_comment(self, comment_id: int) -> CascadeReport:
        """Удаляет комментарий вместе с локальными лайками."""
        return await self._deleter.delete(EntityKind.COMMENT, comment_id)

    async def _delete_all(self, comment_ids: list[int]) -> int:
        deleted = 0
        for comment_id in comment_ids:
            if not await self._repo.exists(comment_id):
                continue
            await self._deleter.delete(EntityKind.COMMENT, comment_id)
            deleted += 1
        return deleted

    async def delete_all_by_post_id(self, post_id: int) -> int:
        """Удаляет все комментарии поста (реакция на post.deleted)."""
        deleted = await self._delete_all(await self._repo.ids_by_post_id(post_id))
        await self._cache.evict(CacheRegion.COMMENTS, post_id)
        await self._cache.evict(CacheRegion.COMMENTS_COUNT, post_id)
        return deleted

    async def delete_all_by_user_id(self, user_id: int) -> int:
        """Удаляет все комментарии пользователя (реакция на user.deleted)."""
        return await self._delete_all(await self._repo.ids_by_user_id(user_id))

    async def _remove(self, comment_id: int) -> None:
        comment = await self._repo.get_by_id(comment_id)
        if comment is None:
            return
        await self._repo.delete(comment_id)

        await self._event_bus.publish(Topics.COMMENT_DELETED, comment.comment_id, comment.to_event())
        await self._evict(comment)

    async def _evict(self, comment: Comment) -> None:
        await self._cache.evict(CacheRegion.COMMENTS, comment.post_id)
        await self._cache.evict(CacheRegion.COMMENTS_COUNT, comment.post_id)
