# src/infra/api_clients.py
"""
HTTP клиенты для синхронных вызовов между сервисами.

Проверки существования (verify_*) и агрегирующие запросы (count/urls).
Ошибки:
- 404 -> NotFound соответствующей сущности
- любая другая ошибка транспорта или статуса -> TransientDependencyFailure
"""

from __future__ import annotations

from typing import Any

import httpx

from src.common.constants import Component
from src.common.exceptions import (
    CommentNotFound,
    MediaNotFound,
    NotFound,
    PostNotFound,
    TransientDependencyFailure,
    UserNotFound,
)


def service_url(component: Component, prefix: str) -> str:
    """Базовый URL API сервиса по настройкам деплоя."""
    from src.config import settings

    host = settings.deployment.host_of(component.value)
    port = settings.deployment.port_of(component.value)
    return f"http://{host}:{port}/api/v1/{prefix}"


class BaseClient:
    """Базовый клиент: GET с переводом ошибок в доменные исключения."""

    not_found: type[NotFound] = NotFound

    def __init__(self, base_url: str, timeout: float | None = None):
        if timeout is None:
            from src.config import settings
            timeout = settings.clients.HTTP_TIMEOUT
        self.base_url = base_url
        self.timeout = timeout
        self.client = httpx.AsyncClient(base_url=base_url, timeout=timeout)

    async def close(self) -> None:
        await self.client.aclose()

    async def _get(self, path: str, entity_id: Any = None, params: dict[str, Any] | None = None) -> Any:
        try:
            response = await self.client.get(path, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                raise self.not_found(entity_id) from e
            raise TransientDependencyFailure(
                f"{self.base_url}{path}: HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise TransientDependencyFailure(f"{self.base_url}{path}: {e}") from e
        return response.json()


class UsersClient(BaseClient):
    not_found = UserNotFound

    def __init__(self, base_url: str | None = None, timeout: float | None = None):
        super().__init__(base_url or service_url(Component.USERS, "users"), timeout)

    async def verify_user(self, user_id: int) -> bool:
        return bool(await self._get(f"/{user_id}/verify", user_id))

    async def get_username(self, user_id: int) -> str:
        return str(await self._get(f"/{user_id}/username", user_id))


class PostsClient(BaseClient):
    not_found = PostNotFound

    def __init__(self, base_url: str | None = None, timeout: float | None = None):
        super().__init__(base_url or service_url(Component.POSTS, "posts"), timeout)

    async def verify_post(self, post_id: int) -> bool:
        return bool(await self._get(f"/{post_id}/verify", post_id))

    async def get_user_id(self, post_id: int) -> int:
        """Владелец поста."""
        return int(await self._get(f"/{post_id}/user-id", post_id))

    async def count_by_user_id(self, user_id: int) -> int:
        return int(await self._get(f"/user/{user_id}/count", user_id))

    async def urls_by_user_id(self, user_id: int) -> list[str]:
        return list(await self._get(f"/user/{user_id}/media", user_id))


class CommentsClient(BaseClient):
    not_found = CommentNotFound

    def __init__(self, base_url: str | None = None, timeout: float | None = None):
        super().__init__(base_url or service_url(Component.COMMENTS, "comments"), timeout)

    async def verify_comment(self, comment_id: int) -> bool:
        return bool(await self._get(f"/{comment_id}/verify", comment_id))

    async def get_user_id(self, comment_id: int) -> int:
        """Автор комментария."""
        return int(await self._get(f"/{comment_id}/user-id", comment_id))

    async def count_by_post_id(self, post_id: int) -> int:
        return int(await self._get(f"/post/{post_id}/count", post_id))


class LikesClient(BaseClient):
    not_found = PostNotFound

    def __init__(self, base_url: str | None = None, timeout: float | None = None):
        super().__init__(base_url or service_url(Component.LIKES, "likes"), timeout)

    async def count_post_likes(self, post_id: int) -> int:
        return int(await self._get(f"/post/{post_id}/count", post_id))

    async def count_comment_likes(self, comment_id: int) -> int:
        return int(await self._get(f"/comment/{comment_id}/count", comment_id))


class MediaClient(BaseClient):
    not_found = MediaNotFound

    def __init__(self, base_url: str | None = None, timeout: float | None = None):
        super().__init__(base_url or service_url(Component.MEDIA, "media"), timeout)

    async def verify_media(self, url: str) -> bool:
        return bool(await self._get("/verification", url, params={"url": url}))


class SubscriptionsClient(BaseClient):
    not_found = UserNotFound

    def __init__(self, base_url: str | None = None, timeout: float | None = None):
        super().__init__(base_url or service_url(Component.SUBSCRIPTIONS, "subscriptions"), timeout)

    async def count_followers(self, user_id: int) -> int:
        return int(await self._get(f"/{user_id}/followers/count", user_id))

    async def count_following(self, user_id: int) -> int:
        return int(await self._get(f"/{user_id}/following/count", user_id))
