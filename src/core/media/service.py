# src/core/media/service.py
"""
Сервис медиа-файлов (только метаданные).
"""

from __future__ import annotations

from typing import Any
from uuid import uuid4

from src.common.constants import CacheRegion, EntityKind, TypeMsg
from src.common.exceptions import MediaNotFound
from src.common.logger import log_info
from src.core.cascade import CascadeDeleter, CascadeNode, CascadeRegistry, CascadeReport
from src.core.media.models import Media, MediaUploadDTO
from src.core.media.repository import MediaRepository
from src.core.validation import ensure_exists
from src.infra.cache import ReadThroughCache
from src.infra.event_bus import BaseEventBus
from src.shared.events import Topics


class MediaService:
    """Сервис медиа."""

    def __init__(
        self,
        repo: MediaRepository,
        cache: ReadThroughCache,
        event_bus: BaseEventBus,
        cascade: CascadeRegistry,
        users_client: Any,
        base_url: str,
    ) -> None:
        """
        Args:
            base_url: Публичный адрес хранилища, к нему добавляется имя объекта
        """
        self._repo = repo
        self._cache = cache
        self._event_bus = event_bus
        self._users = users_client
        self._base_url = base_url.rstrip("/")

        cascade.register(CascadeNode(EntityKind.MEDIA, self._repo.exists, self._remove, MediaNotFound))
        self._deleter = CascadeDeleter(cascade)

    async def get_media(self, media_id: int) -> Media:
        async def load() -> Media:
            media = await self._repo.get_by_id(media_id)
            if media is None:
                raise MediaNotFound(media_id)
            return media

        return await self._cache.get_or_load(CacheRegion.MEDIA, media_id, load, Media)

    async def verify_media(self, url: str) -> bool:
        """Проверка существования файла. В кэш попадает только положительный ответ."""
        return await self._cache.get_or_load(
            CacheRegion.MEDIA_VERIFICATION,
            url,
            lambda: self._repo.exists_by_url(url),
            bool,
            cache_if=bool,
        )

    async def ids_by_user_id(self, user_id: int) -> list[int]:
        return await self._repo.ids_by_user_id(user_id)

    async def urls_by_user_id(self, user_id: int) -> list[str]:
        return await self._repo.urls_by_user_id(user_id)

    async def upload_media(self, dto: MediaUploadDTO) -> Media:
        """
        Регистрирует загруженный файл и публикует media.upload.

        Raises:
            ValidationFailed: владельца нет
        """
        await ensure_exists(self._users.verify_user(dto.user_id), f"User with id = {dto.user_id} not found")

        url = f"{self._base_url}/{uuid4().hex}_{dto.file_name}"
        media = await self._repo.create(dto, url)

        await self._event_bus.publish(Topics.MEDIA_UPLOAD, media.media_id, media.to_event())
        await log_info(f"Файл {media.url} загружен ({media.file_size} байт)", type_msg=TypeMsg.INFO)
        return media

    async def delete_media(self, media_id: int) -> CascadeReport:
        return await self._deleter.delete(EntityKind.MEDIA, media_id)

    async def delete_all_by_user_id(self, user_id: int) -> int:
        deleted = 0
        for media_id in await self._repo.ids_by_user_id(user_id):
            if not await self._repo.exists(media_id):
                continue
            await self._remove(media_id)
            deleted += 1
        return deleted

    async def _remove(self, media_id: int) -> None:
        media = await self._repo.get_by_id(media_id)
        if media is None:
            return
        await self._repo.delete(media_id)

        await self._event_bus.publish(Topics.MEDIA_DELETED, media.media_id, media.to_event())
        await self._cache.evict(CacheRegion.MEDIA, media_id)
        await self._cache.evict(CacheRegion.MEDIA_VERIFICATION, media.url)
