# src/core/media/repository.py
"""
Репозиторий метаданных медиа (media_schema).
"""

from __future__ import annotations

from typing import Optional

from src.core.media.models import Media, MediaUploadDTO
from src.infra.database import DatabaseManager, affected_rows

_COLUMNS = "media_id, user_id, url, file_name, file_size, file_type, upload_date"


class MediaRepository:
    """Репозиторий медиа."""

    def __init__(self, db: DatabaseManager) -> None:
        self._db = db

    async def get_by_id(self, media_id: int) -> Optional[Media]:
        row = await self._db.fetchrow(
            f"SELECT {_COLUMNS} FROM media_schema.media WHERE media_id = $1",
            media_id,
        )
        return Media.model_validate(dict(row)) if row else None

    async def exists(self, media_id: int) -> bool:
        return bool(await self._db.fetchval(
            "SELECT EXISTS(SELECT 1 FROM media_schema.media WHERE media_id = $1)",
            media_id,
        ))

    async def exists_by_url(self, url: str) -> bool:
        return bool(await self._db.fetchval(
            "SELECT EXISTS(SELECT 1 FROM media_schema.media WHERE url = $1)",
            url,
        ))

    async def ids_by_user_id(self, user_id: int) -> list[int]:
        rows = await self._db.fetch(
            "SELECT media_id FROM media_schema.media WHERE user_id = $1 ORDER BY media_id",
            user_id,
        )
        return [row["media_id"] for row in rows]

    async def urls_by_user_id(self, user_id: int) -> list[str]:
        rows = await self._db.fetch(
            "SELECT url FROM media_schema.media WHERE user_id = $1 ORDER BY media_id",
            user_id,
        )
        return [row["url"] for row in rows]

    async def create(self, dto: MediaUploadDTO, url: str) -> Media:
        row = await self._db.fetchrow(
            f"""
            INSERT INTO media_schema.media (user_id, url, file_name, file_size, file_type)
            VALUES ($1, $2, $3, $4, $5)
            RETURNING {_COLUMNS}
            """,
            dto.user_id,
            url,
            dto.file_name,
            dto.file_size,
            dto.file_type,
        )
        return Media.model_validate(dict(row))

    async def delete(self, media_id: int) -> bool:
        status = await self._db.execute("DELETE FROM media_schema.media WHERE media_id = $1", media_id)
        return affected_rows(status) > 0
