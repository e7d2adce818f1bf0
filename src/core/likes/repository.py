# src/core/likes/repository.py
"""
Репозиторий лайков (likes_schema).
"""

from __future__ import annotations

from typing import Optional

from src.core.likes.models import Like
from src.infra.database import DatabaseManager, affected_rows

_COLUMNS = "like_id, user_id, post_id, comment_id, created_at"


class LikeRepository:
    """Репозиторий лайков."""

    def __init__(self, db: DatabaseManager) -> None:
        self._db = db

    async def get_by_id(self, like_id: int) -> Optional[Like]:
        row = await self._db.fetchrow(
            f"SELECT {_COLUMNS} FROM likes_schema.likes WHERE like_id = $1",
            like_id,
        )
        return Like.model_validate(dict(row)) if row else None

    async def exists(self, like_id: int) -> bool:
        return bool(await self._db.fetchval(
            "SELECT EXISTS(SELECT 1 FROM likes_schema.likes WHERE like_id = $1)",
            like_id,
        ))

    async def _ids_by(self, column: str, value: int) -> list[int]:
        rows = await self._db.fetch(
            f"SELECT like_id FROM likes_schema.likes WHERE {column} = $1 ORDER BY like_id",
            value,
        )
        return [row["like_id"] for row in rows]

    async def ids_by_post_id(self, post_id: int) -> list[int]:
        return await self._ids_by("post_id", post_id)

    async def ids_by_comment_id(self, comment_id: int) -> list[int]:
        return await self._ids_by("comment_id", comment_id)

    async def ids_by_user_id(self, user_id: int) -> list[int]:
        return await self._ids_by("user_id", user_id)

    async def count_by_post_id(self, post_id: int) -> int:
        return await self._db.fetchval(
            "SELECT COUNT(*) FROM likes_schema.likes WHERE post_id = $1",
            post_id,
        )

    async def count_by_comment_id(self, comment_id: int) -> int:
        return await self._db.fetchval(
            "SELECT COUNT(*) FROM likes_schema.likes WHERE comment_id = $1",
            comment_id,
        )

    async def create(self, user_id: int, post_id: int | None, comment_id: int | None) -> Like:
        row = await self._db.fetchrow(
            f"""
            INSERT INTO likes_schema.likes (user_id, post_id, comment_id)
            VALUES ($1, $2, $3)
            RETURNING {_COLUMNS}
            """,
            user_id,
            post_id,
            comment_id,
        )
        return Like.model_validate(dict(row))

    async def delete(self, like_id: int) -> bool:
        status = await self._db.execute("DELETE FROM likes_schema.likes WHERE like_id = $1", like_id)
        return affected_rows(status) > 0
