# src/core/comments/repository.py
"""
Репозиторий комментариев (comments_schema).
"""

from __future__ import annotations

from typing import Optional

from src.core.comments.models import Comment, CommentCreateDTO
from src.infra.database import DatabaseManager, affected_rows

_COLUMNS = "comment_id, post_id, user_id, content, created_at, updated_at"


class CommentRepository:
    """Репозиторий комментариев."""

    def __init__(self, db: DatabaseManager) -> None:
        self._db = db

    async def get_by_id(self, comment_id: int) -> Optional[Comment]:
        row = await self._db.fetchrow(
            f"SELECT {_COLUMNS} FROM comments_schema.comments WHERE comment_id = $1",
            comment_id,
        )
        return Comment.model_validate(dict(row)) if row else None

    async def exists(self, comment_id: int) -> bool:
        return bool(await self._db.fetchval(
            "SELECT EXISTS(SELECT 1 FROM comments_schema.comments WHERE comment_id = $1)",
            comment_id,
        ))

    async def get_by_post_id(self, post_id: int) -> list[Comment]:
        rows = await self._db.fetch(
            f"SELECT {_COLUMNS} FROM comments_schema.comments WHERE post_id = $1 ORDER BY comment_id",
            post_id,
        )
        return [Comment.model_validate(dict(row)) for row in rows]

    async def ids_by_post_id(self, post_id: int) -> list[int]:
        rows = await self._db.fetch(
            "SELECT comment_id FROM comments_schema.comments WHERE post_id = $1 ORDER BY comment_id",
            post_id,
        )
        return [row["comment_id"] for row in rows]

    async def ids_by_user_id(self, user_id: int) -> list[int]:
        rows = await self._db.fetch(
            "SELECT comment_id FROM comments_schema.comments WHERE user_id = $1 ORDER BY comment_id",
            user_id,
        )
        return [row["comment_id"] for row in rows]

    async def count_by_post_id(self, post_id: int) -> int:
        return await self._db.fetchval(
            "SELECT COUNT(*) FROM comments_schema.comments WHERE post_id = $1",
            post_id,
        )

    async def create(self, dto: CommentCreateDTO) -> Comment:
        row = await self._db.fetchrow(
            f"""
            INSERT INTO comments_schema.comments (post_id, user_id, content)
            VALUES ($1, $2, $3)
            RETURNING {_COLUMNS}
            """,
            dto.post_id,
            dto.user_id,
            dto.content,
        )
        return Comment.model_validate(dict(row))

    async def update(self, comment_id: int, content: str) -> Optional[Comment]:
        row = await self._db.fetchrow(
            f"""
            UPDATE comments_schema.comments
            SET content = $2, updated_at = NOW()
            WHERE comment_id = $1
            RETURNING {_COLUMNS}
            """,
            comment_id,
            content,
        )
        return Comment.model_validate(dict(row)) if row else None

    async def delete(self, comment_id: int) -> bool:
        status = await self._db.execute(
            "DELETE FROM comments_schema.comments WHERE comment_id = $1",
            comment_id,
        )
        return affected_rows(status) > 0
