# src/core/posts/repository.py
"""
Репозиторий постов (posts_schema).
"""

from __future__ import annotations

from typing import Optional

from src.core.posts.models import Post, PostCreateDTO, PostUpdateDTO
from src.infra.database import DatabaseManager, affected_rows

_COLUMNS = "post_id, user_id, content, media_url, created_at, updated_at"


class PostRepository:
    """Репозиторий постов."""

    def __init__(self, db: DatabaseManager) -> None:
        self._db = db

    async def get_by_id(self, post_id: int) -> Optional[Post]:
        row = await self._db.fetchrow(
            f"SELECT {_COLUMNS} FROM posts_schema.posts WHERE post_id = $1",
            post_id,
        )
        return Post.model_validate(dict(row)) if row else None

    async def exists(self, post_id: int) -> bool:
        return bool(await self._db.fetchval(
            "SELECT EXISTS(SELECT 1 FROM posts_schema.posts WHERE post_id = $1)",
            post_id,
        ))

    async def get_by_user_id(self, user_id: int) -> list[Post]:
        rows = await self._db.fetch(
            f"SELECT {_COLUMNS} FROM posts_schema.posts WHERE user_id = $1 ORDER BY post_id",
            user_id,
        )
        return [Post.model_validate(dict(row)) for row in rows]

    async def get_all(self) -> list[Post]:
        rows = await self._db.fetch(f"SELECT {_COLUMNS} FROM posts_schema.posts ORDER BY post_id")
        return [Post.model_validate(dict(row)) for row in rows]

    async def ids_by_user_id(self, user_id: int) -> list[int]:
        rows = await self._db.fetch(
            "SELECT post_id FROM posts_schema.posts WHERE user_id = $1 ORDER BY post_id",
            user_id,
        )
        return [row["post_id"] for row in rows]

    async def count_by_user_id(self, user_id: int) -> int:
        return await self._db.fetchval(
            "SELECT COUNT(*) FROM posts_schema.posts WHERE user_id = $1",
            user_id,
        )

    async def urls_by_user_id(self, user_id: int) -> list[str]:
        rows = await self._db.fetch(
            """
            SELECT media_url FROM posts_schema.posts
            WHERE user_id = $1 AND media_url IS NOT NULL
            ORDER BY post_id
            """,
            user_id,
        )
        return [row["media_url"] for row in rows]

    async def create(self, dto: PostCreateDTO) -> Post:
        row = await self._db.fetchrow(
            f"""
            INSERT INTO posts_schema.posts (user_id, content, media_url)
            VALUES ($1, $2, $3)
            RETURNING {_COLUMNS}
            """,
            dto.user_id,
            dto.content,
            dto.media_url,
        )
        return Post.model_validate(dict(row))

    async def update(self, post_id: int, dto: PostUpdateDTO) -> Optional[Post]:
        row = await self._db.fetchrow(
            f"""
            UPDATE posts_schema.posts
            SET content = $2, media_url = $3, updated_at = NOW()
            WHERE post_id = $1
            RETURNING {_COLUMNS}
            """,
            post_id,
            dto.content,
            dto.media_url,
        )
        return Post.model_validate(dict(row)) if row else None

    async def delete(self, post_id: int) -> bool:
        status = await self._db.execute("DELETE FROM posts_schema.posts WHERE post_id = $1", post_id)
        return affected_rows(status) > 0
