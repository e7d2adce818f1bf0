# src/core/users/repository.py
"""
Репозиторий пользователей (users_schema).
"""

from __future__ import annotations

from typing import Optional

from src.core.users.models import User, UserCreateDTO
from src.infra.database import DatabaseManager, affected_rows

_COLUMNS = """
    user_id, username, email, phone_number, region,
    first_name, surname, last_name, profile_picture_url,
    created_at, updated_at
"""


class UserRepository:
    """Репозиторий пользователей."""

    def __init__(self, db: DatabaseManager) -> None:
        """
        Args:
            db: Менеджер базы данных (Dependency Injection)
        """
        self._db = db

    async def get_by_id(self, user_id: int) -> Optional[User]:
        row = await self._db.fetchrow(
            f"SELECT {_COLUMNS} FROM users_schema.users WHERE user_id = $1",
            user_id,
        )
        return User.model_validate(dict(row)) if row else None

    async def get_by_ids(self, user_ids: list[int]) -> list[User]:
        rows = await self._db.fetch(
            f"SELECT {_COLUMNS} FROM users_schema.users WHERE user_id = ANY($1::bigint[]) ORDER BY user_id",
            user_ids,
        )
        return [User.model_validate(dict(row)) for row in rows]

    async def exists(self, user_id: int) -> bool:
        return bool(await self._db.fetchval(
            "SELECT EXISTS(SELECT 1 FROM users_schema.users WHERE user_id = $1)",
            user_id,
        ))

    async def exists_by_username(self, username: str) -> bool:
        return bool(await self._db.fetchval(
            "SELECT EXISTS(SELECT 1 FROM users_schema.users WHERE username = $1)",
            username,
        ))

    async def exists_by_email(self, email: str) -> bool:
        return bool(await self._db.fetchval(
            "SELECT EXISTS(SELECT 1 FROM users_schema.users WHERE email = $1)",
            email,
        ))

    async def create(self, dto: UserCreateDTO) -> User:
        """
        Создаёт пользователя.

        Returns:
            Созданный пользователь (с id и временными метками из БД)
        """
        row = await self._db.fetchrow(
            f"""
            INSERT INTO users_schema.users (
                username, email, phone_number, region,
                first_name, surname, last_name, profile_picture_url
            )
            VALUES ($1, $2, $3, $4, $5, $6, $7, $8)
            RETURNING {_COLUMNS}
            """,
            dto.username,
            dto.email,
            dto.phone_number,
            dto.region,
            dto.first_name,
            dto.surname,
            dto.last_name,
            dto.profile_picture_url,
        )
        return User.model_validate(dict(row))

    async def update(self, user_id: int, dto: UserCreateDTO) -> Optional[User]:
        row = await self._db.fetchrow(
            f"""
            UPDATE users_schema.users
            SET username = $2, email = $3, phone_number = $4, region = $5,
                first_name = $6, surname = $7, last_name = $8,
                profile_picture_url = $9, updated_at = NOW()
            WHERE user_id = $1
            RETURNING {_COLUMNS}
            """,
            user_id,
            dto.username,
            dto.email,
            dto.phone_number,
            dto.region,
            dto.first_name,
            dto.surname,
            dto.last_name,
            dto.profile_picture_url,
        )
        return User.model_validate(dict(row)) if row else None

    async def delete(self, user_id: int) -> bool:
        status = await self._db.execute("DELETE FROM users_schema.users WHERE user_id = $1", user_id)
        return affected_rows(status) > 0
