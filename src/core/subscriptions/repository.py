# src/core/subscriptions/repository.py
"""
Репозиторий подписок (subscriptions_schema).
"""

from __future__ import annotations

from typing import Optional

from src.core.subscriptions.models import Subscription
from src.infra.database import DatabaseManager, affected_rows

_COLUMNS = "subscription_id, follower_id, following_id, created_at"


class SubscriptionRepository:
    """Репозиторий подписок."""

    def __init__(self, db: DatabaseManager) -> None:
        self._db = db

    async def get_by_id(self, subscription_id: int) -> Optional[Subscription]:
        row = await self._db.fetchrow(
            f"SELECT {_COLUMNS} FROM subscriptions_schema.subscriptions WHERE subscription_id = $1",
            subscription_id,
        )
        return Subscription.model_validate(dict(row)) if row else None

    async def get_by_pair(self, follower_id: int, following_id: int) -> Optional[Subscription]:
        row = await self._db.fetchrow(
            f"""
            SELECT {_COLUMNS} FROM subscriptions_schema.subscriptions
            WHERE follower_id = $1 AND following_id = $2
            """,
            follower_id,
            following_id,
        )
        return Subscription.model_validate(dict(row)) if row else None

    async def exists(self, subscription_id: int) -> bool:
        return bool(await self._db.fetchval(
            "SELECT EXISTS(SELECT 1 FROM subscriptions_schema.subscriptions WHERE subscription_id = $1)",
            subscription_id,
        ))

    async def ids_by_user_id(self, user_id: int) -> list[int]:
        """Подписки пользователя в обе стороны."""
        rows = await self._db.fetch(
            """
            SELECT subscription_id FROM subscriptions_schema.subscriptions
            WHERE follower_id = $1 OR following_id = $1
            ORDER BY subscription_id
            """,
            user_id,
        )
        return [row["subscription_id"] for row in rows]

    async def follower_ids(self, user_id: int) -> list[int]:
        rows = await self._db.fetch(
            "SELECT follower_id FROM subscriptions_schema.subscriptions WHERE following_id = $1 ORDER BY subscription_id",
            user_id,
        )
        return [row["follower_id"] for row in rows]

    async def following_ids(self, user_id: int) -> list[int]:
        rows = await self._db.fetch(
            "SELECT following_id FROM subscriptions_schema.subscriptions WHERE follower_id = $1 ORDER BY subscription_id",
            user_id,
        )
        return [row["following_id"] for row in rows]

    async def count_followers(self, user_id: int) -> int:
        return await self._db.fetchval(
            "SELECT COUNT(*) FROM subscriptions_schema.subscriptions WHERE following_id = $1",
            user_id,
        )

    async def count_following(self, user_id: int) -> int:
        return await self._db.fetchval(
            "SELECT COUNT(*) FROM subscriptions_schema.subscriptions WHERE follower_id = $1",
            user_id,
        )

    async def create(self, follower_id: int, following_id: int) -> Subscription:
        row = await self._db.fetchrow(
            f"""
            INSERT INTO subscriptions_schema.subscriptions (follower_id, following_id)
            VALUES ($1, $2)
            RETURNING {_COLUMNS}
            """,
            follower_id,
            following_id,
        )
        return Subscription.model_validate(dict(row))

    async def delete(self, subscription_id: int) -> bool:
        status = await self._db.execute(
            "DELETE FROM subscriptions_schema.subscriptions WHERE subscription_id = $1",
            subscription_id,
        )
        return affected_rows(status) > 0
