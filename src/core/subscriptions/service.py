# src/core/subscriptions/service.py
"""
Сервис подписок.
"""

from __future__ import annotations

from typing import Any

from src.common.constants import EntityKind
from src.common.exceptions import SubscriptionNotFound, ValidationFailed
from src.core.cascade import CascadeDeleter, CascadeNode, CascadeRegistry, CascadeReport
from src.core.subscriptions.models import Subscription, SubscriptionCreateDTO
from src.core.subscriptions.repository import SubscriptionRepository
from src.core.validation import ensure_exists
from src.infra.event_bus import BaseEventBus
from src.shared.events import Topics


class SubscriptionService:
    """Сервис подписок."""

    def __init__(
        self,
        repo: SubscriptionRepository,
        event_bus: BaseEventBus,
        cascade: CascadeRegistry,
        users_client: Any,
    ) -> None:
        self._repo = repo
        self._event_bus = event_bus
        self._users = users_client

        cascade.register(
            CascadeNode(EntityKind.SUBSCRIPTION, self._repo.exists, self._remove, SubscriptionNotFound)
        )
        self._deleter = CascadeDeleter(cascade)

    async def ids_by_user_id(self, user_id: int) -> list[int]:
        return await self._repo.ids_by_user_id(user_id)

    async def count_followers(self, user_id: int) -> int:
        return await self._repo.count_followers(user_id)

    async def count_following(self, user_id: int) -> int:
        return await self._repo.count_following(user_id)

    async def get_followers(self, user_id: int) -> list[int]:
        return await self._repo.follower_ids(user_id)

    async def get_following(self, user_id: int) -> list[int]:
        return await self._repo.following_ids(user_id)

    async def subscribe(self, dto: SubscriptionCreateDTO) -> Subscription:
        """
        Raises:
            ValidationFailed: подписка на себя, повторная подписка, пользователя нет
        """
        if dto.follower_id == dto.following_id:
            raise ValidationFailed("You cannot subscribe to yourself")
        await ensure_exists(self._users.verify_user(dto.follower_id), f"User with id = {dto.follower_id} not found")
        await ensure_exists(self._users.verify_user(dto.following_id), f"User with id = {dto.following_id} not found")
        if await self._repo.get_by_pair(dto.follower_id, dto.following_id) is not None:
            raise ValidationFailed(f"User {dto.follower_id} is already subscribed to {dto.following_id}")

        subscription = await self._repo.create(dto.follower_id, dto.following_id)
        await self._event_bus.publish(
            Topics.SUBSCRIPTION_CREATED,
            subscription.subscription_id,
            subscription.to_event(),
        )
        return subscription

    async def unsubscribe(self, follower_id: int, following_id: int) -> CascadeReport:
        subscription = await self._repo.get_by_pair(follower_id, following_id)
        if subscription is None:
            raise SubscriptionNotFound(
                f"{follower_id}->{following_id}",
                f"User {follower_id} is not subscribed to {following_id}",
            )
        return await self._deleter.delete(EntityKind.SUBSCRIPTION, subscription.subscription_id)

    async def delete_subscription(self, subscription_id: int) -> CascadeReport:
        return await self._deleter.delete(EntityKind.SUBSCRIPTION, subscription_id)

    async def delete_all_by_user_id(self, user_id: int) -> int:
        """Удаляет подписки пользователя и подписки на него."""
        deleted = 0
        for subscription_id in await self._repo.ids_by_user_id(user_id):
            if not await self._repo.exists(subscription_id):
                continue
            await self._remove(subscription_id)
            deleted += 1
        return deleted

    async def _remove(self, subscription_id: int) -> None:
        subscription = await self._repo.get_by_id(subscription_id)
        if subscription is None:
            return
        await self._repo.delete(subscription_id)
        await self._event_bus.publish(
            Topics.SUBSCRIPTION_DELETED,
            subscription.subscription_id,
            subscription.to_event(),
        )
