# src/services/subscriptions/routes.py
"""
API сервиса подписок.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from src.core.subscriptions import Subscription, SubscriptionCreateDTO, SubscriptionService
from src.services.app_factory import DeletionResult
from src.services.dependencies import get_subscription_service
from src.shared.models import ErrorResponse

router = APIRouter(prefix="/subscriptions", tags=["subscriptions"])

Service = Annotated[SubscriptionService, Depends(get_subscription_service)]


@router.post("", response_model=Subscription, status_code=status.HTTP_201_CREATED)
async def subscribe(dto: SubscriptionCreateDTO, service: Service) -> Subscription:
    return await service.subscribe(dto)


@router.delete("", response_model=DeletionResult, responses={404: {"model": ErrorResponse}})
async def unsubscribe(
    service: Service,
    follower_id: int = Query(...),
    following_id: int = Query(...),
) -> DeletionResult:
    return DeletionResult.from_report(await service.unsubscribe(follower_id, following_id))


@router.delete("/{subscription_id}", response_model=DeletionResult, responses={404: {"model": ErrorResponse}})
async def delete_subscription(subscription_id: int, service: Service) -> DeletionResult:
    return DeletionResult.from_report(await service.delete_subscription(subscription_id))


@router.get("/{user_id}/followers", response_model=list[int])
async def get_followers(user_id: int, service: Service) -> list[int]:
    return await service.get_followers(user_id)


@router.get("/{user_id}/following", response_model=list[int])
async def get_following(user_id: int, service: Service) -> list[int]:
    return await service.get_following(user_id)


@router.get("/{user_id}/followers/count", response_model=int)
async def count_followers(user_id: int, service: Service) -> int:
    return await service.count_followers(user_id)


@router.get("/{user_id}/following/count", response_model=int)
async def count_following(user_id: int, service: Service) -> int:
    return await service.count_following(user_id)
