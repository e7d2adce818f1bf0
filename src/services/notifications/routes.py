# src/services/notifications/routes.py
"""
API сервиса уведомлений.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from src.core.notifications import Notification, NotificationCreateDTO, NotificationService
from src.services.dependencies import get_notification_service
from src.shared.models import ErrorResponse

router = APIRouter(prefix="/notifications", tags=["notifications"])

Service = Annotated[NotificationService, Depends(get_notification_service)]


class StatusUpdate(BaseModel):
    """Отметка о прочтении."""
    read: bool


@router.post("", response_model=Notification, status_code=status.HTTP_201_CREATED)
async def create_notification(dto: NotificationCreateDTO, service: Service) -> Notification:
    return await service.create_notification(dto)


@router.get("/user/{user_id}", response_model=list[Notification], responses={404: {"model": ErrorResponse}})
async def get_by_user_id(user_id: int, service: Service) -> list[Notification]:
    return await service.get_by_user_id(user_id)


@router.get("/{notification_id}", response_model=Notification, responses={404: {"model": ErrorResponse}})
async def get_by_id(notification_id: int, service: Service) -> Notification:
    return await service.get_by_id(notification_id)


@router.patch("/{notification_id}/status", response_model=Notification, responses={404: {"model": ErrorResponse}})
async def update_status(notification_id: int, request: StatusUpdate, service: Service) -> Notification:
    return await service.update_status(notification_id, request.read)
