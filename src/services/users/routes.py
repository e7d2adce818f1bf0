# src/services/users/routes.py
"""
API сервиса пользователей.
"""

from typing import Annotated

from fastapi import APIRouter, Body, Depends, status

from src.core.users import OpenUser, User, UserCreateDTO, UserService
from src.services.app_factory import DeletionResult
from src.services.dependencies import get_user_service
from src.shared.models import ErrorResponse

router = APIRouter(prefix="/users", tags=["users"])

Service = Annotated[UserService, Depends(get_user_service)]


@router.post("", response_model=User, status_code=status.HTTP_201_CREATED)
async def register_user(dto: UserCreateDTO, service: Service) -> User:
    return await service.register_user(dto)


@router.post("/batch", response_model=list[User])
async def get_users_by_ids(service: Service, user_ids: Annotated[list[int], Body()]) -> list[User]:
    return await service.get_users_by_ids(user_ids)


@router.get("/{user_id}", response_model=User, responses={404: {"model": ErrorResponse}})
async def get_user(user_id: int, service: Service) -> User:
    return await service.get_user(user_id)


@router.put("/{user_id}", response_model=User, responses={404: {"model": ErrorResponse}})
async def update_user(user_id: int, dto: UserCreateDTO, service: Service) -> User:
    return await service.update_user(user_id, dto)


@router.delete("/{user_id}", response_model=DeletionResult, responses={404: {"model": ErrorResponse}})
async def delete_user(user_id: int, service: Service) -> DeletionResult:
    """Удаляет пользователя. Данные в других сервисах чистятся по user.deleted."""
    return DeletionResult.from_report(await service.delete_user(user_id))


@router.get("/{user_id}/verify", response_model=bool)
async def verify_user(user_id: int, service: Service) -> bool:
    return await service.verify_user(user_id)


@router.get("/{user_id}/username", response_model=str, responses={404: {"model": ErrorResponse}})
async def get_username(user_id: int, service: Service) -> str:
    return await service.get_username(user_id)


@router.get("/{user_id}/open", response_model=OpenUser, responses={404: {"model": ErrorResponse}})
async def open_user(user_id: int, service: Service) -> OpenUser:
    """Публичный профиль со счётчиками постов и подписок."""
    return await service.open_user(user_id)
