# src/services/posts/routes.py
"""
API сервиса постов.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from src.core.posts import OpenPost, Post, PostCreateDTO, PostService, PostUpdateDTO
from src.services.app_factory import DeletionResult
from src.services.dependencies import get_post_service
from src.shared.models import ErrorResponse

router = APIRouter(prefix="/posts", tags=["posts"])

Service = Annotated[PostService, Depends(get_post_service)]


@router.post("", response_model=Post, status_code=status.HTTP_201_CREATED)
async def create_post(dto: PostCreateDTO, service: Service) -> Post:
    return await service.create_post(dto)


@router.get("", response_model=list[Post])
async def get_all_posts(service: Service) -> list[Post]:
    return await service.get_all_posts()


@router.get("/user/{user_id}", response_model=list[Post])
async def get_posts_by_user_id(user_id: int, service: Service) -> list[Post]:
    return await service.get_posts_by_user_id(user_id)


@router.get("/user/{user_id}/open", response_model=list[OpenPost])
async def open_posts_by_user_id(user_id: int, service: Service) -> list[OpenPost]:
    return await service.open_posts_by_user_id(user_id)


@router.get("/user/{user_id}/count", response_model=int)
async def count_by_user_id(user_id: int, service: Service) -> int:
    return await service.count_by_user_id(user_id)


@router.get("/user/{user_id}/media", response_model=list[str])
async def urls_by_user_id(user_id: int, service: Service) -> list[str]:
    return await service.urls_by_user_id(user_id)


@router.get("/{post_id}", response_model=OpenPost, responses={404: {"model": ErrorResponse}})
async def open_post(post_id: int, service: Service) -> OpenPost:
    return await service.open_post(post_id)


@router.put("/{post_id}", response_model=Post, responses={404: {"model": ErrorResponse}})
async def update_post(post_id: int, dto: PostUpdateDTO, service: Service) -> Post:
    return await service.update_post(post_id, dto)


@router.delete("/{post_id}", response_model=DeletionResult, responses={404: {"model": ErrorResponse}})
async def delete_post(post_id: int, service: Service) -> DeletionResult:
    return DeletionResult.from_report(await service.delete_post(post_id))


@router.get("/{post_id}/verify", response_model=bool)
async def verify_post(post_id: int, service: Service) -> bool:
    return await service.verify_post(post_id)


@router.get("/{post_id}/user-id", response_model=int, responses={404: {"model": ErrorResponse}})
async def get_user_id(post_id: int, service: Service) -> int:
    return await service.get_user_id_by_post_id(post_id)
