# src/services/likes/routes.py
"""
API сервиса лайков.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from src.core.likes import CommentLikeDTO, Like, LikeService, PostLikeDTO
from src.services.app_factory import DeletionResult
from src.services.dependencies import get_like_service
from src.shared.models import ErrorResponse

router = APIRouter(prefix="/likes", tags=["likes"])

Service = Annotated[LikeService, Depends(get_like_service)]


@router.post("/post", response_model=Like, status_code=status.HTTP_201_CREATED)
async def like_post(dto: PostLikeDTO, service: Service) -> Like:
    return await service.like_post(dto)


@router.post("/comment", response_model=Like, status_code=status.HTTP_201_CREATED)
async def like_comment(dto: CommentLikeDTO, service: Service) -> Like:
    return await service.like_comment(dto)


@router.delete("/{like_id}", response_model=DeletionResult, responses={404: {"model": ErrorResponse}})
async def delete_like(like_id: int, service: Service) -> DeletionResult:
    return DeletionResult.from_report(await service.delete_like(like_id))


@router.get("/post/{post_id}/count", response_model=int)
async def count_post_likes(post_id: int, service: Service) -> int:
    return await service.count_post_likes(post_id)


@router.get("/comment/{comment_id}/count", response_model=int)
async def count_comment_likes(comment_id: int, service: Service) -> int:
    return await service.count_comment_likes(comment_id)
