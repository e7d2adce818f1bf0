# src/services/comments/routes.py
"""
API сервиса комментариев.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from src.core.comments import Comment, CommentCreateDTO, CommentService, CommentUpdateDTO
from src.services.app_factory import DeletionResult
from src.services.dependencies import get_comment_service
from src.shared.models import ErrorResponse

router = APIRouter(prefix="/comments", tags=["comments"])

Service = Annotated[CommentService, Depends(get_comment_service)]


@router.post("", response_model=Comment, status_code=status.HTTP_201_CREATED)
async def add_comment(dto: CommentCreateDTO, service: Service) -> Comment:
    return await service.add_comment(dto)


@router.get("/post/{post_id}", response_model=list[Comment])
async def get_all_by_post_id(post_id: int, service: Service) -> list[Comment]:
    return await service.get_all_by_post_id(post_id)


@router.get("/post/{post_id}/count", response_model=int)
async def count_by_post_id(post_id: int, service: Service) -> int:
    return await service.count_by_post_id(post_id)


@router.put("/{comment_id}", response_model=Comment, responses={404: {"model": ErrorResponse}})
async def update_comment(comment_id: int, dto: CommentUpdateDTO, service: Service) -> Comment:
    return await service.update_comment(comment_id, dto)


@router.delete("/{comment_id}", response_model=DeletionResult, responses={404: {"model": ErrorResponse}})
async def delete_comment(comment_id: int, service: Service) -> DeletionResult:
    return DeletionResult.from_report(await service.delete_comment(comment_id))


@router.get("/{comment_id}/verify", response_model=bool)
async def verify_comment(comment_id: int, service: Service) -> bool:
    return await service.verify_comment(comment_id)


@router.get("/{comment_id}/user-id", response_model=int, responses={404: {"model": ErrorResponse}})
async def get_user_id(comment_id: int, service: Service) -> int:
    return await service.get_user_id_by_comment_id(comment_id)
