# src/services/media/routes.py
"""
API медиа-сервиса (только метаданные файлов).
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from src.core.media import Media, MediaService, MediaUploadDTO
from src.services.app_factory import DeletionResult
from src.services.dependencies import get_media_service
from src.shared.models import ErrorResponse

router = APIRouter(prefix="/media", tags=["media"])

Service = Annotated[MediaService, Depends(get_media_service)]


@router.post("", response_model=Media, status_code=status.HTTP_201_CREATED)
async def upload_media(dto: MediaUploadDTO, service: Service) -> Media:
    return await service.upload_media(dto)


@router.get("/verification", response_model=bool)
async def verify_media(service: Service, url: str = Query(...)) -> bool:
    return await service.verify_media(url)


@router.get("/user/{user_id}/urls", response_model=list[str])
async def urls_by_user_id(user_id: int, service: Service) -> list[str]:
    return await service.urls_by_user_id(user_id)


@router.get("/{media_id}", response_model=Media, responses={404: {"model": ErrorResponse}})
async def get_media(media_id: int, service: Service) -> Media:
    return await service.get_media(media_id)


@router.delete("/{media_id}", response_model=DeletionResult, responses={404: {"model": ErrorResponse}})
async def delete_media(media_id: int, service: Service) -> DeletionResult:
    return DeletionResult.from_report(await service.delete_media(media_id))
