# src/core/media/models.py
"""
Модели метаданных медиа-файлов.
Сами файлы хранятся во внешнем хранилище, здесь только ссылка и атрибуты.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from src.shared.events import MediaEvent


class Media(BaseModel):
    """Метаданные загруженного файла."""

    model_config = ConfigDict(from_attributes=True)

    media_id: int = Field(..., description="ID файла")
    user_id: int = Field(..., description="ID владельца")
    url: str = Field(..., description="Публичный URL")
    file_name: Optional[str] = None
    file_size: float = Field(0.0, ge=0.0, description="Размер в байтах")
    file_type: Optional[str] = None
    upload_date: Optional[datetime] = None

    def to_event(self) -> MediaEvent:
        return MediaEvent.model_validate(self.model_dump())


class MediaUploadDTO(BaseModel):
    """Описание загруженного файла."""

    user_id: int
    file_name: str = Field(..., min_length=1)
    file_size: float = Field(..., ge=0.0)
    file_type: Optional[str] = None
