# src/core/posts/models.py
"""
Модели данных постов.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from src.shared.events import PostEvent


class Post(BaseModel):
    """Модель поста."""

    model_config = ConfigDict(from_attributes=True)

    post_id: int = Field(..., description="ID поста")
    user_id: int = Field(..., description="ID автора")
    content: Optional[str] = Field(None, description="Текст")
    media_url: Optional[str] = Field(None, description="URL прикреплённого файла")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_event(self) -> PostEvent:
        return PostEvent.model_validate(self.model_dump())


class PostCreateDTO(BaseModel):
    """DTO для создания поста."""

    user_id: int
    content: Optional[str] = None
    media_url: Optional[str] = None


class PostUpdateDTO(BaseModel):
    """DTO для обновления поста."""

    content: Optional[str] = None
    media_url: Optional[str] = None


class OpenPost(BaseModel):
    """Пост для показа: с автором и счётчиками лайков и комментариев."""

    post_id: int
    user_id: int
    username: Optional[str] = None
    content: Optional[str] = None
    media_url: Optional[str] = None
    likes: int = 0
    comments: int = 0
    created_at: Optional[datetime] = None
