# src/core/comments/models.py
"""
Модели данных комментариев.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from src.shared.events import CommentEvent


class Comment(BaseModel):
    """Модель комментария."""

    model_config = ConfigDict(from_attributes=True)

    comment_id: int = Field(..., description="ID комментария")
    post_id: int = Field(..., description="ID поста")
    user_id: int = Field(..., description="ID автора")
    content: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_event(self) -> CommentEvent:
        return CommentEvent.model_validate(self.model_dump())


class CommentCreateDTO(BaseModel):
    """DTO для создания комментария."""

    post_id: int
    user_id: int
    content: str = Field(..., min_length=1)


class CommentUpdateDTO(BaseModel):
    content: str = Field(..., min_length=1)
