# src/core/likes/models.py
"""
Модели данных лайков.
Лайк ставится либо посту, либо комментарию.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from src.shared.events import LikeEvent, Topics


class Like(BaseModel):
    """Модель лайка."""

    model_config = ConfigDict(from_attributes=True)

    like_id: int = Field(..., description="ID лайка")
    user_id: int = Field(..., description="ID поставившего")
    post_id: Optional[int] = Field(None, description="ID поста")
    comment_id: Optional[int] = Field(None, description="ID комментария")
    created_at: Optional[datetime] = None

    @property
    def is_post_like(self) -> bool:
        return self.post_id is not None

    @property
    def created_topic(self) -> str:
        return Topics.POST_LIKE_CREATED if self.is_post_like else Topics.COMMENT_LIKE_CREATED

    @property
    def deleted_topic(self) -> str:
        return Topics.POST_LIKE_DELETED if self.is_post_like else Topics.COMMENT_LIKE_DELETED

    def to_event(self) -> LikeEvent:
        return LikeEvent.model_validate(self.model_dump())


class PostLikeDTO(BaseModel):
    user_id: int
    post_id: int


class CommentLikeDTO(BaseModel):
    user_id: int
    comment_id: int
