# src/shared/events/content_events.py
"""
События контента: посты, комментарии, лайки.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import model_validator

from src.shared.events.base import DomainEvent


class PostEvent(DomainEvent):
    """Снимок поста. Топики post.created / post.updated / post.deleted."""

    entity_field = "post_id"

    post_id: int
    user_id: int
    content: str | None = None
    media_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class CommentEvent(DomainEvent):
    """Снимок комментария. Топики comment.created / comment.updated / comment.deleted."""

    entity_field = "comment_id"

    comment_id: int
    post_id: int
    user_id: int
    content: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class LikeEvent(DomainEvent):
    """
    Снимок лайка.
    Ровно одно из post_id / comment_id заполнено: по нему же выбирается
    топик (post.like.* или comment.like.*).
    """

    entity_field = "like_id"
    timestamp_fields = ("created_at",)

    like_id: int
    user_id: int
    post_id: int | None = None
    comment_id: int | None = None
    created_at: datetime | None = None

    @model_validator(mode="after")
    def check_single_target(self) -> "LikeEvent":
        if (self.post_id is None) == (self.comment_id is None):
            raise ValueError("Лайк должен ссылаться ровно на один из postId / commentId")
        return self

    @property
    def is_post_like(self) -> bool:
        return self.post_id is not None
