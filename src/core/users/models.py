# src/core/users/models.py
"""
Модели данных пользователей.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from src.shared.events import UserEvent


class User(BaseModel):
    """Модель пользователя."""

    model_config = ConfigDict(from_attributes=True)

    user_id: int = Field(..., description="ID пользователя")
    username: str = Field(..., description="Уникальное имя")
    email: Optional[str] = Field(None, description="Email")
    phone_number: Optional[str] = Field(None, description="Номер телефона")
    region: Optional[str] = Field(None, description="Регион")
    first_name: Optional[str] = Field(None, description="Имя")
    surname: Optional[str] = Field(None, description="Фамилия")
    last_name: Optional[str] = Field(None, description="Отчество")
    profile_picture_url: Optional[str] = Field(None, description="URL аватара (файл медиа-сервиса)")
    created_at: Optional[datetime] = Field(None, description="Дата регистрации")
    updated_at: Optional[datetime] = Field(None, description="Дата обновления")

    def to_event(self) -> UserEvent:
        """Снимок для публикации в шину."""
        return UserEvent.model_validate(self.model_dump())


class UserCreateDTO(BaseModel):
    """DTO для регистрации и обновления профиля."""

    username: str = Field(..., min_length=1, max_length=64)
    email: Optional[str] = None
    phone_number: Optional[str] = None
    region: Optional[str] = None
    first_name: Optional[str] = None
    surname: Optional[str] = None
    last_name: Optional[str] = None
    profile_picture_url: Optional[str] = None


class OpenUser(BaseModel):
    """Публичный профиль пользователя с агрегатами из других сервисов."""

    username: str
    profile_picture_url: Optional[str] = None
    count_posts: int = 0
    count_following: int = 0
    count_followers: int = 0
    media_posts_url: list[str] = Field(default_factory=list)
