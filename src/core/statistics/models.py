# src/core/statistics/models.py
"""
Модели дневной статистики.

Одна строка на дату в каждой таблице счётчиков. Наружу поля отдаются
в camelCase (postsCreated, numberOfDeletedFiles, ...).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CounterRow(BaseModel):
    """Базовая строка счётчиков."""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )

    statistic_date: date


class PostStatistic(CounterRow):
    posts_created: int = 0
    posts_deleted: int = 0


class CommentStatistic(CounterRow):
    number_of_created_comments: int = 0
    number_of_deleted_comments: int = 0


class LikeStatistic(CounterRow):
    post_like: int = 0
    comment_like: int = 0
    remove_post_like: int = 0
    remove_comment_like: int = 0


class MediaStatistic(CounterRow):
    number_of_uploaded_files: int = 0
    number_of_deleted_files: int = 0
    total_file_size: float = 0.0


class UserStatistic(CounterRow):
    new_users: int = 0
    remote_users: int = 0


@dataclass(frozen=True)
class CounterTable:
    """Описание таблицы счётчиков."""
    kind: str
    table: str
    model: type[CounterRow]

    @property
    def fields(self) -> tuple[str, ...]:
        return tuple(name for name in self.model.model_fields if name != "statistic_date")

    def coerce(self, field: str, value: float) -> int | float:
        """Приводит значение к типу колонки (asyncpg строг к типам параметров)."""
        if self.model.model_fields[field].annotation is float:
            return float(value)
        return int(value)


POSTS = CounterTable("posts", "statistics_schema.post_statistics", PostStatistic)
COMMENTS = CounterTable("comments", "statistics_schema.comment_statistics", CommentStatistic)
LIKES = CounterTable("likes", "statistics_schema.like_statistics", LikeStatistic)
MEDIA = CounterTable("media", "statistics_schema.media_statistics", MediaStatistic)
USERS = CounterTable("users", "statistics_schema.user_statistics", UserStatistic)

COUNTER_TABLES: dict[str, CounterTable] = {
    table.kind: table for table in (POSTS, COMMENTS, LIKES, MEDIA, USERS)
}
