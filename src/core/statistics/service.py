# src/core/statistics/service.py
"""
Сервис дневной статистики.

Каждое событие меняет строку за «сегодня» (по часам сервиса):
- created: поле +1
- deleted: поле «удалено» +1, а в уже существующей строке «создано» -1
  (даже если сущность создана в другой день)
- media.upload: файлов +1, суммарный размер +size
- media.deleted: удалённых файлов +1, в существующей строке размер -size
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Callable

from src.common.constants import TypeMsg
from src.common.exceptions import StatisticNotFound, ValidationFailed
from src.common.logger import log_info
from src.core.statistics import models
from src.core.statistics.models import CounterRow, CounterTable
from src.core.statistics.repository import CounterRepository
from src.shared.events import DomainEvent, MediaEvent, Topics


@dataclass(frozen=True)
class CounterRule:
    """Как событие топика меняет счётчики."""
    table: CounterTable
    field: str
    opposite: str | None = None
    size_sign: int = 0

    def changes(self, event: DomainEvent) -> tuple[dict[str, float], dict[str, float]]:
        """Значения для новой строки и дельты для существующей."""
        on_insert: dict[str, float] = {self.field: 1}
        on_update: dict[str, float] = {self.field: 1}
        if self.opposite:
            on_update[self.opposite] = -1
        if self.size_sign and isinstance(event, MediaEvent):
            if self.size_sign > 0:
                on_insert["total_file_size"] = event.file_size
            on_update["total_file_size"] = self.size_sign * event.file_size
        return on_insert, on_update


COUNTER_RULES: dict[str, CounterRule] = {
    Topics.USER_CREATED: CounterRule(models.USERS, "new_users"),
    Topics.USER_DELETED: CounterRule(models.USERS, "remote_users", opposite="new_users"),
    Topics.POST_CREATED: CounterRule(models.POSTS, "posts_created"),
    Topics.POST_DELETED: CounterRule(models.POSTS, "posts_deleted", opposite="posts_created"),
    Topics.COMMENT_CREATED: CounterRule(models.COMMENTS, "number_of_created_comments"),
    Topics.COMMENT_DELETED: CounterRule(
        models.COMMENTS, "number_of_deleted_comments", opposite="number_of_created_comments"
    ),
    Topics.POST_LIKE_CREATED: CounterRule(models.LIKES, "post_like"),
    Topics.POST_LIKE_DELETED: CounterRule(models.LIKES, "remove_post_like", opposite="post_like"),
    Topics.COMMENT_LIKE_CREATED: CounterRule(models.LIKES, "comment_like"),
    Topics.COMMENT_LIKE_DELETED: CounterRule(models.LIKES, "remove_comment_like", opposite="comment_like"),
    Topics.MEDIA_UPLOAD: CounterRule(models.MEDIA, "number_of_uploaded_files", size_sign=1),
    Topics.MEDIA_DELETED: CounterRule(models.MEDIA, "number_of_deleted_files", size_sign=-1),
}


class StatisticService:
    """Сервис статистики."""

    def __init__(
        self,
        repos: dict[str, CounterRepository],
        today: Callable[[], date] = date.today,
    ) -> None:
        """
        Args:
            repos: Репозитории счётчиков по виду (posts, comments, likes, media, users)
            today: Часы сервиса
        """
        self._repos = repos
        self._today = today

    def _repo(self, kind: str) -> CounterRepository:
        repo = self._repos.get(kind)
        if repo is None:
            raise ValidationFailed(f"Unknown statistic kind: {kind}")
        return repo

    async def record(self, topic: str, event: DomainEvent) -> CounterRow:
        """Применяет событие к счётчикам за сегодня."""
        rule = COUNTER_RULES[topic]
        on_insert, on_update = rule.changes(event)
        row = await self._repo(rule.table.kind).apply(self._today(), on_insert, on_update)

        await log_info(
            f"Статистика {rule.table.kind} за {row.statistic_date} обновлена по {topic}",
            type_msg=TypeMsg.DEBUG,
        )
        return row

    async def get_all(self, kind: str) -> list[CounterRow]:
        return await self._repo(kind).get_all()

    async def get_by_date(self, kind: str, statistic_date: date) -> CounterRow:
        """
        Raises:
            StatisticNotFound: строки за дату нет
        """
        row = await self._repo(kind).get_by_date(statistic_date)
        if row is None:
            raise StatisticNotFound(statistic_date, f"Statistic with date = {statistic_date} not found")
        return row

    async def delete_by_date(self, kind: str, statistic_date: date) -> None:
        if not await self._repo(kind).delete_by_date(statistic_date):
            raise StatisticNotFound(statistic_date, f"Statistic with date = {statistic_date} not found")
