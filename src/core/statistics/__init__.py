# src/core/statistics/__init__.py
"""
Домен статистики: дневные счётчики по видам сущностей.
"""

from src.core.statistics.models import (
    COUNTER_TABLES,
    CommentStatistic,
    CounterRow,
    CounterTable,
    LikeStatistic,
    MediaStatistic,
    PostStatistic,
    UserStatistic,
)
from src.core.statistics.repository import CounterRepository
from src.core.statistics.service import COUNTER_RULES, CounterRule, StatisticService

__all__ = [
    "COUNTER_TABLES",
    "COUNTER_RULES",
    "CommentStatistic",
    "CounterRow",
    "CounterRule",
    "CounterTable",
    "CounterRepository",
    "LikeStatistic",
    "MediaStatistic",
    "PostStatistic",
    "StatisticService",
    "UserStatistic",
]
