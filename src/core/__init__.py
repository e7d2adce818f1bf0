# src/core/__init__.py
"""
Доменный слой.
Модели, репозитории и сервисы по доменам, каскадное удаление,
политики синхронных вызовов между сервисами.
"""

from src.core.cascade import CascadeDeleter, CascadeNode, CascadeRegistry, CascadeReport
from src.core.validation import count_or_default, ensure_exists

__all__ = [
    "CascadeDeleter",
    "CascadeNode",
    "CascadeRegistry",
    "CascadeReport",
    "count_or_default",
    "ensure_exists",
]
