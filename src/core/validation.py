# src/core/validation.py
"""
Политики синхронных вызовов между сервисами.

- ensure_exists: проверка существования перед записью, жёсткий отказ
- count_or_default: агрегаты для чтения, при любой ошибке значение по умолчанию
"""

from __future__ import annotations

from typing import Awaitable, TypeVar

from src.common.exceptions import ValidationFailed
from src.common.logger import log_warning

T = TypeVar("T")


async def ensure_exists(check: Awaitable[bool], message: str) -> None:
    """
    Пропускает запись, только если зависимая сущность существует.

    Raises:
        ValidationFailed: проверка вернула False
        Exception: ошибка самой проверки пробрасывается
    """
    if not await check:
        raise ValidationFailed(message)


async def count_or_default(call: Awaitable[T], default: T, what: str) -> T:
    """Возвращает результат вызова или default, если вызов упал."""
    try:
        return await call
    except Exception as e:
        await log_warning(f"Не удалось получить {what}, используем значение по умолчанию: {e}")
        return default
