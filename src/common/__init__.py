# src/common/__init__.py
"""
Общие утилиты, константы, логгер и исключения.
"""

from src.common.logger import get_logger, log_info, log_error, log_warning, log_debug
from src.common.constants import TypeMsg, Component, EntityKind

__all__ = [
    "get_logger",
    "log_info",
    "log_error",
    "log_warning",
    "log_debug",
    "TypeMsg",
    "Component",
    "EntityKind",
]
