# src/core/users/__init__.py
"""
Домен пользователей.
"""

from src.core.users.models import OpenUser, User, UserCreateDTO
from src.core.users.repository import UserRepository
from src.core.users.service import UserService

__all__ = [
    "OpenUser",
    "User",
    "UserCreateDTO",
    "UserRepository",
    "UserService",
]
