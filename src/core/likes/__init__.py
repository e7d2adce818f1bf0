# src/core/likes/__init__.py
"""
Домен лайков.
"""

from src.core.likes.models import CommentLikeDTO, Like, PostLikeDTO
from src.core.likes.repository import LikeRepository
from src.core.likes.service import LikeService

__all__ = [
    "CommentLikeDTO",
    "Like",
    "PostLikeDTO",
    "LikeRepository",
    "LikeService",
]
