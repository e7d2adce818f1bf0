# src/core/comments/__init__.py
"""
Домен комментариев.
"""

from src.core.comments.models import Comment, CommentCreateDTO, CommentUpdateDTO
from src.core.comments.repository import CommentRepository
from src.core.comments.service import CommentService

__all__ = [
    "Comment",
    "CommentCreateDTO",
    "CommentUpdateDTO",
    "CommentRepository",
    "CommentService",
]
