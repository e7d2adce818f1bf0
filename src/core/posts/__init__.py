# src/core/posts/__init__.py
"""
Домен постов.
"""

from src.core.posts.models import OpenPost, Post, PostCreateDTO, PostUpdateDTO
from src.core.posts.repository import PostRepository
from src.core.posts.service import PostService

__all__ = [
    "OpenPost",
    "Post",
    "PostCreateDTO",
    "PostUpdateDTO",
    "PostRepository",
    "PostService",
]
