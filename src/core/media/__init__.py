# src/core/media/__init__.py
"""
Домен медиа-файлов.
"""

from src.core.media.models import Media, MediaUploadDTO
from src.core.media.repository import MediaRepository
from src.core.media.service import MediaService

__all__ = [
    "Media",
    "MediaUploadDTO",
    "MediaRepository",
    "MediaService",
]
