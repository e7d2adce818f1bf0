# src/config/__init__.py
"""
Модуль конфигурации.
Экспортирует настройки приложения и путь к корню проекта.
"""

from src.config.loader import Settings, get_project_root, get_settings, settings

__all__ = ["Settings", "get_project_root", "get_settings", "settings"]
