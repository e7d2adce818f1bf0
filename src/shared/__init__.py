# src/shared/__init__.py
"""
Общий код между микросервисами.

Модули:
- events: схемы событий шины и реестр топиков
- models: общие модели HTTP ответов
"""

__all__: list[str] = []
