# src/services/__init__.py
"""
Микросервисы приложения.

Архитектура:
- Каждый сервис - отдельное FastAPI-приложение со своей схемой в PostgreSQL
- Изменения распространяются событиями шины (RabbitMQ), без распределённых транзакций
- Синхронные проверки существования и счётчики идут по HTTP
- Redis для кэша чтения и окна дедупликации событий

Сервисы: users, posts, comments, likes, media, subscriptions,
notifications, statistics. Режим all поднимает их в одном процессе.
"""

__all__: list[str] = []
