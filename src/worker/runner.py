# src/worker/runner.py
"""
Запускалка консьюмеров.
"""

from __future__ import annotations

import asyncio
from typing import Iterable, List

from src.common.constants import Component, TypeMsg
from src.common.logger import log_error, log_info
from src.infra.database import close_db, init_db
from src.infra.event_bus import close_event_bus, init_event_bus
from src.infra.redis_client import close_redis, init_redis
from src.services.dependencies import ServiceContainer, cleanup_dependencies, init_dependencies
from src.worker.base import BaseConsumer
from src.worker.comments import CommentsConsumer
from src.worker.likes import LikesConsumer
from src.worker.media import MediaConsumer
from src.worker.notifications import NotificationsConsumer
from src.worker.posts import PostsConsumer
from src.worker.statistics import StatisticsConsumer
from src.worker.subscriptions import SubscriptionsConsumer


def build_consumers(container: ServiceContainer) -> List[BaseConsumer]:
    """Консьюмеры для всех компонентов контейнера, которые слушают шину."""
    bus, dedupe = container.event_bus, container.dedupe
    consumers: List[BaseConsumer] = []

    if container.is_local(Component.POSTS):
        consumers.append(PostsConsumer(bus, container.service(Component.POSTS), dedupe))
    if container.is_local(Component.COMMENTS):
        consumers.append(CommentsConsumer(bus, container.service(Component.COMMENTS), dedupe))
    if container.is_local(Component.LIKES):
        consumers.append(LikesConsumer(bus, container.service(Component.LIKES), dedupe))
    if container.is_local(Component.MEDIA):
        consumers.append(MediaConsumer(bus, container.service(Component.MEDIA), dedupe))
    if container.is_local(Component.SUBSCRIPTIONS):
        consumers.append(SubscriptionsConsumer(bus, container.service(Component.SUBSCRIPTIONS), dedupe))
    if container.is_local(Component.NOTIFICATIONS):
        consumers.append(
            NotificationsConsumer(
                bus,
                container.service(Component.NOTIFICATIONS),
                posts_client=container.client(Component.POSTS),
                comments_client=container.client(Component.COMMENTS),
                dedupe=dedupe,
            )
        )
    if container.is_local(Component.STATISTICS):
        consumers.append(StatisticsConsumer(bus, container.service(Component.STATISTICS), dedupe))
    return consumers


async def start_consumers(container: ServiceContainer) -> List[BaseConsumer]:
    consumers = build_consumers(container)
    for consumer in consumers:
        await consumer.start()
    await log_info(f"Запущено {len(consumers)} консьюмеров", type_msg=TypeMsg.INFO)
    return consumers


async def stop_consumers(consumers: Iterable[BaseConsumer]) -> None:
    for consumer in consumers:
        await consumer.stop()


async def run_consumers(
    components: Iterable[Component] = tuple(Component),
    init_infra: bool = True,
) -> None:
    """
    Запускает консьюмеры указанных компонентов и ждёт остановки.

    Args:
        components: Компоненты, чьи консьюмеры работают в процессе
        init_infra: Если True, инициализирует БД, Redis и шину.
                    При запуске из main.py в режиме all инфраструктура
                    уже поднята и передаётся False.
    """
    await log_info("Запуск консьюмеров...", type_msg=TypeMsg.INFO)

    if init_infra:
        await log_info("Инициализация инфраструктуры для консьюмеров...", type_msg=TypeMsg.DEBUG)
        await init_db()
        await init_redis()
        await init_event_bus()

    consumers: List[BaseConsumer] = []
    try:
        container = await init_dependencies(components)
        consumers = await start_consumers(container)

        # Ждём завершения (Ctrl+C)
        while True:
            await asyncio.sleep(1)

    except asyncio.CancelledError:
        await log_info("Получен сигнал остановки", type_msg=TypeMsg.INFO)
    except Exception as e:
        await log_error(f"Критическая ошибка консьюмеров: {e}", exc_info=True)
        raise
    finally:
        await stop_consumers(consumers)

        if init_infra:
            await cleanup_dependencies()
            await close_event_bus()
            await close_redis()
            await close_db()

        await log_info("Консьюмеры остановлены", type_msg=TypeMsg.INFO)


def main() -> None:
    """Точка входа."""
    try:
        asyncio.run(run_consumers())
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
