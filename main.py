#!/usr/bin/env python3
# main.py
"""
Главная точка входа приложения Social Network.
Запускает один сервис, все сервисы в одном процессе или только консьюмеров.
"""

from __future__ import annotations

import asyncio
import signal
import sys

from fastapi import FastAPI

from src.common.constants import Component, TypeMsg
from src.common.logger import log_error, log_info, setup_logging
from src.config import settings

COMPONENT_MODES = tuple(component.value for component in Component)
VALID_MODES = COMPONENT_MODES + ("consumers", "all")

# Глобальный флаг для graceful shutdown
_shutdown_event: asyncio.Event | None = None
_running_tasks: list[asyncio.Task] = []


def setup_signal_handlers() -> None:
    """Настраивает обработчики сигналов для graceful shutdown."""
    global _shutdown_event
    _shutdown_event = asyncio.Event()

    def signal_handler(sig: int) -> None:
        """Обработчик сигналов SIGINT и SIGTERM."""
        if _shutdown_event and not _shutdown_event.is_set():
            print(f"\nПолучен сигнал остановки (sig={sig}), завершаем работу...")
            _shutdown_event.set()
            for task in _running_tasks:
                if not task.done():
                    task.cancel()

    try:
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, lambda s=sig: signal_handler(s))
    except NotImplementedError:
        # Windows не поддерживает add_signal_handler
        signal.signal(signal.SIGINT, lambda s, f: signal_handler(s))
        signal.signal(signal.SIGTERM, lambda s, f: signal_handler(s))


def build_app(mode: str) -> tuple[FastAPI, int]:
    """Приложение и порт для режима сервиса или all."""
    from src.services.app_factory import create_app
    from src.services.routers import SERVICE_ROUTERS, SERVICE_TITLES

    if mode == "all":
        app = create_app(
            list(Component),
            title="Social Network",
            routers=SERVICE_ROUTERS.values(),
            description="Все сервисы в одном процессе",
        )
        return app, settings.deployment.ALL_IN_ONE_PORT

    component = Component(mode)
    app = create_app([component], title=SERVICE_TITLES[component], routers=[SERVICE_ROUTERS[component]])
    return app, settings.deployment.port_of(component.value)


async def serve(mode: str) -> None:
    """Запускает uvicorn для режима сервиса или all."""
    import uvicorn

    app, port = build_app(mode)
    await log_info(f"Запуск '{mode}' на порту {port}...", type_msg=TypeMsg.INFO)

    config = uvicorn.Config(
        app,
        host="0.0.0.0",
        port=port,
        log_level="debug" if settings.system.DEBUG else "info",
    )
    server = uvicorn.Server(config)
    try:
        await server.serve()
    except asyncio.CancelledError:
        await log_info(f"{mode}: graceful shutdown", type_msg=TypeMsg.DEBUG)
        await server.shutdown()


async def run_consumers_only() -> None:
    """Консьюмеры всех компонентов без HTTP."""
    from src.worker.runner import run_consumers

    await run_consumers(tuple(Component), init_infra=True)


def resolve_mode(mode: str | None) -> str:
    """Режим из аргумента, COMPONENT_MODE или all."""
    if mode is None:
        mode = settings.system.COMPONENT_MODE or "all"
    if mode not in VALID_MODES:
        raise ValueError(f"Неизвестный режим: {mode}. Допустимые: {', '.join(VALID_MODES)}")
    return mode


async def main(mode: str | None = None) -> None:
    """
    Главная функция запуска.

    Args:
        mode: Имя сервиса, consumers или all.
              Если None, берётся из COMPONENT_MODE.
    """
    setup_logging()
    setup_signal_handlers()

    mode = resolve_mode(mode)
    await log_info(
        f"{settings.system.PROJECT_NAME} v{settings.system.VERSION} — запуск в режиме '{mode}'",
        type_msg=TypeMsg.INFO,
    )

    runner = run_consumers_only() if mode == "consumers" else serve(mode)
    task = asyncio.create_task(runner)
    _running_tasks.append(task)

    try:
        await task
    except asyncio.CancelledError:
        await log_info("Задача отменена, выполняется graceful shutdown", type_msg=TypeMsg.INFO)
    except Exception as e:
        await log_error(f"Критическая ошибка: {e}", exc_info=True)
        raise
    finally:
        _running_tasks.clear()
        await log_info("Приложение остановлено", type_msg=TypeMsg.INFO)


def print_usage() -> None:
    """Выводит справку по использованию."""
    print(f"""
Social Network — событийная согласованность между микросервисами

Использование:
    python main.py [mode]

Режимы:
    {', '.join(COMPONENT_MODES)}
                           — один сервис (HTTP API + его консьюмеры)
    consumers              — только консьюмеры всех сервисов
    all                    — все сервисы в одном процессе (:{settings.deployment.ALL_IN_ONE_PORT})

Без аргумента режим берётся из COMPONENT_MODE.
    """)


if __name__ == "__main__":
    mode = None

    if len(sys.argv) > 1:
        arg = sys.argv[1].lower()
        if arg in ("--help", "-h"):
            print_usage()
            sys.exit(0)
        if arg not in VALID_MODES:
            print(f"Неизвестный режим: {arg}")
            print_usage()
            sys.exit(1)
        mode = arg

    try:
        asyncio.run(main(mode))
    except KeyboardInterrupt:
        pass
