# src/services/app_factory.py
"""
Сборка FastAPI приложений сервисов.

Каждое приложение:
- в lifespan поднимает PostgreSQL, Redis, шину и контейнер зависимостей
  своего набора компонентов, при RUN_CONSUMERS запускает их консьюмеры
- отдаёт /health с состоянием зависимостей
- переводит доменные исключения в HTTP ответы
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Iterable

from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from src.common.constants import Component, EntityKind, TypeMsg
from src.common.exceptions import NotFound, TransientDependencyFailure, ValidationFailed
from src.common.logger import log_info, log_warning
from src.core.cascade import CascadeReport
from src.shared.models import ErrorResponse, HealthStatus


class DeletedEntity(BaseModel):
    kind: EntityKind
    id: int


class DeletionResult(BaseModel):
    """Результат каскадного удаления: сущности в порядке удаления."""

    deleted: list[DeletedEntity]

    @classmethod
    def from_report(cls, report: CascadeReport) -> DeletionResult:
        return cls(deleted=[DeletedEntity(kind=kind, id=entity_id) for kind, entity_id in report.deleted])


def register_exception_handlers(app: FastAPI) -> None:
    """NotFound -> 404, ValidationFailed -> 400, TransientDependencyFailure -> 503."""

    @app.exception_handler(NotFound)
    async def not_found_handler(request: Request, exc: NotFound) -> JSONResponse:
        body = ErrorResponse(error_code="not_found", message=str(exc))
        return JSONResponse(status_code=404, content=body.model_dump())

    @app.exception_handler(ValidationFailed)
    async def validation_handler(request: Request, exc: ValidationFailed) -> JSONResponse:
        body = ErrorResponse(error_code="validation_failed", message=str(exc))
        return JSONResponse(status_code=400, content=body.model_dump())

    @app.exception_handler(TransientDependencyFailure)
    async def dependency_handler(request: Request, exc: TransientDependencyFailure) -> JSONResponse:
        await log_warning(f"{request.method} {request.url.path}: зависимость недоступна: {exc}")
        body = ErrorResponse(error_code="dependency_unavailable", message=str(exc))
        return JSONResponse(status_code=503, content=body.model_dump())


async def check_health(service: str) -> HealthStatus:
    """Опрашивает инфраструктуру процесса."""
    from src.config import settings
    from src.infra.database import get_db
    from src.infra.event_bus import get_event_bus
    from src.infra.redis_client import get_redis

    checks = {
        "postgres": get_db().health_check,
        "redis": get_redis().health_check,
        "event_bus": get_event_bus().health_check,
    }
    dependencies = {
        name: "healthy" if await check() else "unhealthy"
        for name, check in checks.items()
    }
    status = "healthy" if all(state == "healthy" for state in dependencies.values()) else "degraded"
    return HealthStatus(
        service=service,
        status=status,
        version=settings.system.VERSION,
        dependencies=dependencies,
    )


def create_app(
    components: Iterable[Component],
    title: str,
    routers: Iterable[APIRouter],
    description: str = "",
) -> FastAPI:
    """
    Создаёт приложение для набора компонентов.

    Args:
        components: Компоненты, которые обслуживает процесс
        title: Название сервиса
        routers: Роутеры API (монтируются под /api/v1)
    """
    components = tuple(components)
    service_name = "_".join(component.value for component in components) + "_service"

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        from src.config import settings
        from src.infra.database import close_db, init_db
        from src.infra.event_bus import close_event_bus, init_event_bus
        from src.infra.redis_client import close_redis, init_redis
        from src.services.dependencies import cleanup_dependencies, init_dependencies
        from src.worker.runner import start_consumers, stop_consumers

        await log_info(f"Запуск {title}...", type_msg=TypeMsg.INFO)
        await init_db()
        await init_redis()
        await init_event_bus()
        container = await init_dependencies(components)

        consumers = []
        if settings.system.RUN_CONSUMERS:
            consumers = await start_consumers(container)

        yield

        await log_info(f"Остановка {title}...", type_msg=TypeMsg.INFO)
        await stop_consumers(consumers)
        await cleanup_dependencies()
        await close_event_bus()
        await close_redis()
        await close_db()

    app = FastAPI(
        title=title,
        description=description,
        version="1.0.0",
        lifespan=lifespan,
    )
    register_exception_handlers(app)

    @app.get("/health", response_model=HealthStatus, tags=["Health"])
    async def health_check() -> HealthStatus:
        """Проверка здоровья сервиса."""
        return await check_health(service_name)

    for router in routers:
        app.include_router(router, prefix="/api/v1")
    return app
