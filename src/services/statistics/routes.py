# src/services/statistics/routes.py
"""
API статистики. kind: posts, comments, likes, media, users.

Строки отдаются словарями в camelCase: у каждого вида свой набор полей.
"""

from datetime import date
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Response, status

from src.core.statistics import CounterRow, StatisticService
from src.services.dependencies import get_statistic_service
from src.shared.models import ErrorResponse

router = APIRouter(prefix="/statistics", tags=["statistics"])

Service = Annotated[StatisticService, Depends(get_statistic_service)]


def _dump(row: CounterRow) -> dict[str, Any]:
    return row.model_dump(mode="json", by_alias=True)


@router.get("/{kind}", response_model=list[dict[str, Any]], responses={400: {"model": ErrorResponse}})
async def get_all(kind: str, service: Service) -> list[dict[str, Any]]:
    return [_dump(row) for row in await service.get_all(kind)]


@router.get("/{kind}/{statistic_date}", response_model=dict[str, Any], responses={404: {"model": ErrorResponse}})
async def get_by_date(kind: str, statistic_date: date, service: Service) -> dict[str, Any]:
    return _dump(await service.get_by_date(kind, statistic_date))


@router.delete(
    "/{kind}/{statistic_date}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
async def delete_by_date(kind: str, statistic_date: date, service: Service) -> Response:
    await service.delete_by_date(kind, statistic_date)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
