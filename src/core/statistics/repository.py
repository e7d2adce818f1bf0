# src/core/statistics/repository.py
"""
Репозиторий счётчиков (statistics_schema).

Изменение счётчика - один атомарный INSERT ... ON CONFLICT DO UPDATE:
нет строки за дату -> вставка значений «для новой строки»,
строка есть -> прибавление дельт к текущим значениям.
"""

from __future__ import annotations

from datetime import date
from typing import Optional

from src.core.statistics.models import CounterRow, CounterTable
from src.infra.database import DatabaseManager, affected_rows


class CounterRepository:
    """Репозиторий одной таблицы счётчиков."""

    def __init__(self, db: DatabaseManager, table: CounterTable) -> None:
        self._db = db
        self.table = table
        self._columns = ", ".join(("statistic_date",) + table.fields)
        self._upsert_sql = self._build_upsert()

    def _build_upsert(self) -> str:
        fields = self.table.fields
        count = len(fields)
        insert_params = ", ".join(f"${i + 2}" for i in range(count))
        updates = ",\n                ".join(
            f"{field} = s.{field} + ${i + 2 + count}" for i, field in enumerate(fields)
        )
        return f"""
            INSERT INTO {self.table.table} AS s ({self._columns})
            VALUES ($1, {insert_params})
            ON CONFLICT (statistic_date) DO UPDATE SET
                {updates}
            RETURNING {self._columns}
        """

    def _row(self, row) -> CounterRow:
        return self.table.model.model_validate(dict(row))

    async def apply(
        self,
        statistic_date: date,
        on_insert: dict[str, float],
        on_update: dict[str, float],
    ) -> CounterRow:
        """
        Атомарно применяет изменение к строке за дату.

        Args:
            statistic_date: Дата строки
            on_insert: Значения полей, если строки ещё нет (остальные 0)
            on_update: Дельты полей, если строка уже есть (остальные 0)
        """
        params = [self.table.coerce(field, on_insert.get(field, 0)) for field in self.table.fields]
        params += [self.table.coerce(field, on_update.get(field, 0)) for field in self.table.fields]
        row = await self._db.fetchrow(self._upsert_sql, statistic_date, *params)
        return self._row(row)

    async def get_all(self) -> list[CounterRow]:
        rows = await self._db.fetch(
            f"SELECT {self._columns} FROM {self.table.table} ORDER BY statistic_date"
        )
        return [self._row(row) for row in rows]

    async def get_by_date(self, statistic_date: date) -> Optional[CounterRow]:
        row = await self._db.fetchrow(
            f"SELECT {self._columns} FROM {self.table.table} WHERE statistic_date = $1",
            statistic_date,
        )
        return self._row(row) if row else None

    async def delete_by_date(self, statistic_date: date) -> bool:
        status = await self._db.execute(
            f"DELETE FROM {self.table.table} WHERE statistic_date = $1",
            statistic_date,
        )
        return affected_rows(status) > 0
