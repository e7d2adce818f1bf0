# src/core/cascade.py
"""
Каскадное удаление.

Удаление сущности E:
1. E не найдена -> NotFound
2. для каждой связи «родитель -> потомки» типа E запрашиваются все потомки
3. каждый потомок удаляется тем же алгоритмом (в глубину, по явному стеку)
4. после всех потомков удаляется сама E и публикуется её Deleted событие

Компенсаций нет: если потомок K упал, потомки 1..K-1 остаются удалёнными
(их события уже опубликованы), а родитель не удаляется.

Связь регистрируется, только если оба её конца живут в этом процессе.
Иначе потомков удаляет консьюмер сервиса-владельца по <parent>.deleted.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Awaitable, Callable

from src.common.constants import EntityKind, TypeMsg
from src.common.exceptions import NotFound
from src.common.logger import log_info

# Поиск id потомков по id родителя
ChildFinder = Callable[[int], Awaitable[list[int]]]


@dataclass(frozen=True)
class CascadeNode:
    """
    Тип сущности в графе удаления.

    exists: есть ли сущность с таким id
    remove: удаляет одну сущность (без потомков), публикует Deleted, чистит кэш
    not_found: исключение для отсутствующего корня
    """
    kind: EntityKind
    exists: Callable[[int], Awaitable[bool]]
    remove: Callable[[int], Awaitable[None]]
    not_found: type[NotFound] = NotFound


@dataclass(frozen=True)
class Relation:
    parent: EntityKind
    child: EntityKind
    find_children: ChildFinder


@dataclass
class CascadeReport:
    """Удалённые сущности в порядке удаления (корень последним)."""
    deleted: list[tuple[EntityKind, int]] = field(default_factory=list)

    def count(self, kind: EntityKind) -> int:
        return sum(1 for deleted_kind, _ in self.deleted if deleted_kind == kind)


@dataclass
class _Frame:
    kind: EntityKind
    entity_id: int
    relations: deque[Relation]
    children: deque[tuple[EntityKind, int]] = field(default_factory=deque)


class CascadeRegistry:
    """Граф типов сущностей и связей между ними."""

    def __init__(self) -> None:
        self._nodes: dict[EntityKind, CascadeNode] = {}
        self._relations: dict[EntityKind, list[Relation]] = {}

    def register(self, node: CascadeNode) -> None:
        self._nodes[node.kind] = node

    def relate(self, parent: EntityKind, child: EntityKind, find_children: ChildFinder) -> None:
        """
        Добавляет связь. Порядок добавления задаёт порядок обхода потомков.
        """
        if parent not in self._nodes or child not in self._nodes:
            raise ValueError(f"Связь {parent.value} -> {child.value}: тип не зарегистрирован")
        self._relations.setdefault(parent, []).append(Relation(parent, child, find_children))

    def node(self, kind: EntityKind) -> CascadeNode:
        try:
            return self._nodes[kind]
        except KeyError:
            raise ValueError(f"Тип {kind.value} не зарегистрирован в каскаде") from None

    def relations_of(self, kind: EntityKind) -> list[Relation]:
        return list(self._relations.get(kind, []))

    @property
    def relations(self) -> list[Relation]:
        return [relation for items in self._relations.values() for relation in items]

    def has_relation(self, parent: EntityKind, child: EntityKind) -> bool:
        return any(relation.child == child for relation in self._relations.get(parent, []))


class CascadeDeleter:
    """Удаляет сущность вместе со всеми локальными потомками."""

    def __init__(self, registry: CascadeRegistry) -> None:
        self._registry = registry

    async def delete(self, kind: EntityKind, entity_id: int) -> CascadeReport:
        """
        Удаляет корень и его потомков.

        Raises:
            NotFound: корня нет
            Exception: ошибка удаления потомка пробрасывается как есть
        """
        node = self._registry.node(kind)
        if not await node.exists(entity_id):
            raise node.not_found(entity_id)

        report = CascadeReport()
        await self._delete(kind, entity_id, report)

        await log_info(
            f"Каскадное удаление {kind.value} {entity_id} завершено: {len(report.deleted)} сущностей",
            type_msg=TypeMsg.DEBUG,
        )
        return report

    async def _delete(self, kind: EntityKind, entity_id: int, report: CascadeReport) -> None:
        """Обход в глубину по явному стеку: сущность удаляется после всех своих потомков."""
        visited = {(kind, entity_id)}
        stack = [_Frame(kind, entity_id, deque(self._registry.relations_of(kind)))]

        while stack:
            frame = stack[-1]

            if frame.children:
                child_kind, child_id = frame.children.popleft()
                if (child_kind, child_id) in visited:
                    continue
                # Потомок мог быть удалён по другой связи или консьюмером
                if not await self._registry.node(child_kind).exists(child_id):
                    continue
                visited.add((child_kind, child_id))
                stack.append(_Frame(child_kind, child_id, deque(self._registry.relations_of(child_kind))))
                continue

            if frame.relations:
                # Потомки следующей связи запрашиваются после удаления предыдущих
                relation = frame.relations.popleft()
                child_ids = await relation.find_children(frame.entity_id)
                frame.children.extend((relation.child, child_id) for child_id in child_ids)
                continue

            stack.pop()
            await self._registry.node(frame.kind).remove(frame.entity_id)
            report.deleted.append((frame.kind, frame.entity_id))
