# tests/core/test_cascade.py
"""
Тесты каскадного удаления.
"""

from __future__ import annotations

import sys

import pytest

from src.common.constants import EntityKind
from src.common.exceptions import PostNotFound
from src.core.cascade import CascadeDeleter, CascadeNode, CascadeRegistry


class Store:
    """Сущности одного типа и журнал удалений."""

    def __init__(self, kind: EntityKind, ids, log: list, fail_on: int | None = None) -> None:
        self.kind = kind
        self.ids = set(ids)
        self.log = log
        self.fail_on = fail_on

    async def exists(self, entity_id: int) -> bool:
        return entity_id in self.ids

    async def remove(self, entity_id: int) -> None:
        if entity_id == self.fail_on:
            raise RuntimeError(f"не удалось удалить {self.kind.value} {entity_id}")
        self.ids.discard(entity_id)
        self.log.append((self.kind, entity_id))


@pytest.fixture
def log() -> list:
    return []


def build(log: list, comment_fail_on: int | None = None):
    """Пост 10 -> комментарии 1, 2; комментарий 1 -> лайк 100; пост 10 -> лайк 101."""
    posts = Store(EntityKind.POST, [10], log)
    comments = Store(EntityKind.COMMENT, [1, 2], log, fail_on=comment_fail_on)
    likes = Store(EntityKind.LIKE, [100, 101], log)
    comment_parent = {1: 10, 2: 10}
    like_parent = {100: ("comment", 1), 101: ("post", 10)}

    async def comments_of_post(post_id: int) -> list[int]:
        return [c for c in sorted(comments.ids) if comment_parent[c] == post_id]

    async def likes_of_post(post_id: int) -> list[int]:
        return [l for l in sorted(likes.ids) if like_parent[l] == ("post", post_id)]

    async def likes_of_comment(comment_id: int) -> list[int]:
        return [l for l in sorted(likes.ids) if like_parent[l] == ("comment", comment_id)]

    registry = CascadeRegistry()
    registry.register(CascadeNode(EntityKind.POST, posts.exists, posts.remove, PostNotFound))
    registry.register(CascadeNode(EntityKind.COMMENT, comments.exists, comments.remove))
    registry.register(CascadeNode(EntityKind.LIKE, likes.exists, likes.remove))
    registry.relate(EntityKind.POST, EntityKind.COMMENT, comments_of_post)
    registry.relate(EntityKind.POST, EntityKind.LIKE, likes_of_post)
    registry.relate(EntityKind.COMMENT, EntityKind.LIKE, likes_of_comment)
    return CascadeDeleter(registry), posts, comments, likes


class TestCascadeDeleter:
    """Удаление в глубину, корень последним."""

    @pytest.mark.asyncio
    async def test_depth_first_root_last(self, log: list) -> None:
        deleter, posts, comments, likes = build(log)

        report = await deleter.delete(EntityKind.POST, 10)

        assert log == [
            (EntityKind.LIKE, 100),
            (EntityKind.COMMENT, 1),
            (EntityKind.COMMENT, 2),
            (EntityKind.LIKE, 101),
            (EntityKind.POST, 10),
        ]
        assert report.deleted == log
        assert report.count(EntityKind.LIKE) == 2
        assert not posts.ids and not comments.ids and not likes.ids

    @pytest.mark.asyncio
    async def test_missing_root(self, log: list) -> None:
        deleter, *_ = build(log)

        with pytest.raises(PostNotFound, match="Post with id = 11 not found"):
            await deleter.delete(EntityKind.POST, 11)
        assert log == []

    @pytest.mark.asyncio
    async def test_leaf_without_children(self, log: list) -> None:
        deleter, *_ = build(log)

        report = await deleter.delete(EntityKind.COMMENT, 2)

        assert report.deleted == [(EntityKind.COMMENT, 2)]

    @pytest.mark.asyncio
    async def test_partial_failure_keeps_deleted_children(self, log: list) -> None:
        """Компенсаций нет: удалённые потомки остаются удалёнными, корень цел."""
        deleter, posts, comments, likes = build(log, comment_fail_on=2)

        with pytest.raises(RuntimeError):
            await deleter.delete(EntityKind.POST, 10)

        assert log == [(EntityKind.LIKE, 100), (EntityKind.COMMENT, 1)]
        assert posts.ids == {10}
        assert comments.ids == {2}
        assert likes.ids == {101}

    @pytest.mark.asyncio
    async def test_retry_after_failure_finishes(self, log: list) -> None:
        deleter, posts, comments, _ = build(log, comment_fail_on=2)
        with pytest.raises(RuntimeError):
            await deleter.delete(EntityKind.POST, 10)

        comments.fail_on = None
        report = await deleter.delete(EntityKind.POST, 10)

        assert report.deleted[-1] == (EntityKind.POST, 10)
        assert (EntityKind.COMMENT, 1) not in report.deleted
        assert not posts.ids

    @pytest.mark.asyncio
    async def test_deep_chain_does_not_hit_recursion_limit(self, log: list) -> None:
        """Цепочка глубже лимита рекурсии: обход идёт по явному стеку."""
        depth = sys.getrecursionlimit() * 2
        comments = Store(EntityKind.COMMENT, range(depth), log)

        async def replies(comment_id: int) -> list[int]:
            return [comment_id + 1] if comment_id + 1 < depth else []

        registry = CascadeRegistry()
        registry.register(CascadeNode(EntityKind.COMMENT, comments.exists, comments.remove))
        registry.relate(EntityKind.COMMENT, EntityKind.COMMENT, replies)

        report = await CascadeDeleter(registry).delete(EntityKind.COMMENT, 0)

        assert len(report.deleted) == depth
        assert report.deleted[0] == (EntityKind.COMMENT, depth - 1)
        assert report.deleted[-1] == (EntityKind.COMMENT, 0)


class TestCascadeRegistry:

    def test_relation_needs_registered_kinds(self) -> None:
        registry = CascadeRegistry()
        store = Store(EntityKind.POST, [], [])
        registry.register(CascadeNode(EntityKind.POST, store.exists, store.remove))

        with pytest.raises(ValueError):
            registry.relate(EntityKind.POST, EntityKind.COMMENT, store.exists)

    def test_unknown_kind(self) -> None:
        with pytest.raises(ValueError, match="не зарегистрирован"):
            CascadeRegistry().node(EntityKind.USER)

    def test_has_relation(self, log: list) -> None:
        deleter, *_ = build(log)
        registry = deleter._registry

        assert registry.has_relation(EntityKind.POST, EntityKind.COMMENT)
        assert not registry.has_relation(EntityKind.LIKE, EntityKind.POST)
        assert len(registry.relations) == 3
