# tests/services/test_api.py
"""
Тесты HTTP API: маршруты, коды ответов и формат ошибок.
"""

from __future__ import annotations

import asyncio
from datetime import date
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from src.common.constants import Component
from src.common.exceptions import TransientDependencyFailure
from src.services import dependencies
from src.services.app_factory import create_app
from src.services.dependencies import ServiceContainer
from src.services.routers import SERVICE_ROUTERS
from src.shared.events import PostEvent, Topics, UserEvent


@pytest.fixture
def client(container: ServiceContainer, monkeypatch: pytest.MonkeyPatch) -> TestClient:
    """Приложение со всеми роутерами без lifespan (инфраструктура в памяти)."""
    monkeypatch.setattr(dependencies, "_container", container)
    app = create_app(tuple(Component), title="Social Network", routers=SERVICE_ROUTERS.values())
    return TestClient(app)


def register(client: TestClient, username: str) -> int:
    response = client.post("/api/v1/users", json={"username": username})
    assert response.status_code == 201
    return response.json()["user_id"]


class TestErrorMapping:
    """Доменные исключения -> HTTP коды."""

    def test_not_found_is_404(self, client: TestClient) -> None:
        response = client.get("/api/v1/posts/10")

        assert response.status_code == 404
        assert response.json() == {"error_code": "not_found", "message": "Post with id = 10 not found"}

    def test_validation_is_400(self, client: TestClient) -> None:
        response = client.post("/api/v1/posts", json={"user_id": 5, "content": "hi"})

        assert response.status_code == 400
        assert response.json()["error_code"] == "validation_failed"
        assert response.json()["message"] == "User with id = 5 not found"

    def test_dependency_failure_is_503(self, client: TestClient, container: ServiceContainer) -> None:
        container.service(Component.USERS).verify_user = AsyncMock(side_effect=TransientDependencyFailure("timeout"))

        response = client.post("/api/v1/posts", json={"user_id": 1, "content": "hi"})

        assert response.status_code == 503
        assert response.json()["error_code"] == "dependency_unavailable"

    def test_request_body_validation(self, client: TestClient) -> None:
        response = client.post("/api/v1/comments", json={"post_id": 1, "user_id": 1, "content": ""})

        assert response.status_code == 422


class TestPostsApi:

    def test_create_and_open(self, client: TestClient) -> None:
        user_id = register(client, "alice")

        created = client.post("/api/v1/posts", json={"user_id": user_id, "content": "hello"})
        post_id = created.json()["post_id"]
        card = client.get(f"/api/v1/posts/{post_id}")

        assert created.status_code == 201
        assert card.json()["username"] == "alice"
        assert card.json()["likes"] == 0
        assert client.get(f"/api/v1/posts/{post_id}/user-id").json() == user_id

    def test_delete_returns_cascade(self, client: TestClient, container: ServiceContainer) -> None:
        user_id = register(client, "alice")
        post_id = client.post("/api/v1/posts", json={"user_id": user_id}).json()["post_id"]
        comment = client.post(
            "/api/v1/comments", json={"post_id": post_id, "user_id": user_id, "content": "c"}
        ).json()

        response = client.delete(f"/api/v1/posts/{post_id}")

        assert response.status_code == 200
        assert response.json() == {
            "deleted": [
                {"kind": "comment", "id": comment["comment_id"]},
                {"kind": "post", "id": post_id},
            ]
        }
        records = container.event_bus.published(Topics.POST_DELETED)
        assert PostEvent.from_json(records[0].value).post_id == post_id


class TestUsersApi:

    def test_open_user(self, client: TestClient) -> None:
        user_id = register(client, "alice")

        response = client.get(f"/api/v1/users/{user_id}/open")

        assert response.status_code == 200
        assert response.json()["count_posts"] == 0

    def test_duplicate_username(self, client: TestClient) -> None:
        register(client, "alice")

        response = client.post("/api/v1/users", json={"username": "alice"})

        assert response.status_code == 400
        assert response.json()["message"] == "Username alice is busy"

    def test_batch(self, client: TestClient) -> None:
        first, second = register(client, "alice"), register(client, "bob")

        response = client.post("/api/v1/users/batch", json=[second])

        assert [user["user_id"] for user in response.json()] == [second]
        assert first != second


class TestSubscriptionsApi:

    def test_subscribe_and_count(self, client: TestClient) -> None:
        alice, bob = register(client, "alice"), register(client, "bob")

        response = client.post("/api/v1/subscriptions", json={"follower_id": bob, "following_id": alice})

        assert response.status_code == 201
        assert client.get(f"/api/v1/subscriptions/{alice}/followers/count").json() == 1
        assert client.get(f"/api/v1/subscriptions/{alice}/followers").json() == [bob]

    def test_subscribe_to_self(self, client: TestClient) -> None:
        alice = register(client, "alice")

        response = client.post("/api/v1/subscriptions", json={"follower_id": alice, "following_id": alice})

        assert response.status_code == 400


class TestStatisticsApi:

    def test_camel_case_rows_and_delete(self, client: TestClient, container: ServiceContainer, today: date) -> None:
        statistics = container.service(Component.STATISTICS)
        statistics._today = lambda: today
        asyncio.run(statistics.record(Topics.USER_CREATED, UserEvent(user_id=1, username="alice")))

        rows = client.get("/api/v1/statistics/users")
        row = client.get(f"/api/v1/statistics/users/{today}")
        deleted = client.delete(f"/api/v1/statistics/users/{today}")

        assert rows.json() == [{"statisticDate": "2024-05-17", "newUsers": 1, "remoteUsers": 0}]
        assert row.json()["newUsers"] == 1
        assert deleted.status_code == 204
        assert client.get("/api/v1/statistics/users").json() == []

    def test_unknown_kind(self, client: TestClient) -> None:
        response = client.get("/api/v1/statistics/orders")

        assert response.status_code == 400

    def test_missing_date(self, client: TestClient) -> None:
        response = client.get("/api/v1/statistics/posts/2024-05-17")

        assert response.status_code == 404
        assert response.json()["message"] == "Statistic with date = 2024-05-17 not found"


class TestHealth:

    def test_degraded_when_dependency_down(self, client: TestClient) -> None:
        healthy = MagicMock(health_check=AsyncMock(return_value=True))
        down = MagicMock(health_check=AsyncMock(return_value=False))

        with patch("src.infra.database.get_db", return_value=healthy), \
             patch("src.infra.redis_client.get_redis", return_value=down), \
             patch("src.infra.event_bus.get_event_bus", return_value=healthy):
            response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "degraded"
        assert response.json()["dependencies"]["redis"] == "unhealthy"
