# tests/shared/test_events.py
"""
Тесты схем событий и реестра топиков.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from src.common.exceptions import NonRetryableDeliveryFailure
from src.shared.events import (
    ALL_TOPICS,
    CommentEvent,
    LikeEvent,
    MediaEvent,
    PostEvent,
    SubscriptionEvent,
    Topics,
    UserEvent,
    decode_event,
    payload_type,
)

CREATED = datetime(2024, 5, 17, 12, 0, tzinfo=timezone.utc)


class TestWireFormat:
    """Поля сериализуются в camelCase."""

    def test_post_event_camel_case(self) -> None:
        event = PostEvent(post_id=10, user_id=1, media_url="http://files/a.png", created_at=CREATED)

        data = json.loads(event.to_json())

        assert data["postId"] == 10
        assert data["userId"] == 1
        assert data["mediaUrl"] == "http://files/a.png"
        assert "post_id" not in data

    def test_decode_accepts_camel_case(self) -> None:
        raw = '{"mediaId": 3, "userId": 1, "url": "http://files/a.png", "fileSize": 1024.5, "extra": 1}'

        event = decode_event(Topics.MEDIA_UPLOAD, raw)

        assert isinstance(event, MediaEvent)
        assert event.file_size == 1024.5

    def test_events_are_immutable(self) -> None:
        event = UserEvent(user_id=1, username="alice")

        with pytest.raises(ValidationError):
            event.username = "bob"


class TestPartitionKey:
    """Ключ партиции - id изменившейся сущности."""

    @pytest.mark.parametrize(
        ("event", "key"),
        [
            (UserEvent(user_id=1, username="alice"), 1),
            (PostEvent(post_id=10, user_id=1), 10),
            (CommentEvent(comment_id=5, post_id=10, user_id=1), 5),
            (LikeEvent(like_id=7, user_id=1, post_id=10), 7),
            (MediaEvent(media_id=3, user_id=1, url="u"), 3),
            (SubscriptionEvent(subscription_id=4, follower_id=1, following_id=2), 4),
        ],
    )
    def test_partition_key(self, event, key: int) -> None:
        assert event.partition_key == key


class TestLikeEvent:

    def test_exactly_one_target(self) -> None:
        with pytest.raises(ValidationError):
            LikeEvent(like_id=1, user_id=1)
        with pytest.raises(ValidationError):
            LikeEvent(like_id=1, user_id=1, post_id=10, comment_id=5)

    def test_target_kind(self) -> None:
        assert LikeEvent(like_id=1, user_id=1, post_id=10).is_post_like is True
        assert LikeEvent(like_id=1, user_id=1, comment_id=5).is_post_like is False


class TestEventId:
    """Стабильный идентификатор для окна дедупликации."""

    def test_same_fact_same_id(self) -> None:
        first = PostEvent(post_id=10, user_id=1, created_at=CREATED, updated_at=CREATED)
        second = PostEvent.from_json(first.to_json())

        assert first.event_id(Topics.POST_DELETED) == second.event_id(Topics.POST_DELETED)

    def test_topic_changes_id(self) -> None:
        event = PostEvent(post_id=10, user_id=1, created_at=CREATED)

        assert event.event_id(Topics.POST_CREATED) != event.event_id(Topics.POST_DELETED)

    def test_update_changes_id(self) -> None:
        before = PostEvent(post_id=10, user_id=1, updated_at=CREATED)
        after = PostEvent(post_id=10, user_id=1, updated_at=CREATED.replace(minute=5))

        assert before.event_id(Topics.POST_UPDATED) != after.event_id(Topics.POST_UPDATED)


class TestRegistry:
    """Каждый топик несёт ровно один тип payload."""

    def test_all_topics_registered(self) -> None:
        assert len(ALL_TOPICS) == 17
        assert payload_type(Topics.COMMENT_LIKE_DELETED) is LikeEvent
        assert payload_type(Topics.SUBSCRIPTION_CREATED) is SubscriptionEvent

    def test_unknown_topic(self) -> None:
        with pytest.raises(NonRetryableDeliveryFailure, match="Неизвестный топик"):
            decode_event("order.created", "{}")

    def test_malformed_payload(self) -> None:
        with pytest.raises(NonRetryableDeliveryFailure):
            decode_event(Topics.POST_DELETED, '{"postId": "not-a-number"}')

    def test_payload_of_wrong_type(self) -> None:
        """Payload другого топика не декодируется."""
        raw = UserEvent(user_id=1, username="alice").to_json()

        with pytest.raises(NonRetryableDeliveryFailure):
            decode_event(Topics.POST_DELETED, raw)

    def test_dead_letter_name(self) -> None:
        assert Topics.dead_letter(Topics.USER_DELETED) == "user.deleted.DLT"
