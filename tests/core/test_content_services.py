# tests/core/test_content_services.py
"""
Тесты сервисов комментариев, лайков, медиа и подписок.
"""

from __future__ import annotations

import pytest
import pytest_asyncio

from src.common.constants import Component, EntityKind
from src.common.exceptions import (
    CommentNotFound,
    LikeNotFound,
    MediaNotFound,
    SubscriptionNotFound,
    ValidationFailed,
)
from src.core.comments import CommentCreateDTO, CommentService, CommentUpdateDTO
from src.core.likes import CommentLikeDTO, LikeService, PostLikeDTO
from src.core.media import MediaService, MediaUploadDTO
from src.core.posts import PostCreateDTO
from src.core.subscriptions import SubscriptionCreateDTO, SubscriptionService
from src.core.users import UserCreateDTO
from src.infra.memory_bus import InMemoryEventBus
from src.services.dependencies import ServiceContainer
from src.shared.events import LikeEvent, MediaEvent, Topics


@pytest_asyncio.fixture
async def alice(container: ServiceContainer) -> int:
    return (await container.service(Component.USERS).register_user(UserCreateDTO(username="alice"))).user_id


@pytest_asyncio.fixture
async def bob(container: ServiceContainer) -> int:
    return (await container.service(Component.USERS).register_user(UserCreateDTO(username="bob"))).user_id


@pytest_asyncio.fixture
async def post_id(container: ServiceContainer, alice: int) -> int:
    post = await container.service(Component.POSTS).create_post(PostCreateDTO(user_id=alice, content="post"))
    return post.post_id


class TestCommentService:

    @pytest.fixture
    def comments(self, container: ServiceContainer) -> CommentService:
        return container.service(Component.COMMENTS)

    @pytest.mark.asyncio
    async def test_add_to_missing_post(self, comments: CommentService, alice: int) -> None:
        with pytest.raises(ValidationFailed, match="Post with id = 77 not found"):
            await comments.add_comment(CommentCreateDTO(post_id=77, user_id=alice, content="hi"))

    @pytest.mark.asyncio
    async def test_count_refreshes_after_add(self, comments: CommentService, bob: int, post_id: int) -> None:
        assert await comments.count_by_post_id(post_id) == 0

        await comments.add_comment(CommentCreateDTO(post_id=post_id, user_id=bob, content="hi"))

        assert await comments.count_by_post_id(post_id) == 1
        assert [c.content for c in await comments.get_all_by_post_id(post_id)] == ["hi"]

    @pytest.mark.asyncio
    async def test_update(self, comments: CommentService, bob: int, post_id: int, memory_bus: InMemoryEventBus) -> None:
        comment = await comments.add_comment(CommentCreateDTO(post_id=post_id, user_id=bob, content="hi"))
        await comments.get_all_by_post_id(post_id)

        await comments.update_comment(comment.comment_id, CommentUpdateDTO(content="edited"))

        assert [c.content for c in await comments.get_all_by_post_id(post_id)] == ["edited"]
        assert len(memory_bus.published(Topics.COMMENT_UPDATED)) == 1

    @pytest.mark.asyncio
    async def test_update_missing(self, comments: CommentService) -> None:
        with pytest.raises(CommentNotFound):
            await comments.update_comment(3, CommentUpdateDTO(content="x"))

    @pytest.mark.asyncio
    async def test_delete_with_likes(self, comments: CommentService, container: ServiceContainer, bob: int, post_id: int) -> None:
        comment = await comments.add_comment(CommentCreateDTO(post_id=post_id, user_id=bob, content="hi"))
        like = await container.service(Component.LIKES).like_comment(
            CommentLikeDTO(user_id=bob, comment_id=comment.comment_id)
        )

        report = await comments.delete_comment(comment.comment_id)

        assert report.deleted == [(EntityKind.LIKE, like.like_id), (EntityKind.COMMENT, comment.comment_id)]

    @pytest.mark.asyncio
    async def test_delete_all_by_post_skips_missing(self, comments: CommentService, bob: int, post_id: int) -> None:
        for text in ("a", "b"):
            await comments.add_comment(CommentCreateDTO(post_id=post_id, user_id=bob, content=text))

        assert await comments.delete_all_by_post_id(post_id) == 2
        assert await comments.delete_all_by_post_id(post_id) == 0


class TestLikeService:

    @pytest.fixture
    def likes(self, container: ServiceContainer) -> LikeService:
        return container.service(Component.LIKES)

    @pytest.mark.asyncio
    async def test_post_like_topic(self, likes: LikeService, bob: int, post_id: int, memory_bus: InMemoryEventBus) -> None:
        like = await likes.like_post(PostLikeDTO(user_id=bob, post_id=post_id))

        record = memory_bus.published(Topics.POST_LIKE_CREATED)[0]
        assert record.key == like.like_id
        assert LikeEvent.from_json(record.value).post_id == post_id
        assert memory_bus.published(Topics.COMMENT_LIKE_CREATED) == []

    @pytest.mark.asyncio
    async def test_comment_like_needs_comment(self, likes: LikeService, bob: int) -> None:
        with pytest.raises(ValidationFailed, match="Comment with id = 9 not found"):
            await likes.like_comment(CommentLikeDTO(user_id=bob, comment_id=9))

    @pytest.mark.asyncio
    async def test_counter_cache_evicted(self, likes: LikeService, alice: int, bob: int, post_id: int) -> None:
        await likes.like_post(PostLikeDTO(user_id=bob, post_id=post_id))
        assert await likes.count_post_likes(post_id) == 1

        like = await likes.like_post(PostLikeDTO(user_id=alice, post_id=post_id))
        assert await likes.count_post_likes(post_id) == 2

        await likes.delete_like(like.like_id)
        assert await likes.count_post_likes(post_id) == 1

    @pytest.mark.asyncio
    async def test_delete_by_like_id(self, likes: LikeService, bob: int, post_id: int, memory_bus: InMemoryEventBus) -> None:
        like = await likes.like_post(PostLikeDTO(user_id=bob, post_id=post_id))

        report = await likes.delete_like(like.like_id)

        assert report.deleted == [(EntityKind.LIKE, like.like_id)]
        assert memory_bus.published(Topics.POST_LIKE_DELETED)[0].key == like.like_id

    @pytest.mark.asyncio
    async def test_delete_missing(self, likes: LikeService) -> None:
        with pytest.raises(LikeNotFound, match="Like with id = 5 not found"):
            await likes.delete_like(5)

    @pytest.mark.asyncio
    async def test_delete_all_by_user(self, likes: LikeService, bob: int, post_id: int) -> None:
        await likes.like_post(PostLikeDTO(user_id=bob, post_id=post_id))
        await likes.like_post(PostLikeDTO(user_id=bob, post_id=post_id))

        assert await likes.delete_all_by_user_id(bob) == 2
        assert await likes.ids_by_user_id(bob) == []


class TestMediaService:

    @pytest.fixture
    def media(self, container: ServiceContainer) -> MediaService:
        return container.service(Component.MEDIA)

    @pytest.mark.asyncio
    async def test_upload_builds_url(self, media: MediaService, alice: int, memory_bus: InMemoryEventBus) -> None:
        uploaded = await media.upload_media(MediaUploadDTO(user_id=alice, file_name="cat.png", file_size=2048))

        assert uploaded.url.startswith("http://localhost:9000/media/")
        assert uploaded.url.endswith("_cat.png")
        event = MediaEvent.from_json(memory_bus.published(Topics.MEDIA_UPLOAD)[0].value)
        assert event.file_size == 2048

    @pytest.mark.asyncio
    async def test_upload_for_missing_user(self, media: MediaService) -> None:
        with pytest.raises(ValidationFailed):
            await media.upload_media(MediaUploadDTO(user_id=3, file_name="cat.png", file_size=1))

    @pytest.mark.asyncio
    async def test_negative_verification_not_cached(self, media: MediaService, container: ServiceContainer, alice: int) -> None:
        assert await media.verify_media("http://localhost:9000/media/x_cat.png") is False

        repo = container._repos[Component.MEDIA]
        uploaded = await repo.create(
            MediaUploadDTO(user_id=alice, file_name="cat.png", file_size=1),
            "http://localhost:9000/media/x_cat.png",
        )

        assert await media.verify_media(uploaded.url) is True

    @pytest.mark.asyncio
    async def test_delete_evicts_verification(self, media: MediaService, alice: int) -> None:
        uploaded = await media.upload_media(MediaUploadDTO(user_id=alice, file_name="cat.png", file_size=1))
        assert await media.verify_media(uploaded.url) is True

        await media.delete_media(uploaded.media_id)

        assert await media.verify_media(uploaded.url) is False
        with pytest.raises(MediaNotFound):
            await media.get_media(uploaded.media_id)


class TestSubscriptionService:

    @pytest.fixture
    def subscriptions(self, container: ServiceContainer) -> SubscriptionService:
        return container.service(Component.SUBSCRIPTIONS)

    @pytest.mark.asyncio
    async def test_subscribe_to_self(self, subscriptions: SubscriptionService, alice: int) -> None:
        with pytest.raises(ValidationFailed, match="You cannot subscribe to yourself"):
            await subscriptions.subscribe(SubscriptionCreateDTO(follower_id=alice, following_id=alice))

    @pytest.mark.asyncio
    async def test_subscribe_twice(self, subscriptions: SubscriptionService, alice: int, bob: int) -> None:
        dto = SubscriptionCreateDTO(follower_id=bob, following_id=alice)
        await subscriptions.subscribe(dto)

        with pytest.raises(ValidationFailed, match="already subscribed"):
            await subscriptions.subscribe(dto)

    @pytest.mark.asyncio
    async def test_followers_and_following(self, subscriptions: SubscriptionService, alice: int, bob: int) -> None:
        await subscriptions.subscribe(SubscriptionCreateDTO(follower_id=bob, following_id=alice))

        assert await subscriptions.get_followers(alice) == [bob]
        assert await subscriptions.get_following(bob) == [alice]
        assert await subscriptions.count_followers(bob) == 0

    @pytest.mark.asyncio
    async def test_unsubscribe(self, subscriptions: SubscriptionService, alice: int, bob: int, memory_bus: InMemoryEventBus) -> None:
        await subscriptions.subscribe(SubscriptionCreateDTO(follower_id=bob, following_id=alice))

        await subscriptions.unsubscribe(bob, alice)

        assert await subscriptions.count_followers(alice) == 0
        assert len(memory_bus.published(Topics.SUBSCRIPTION_DELETED)) == 1
        with pytest.raises(SubscriptionNotFound, match=f"User {bob} is not subscribed to {alice}"):
            await subscriptions.unsubscribe(bob, alice)

    @pytest.mark.asyncio
    async def test_delete_all_both_directions(self, subscriptions: SubscriptionService, container: ServiceContainer, alice: int, bob: int) -> None:
        carol = (await container.service(Component.USERS).register_user(UserCreateDTO(username="carol"))).user_id
        await subscriptions.subscribe(SubscriptionCreateDTO(follower_id=bob, following_id=alice))
        await subscriptions.subscribe(SubscriptionCreateDTO(follower_id=alice, following_id=carol))
        await subscriptions.subscribe(SubscriptionCreateDTO(follower_id=bob, following_id=carol))

        assert await subscriptions.delete_all_by_user_id(alice) == 2
        assert await subscriptions.get_followers(carol) == [bob]
