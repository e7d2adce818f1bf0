# src/services/routers.py
"""
Роутеры и названия сервисов по компонентам.
"""

from fastapi import APIRouter

from src.common.constants import Component
from src.services.comments.routes import router as comments_router
from src.services.likes.routes import router as likes_router
from src.services.media.routes import router as media_router
from src.services.notifications.routes import router as notifications_router
from src.services.posts.routes import router as posts_router
from src.services.statistics.routes import router as statistics_router
from src.services.subscriptions.routes import router as subscriptions_router
from src.services.users.routes import router as users_router

SERVICE_ROUTERS: dict[Component, APIRouter] = {
    Component.USERS: users_router,
    Component.POSTS: posts_router,
    Component.COMMENTS: comments_router,
    Component.LIKES: likes_router,
    Component.MEDIA: media_router,
    Component.SUBSCRIPTIONS: subscriptions_router,
    Component.NOTIFICATIONS: notifications_router,
    Component.STATISTICS: statistics_router,
}

SERVICE_TITLES: dict[Component, str] = {
    component: f"{component.value.capitalize()} Service" for component in Component
}
