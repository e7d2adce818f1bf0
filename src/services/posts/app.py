# src/services/posts/app.py
"""
FastAPI приложение Posts Service.
"""

from src.common.constants import Component
from src.services.app_factory import create_app
from src.services.posts.routes import router

app = create_app(
    [Component.POSTS],
    title="Posts Service",
    routers=[router],
    description="Посты и их карточки со счётчиками",
)

if __name__ == "__main__":
    import uvicorn
    from src.config import settings

    uvicorn.run(app, host="0.0.0.0", port=settings.deployment.port_of(Component.POSTS.value))
