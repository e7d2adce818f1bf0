# src/services/likes/app.py
"""
FastAPI приложение Likes Service.
"""

from src.common.constants import Component
from src.services.app_factory import create_app
from src.services.likes.routes import router

app = create_app(
    [Component.LIKES],
    title="Likes Service",
    routers=[router],
    description="Лайки постов и комментариев",
)

if __name__ == "__main__":
    import uvicorn
    from src.config import settings

    uvicorn.run(app, host="0.0.0.0", port=settings.deployment.port_of(Component.LIKES.value))
