# src/services/comments/app.py
"""
FastAPI приложение Comments Service.
"""

from src.common.constants import Component
from src.services.app_factory import create_app
from src.services.comments.routes import router

app = create_app(
    [Component.COMMENTS],
    title="Comments Service",
    routers=[router],
    description="Комментарии к постам",
)

if __name__ == "__main__":
    import uvicorn
    from src.config import settings

    uvicorn.run(app, host="0.0.0.0", port=settings.deployment.port_of(Component.COMMENTS.value))
