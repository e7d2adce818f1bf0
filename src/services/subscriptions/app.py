# src/services/subscriptions/app.py
"""
FastAPI приложение Subscriptions Service.
"""

from src.common.constants import Component
from src.services.app_factory import create_app
from src.services.subscriptions.routes import router

app = create_app(
    [Component.SUBSCRIPTIONS],
    title="Subscriptions Service",
    routers=[router],
    description="Подписки между пользователями",
)

if __name__ == "__main__":
    import uvicorn
    from src.config import settings

    uvicorn.run(app, host="0.0.0.0", port=settings.deployment.port_of(Component.SUBSCRIPTIONS.value))
