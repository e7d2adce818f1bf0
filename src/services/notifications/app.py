# src/services/notifications/app.py
"""
FastAPI приложение Notifications Service.
"""

from src.common.constants import Component
from src.services.app_factory import create_app
from src.services.notifications.routes import router

app = create_app(
    [Component.NOTIFICATIONS],
    title="Notifications Service",
    routers=[router],
    description="Уведомления о событиях других сервисов",
)

if __name__ == "__main__":
    import uvicorn
    from src.config import settings

    uvicorn.run(app, host="0.0.0.0", port=settings.deployment.port_of(Component.NOTIFICATIONS.value))
