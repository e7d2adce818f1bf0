# src/services/users/app.py
"""
FastAPI приложение Users Service.
"""

from src.common.constants import Component
from src.services.app_factory import create_app
from src.services.users.routes import router

app = create_app(
    [Component.USERS],
    title="Users Service",
    routers=[router],
    description="Регистрация, профили и публичные карточки пользователей",
)

if __name__ == "__main__":
    import uvicorn
    from src.config import settings

    uvicorn.run(app, host="0.0.0.0", port=settings.deployment.port_of(Component.USERS.value))
