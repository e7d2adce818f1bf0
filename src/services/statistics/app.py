# src/services/statistics/app.py
"""
FastAPI приложение Statistics Service.
"""

from src.common.constants import Component
from src.services.app_factory import create_app
from src.services.statistics.routes import router

app = create_app(
    [Component.STATISTICS],
    title="Statistics Service",
    routers=[router],
    description="Дневные счётчики активности",
)

if __name__ == "__main__":
    import uvicorn
    from src.config import settings

    uvicorn.run(app, host="0.0.0.0", port=settings.deployment.port_of(Component.STATISTICS.value))
