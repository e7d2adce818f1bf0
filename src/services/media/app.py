# src/services/media/app.py
"""
FastAPI приложение Media Service.
"""

from src.common.constants import Component
from src.services.app_factory import create_app
from src.services.media.routes import router

app = create_app(
    [Component.MEDIA],
    title="Media Service",
    routers=[router],
    description="Метаданные загруженных файлов",
)

if __name__ == "__main__":
    import uvicorn
    from src.config import settings

    uvicorn.run(app, host="0.0.0.0", port=settings.deployment.port_of(Component.MEDIA.value))
