import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from easyaccess.api.http import files_router, health_router
from easyaccess.core.config import Settings, settings as default_settings
from easyaccess.domains.files.exceptions import StoreUnavailableError
from easyaccess.infrastructure.storage import create_storage

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Сборка приложения; хранилище создается и закрывается в lifespan"""
    settings = settings or default_settings

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        storage = create_storage(settings)
        await storage.open()
        app.state.storage = storage
        logger.info(f"EasyAccess started with {storage.name} storage")
        try:
            yield
        finally:
            await storage.close()

    app = FastAPI(
        title="EasyAccess",
        description="Файлы с текстом и изображениями, защищенные паролем",
        version="1.0.0",
        lifespan=lifespan
    )
    app.state.settings = settings

    # Настройка CORS для работы с frontend
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(StoreUnavailableError)
    async def store_unavailable_handler(request: Request, exc: StoreUnavailableError):
        return JSONResponse(status_code=503, content={"detail": str(exc)})

    # Подключаем роутеры
    app.include_router(health_router)
    app.include_router(files_router)

    @app.get("/")
    async def root():
        """Корневой эндпоинт"""
        return {
            "message": "EasyAccess API",
            "version": "1.0.0",
            "docs": "/docs",
            "health": "/health"
        }

    return app


app = create_app()
