from easyaccess.api.http.health import router as health_router
from easyaccess.api.http.files import router as files_router

__all__ = [
    "health_router",
    "files_router"
]
