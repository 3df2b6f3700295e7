from fastapi import APIRouter, Request

from easyaccess.domains.files.entities import utcnow

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(request: Request):
    """Проверка работоспособности"""
    return {
        "status": "healthy",
        "timestamp": utcnow().isoformat(),
        "storage": request.app.state.storage.name
    }
