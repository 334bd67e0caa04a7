"""Liveness and dependency health."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from api.dependencies import get_settings
from adapter.mongodb.connection import get_mongodb_client, ping
from utils.settings import Settings

router = APIRouter(prefix="/health", tags=["health"])


def _mongodb_status(settings: Settings) -> dict[str, str]:
    client = get_mongodb_client(settings.mongo_url)
    if client is None:
        return {"status": "unhealthy", "message": "Connection failed or not configured"}
    if not ping(client):
        return {"status": "unhealthy", "message": "Ping failed"}
    return {"status": "healthy", "message": "Connection successful"}


@router.get("")
def health(settings: Settings = Depends(get_settings)):
    """Report 200 when MongoDB answers, 503 otherwise."""
    services = {"mongodb": _mongodb_status(settings)}
    healthy = all(s["status"] == "healthy" for s in services.values())

    return JSONResponse(
        status_code=status.HTTP_200_OK if healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": "healthy" if healthy else "degraded",
            "timestamp": datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
            "services": services,
        },
    )
