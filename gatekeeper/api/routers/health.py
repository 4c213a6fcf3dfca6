# gatekeeper/api/routers/health.py

from fastapi import APIRouter, Request

from gatekeeper.config.settings import get_settings

router = APIRouter()


@router.get("/health")
async def health(request: Request):
    """Health check with correlation ID and gateway state."""
    settings = get_settings()
    gateway = getattr(request.app.state, "gateway", None)
    return {
        "status": "ok",
        "correlation_id": request.state.correlation_id,
        "environment": settings.environment,
        "version": settings.version,
        "gateway_running": bool(gateway and gateway.ingestion.running),
    }
