"""Health check endpoint."""

from fastapi import APIRouter, Request

from initload.config import APP_VERSION

router = APIRouter()


@router.get("/health")
async def health_check(request: Request):
    """Return service liveness; excluded from tracing."""
    settings = request.app.state.settings
    return {"status": "healthy", "service": settings.service_name, "version": APP_VERSION}
