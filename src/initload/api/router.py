"""Master API router."""

from fastapi import APIRouter

from initload.api.routes import health, page

api_router = APIRouter()
api_router.include_router(page.router, tags=["Page"])
api_router.include_router(health.router, tags=["Health"])
