"""Initial page load endpoint."""

import logging

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse

from initload.traceparent import TRACEPARENT_HEADER

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/", response_class=HTMLResponse)
async def index(request: Request):
    """Render the page, embedding the request's traceparent for the browser."""
    # Always present: the request pipeline runs before routing
    traceparent = request.headers[TRACEPARENT_HEADER]
    html = await request.app.state.renderer.render(traceparent)
    logger.info("Rendered initial load page")
    return HTMLResponse(html)
