"""FastAPI exception handlers producing ErrorResponse bodies."""

import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from initload.errors.exceptions import InitLoadError
from initload.models.common import ErrorDetail, ErrorResponse

logger = logging.getLogger(__name__)


def register_exception_handlers(app: FastAPI) -> None:
    """Register all custom exception handlers on the FastAPI app."""

    @app.exception_handler(InitLoadError)
    async def initload_error_handler(request: Request, exc: InitLoadError):
        trace_id = getattr(request.state, "trace_id", "unknown")
        logger.error(
            "request_failed",
            extra={
                "path": request.url.path,
                "method": request.method,
                "trace_id": trace_id,
                "code": exc.code,
                "reason": str(exc),
            },
        )
        error_response = ErrorResponse(
            error=ErrorDetail(
                code=exc.code,
                message=exc.message,
                details=exc.details,
                trace_id=trace_id,
                timestamp=datetime.now(timezone.utc),
            ),
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=error_response.model_dump(mode="json", exclude_none=True),
        )
