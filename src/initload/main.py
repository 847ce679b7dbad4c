"""FastAPI application factory and lifespan management."""

import logging
from collections.abc import Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI
from opentelemetry.instrumentation.asgi import OpenTelemetryMiddleware
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.util.http import parse_excluded_urls

from initload import telemetry
from initload.api.middleware.pipeline import RequestPipeline, RequestPipelineMiddleware, abort_process, default_pipeline
from initload.api.static import StaticAssets
from initload.config import APP_VERSION, Settings, settings as default_settings
from initload.errors.exceptions import RandomSourceError
from initload.logging_config import configure_logging
from initload.renderer import PageConfig, PageRenderer

# Configure logging at import time
configure_logging(log_level=default_settings.log_level, json_output=default_settings.json_logs)

logger = logging.getLogger(__name__)

_UNTRACED_PATHS = "health,static"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Flush exported spans on shutdown when the app owns its tracer provider."""
    logger.info("Initial load server started (exporter=%s)", app.state.settings.exporter)
    yield

    if app.state.owns_tracer_provider:
        telemetry.shutdown(app.state.tracer_provider)
    logger.info("Initial load server shutdown complete")


def create_app(
    settings: Settings | None = None,
    tracer_provider: TracerProvider | None = None,
    renderer: PageRenderer | None = None,
    pipeline: RequestPipeline | None = None,
    on_fatal: Callable[[RandomSourceError], None] = abort_process,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or default_settings

    app = FastAPI(
        title="Initial Load Tracing Demo",
        version=APP_VERSION,
        description="Propagates a server trace context to the browser on initial page load.",
        lifespan=lifespan,
    )

    telemetry.configure_propagation()
    app.state.owns_tracer_provider = tracer_provider is None
    if tracer_provider is None:
        tracer_provider = telemetry.create_tracer_provider(settings)

    app.state.settings = settings
    app.state.tracer_provider = tracer_provider
    app.state.renderer = renderer or PageRenderer(
        PageConfig.from_settings(settings),
        delay_range_ms=settings.delay_range_ms,
        tracer_provider=tracer_provider,
    )

    # Order matters: last added = first executed. The request pipeline must
    # run first so the instrumentation always sees a traceparent header.
    app.add_middleware(
        OpenTelemetryMiddleware,
        excluded_urls=parse_excluded_urls(_UNTRACED_PATHS),
        tracer_provider=tracer_provider,
    )
    app.add_middleware(
        RequestPipelineMiddleware,
        pipeline=pipeline if pipeline is not None else default_pipeline(),
        on_fatal=on_fatal,
    )

    from initload.errors.handlers import register_exception_handlers
    register_exception_handlers(app)

    from initload.api.router import api_router
    app.include_router(api_router)

    app.mount("/static", StaticAssets(directory=settings.static_dir, check_dir=False), name="static")

    return app
