"""Ordered request-transform pipeline and the traceparent header ensurer.

The pipeline runs as pure ASGI middleware. It must be registered so that it
executes before the OpenTelemetry middleware: the instrumentation extracts
the parent context from ``traceparent``, so the header has to exist by then.
"""

from __future__ import annotations

import logging
import os
import secrets
from collections.abc import Callable
from typing import Protocol

from starlette.datastructures import MutableHeaders
from starlette.requests import Request
from starlette.types import ASGIApp, Receive, Scope, Send

from initload.errors.exceptions import RandomSourceError
from initload.logging_config import bind_request_context, clear_request_context
from initload.traceparent import TRACEPARENT_HEADER, generate, parse

logger = logging.getLogger(__name__)

# sysexits.h EX_OSERR
EXIT_ENVIRONMENT_FAILURE = 71


class RequestTransform(Protocol):
    """A single pipeline stage: takes a request, returns the request to forward."""

    name: str

    def transform(self, request: Request) -> Request: ...


class HeaderEnsurer:
    """Guarantee every request carries a ``traceparent`` header.

    Browsers send no trace header for the initial page load, so one is
    synthesized here. The rendered page hands it back to the browser, which
    makes its own initial-load span the parent of the server span.
    """

    name = "ensure_traceparent"

    def __init__(self, random_bytes: Callable[[int], bytes] = secrets.token_bytes):
        self._random_bytes = random_bytes

    def transform(self, request: Request) -> Request:
        existing = request.headers.get(TRACEPARENT_HEADER)
        if existing:
            if parse(existing) is None:
                logger.warning("Forwarding malformed traceparent header unchanged: %r", existing)
            return request

        value = generate(self._random_bytes)
        headers = MutableHeaders(scope=request.scope)
        headers[TRACEPARENT_HEADER] = value.to_header()
        logger.debug("Synthesized traceparent %s", value)
        # Request caches its headers, so hand on a fresh view of the scope
        return Request(request.scope, request.receive)


class RequestPipeline:
    """Ordered collection of request transforms applied before the app."""

    def __init__(self) -> None:
        self._stages: list[RequestTransform] = []

    def add_stage(self, stage: RequestTransform) -> RequestPipeline:
        if stage.name in self.stage_names:
            raise ValueError(f"Duplicate pipeline stage '{stage.name}'")
        self._stages.append(stage)
        return self

    @property
    def stage_names(self) -> list[str]:
        return [stage.name for stage in self._stages]

    def transform(self, request: Request) -> Request:
        for stage in self._stages:
            request = stage.transform(request)
        return request


def default_pipeline(random_bytes: Callable[[int], bytes] = secrets.token_bytes) -> RequestPipeline:
    return RequestPipeline().add_stage(HeaderEnsurer(random_bytes=random_bytes))


def abort_process(exc: RandomSourceError) -> None:
    """Terminate the server: without a random source no request can be served."""
    logger.critical("Environment failure, aborting process: %s", exc.message, exc_info=exc)
    logging.shutdown()
    os._exit(EXIT_ENVIRONMENT_FAILURE)


class RequestPipelineMiddleware:
    """Run a :class:`RequestPipeline` on each HTTP request before the wrapped app."""

    def __init__(
        self,
        app: ASGIApp,
        pipeline: RequestPipeline | None = None,
        on_fatal: Callable[[RandomSourceError], None] = abort_process,
    ) -> None:
        self.app = app
        self.pipeline = pipeline if pipeline is not None else default_pipeline()
        self.on_fatal = on_fatal

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        try:
            request = self.pipeline.transform(Request(scope, receive))
        except RandomSourceError as exc:
            self.on_fatal(exc)
            raise

        traceparent = request.headers.get(TRACEPARENT_HEADER)
        context = parse(traceparent)
        request.state.trace_id = context.trace_id if context else "unknown"
        bind_request_context(trace_id=request.state.trace_id, traceparent=traceparent)
        try:
            await self.app(request.scope, receive, send)
        finally:
            clear_request_context()
