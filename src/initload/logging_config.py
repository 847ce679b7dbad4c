"""Structured logging through structlog, with the request's trace context attached."""

import logging
import sys

import structlog

# Libraries that log every request or export batch at INFO
_NOISY_LOGGERS = ("uvicorn.access", "opentelemetry")


def _shared_processors() -> list:
    """Processors applied to both structlog and stdlib log records.

    ``ExtraAdder`` lifts ``logger.x(..., extra={...})`` fields into the event,
    so stdlib callers get structured fields too.
    """
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.ExtraAdder(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]


def configure_logging(log_level: str = "info", json_output: bool = False) -> None:
    """Route stdlib and structlog output through one stdout handler.

    Args:
        log_level: Logging level string (debug/info/warning/error).
        json_output: Emit one JSON object per line instead of the console format.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)
    shared = _shared_processors()

    structlog.configure(
        processors=shared + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    renderer = structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer(colors=True)
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
            foreign_pre_chain=shared,
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def bind_request_context(trace_id: str, traceparent: str | None = None) -> None:
    """Attach the request's trace id (and raw header) to every log line it emits."""
    ctx = {"trace_id": trace_id}
    if traceparent:
        ctx["traceparent"] = traceparent
    structlog.contextvars.bind_contextvars(**ctx)


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()
