"""CLI entry point for the initial load demo server."""

import argparse
import logging
import os

from initload.logging_config import configure_logging

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="initload-server",
        description="Demo server propagating trace context to the browser on initial page load",
    )
    parser.add_argument("--agent", help="HTTP(S) endpoint of the tracing agent (default: http://localhost:55678)")
    parser.add_argument(
        "--ocw-script-prefix",
        help="HTTP(S) endpoint serving the client tracing script (default: http://localhost:8080)",
    )
    parser.add_argument("--listen", help="Listen address HOST:PORT (default: 127.0.0.1:8000)")
    parser.add_argument("--log-level", help="Log level (default: info)")
    args = parser.parse_args(argv)

    overrides = {
        "INITLOAD_AGENT_ENDPOINT": args.agent,
        "INITLOAD_OCW_SCRIPT_ENDPOINT": args.ocw_script_prefix,
        "INITLOAD_LISTEN": args.listen,
        "INITLOAD_LOG_LEVEL": args.log_level,
    }
    for key, value in overrides.items():
        if value is not None:
            os.environ[key] = value

    # Settings are read from the environment on first import
    from initload.config import Settings
    from initload.errors.exceptions import ConfigurationError

    cli_settings = Settings()
    try:
        host, port = cli_settings.listen_host, cli_settings.listen_port
    except ConfigurationError as exc:
        parser.error(exc.message)

    configure_logging(log_level=cli_settings.log_level, json_output=cli_settings.json_logs)

    import uvicorn

    logger.info("Initial load example server listening on %s:%d", host, port)
    uvicorn.run("initload.main:create_app", factory=True, host=host, port=port, log_config=None)


if __name__ == "__main__":
    main()
