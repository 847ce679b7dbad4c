"""Application configuration via environment variables."""

from pathlib import Path

from pydantic_settings import BaseSettings

from initload.errors.exceptions import ConfigurationError

APP_VERSION = "0.1.0"

_PACKAGE_DIR = Path(__file__).parent


class Settings(BaseSettings):
    # Endpoints rendered into the page for the browser
    agent_endpoint: str = "http://localhost:55678"
    ocw_script_endpoint: str = "http://localhost:8080"
    sample_rate: float = 1.0

    # Server
    listen: str = "127.0.0.1:8000"
    log_level: str = "info"
    json_logs: bool = False

    # Tracing export (otlp, console or none)
    service_name: str = "hello-server"
    exporter: str = "otlp"
    otlp_endpoint: str = "http://localhost:4318"

    # Simulated work inside the page handler
    delay_min_ms: int = 1
    delay_max_ms: int = 100

    # Templates and static assets
    template_dir: str = str(_PACKAGE_DIR / "templates")
    template_name: str = "index.html"
    static_dir: str = str(_PACKAGE_DIR / "static")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "INITLOAD_",
    }

    @property
    def listen_host(self) -> str:
        return self._split_listen()[0]

    @property
    def listen_port(self) -> int:
        return self._split_listen()[1]

    def _split_listen(self) -> tuple[str, int]:
        host, sep, port = self.listen.rpartition(":")
        if not sep or not host or not port.isdigit():
            raise ConfigurationError(
                f"Invalid listen address '{self.listen}', expected HOST:PORT",
                details={"listen": self.listen},
            )
        return host, int(port)

    @property
    def delay_range_ms(self) -> tuple[int, int]:
        """Return the simulated-work delay bounds, validated."""
        if self.delay_min_ms < 0 or self.delay_max_ms < self.delay_min_ms:
            raise ConfigurationError(
                "Invalid delay range",
                details={"delay_min_ms": self.delay_min_ms, "delay_max_ms": self.delay_max_ms},
            )
        return self.delay_min_ms, self.delay_max_ms


settings = Settings()
