"""Renders the initial-load page that hands the trace context to the browser."""

from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, Template, TemplateError, select_autoescape
from opentelemetry import trace
from opentelemetry.trace import TracerProvider

from initload.config import Settings
from initload.errors.exceptions import TemplateRenderError

logger = logging.getLogger(__name__)

_TEMPLATES_DIR = Path(__file__).parent / "templates"


@dataclass(frozen=True)
class PageConfig:
    """Values rendered into every page, fixed at startup."""

    agent_endpoint: str
    ocw_script_endpoint: str
    sample_rate: float = 1.0
    template_dir: str = str(_TEMPLATES_DIR)
    template_name: str = "index.html"

    @classmethod
    def from_settings(cls, settings: Settings) -> PageConfig:
        return cls(
            agent_endpoint=settings.agent_endpoint,
            ocw_script_endpoint=settings.ocw_script_endpoint,
            sample_rate=settings.sample_rate,
            template_dir=settings.template_dir,
            template_name=settings.template_name,
        )


class PageRenderer:
    """Per-request page rendering, traced as parse / delay / render spans.

    Holds no per-request state; one instance serves all requests.
    """

    def __init__(
        self,
        config: PageConfig,
        delay_range_ms: tuple[int, int] = (1, 100),
        tracer_provider: TracerProvider | None = None,
    ) -> None:
        self.config = config
        self.delay_range_ms = delay_range_ms
        self._env = Environment(
            loader=FileSystemLoader(config.template_dir),
            autoescape=select_autoescape(["html"]),
        )
        self._tracer = trace.get_tracer(__name__, tracer_provider=tracer_provider)

    async def render(self, traceparent: str) -> str:
        with self._tracer.start_as_current_span("Parse template"):
            template = self._load_template()

        # Fake work so the server span has visible duration
        with self._tracer.start_as_current_span("Random delay"):
            await asyncio.sleep(self._delay_seconds())

        with self._tracer.start_as_current_span("Render template"):
            try:
                return template.render(
                    traceparent=traceparent,
                    agent_endpoint=self.config.agent_endpoint,
                    ocw_script_endpoint=self.config.ocw_script_endpoint,
                    sample_rate=self.config.sample_rate,
                )
            except TemplateError as exc:
                logger.error("Template render failed: %s", exc)
                raise TemplateRenderError(self.config.template_name, str(exc)) from exc

    def _load_template(self) -> Template:
        try:
            return self._env.get_template(self.config.template_name)
        except TemplateError as exc:
            logger.error("Template load failed: %s", exc)
            raise TemplateRenderError(self.config.template_name, str(exc)) from exc

    def _delay_seconds(self) -> float:
        low, high = self.delay_range_ms
        return random.randint(low, high) / 1000
