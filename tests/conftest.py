"""Shared test fixtures."""

import pytest
from httpx import ASGITransport, AsyncClient
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from opentelemetry.sdk.trace.sampling import ALWAYS_ON

from initload.config import Settings

AGENT_ENDPOINT = "http://agent.test:55678"
SCRIPT_ENDPOINT = "http://scripts.test:8080"


@pytest.fixture
def span_exporter():
    return InMemorySpanExporter()


@pytest.fixture
def tracer_provider(span_exporter):
    """Tracer provider exporting synchronously into memory."""
    provider = TracerProvider(sampler=ALWAYS_ON)
    provider.add_span_processor(SimpleSpanProcessor(span_exporter))
    yield provider
    provider.shutdown()


@pytest.fixture
def test_settings(tmp_path):
    return Settings(
        agent_endpoint=AGENT_ENDPOINT,
        ocw_script_endpoint=SCRIPT_ENDPOINT,
        exporter="none",
        delay_min_ms=0,
        delay_max_ms=0,
        static_dir=str(tmp_path),
    )


@pytest.fixture
def app(test_settings, tracer_provider):
    """Create a test application instance with in-memory span export."""
    from initload.main import create_app

    return create_app(settings=test_settings, tracer_provider=tracer_provider)


@pytest.fixture
async def client(app):
    """Async HTTP test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
