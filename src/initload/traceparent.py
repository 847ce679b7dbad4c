"""W3C Trace Context ``traceparent`` values: synthesis and validation."""

from __future__ import annotations

import re
import secrets
from collections.abc import Callable
from dataclasses import dataclass

from initload.errors.exceptions import RandomSourceError

TRACEPARENT_HEADER = "traceparent"

TRACE_ID_BYTES = 16
SPAN_ID_BYTES = 8

DEFAULT_VERSION = "00"
SAMPLED_FLAGS = "01"

_INVALID_VERSION = "ff"
_TRACEPARENT_PATTERN = re.compile(r"^[0-9a-f]{2}-[0-9a-f]{32}-[0-9a-f]{16}-[0-9a-f]{2}$")


@dataclass(frozen=True)
class TraceContextValue:
    """A parsed or synthesized ``traceparent`` token."""

    version: str
    trace_id: str
    span_id: str
    flags: str

    @property
    def sampled(self) -> bool:
        return bool(int(self.flags, 16) & 0x01)

    def to_header(self) -> str:
        return f"{self.version}-{self.trace_id}-{self.span_id}-{self.flags}"

    def __str__(self) -> str:
        return self.to_header()


def _read_random(random_bytes: Callable[[int], bytes], count: int) -> bytes:
    try:
        data = random_bytes(count)
    except (OSError, NotImplementedError) as exc:
        raise RandomSourceError(details={"reason": str(exc)}) from exc
    if len(data) != count:
        raise RandomSourceError(
            f"Random source returned {len(data)} bytes, expected {count}",
            details={"expected": count, "received": len(data)},
        )
    return data


def generate(random_bytes: Callable[[int], bytes] = secrets.token_bytes) -> TraceContextValue:
    """Synthesize a sampled trace context with fresh trace and span ids.

    Args:
        random_bytes: Source of cryptographically strong random bytes.
            Defaults to :func:`secrets.token_bytes` (the OS CSPRNG).

    Raises:
        RandomSourceError: if the random source fails or returns a short read.
    """
    trace_id = _read_random(random_bytes, TRACE_ID_BYTES).hex()
    span_id = _read_random(random_bytes, SPAN_ID_BYTES).hex()
    return TraceContextValue(
        version=DEFAULT_VERSION,
        trace_id=trace_id,
        span_id=span_id,
        flags=SAMPLED_FLAGS,
    )


def parse(header: str | None) -> TraceContextValue | None:
    """Parse a ``traceparent`` header, returning None if it is not valid."""
    if not header or not _TRACEPARENT_PATTERN.match(header):
        return None
    version, trace_id, span_id, flags = header.split("-")
    if version == _INVALID_VERSION:
        return None
    # All-zero ids are reserved as invalid
    if not trace_id.strip("0") or not span_id.strip("0"):
        return None
    return TraceContextValue(version=version, trace_id=trace_id, span_id=span_id, flags=flags)
