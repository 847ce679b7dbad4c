"""Trace context value synthesis and parsing."""

import re

import pytest

from initload.errors.exceptions import RandomSourceError
from initload.traceparent import TraceContextValue, generate, parse

TRACEPARENT_RE = re.compile(r"^[0-9a-f]{2}-[0-9a-f]{32}-[0-9a-f]{16}-[0-9a-f]{2}$")


def test_generated_value_matches_header_format():
    value = generate()
    header = value.to_header()
    assert TRACEPARENT_RE.match(header)
    assert header.startswith("00-")
    assert header.endswith("-01")
    assert str(value) == header


def test_generated_value_is_sampled():
    assert generate().sampled is True


def test_generated_trace_ids_do_not_collide():
    trace_ids = {generate().trace_id for _ in range(10_000)}
    assert len(trace_ids) == 10_000


def test_generate_hex_encodes_random_bytes():
    chunks = iter([bytes(range(16)), bytes([0xFF] * 8)])
    value = generate(lambda n: next(chunks))
    assert value.trace_id == "000102030405060708090a0b0c0d0e0f"
    assert value.span_id == "ffffffffffffffff"


def test_generate_requests_trace_and_span_sizes():
    requested = []

    def record(n):
        requested.append(n)
        return b"\x01" * n

    generate(record)
    assert requested == [16, 8]


def test_random_source_failure_raises():
    def broken(n):
        raise OSError("getrandom unavailable")

    with pytest.raises(RandomSourceError) as exc_info:
        generate(broken)
    assert exc_info.value.code == "RANDOM_SOURCE_UNAVAILABLE"
    assert "getrandom unavailable" in exc_info.value.details["reason"]


def test_short_random_read_raises():
    with pytest.raises(RandomSourceError):
        generate(lambda n: b"\x01" * (n - 1))


def test_parse_round_trips_generated_value():
    value = generate()
    assert parse(value.to_header()) == value


def test_parse_known_header():
    value = parse("00-aaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaa-bbbbbbbbbbbbbbbb-01")
    assert value == TraceContextValue(
        version="00",
        trace_id="a" * 32,
        span_id="b" * 16,
        flags="01",
    )


def test_parse_unsampled_flags():
    value = parse("00-aaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaa-bbbbbbbbbbbbbbbb-00")
    assert value is not None
    assert value.sampled is False


@pytest.mark.parametrize(
    "header",
    [
        None,
        "",
        "garbage",
        "00-AAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAA-bbbbbbbbbbbbbbbb-01",
        "00-aaaaaaaaaaaaaaaaaaaaaaaaaaaaaaa-bbbbbbbbbbbbbbbb-01",
        "00-aaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaa-bbbbbbbbbbbbbbbb-01-extra",
        "00-00000000000000000000000000000000-bbbbbbbbbbbbbbbb-01",
        "00-aaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaa-0000000000000000-01",
        "ff-aaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaa-bbbbbbbbbbbbbbbb-01",
    ],
)
def test_parse_rejects_invalid_headers(header):
    assert parse(header) is None
