"""CLI flag handling for the server entry point."""

import logging
import os

import pytest
import uvicorn

from initload import server_cli


@pytest.fixture
def run_calls(monkeypatch):
    calls = []
    monkeypatch.setattr(uvicorn, "run", lambda *args, **kwargs: calls.append((args, kwargs)))
    monkeypatch.setattr(server_cli, "configure_logging", lambda **kwargs: None)
    for key in ("INITLOAD_AGENT_ENDPOINT", "INITLOAD_OCW_SCRIPT_ENDPOINT", "INITLOAD_LISTEN", "INITLOAD_LOG_LEVEL"):
        # Register the key so values set by the CLI are undone after the test
        monkeypatch.setenv(key, "")
        monkeypatch.delenv(key)
    return calls


def test_flags_become_settings(run_calls):
    server_cli.main([
        "--agent", "http://agent:55678",
        "--ocw-script-prefix", "http://cdn:8080",
        "--listen", "0.0.0.0:9001",
    ])

    args, kwargs = run_calls[0]
    assert args == ("initload.main:create_app",)
    assert kwargs["factory"] is True
    assert kwargs["host"] == "0.0.0.0"
    assert kwargs["port"] == 9001

    assert os.environ["INITLOAD_AGENT_ENDPOINT"] == "http://agent:55678"
    assert os.environ["INITLOAD_OCW_SCRIPT_ENDPOINT"] == "http://cdn:8080"


def test_default_listen_address(run_calls):
    server_cli.main([])
    _, kwargs = run_calls[0]
    assert (kwargs["host"], kwargs["port"]) == ("127.0.0.1", 8000)


def test_bad_listen_address_exits(run_calls):
    with pytest.raises(SystemExit):
        server_cli.main(["--listen", "nonsense"])
    assert run_calls == []


def test_listen_address_is_logged(run_calls, caplog):
    with caplog.at_level(logging.INFO, logger="initload.server_cli"):
        server_cli.main(["--listen", "127.0.0.1:9002"])
    assert "listening on 127.0.0.1:9002" in caplog.text
