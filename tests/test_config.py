"""Tests for settings and start-up."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from guestlog import server
from guestlog.config import Settings

REQUIRED = ("GUESTLOG_PORT", "GUESTLOG_DEST_FILE", "GUESTLOG_AUTH")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in REQUIRED + ("GUESTLOG_HOST", "GUESTLOG_LOG_LEVEL", "GUESTLOG_ATOMIC_APPEND"):
        monkeypatch.delenv(name, raising=False)


def test_settings_from_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("GUESTLOG_PORT", "9000")
    monkeypatch.setenv("GUESTLOG_DEST_FILE", str(tmp_path / "accounts.jsonl"))
    monkeypatch.setenv("GUESTLOG_AUTH", "hunter2")
    monkeypatch.setenv("GUESTLOG_ATOMIC_APPEND", "true")

    settings = Settings()

    assert settings.port == 9000
    assert settings.dest_file == Path(tmp_path / "accounts.jsonl")
    assert settings.auth == "hunter2"
    assert settings.atomic_append is True
    assert settings.host == "127.0.0.1"
    assert settings.log_level == "info"


@pytest.mark.parametrize("missing", REQUIRED)
def test_missing_required_value_is_rejected(monkeypatch, tmp_path, missing):
    values = {
        "GUESTLOG_PORT": "9000",
        "GUESTLOG_DEST_FILE": str(tmp_path / "accounts.jsonl"),
        "GUESTLOG_AUTH": "hunter2",
    }
    for name, value in values.items():
        if name != missing:
            monkeypatch.setenv(name, value)

    with pytest.raises(ValidationError):
        Settings()


def test_empty_secret_is_rejected(tmp_path):
    with pytest.raises(ValidationError):
        Settings(port=9000, dest_file=tmp_path / "a.jsonl", auth="")


def test_main_exits_on_invalid_configuration(monkeypatch):
    """Missing configuration is fatal at start-up."""
    started = []
    monkeypatch.setattr(server.uvicorn, "run", lambda *args, **kwargs: started.append(args))

    with pytest.raises(SystemExit) as exc_info:
        server.main()

    assert exc_info.value.code == 1
    assert started == []


def test_main_runs_uvicorn_with_configured_address(monkeypatch, tmp_path):
    monkeypatch.setenv("GUESTLOG_PORT", "9001")
    monkeypatch.setenv("GUESTLOG_DEST_FILE", str(tmp_path / "accounts.jsonl"))
    monkeypatch.setenv("GUESTLOG_AUTH", "hunter2")
    calls = []
    monkeypatch.setattr(server.uvicorn, "run", lambda app, **kwargs: calls.append(kwargs))

    server.main()

    assert calls == [{"host": "127.0.0.1", "port": 9001}]


def test_unknown_log_level_is_fatal(monkeypatch, tmp_path):
    monkeypatch.setenv("GUESTLOG_PORT", "9001")
    monkeypatch.setenv("GUESTLOG_DEST_FILE", str(tmp_path / "accounts.jsonl"))
    monkeypatch.setenv("GUESTLOG_AUTH", "hunter2")
    monkeypatch.setenv("GUESTLOG_LOG_LEVEL", "verbose")
    started = []
    monkeypatch.setattr(server.uvicorn, "run", lambda *args, **kwargs: started.append(args))

    with pytest.raises(SystemExit) as exc_info:
        server.main()

    assert exc_info.value.code == 1
    assert started == []
