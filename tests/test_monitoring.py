"""Tests for monitoring helpers."""

from types import SimpleNamespace

from warmstart.observability import monitoring


class ConsoleOptions:
    def __init__(self, **kwargs):
        self.__dict__.update(kwargs)


def _dummy(called: dict[str, object], debug: list[dict]) -> SimpleNamespace:
    return SimpleNamespace(
        ConsoleOptions=ConsoleOptions,
        configure=lambda **kwargs: called.update(kwargs),
        debug=lambda *a, **k: debug.append(k),
    )


def test_init_logfire_configures(monkeypatch):
    called: dict[str, object] = {}
    debug: list[dict] = []
    monkeypatch.setattr(monitoring, "logfire", _dummy(called, debug))

    monitoring.init_logfire("secret-token", "info")

    assert called["token"] == "secret-token"
    assert called["service_name"] == "warmstart"
    assert called["send_to_logfire"] == "if-token-present"
    assert called["console"].min_log_level == "info"
    assert called["min_level"] == "info"
    assert debug == [{"token": "secr..."}]


def test_init_logfire_reads_env_token(monkeypatch):
    called: dict[str, object] = {}
    monkeypatch.setattr(monitoring, "logfire", _dummy(called, []))
    monkeypatch.setenv("WARMSTART_LOGFIRE_TOKEN", "from-env")

    monitoring.init_logfire()

    assert called["token"] == "from-env"


def test_init_logfire_without_token(monkeypatch):
    called: dict[str, object] = {}
    debug: list[dict] = []
    monkeypatch.setattr(monitoring, "logfire", _dummy(called, debug))

    monitoring.init_logfire()

    assert called["token"] is None
    assert called["console"].min_log_level == "warn"
    assert debug == [{"token": None}]
