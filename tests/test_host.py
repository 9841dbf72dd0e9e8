# SPDX-License-Identifier: MIT
"""Tests for the runtime path host."""

from __future__ import annotations

from pathlib import Path

import pytest

from warmstart.runtime.host import RuntimePathHost, narrowed_search_path


def test_find_first_and_all(tmp_path: Path) -> None:
    a, b = tmp_path / "a", tmp_path / "b"
    for root in (a, b):
        (root / "python").mkdir(parents=True)
        (root / "python" / "m.py").write_text("", encoding="utf-8")
    host = RuntimePathHost([a, b])
    assert host.find_first("python/m.py") == a / "python" / "m.py"
    assert host.find_all("python/m.py") == [a / "python" / "m.py", b / "python" / "m.py"]
    assert host.find_first("python/x.py") is None
    assert host.list_source_roots("python") == (a, b)


def test_listeners_fire_unless_suppressed(tmp_path: Path) -> None:
    host = RuntimePathHost()
    events: list[tuple[Path, ...]] = []
    host.add_listener(events.append)
    host.set_search_path([tmp_path])
    assert events == [(tmp_path,)]
    host.suppress_events(True)
    host.set_search_path([])
    assert len(events) == 1


def test_narrowed_search_path_restores_after_error(tmp_path: Path) -> None:
    host = RuntimePathHost([tmp_path / "a", tmp_path / "b"])
    original = host.get_search_path()
    with pytest.raises(RuntimeError):
        with narrowed_search_path(host, [tmp_path / "b"]):
            assert host.get_search_path() == (tmp_path / "b",)
            raise RuntimeError("boom")
    assert host.get_search_path() == original
    assert host.suppress_events(False) is False


def test_restricted_context_nests(tmp_path: Path) -> None:
    host = RuntimePathHost()
    assert not host.is_restricted()
    with host.restricted():
        with host.restricted():
            assert host.is_restricted()
        assert host.is_restricted()
    assert not host.is_restricted()
