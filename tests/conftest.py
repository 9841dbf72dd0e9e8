# SPDX-License-Identifier: MIT
"""Test configuration for warmstart.

Keeps logfire local, isolates environment configuration and cleans up any
modules or finders installed by import integration tests.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Callable, Iterator

import logfire
import pytest

from warmstart.runtime.settings import Settings

logfire.configure(send_to_logfire=False, console=False)


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch):
    """Drop loader configuration inherited from the developer's shell."""

    for name in list(os.environ):
        if name.startswith("WARMSTART_") or name == "APPDIR":
            monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def _restore_import_state() -> Iterator[None]:
    """Remove finders and demo modules added during a test."""

    meta_path = list(sys.meta_path)
    modules = set(sys.modules)
    yield
    sys.meta_path[:] = meta_path
    for name in set(sys.modules) - modules:
        if name.startswith("wsdemo"):
            del sys.modules[name]


WriteModule = Callable[..., Path]


@pytest.fixture()
def write_module() -> WriteModule:
    """Return a helper writing ``<root>/python/<key>.py`` sources."""

    def _write(root: Path, key: str, source: str, *, package: bool = False) -> Path:
        base = root / "python" / key
        path = base / "__init__.py" if package else base.with_suffix(".py")
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(source, encoding="utf-8")
        return path

    return _write


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    """Settings pointing the store at a temporary cache directory."""

    root = tmp_path / "root"
    root.mkdir()
    return Settings(cache_dir=tmp_path / "cache", runtime_path=[root])


def bump_mtime(path: Path, delta: int = 10) -> None:
    """Move the modification time of ``path`` by ``delta`` whole seconds."""

    stat = path.stat()
    os.utime(path, (stat.st_atime, int(stat.st_mtime) + delta))
