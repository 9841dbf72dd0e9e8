# SPDX-License-Identifier: MIT
"""Tests for the loader chain and import system integration."""

from __future__ import annotations

import importlib
import sys
from importlib.machinery import BuiltinImporter, FrozenImporter, PathFinder
from pathlib import Path

import pytest

from warmstart.core.chain import (
    CACHE_POSITION,
    FALLBACK_POSITION,
    CacheFinder,
    LoaderChain,
)
from warmstart.models import CompiledModule
from warmstart.runtime.context import CacheContext


class _Stage:
    def __init__(self, label: str, result=None) -> None:
        self.label = label
        self.result = result
        self.calls: list[str] = []

    def load(self, name: str):
        self.calls.append(name)
        return self.result


def test_chain_consults_stages_in_order() -> None:
    hit = CompiledModule(name="m", origin=Path("/m.py"), code=compile("", "m", "exec"))
    first, second, third = _Stage("a"), _Stage("b", hit), _Stage("c", hit)
    chain = LoaderChain([first, third])
    chain.insert(1, second)

    assert chain.find("m") is hit
    assert first.calls == second.calls == ["m"]
    assert third.calls == []


def test_chain_returns_none_when_all_defer() -> None:
    assert LoaderChain([_Stage("a"), _Stage("b")]).find("m") is None


def test_context_places_cache_before_fallback(settings) -> None:
    context = CacheContext(settings)
    stages = context.chain.stages
    assert stages[CACHE_POSITION] is context.resolver
    assert stages[FALLBACK_POSITION] is context.fallback


def test_finder_installs_between_builtin_and_path_finders(settings) -> None:
    finder = CacheFinder(LoaderChain())
    finder.install()
    finder.install()
    position = sys.meta_path.index(finder)
    assert sys.meta_path.index(BuiltinImporter) < position
    assert sys.meta_path.index(FrozenImporter) < position
    assert sys.meta_path[position + 1] is PathFinder
    assert sys.meta_path.count(finder) == 1
    finder.uninstall()
    finder.uninstall()
    assert finder not in sys.meta_path


def test_import_through_cache_context(settings, write_module) -> None:
    root = settings.runtime_path[0]
    write_module(root, "wsdemo_pkg", "NAME = 'pkg'\n", package=True)
    write_module(root, "wsdemo_pkg/child", "from . import NAME as PARENT\nVALUE = PARENT + '.child'\n")
    context = CacheContext(settings)

    with context.session():
        module = importlib.import_module("wsdemo_pkg.child")

    assert module.VALUE == "pkg.child"
    assert module.__file__ == str(root / "python" / "wsdemo_pkg" / "child.py")
    assert sys.modules["wsdemo_pkg"].__path__ == [str(root / "python" / "wsdemo_pkg")]
    assert sorted(context.store.load()) == ["wsdemo_pkg", "wsdemo_pkg/child"]
    assert context.dirty is False


def test_import_syntax_error_surfaces(settings, write_module) -> None:
    write_module(settings.runtime_path[0], "wsdemo_bad", "x = (\n")
    context = CacheContext(settings)
    with context.session(), pytest.raises(SyntaxError):
        importlib.import_module("wsdemo_bad")
    assert context.store.load() == {}


def test_unknown_module_defers_to_default_finders(settings) -> None:
    context = CacheContext(settings)
    with context.session():
        with pytest.raises(ModuleNotFoundError):
            importlib.import_module("wsdemo_missing")
        # Standard library modules still resolve through the default finders.
        assert importlib.import_module("colorsys").__name__ == "colorsys"
