# SPDX-License-Identifier: MIT
"""Ordered loader chain and its ``sys.meta_path`` adapter.

The chain owns its stages explicitly: the cache resolver sits at
:data:`CACHE_POSITION` and the fallback compiler at :data:`FALLBACK_POSITION`.
:class:`CacheFinder` exposes the chain to the import system ahead of Python's
default path-based finder.
"""

from __future__ import annotations

import sys
from importlib.abc import Loader, MetaPathFinder
from importlib.machinery import ExtensionFileLoader, ModuleSpec, PathFinder
from importlib.util import spec_from_file_location
from types import ModuleType
from typing import Protocol, Sequence

from ..models import CompiledModule, NativeModule

CACHE_POSITION = 0
FALLBACK_POSITION = 1

LoadResult = CompiledModule | NativeModule


class Stage(Protocol):
    """A single resolver in the loader chain."""

    label: str

    def load(self, name: str) -> LoadResult | None:
        """Return the module for ``name`` or ``None`` to defer to later stages."""


class LoaderChain:
    """Ordered list of resolver stages consulted first to last."""

    def __init__(self, stages: Sequence[Stage] = ()) -> None:
        self._stages: list[Stage] = list(stages)

    @property
    def stages(self) -> tuple[Stage, ...]:
        """Return the stages in consultation order."""
        return tuple(self._stages)

    def insert(self, position: int, stage: Stage) -> None:
        """Insert ``stage`` at ``position``."""
        self._stages.insert(position, stage)

    def remove(self, stage: Stage) -> None:
        """Remove ``stage`` from the chain."""
        self._stages.remove(stage)

    def find(self, name: str) -> LoadResult | None:
        """Return the first stage result for ``name``."""
        for stage in self._stages:
            result = stage.load(name)
            if result is not None:
                return result
        return None


class CachedCodeLoader(Loader):
    """Execute a compiled code object as a module body."""

    def __init__(self, module: CompiledModule) -> None:
        self.module = module

    def create_module(self, spec: ModuleSpec) -> ModuleType | None:
        return None

    def exec_module(self, module: ModuleType) -> None:
        exec(self.module.code, module.__dict__)

    def get_code(self, fullname: str):
        return self.module.code

    def is_package(self, fullname: str) -> bool:
        return self.module.is_package


class CacheFinder(MetaPathFinder):
    """Meta path finder delegating to a :class:`LoaderChain`."""

    def __init__(self, chain: LoaderChain) -> None:
        self.chain = chain

    def find_spec(self, fullname, path=None, target=None) -> ModuleSpec | None:
        result = self.chain.find(fullname)
        if result is None:
            return None
        if isinstance(result, NativeModule):
            return spec_from_file_location(
                fullname,
                result.origin,
                loader=ExtensionFileLoader(fullname, str(result.origin)),
            )
        spec = ModuleSpec(
            fullname,
            CachedCodeLoader(result),
            origin=str(result.origin),
            is_package=result.is_package,
        )
        spec.has_location = True
        if result.is_package:
            spec.submodule_search_locations = [str(result.origin.parent)]
        return spec

    def install(self) -> None:
        """Insert this finder just ahead of :class:`PathFinder`.

        Builtin and frozen importers stay in front so stdlib modules never pay
        for a runtime path scan and cannot be shadowed by runtime sources.
        """
        if self in sys.meta_path:
            return
        for index, finder in enumerate(sys.meta_path):
            if finder is PathFinder:
                sys.meta_path.insert(index, self)
                return
        sys.meta_path.append(self)

    def uninstall(self) -> None:
        """Remove this finder from ``sys.meta_path`` if present."""
        if self in sys.meta_path:
            sys.meta_path.remove(self)

    def invalidate_caches(self) -> None:
        pass


__all__ = [
    "CACHE_POSITION",
    "FALLBACK_POSITION",
    "CacheFinder",
    "CachedCodeLoader",
    "LoaderChain",
    "LoadResult",
    "Stage",
]
