# SPDX-License-Identifier: MIT
"""Resolve, compile and cache modules the cache could not serve.

Cache misses pay for a scan of the runtime path. To bound that cost the
compiler can narrow the search path to the roots that actually carry module
sources for the duration of one lookup. Narrowing mutates host configuration,
so it is skipped whenever the host reports a restricted context.
"""

from __future__ import annotations

from importlib.machinery import EXTENSION_SUFFIXES
from pathlib import Path
from types import CodeType

import logfire

from ..errors import ResolutionFailure
from ..models import CacheEntry, CompiledModule, LoaderKind, NativeModule, module_key
from ..observability import EventLog, Profiler
from ..runtime.host import Host, SearchPath, narrowed_search_path
from .codec import dump_code
from .portability import PathCodec
from .staleness import token
from .table import CacheTable


def compile_source(path: Path) -> CodeType:
    """Read and compile the module source at ``path``.

    Raises:
        SyntaxError: If the source is invalid.
        OSError: If the file cannot be read.
    """
    return compile(path.read_bytes(), str(path), "exec", dont_inherit=True)


class FallbackCompiler:
    """Find module sources on the host search path and cache their code."""

    label = "fallback"

    def __init__(
        self,
        table: CacheTable,
        host: Host,
        codec: PathCodec,
        log: EventLog,
        *,
        source_dir: str,
        reduced_search: bool = True,
        profiler: Profiler | None = None,
    ) -> None:
        self.table = table
        self.host = host
        self.codec = codec
        self.log = log
        self.source_dir = source_dir
        self.reduced_search = reduced_search
        self.profiler = profiler
        self._memo_key: SearchPath | None = None
        self._reduced: SearchPath = ()
        self._narrowing = False

    def reduced_path(self) -> SearchPath:
        """Return the roots carrying module sources, memoized per search path."""
        current = self.host.get_search_path()
        if current != self._memo_key:
            self.log.record("Updating reduced search path")
            self._reduced = self.host.list_source_roots(self.source_dir)
            self._memo_key = current
        return self._reduced

    def compile_and_cache(self, name: str) -> CompiledModule | NativeModule:
        """Resolve ``name``, compile it and insert the result into the table.

        Reduced search is used when enabled and the host allows mutation;
        otherwise the full search path is scanned.

        Raises:
            ResolutionFailure: If no source or native module exists for ``name``.
            SyntaxError: If the source fails to compile. The table is unchanged.
        """
        if not self.reduced_search:
            return self._load(name, "standard")
        if self._narrowing or self.host.is_restricted():
            return self._load(name, "fast")
        narrowed = self.reduced_path()
        self._narrowing = True
        try:
            with narrowed_search_path(self.host, narrowed):
                return self._load(name, "reduced")
        finally:
            self._narrowing = False

    def load(self, name: str) -> CompiledModule | NativeModule | None:
        """Chain stage adapter: return ``None`` when nothing was found."""
        try:
            return self.compile_and_cache(name)
        except ResolutionFailure:
            return None

    def _load(self, name: str, loader: LoaderKind) -> CompiledModule | NativeModule:
        key = module_key(name)
        profiler = self.profiler
        resolve_start = profiler.now() if profiler else 0

        for relative in (
            f"{self.source_dir}/{key}.py",
            f"{self.source_dir}/{key}/__init__.py",
        ):
            path = self.host.find_first(relative)
            if path is None:
                continue
            mtime = token(path)
            load_start = profiler.now() if profiler else 0
            with logfire.span("fallback.compile", attributes={"module": key}):
                code = compile_source(path)
            if profiler:
                profiler.record(
                    key,
                    resolve=load_start - resolve_start,
                    load=profiler.now() - load_start,
                    loader=loader,
                )
            self._store(key, path, code, mtime)
            return CompiledModule(name=key, origin=path, code=code, loader=loader)

        native = self._find_native(key)
        if native is not None:
            self.log.record("Found native module %s at %s", key, native)
            return NativeModule(name=key, origin=native)
        raise ResolutionFailure(name)

    def _store(self, key: str, path: Path, code: CodeType, mtime: int | None) -> None:
        if mtime is None:
            self.log.record("Source for module %s vanished; not caching", key)
            return
        self.log.record("Creating cache for module %s", key)
        self.table.put(
            key,
            CacheEntry(
                source_path=self.codec.encode(str(path)),
                token=mtime,
                blob=dump_code(code),
            ),
        )

    def _find_native(self, key: str) -> Path | None:
        for suffix in EXTENSION_SUFFIXES:
            path = self.host.find_first(f"{self.source_dir}/{key}{suffix}")
            if path is not None:
                return path
        return None


__all__ = ["FallbackCompiler", "compile_source"]
