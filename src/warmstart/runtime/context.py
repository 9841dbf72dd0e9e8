# SPDX-License-Identifier: MIT
"""Explicit handle owning the loader state for one process.

Everything the loader mutates (the table, its dirty flag, the event log and
profile) hangs off a :class:`CacheContext` instead of module globals, and the
lifecycle (load, flush, clear, install) is a set of methods on that handle.
"""

from __future__ import annotations

import atexit
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Literal

import logfire

from ..core.chain import CACHE_POSITION, FALLBACK_POSITION, CacheFinder, LoaderChain
from ..core.fallback import FallbackCompiler
from ..core.portability import PathCodec
from ..core.resolver import CacheResolver
from ..core.staleness import token
from ..core.store import CacheStore
from ..core.table import CacheTable
from ..observability import EventLog, Profiler
from ..utils import ErrorHandler
from .host import Host, RuntimePathHost
from .settings import Settings

EntryStatus = Literal["fresh", "stale", "missing"]


@dataclass(frozen=True)
class EntryReport:
    """Diagnostic view of one cached module."""

    name: str
    path: str
    token: int
    size: int
    status: EntryStatus


class CacheContext:
    """Own the cache table and wire the resolver stages together."""

    def __init__(
        self,
        settings: Settings,
        host: Host | None = None,
        *,
        codec: PathCodec | None = None,
        error_handler: ErrorHandler | None = None,
    ) -> None:
        self.settings = settings
        self.host = host or RuntimePathHost(settings.runtime_path)
        self.codec = codec or PathCodec(settings.appdir)
        self.table = CacheTable()
        self.store = CacheStore(settings.store_path, error_handler)
        self.log = EventLog()
        self.profiler: Profiler | None = None
        self.resolver = CacheResolver(self.table, self.codec, self.log)
        self.fallback = FallbackCompiler(
            self.table,
            self.host,
            self.codec,
            self.log,
            source_dir=settings.source_dir,
            reduced_search=settings.reduced_search,
        )
        self.chain = LoaderChain()
        self.chain.insert(CACHE_POSITION, self.resolver)
        self.chain.insert(FALLBACK_POSITION, self.fallback)
        self.finder = CacheFinder(self.chain)
        self._exit_registered = False
        if settings.profile:
            self.enable_profile()

    @property
    def dirty(self) -> bool:
        """Return ``True`` when the table has unpersisted changes."""
        return self.table.dirty

    def load(self) -> int:
        """Populate the table from disk and return the number of entries."""
        entries = self.store.load()
        self.table.replace_all(entries)
        return len(entries)

    def flush(self) -> bool:
        """Persist the table if dirty; return ``True`` when a write happened."""
        written = self.store.flush(self.table)
        if written:
            self.log.record("Updating cache")
        return written

    def clear(self) -> bool:
        """Delete the store and drop every in-memory entry.

        The table is left untouched when the store file cannot be removed, so
        it never reads clean while stale entries remain on disk.
        """
        if not self.store.clear():
            return False
        self.table.clear()
        self.log.record("Cleared cache")
        return True

    def install(self, register_exit: bool = True) -> None:
        """Insert the loader chain ahead of the path-based import finder.

        Args:
            register_exit: Flush the table when the interpreter exits.
        """
        with logfire.span("context.install"):
            self.finder.install()
            if register_exit and not self._exit_registered:
                atexit.register(self.flush)
                self._exit_registered = True
            logfire.debug("Installed cache finder", entries=len(self.table))

    def uninstall(self) -> None:
        """Remove the loader chain and any exit hook."""
        self.finder.uninstall()
        if self._exit_registered:
            atexit.unregister(self.flush)
            self._exit_registered = False

    @contextmanager
    def session(self) -> Iterator["CacheContext"]:
        """Load, install for the block, then flush and uninstall."""
        self.load()
        self.install(register_exit=False)
        try:
            yield self
        finally:
            self.uninstall()
            self.flush()

    def enable_profile(self) -> Profiler:
        """Start collecting per-module timings."""
        if self.profiler is None:
            self.profiler = Profiler()
            self.resolver.profiler = self.profiler
            self.fallback.profiler = self.profiler
        return self.profiler

    def record_setup(self, started: int) -> None:
        """Record the loader's own set-up time in the profile."""
        if self.profiler is not None:
            self.profiler.record(
                "warmstart", resolve=0, load=Profiler.now() - started, loader="standard"
            )

    def print_log(self) -> None:
        """Write the event log to ``stdout``."""
        self.log.print_log()

    def print_profile(self) -> None:
        """Write the profile table to ``stdout`` if profiling is enabled."""
        if self.profiler is None:
            print("Profiling is not enabled")
            return
        self.profiler.print_profile()

    def inspect(self) -> list[EntryReport]:
        """Return the status of every cached module without mutating the table."""
        reports = []
        for name, entry in sorted(self.table.snapshot().items()):
            path = self.codec.decode(entry.source_path)
            current = token(path)
            if current is None:
                status: EntryStatus = "missing"
            elif current != entry.token:
                status = "stale"
            else:
                status = "fresh"
            reports.append(
                EntryReport(
                    name=name,
                    path=path,
                    token=entry.token,
                    size=len(entry.blob),
                    status=status,
                )
            )
        return reports


def setup(
    settings: Settings | None = None,
    roots: list[Path | str] | None = None,
    host: Host | None = None,
) -> CacheContext:
    """Create a context, load the store and install the loader.

    Args:
        settings: Loader configuration. Loaded from the environment if omitted.
        roots: Runtime path roots overriding ``settings.runtime_path``.
        host: Custom host implementation; takes precedence over ``roots``.

    Returns:
        The installed :class:`CacheContext`.
    """
    started = Profiler.now()
    if settings is None:
        from .settings import load_settings

        settings = load_settings()
    if roots is not None:
        settings = settings.model_copy(update={"runtime_path": [Path(r) for r in roots]})
    context = CacheContext(settings, host)
    context.load()
    context.install()
    context.record_setup(started)
    return context


__all__ = ["CacheContext", "EntryReport", "EntryStatus", "setup"]
