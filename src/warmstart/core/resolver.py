# SPDX-License-Identifier: MIT
"""Serve modules from the in-memory cache table.

This is the hot path of every import, so it does one dict lookup and one
``stat`` and nothing else. Any reason the cached artifact cannot be used is
returned as a :class:`~warmstart.models.Miss`; bad entries are evicted on the
way out so the next flush drops them from disk.
"""

from __future__ import annotations

from pathlib import Path

from ..errors import CorruptBlobError
from ..models import CompiledModule, Miss, MissReason, module_key
from ..observability import EventLog, Profiler
from .codec import load_code
from .portability import PathCodec
from .staleness import token
from .table import CacheTable


class CacheResolver:
    """Look up, validate and deserialize cached modules."""

    label = "cache"

    def __init__(
        self,
        table: CacheTable,
        codec: PathCodec,
        log: EventLog,
        profiler: Profiler | None = None,
    ) -> None:
        self.table = table
        self.codec = codec
        self.log = log
        self.profiler = profiler

    def resolve(self, name: str) -> CompiledModule | Miss:
        """Return the cached module for ``name`` or the reason it was missed."""
        profiler = self.profiler
        resolve_start = profiler.now() if profiler else 0
        key = module_key(name)

        entry = self.table.get(key)
        if entry is None:
            self.log.record("No cache for module %s", key)
            return Miss(MissReason.NO_ENTRY)

        source = self.codec.decode(entry.source_path)
        if entry.token != token(source):
            self.log.record("Stale cache for module %s", key)
            self.table.remove(key)
            return Miss(MissReason.STALE)

        load_start = profiler.now() if profiler else 0
        try:
            code = load_code(entry.blob)
        except CorruptBlobError as exc:
            self.log.record("Error loading cache for module %s: %s. Invalidating", key, exc)
            self.table.remove(key)
            return Miss(MissReason.CORRUPT)

        if profiler:
            profiler.record(
                key,
                resolve=load_start - resolve_start,
                load=profiler.now() - load_start,
                loader=self.label,
            )
        return CompiledModule(name=key, origin=Path(source), code=code, loader="cache")

    def load(self, name: str) -> CompiledModule | None:
        """Chain stage adapter: return the module on a hit, ``None`` on a miss."""
        result = self.resolve(name)
        return None if isinstance(result, Miss) else result


__all__ = ["CacheResolver"]
