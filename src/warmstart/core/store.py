# SPDX-License-Identifier: MIT
"""Persistent store holding the whole module table in one msgpack file.

The store never blocks start-up: anything that goes wrong while reading is
reported and treated as an empty cache, and failures while writing leave the
session running with the in-memory table still dirty.
"""

from __future__ import annotations

from importlib.util import MAGIC_NUMBER
from pathlib import Path
from typing import Mapping

import logfire
import msgpack
from pydantic import ValidationError

from ..constants import STORE_FORMAT_VERSION
from ..errors import StoreReadError
from ..io_utils import atomic_write_bytes, read_bytes
from ..models import CacheEntry, StoreDocument
from ..utils import ErrorHandler, LoggingErrorHandler
from .table import CacheTable


def encode_table(entries: Mapping[str, CacheEntry]) -> bytes:
    """Serialize ``entries`` with the versioned store header."""
    document = {
        "format": STORE_FORMAT_VERSION,
        "python": MAGIC_NUMBER,
        "modules": {name: entry.as_record() for name, entry in entries.items()},
    }
    return msgpack.packb(document, use_bin_type=True)


def decode_table(data: bytes) -> dict[str, CacheEntry]:
    """Return the entries stored in ``data``.

    Raises:
        StoreReadError: If ``data`` is not a store written by this format
            version and interpreter.
    """
    try:
        raw = msgpack.unpackb(data, raw=False)
    except (ValueError, TypeError, msgpack.UnpackException) as exc:
        raise StoreReadError(f"cannot unpack store: {exc}") from exc
    try:
        document = StoreDocument.model_validate(raw)
    except ValidationError as exc:
        details = "; ".join(
            f"{'.'.join(map(str, error['loc']))}: {error['msg']}"
            for error in exc.errors()
        )
        raise StoreReadError(f"invalid store layout: {details}") from exc
    if document.format != STORE_FORMAT_VERSION:
        raise StoreReadError(
            f"unsupported store format {document.format}"
            f" (expected {STORE_FORMAT_VERSION})"
        )
    if document.python != MAGIC_NUMBER:
        raise StoreReadError("store was written by a different Python version")
    return {
        name: CacheEntry.from_record(record)
        for name, record in document.modules.items()
    }


class CacheStore:
    """Load, flush and clear the single store file at ``path``."""

    def __init__(self, path: Path, error_handler: ErrorHandler | None = None) -> None:
        self.path = path
        self._handler = error_handler or LoggingErrorHandler()
        self.writes = 0

    def load(self) -> dict[str, CacheEntry]:
        """Return the persisted entries; any failure yields an empty mapping."""
        with logfire.span("store.load", attributes={"path": str(self.path)}):
            try:
                data = read_bytes(self.path)
            except OSError as exc:
                self._handler.handle(f"Cannot read module cache {self.path}", exc)
                return {}
            if data is None:
                logfire.debug("No module cache on disk", path=str(self.path))
                return {}
            try:
                entries = decode_table(data)
            except StoreReadError as exc:
                self._handler.handle(f"Ignoring module cache {self.path}", exc)
                return {}
            logfire.info("Loaded module cache", path=str(self.path), entries=len(entries))
            return entries

    def flush(self, table: CacheTable) -> bool:
        """Persist ``table`` if it is dirty.

        Returns:
            ``True`` when a write happened. Clean tables and failed writes both
            return ``False``; a failed write keeps the table dirty.
        """
        if not table.dirty:
            return False
        with logfire.span("store.flush", attributes={"path": str(self.path)}):
            try:
                atomic_write_bytes(self.path, encode_table(table.snapshot()))
            except OSError as exc:
                self._handler.handle(f"Cannot write module cache {self.path}", exc)
                return False
            table.mark_clean()
            self.writes += 1
            logfire.info("Updated module cache", path=str(self.path), entries=len(table))
            return True

    def clear(self) -> bool:
        """Delete the store file; missing files are ignored.

        Returns:
            ``False`` when the file exists but could not be removed.
        """
        with logfire.span("store.clear", attributes={"path": str(self.path)}):
            try:
                self.path.unlink(missing_ok=True)
            except OSError as exc:
                self._handler.handle(f"Cannot delete module cache {self.path}", exc)
                return False
            logfire.info("Cleared module cache", path=str(self.path))
            return True


__all__ = ["CacheStore", "decode_table", "encode_table"]
