# SPDX-License-Identifier: MIT
"""Utilities for safe binary file writes.

The store writes its whole payload at once, so a reader must only ever see the
previous file or the complete new one.
"""

from __future__ import annotations

import os
from pathlib import Path

import logfire


def read_bytes(path: Path) -> bytes | None:
    """Return the contents of ``path`` or ``None`` when it does not exist."""
    with logfire.span("fs.read_bytes", attributes={"path": str(path)}):
        try:
            data = path.read_bytes()
        except FileNotFoundError:
            logfire.debug("File not found when reading bytes", path=str(path))
            return None
        logfire.debug("Read bytes", path=str(path), bytes=len(data))
        return data


def atomic_write_bytes(path: Path, data: bytes) -> None:
    """Write ``data`` to ``path`` atomically.

    Args:
        path: Destination file to replace.
        data: Payload to store.

    The payload is written to ``path`` with a ``.tmp`` suffix, flushed and
    synced to disk, then moved over the destination with :func:`os.replace`.
    The temporary file is removed if any step fails.

    Raises:
        OSError: If the directory cannot be created or the write fails.
    """
    with logfire.span("fs.atomic_write_bytes", attributes={"path": str(path)}):
        tmp_path = Path(f"{path}.tmp")
        tmp_path.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(tmp_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(data)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_path, path)
        finally:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
        logfire.debug("Atomic write complete", path=str(path), bytes=len(data))


__all__ = ["atomic_write_bytes", "read_bytes"]
