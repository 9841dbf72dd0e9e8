# SPDX-License-Identifier: MIT
"""Staleness tokens derived from source modification times."""

from __future__ import annotations

import os
from pathlib import Path


def token(path: Path | str) -> int | None:
    """Return the modification time of ``path`` in whole seconds.

    The file is stat'ed on every call. ``None`` is returned when the path is
    missing or inaccessible and must be treated as always stale.
    """
    try:
        return int(os.stat(path).st_mtime)
    except OSError:
        return None


__all__ = ["token"]
