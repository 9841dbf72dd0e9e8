# SPDX-License-Identifier: MIT
"""Input and output helpers.

Exports:
    read_bytes: Return a file's contents or ``None`` when it is missing.
    atomic_write_bytes: Replace a file atomically.
"""

from __future__ import annotations

from .persistence import atomic_write_bytes, read_bytes

__all__ = ["atomic_write_bytes", "read_bytes"]
