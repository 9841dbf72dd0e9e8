# SPDX-License-Identifier: MIT
"""Exception taxonomy for the cache-backed loader.

Only :class:`ResolutionFailure` and compiler errors (``SyntaxError``) ever reach
callers. The remaining errors are recovered inside the package and degrade to
uncached behaviour.
"""

from __future__ import annotations


class WarmstartError(Exception):
    """Base class for loader cache errors."""


class StoreReadError(WarmstartError):
    """The persisted store is unreadable, corrupt or of an unknown format."""


class CorruptBlobError(WarmstartError):
    """A cached compiled blob failed integrity or unmarshal checks."""


class ResolutionFailure(ModuleNotFoundError):
    """No source or native module was found for a name on any search path."""

    def __init__(self, name: str) -> None:
        super().__init__(f"module '{name}' not found on the runtime path", name=name)


__all__ = [
    "CorruptBlobError",
    "ResolutionFailure",
    "StoreReadError",
    "WarmstartError",
]
