# SPDX-License-Identifier: MIT
"""Rewrite source paths so a cache survives relocation of the install root.

Self-contained installs (AppImage and similar) mount the application under a
different directory on every run. Persisted paths replace that root with a
fixed placeholder and are expanded again before any filesystem access.
"""

from __future__ import annotations

import os

from ..constants import APPDIR_PLACEHOLDER


class PathCodec:
    """Encode and decode installation-root prefixes.

    Only a whole-component prefix match is rewritten: ``/opt/app`` matches
    ``/opt/app`` and ``/opt/app/x`` but never ``/opt/apple`` or ``/x/opt/app``.
    Without a root both directions are the identity.
    """

    def __init__(self, root: str | None = None, sep: str = os.sep) -> None:
        self._sep = sep
        self._root = root.rstrip(sep) or sep if root else None

    @property
    def root(self) -> str | None:
        """Return the installation root, if one is configured."""
        return self._root

    @classmethod
    def from_env(cls) -> "PathCodec":
        """Build a codec from ``WARMSTART_APPDIR``, falling back to ``APPDIR``."""
        return cls(os.environ.get("WARMSTART_APPDIR") or os.environ.get("APPDIR") or None)

    def encode(self, path: str) -> str:
        """Return the portable form of ``path``."""
        root = self._root
        if root is None:
            return path
        if path == root:
            return APPDIR_PLACEHOLDER
        prefix = root if root.endswith(self._sep) else root + self._sep
        if path.startswith(prefix):
            return APPDIR_PLACEHOLDER + self._sep + path[len(prefix) :]
        return path

    def decode(self, portable: str) -> str:
        """Return the filesystem path for a ``portable`` path."""
        root = self._root
        if root is None:
            return portable
        if portable == APPDIR_PLACEHOLDER:
            return root
        marker = APPDIR_PLACEHOLDER + self._sep
        if portable.startswith(marker):
            rest = portable[len(marker) :]
            return root + rest if root.endswith(self._sep) else root + self._sep + rest
        return portable


__all__ = ["PathCodec"]
