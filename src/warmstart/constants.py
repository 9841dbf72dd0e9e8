# SPDX-License-Identifier: MIT
"""Project-wide constants and default paths.

This module centralises small constants that are imported across the
package. Keep this file minimal and free of side effects.
"""

from __future__ import annotations

import os
from pathlib import Path

# Per-user XDG cache location; never a shared temp directory.
DEFAULT_CACHE_DIR = (
    Path(os.environ.get("XDG_CACHE_HOME") or Path.home() / ".cache") / "warmstart"
)

# Name of the single store file inside the cache directory.
DEFAULT_STORE_NAME = "modcache"

# Subdirectory of each runtime path root holding module sources.
DEFAULT_SOURCE_DIR = "python"

# Bump whenever the persisted record layout changes.
STORE_FORMAT_VERSION = 1

# Placeholder substituted for the installation root in persisted paths.
APPDIR_PLACEHOLDER = "$APPDIR"

__all__ = [
    "APPDIR_PLACEHOLDER",
    "DEFAULT_CACHE_DIR",
    "DEFAULT_SOURCE_DIR",
    "DEFAULT_STORE_NAME",
    "STORE_FORMAT_VERSION",
]
