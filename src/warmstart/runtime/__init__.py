# SPDX-License-Identifier: MIT
"""Runtime package exposing host collaborators and settings.

:class:`~warmstart.runtime.context.CacheContext` lives in
``warmstart.runtime.context`` and is imported from there; it depends on the
core package, which in turn depends on :mod:`warmstart.runtime.host`.
"""

from .host import Host, RuntimePathHost, narrowed_search_path
from .settings import Settings, load_settings

__all__ = [
    "Host",
    "RuntimePathHost",
    "Settings",
    "load_settings",
    "narrowed_search_path",
]
