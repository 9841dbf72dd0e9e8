# SPDX-License-Identifier: MIT
"""Cache compiled module code to speed up repeated start-up.

Typical embedding::

    import warmstart

    context = warmstart.setup(roots=["/opt/app/runtime"])
    ...
    context.flush()
"""

from .errors import ResolutionFailure, StoreReadError, WarmstartError
from .models import CacheEntry, CompiledModule, Miss, MissReason, NativeModule
from .runtime import RuntimePathHost, Settings, load_settings
from .runtime.context import CacheContext, setup

__all__ = [
    "CacheContext",
    "CacheEntry",
    "CompiledModule",
    "Miss",
    "MissReason",
    "NativeModule",
    "ResolutionFailure",
    "RuntimePathHost",
    "Settings",
    "StoreReadError",
    "WarmstartError",
    "load_settings",
    "setup",
]
