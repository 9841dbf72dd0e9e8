# SPDX-License-Identifier: MIT
"""Telemetry and diagnostics helpers for the loader.

Exports:
    init_logfire: Configure Pydantic Logfire instrumentation.
    EventLog: Buffer of loader events shown on demand.
    Profiler: Per-module resolve and load timings.
"""

from .monitoring import init_logfire
from .telemetry import EventLog, Profiler

__all__ = ["EventLog", "Profiler", "init_logfire"]
