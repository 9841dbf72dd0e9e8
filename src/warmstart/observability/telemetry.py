# SPDX-License-Identifier: MIT
"""In-process event log and per-module load profile."""

from __future__ import annotations

import time
from collections import defaultdict
from typing import DefaultDict, List

import logfire

from ..models import ProfileRecord


class EventLog:
    """Buffer of human-readable loader events for on-demand display."""

    def __init__(self) -> None:
        self.lines: List[str] = []

    def record(self, message: str, *args: object) -> None:
        """Append ``message % args`` and mirror it to logfire at debug level."""

        line = message % args if args else message
        self.lines.append(line)
        logfire.debug(line)

    def print_log(self) -> None:
        """Write every recorded line to ``stdout``."""

        for line in self.lines:
            print(line)

    def reset(self) -> None:
        """Forget recorded lines."""

        self.lines.clear()


class Profiler:
    """Collect resolve and load timings keyed by module name."""

    def __init__(self) -> None:
        self.records: DefaultDict[str, ProfileRecord] = defaultdict(ProfileRecord)

    @staticmethod
    def now() -> int:
        """Return a monotonic timestamp in nanoseconds."""

        return time.perf_counter_ns()

    def record(self, name: str, *, resolve: int, load: int, loader: str) -> None:
        """Store the timings for ``name``, replacing any earlier record."""

        entry = self.records[name]
        entry.resolve = resolve
        entry.load = load
        entry.loader = loader

    def reset(self) -> None:
        """Clear all collected timings."""

        self.records.clear()

    def format_profile(self) -> list[str]:
        """Return a table of timings sorted by total time, slowest first."""

        rows = sorted(self.records.items(), key=lambda item: item[1].total, reverse=True)
        width = max([len("module")] + [len(name) for name, _ in rows])
        lines = [
            f"{'module':<{width}}  {'loader':<8}  {'resolve':>10}  {'load':>10}  {'total':>10}"
        ]
        for name, rec in rows:
            lines.append(
                f"{name:<{width}}  {rec.loader:<8}  {rec.resolve / 1e6:>8.3f}ms"
                f"  {rec.load / 1e6:>8.3f}ms  {rec.total / 1e6:>8.3f}ms"
            )
        by_loader: DefaultDict[str, int] = defaultdict(int)
        for _, rec in rows:
            by_loader[rec.loader] += rec.total
        for loader, total in sorted(by_loader.items()):
            lines.append(f"Total {loader}: {total / 1e6:.3f}ms")
        return lines

    def print_profile(self) -> None:
        """Write the profile table to ``stdout``."""

        for line in self.format_profile():
            print(line)


__all__ = ["EventLog", "Profiler"]
