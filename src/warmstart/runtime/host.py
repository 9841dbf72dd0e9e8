# SPDX-License-Identifier: MIT
"""Host collaborators consulted during module resolution.

The loader only talks to the host through :class:`Host`. The bundled
:class:`RuntimePathHost` models an application with an ordered runtime path:
a list of root directories, each of which may carry module sources below a
fixed source subdirectory.
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Iterator, Sequence

import logfire

SearchPath = tuple[Path, ...]
SearchPathListener = Callable[[SearchPath], None]


class Host(ABC):
    """Interface the loader requires from its embedding application.

    Implementations should keep lookups cheap: ``find_first`` runs on every
    cache miss and dominates cold start-up.
    """

    @abstractmethod
    def get_search_path(self) -> SearchPath:
        """Return the active search path."""

    @abstractmethod
    def set_search_path(self, value: Sequence[Path | str]) -> None:
        """Replace the active search path."""

    @abstractmethod
    def find_first(self, relative: str) -> Path | None:
        """Return the first ``root / relative`` file on the search path."""

    @abstractmethod
    def find_all(self, relative: str) -> list[Path]:
        """Return every existing ``root / relative`` in search path order."""

    @abstractmethod
    def suppress_events(self, suppress: bool) -> bool:
        """Enable or disable change notifications; return the previous state."""

    @abstractmethod
    def is_restricted(self) -> bool:
        """Return ``True`` when host configuration must not be mutated."""

    def list_source_roots(self, source_dir: str) -> SearchPath:
        """Return the roots that contain a ``source_dir`` directory."""
        return tuple(path.parent for path in self.find_all(f"{source_dir}/"))


class RuntimePathHost(Host):
    """In-process host backed by a list of runtime path roots.

    The thread that creates the host owns it. Lookups from any other thread,
    or from inside :meth:`restricted`, report a restricted context.
    """

    def __init__(self, roots: Sequence[Path | str] = ()) -> None:
        self._path: SearchPath = tuple(Path(root).absolute() for root in roots)
        self._owner = threading.get_ident()
        self._restricted_depth = 0
        self._events_suppressed = False
        self._listeners: list[SearchPathListener] = []

    def get_search_path(self) -> SearchPath:
        return self._path

    def set_search_path(self, value: Sequence[Path | str]) -> None:
        self._path = tuple(Path(root).absolute() for root in value)
        if self._events_suppressed:
            return
        for listener in list(self._listeners):
            listener(self._path)

    def add_listener(self, listener: SearchPathListener) -> None:
        """Call ``listener`` whenever the search path changes."""
        self._listeners.append(listener)

    def find_first(self, relative: str) -> Path | None:
        for root in self._path:
            candidate = root / relative
            if candidate.is_file():
                return candidate
        return None

    def find_all(self, relative: str) -> list[Path]:
        want_dir = relative.endswith("/")
        found: list[Path] = []
        for root in self._path:
            candidate = root / relative
            if candidate.is_dir() if want_dir else candidate.is_file():
                found.append(candidate)
        return found

    def suppress_events(self, suppress: bool) -> bool:
        previous = self._events_suppressed
        self._events_suppressed = suppress
        return previous

    def is_restricted(self) -> bool:
        return self._restricted_depth > 0 or threading.get_ident() != self._owner

    @contextmanager
    def restricted(self) -> Iterator[None]:
        """Mark the enclosed block as a context where mutation is unsafe."""
        self._restricted_depth += 1
        try:
            yield
        finally:
            self._restricted_depth -= 1


@contextmanager
def narrowed_search_path(host: Host, narrowed: Sequence[Path]) -> Iterator[None]:
    """Temporarily apply ``narrowed`` as the host search path.

    Change notifications are suppressed while the narrowed value is active and
    both the search path and the notification state are restored on every exit
    path.
    """
    original = host.get_search_path()
    was_suppressed = host.suppress_events(True)
    try:
        host.set_search_path(narrowed)
        yield
    finally:
        try:
            host.set_search_path(original)
        finally:
            host.suppress_events(was_suppressed)
        logfire.debug("Restored search path", roots=len(original))


__all__ = [
    "Host",
    "RuntimePathHost",
    "SearchPath",
    "SearchPathListener",
    "narrowed_search_path",
]
