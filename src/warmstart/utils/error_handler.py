# SPDX-License-Identifier: MIT
"""Error handling abstractions for fail-soft cache operations."""

from __future__ import annotations

from abc import ABC, abstractmethod

import logfire


class ErrorHandler(ABC):
    """Interface for reporting recoverable cache errors.

    Implementations must never raise: they are called from paths where a
    failure has to degrade to uncached behaviour rather than abort the host.
    """

    @abstractmethod
    def handle(self, message: str, exc: Exception | None = None) -> None:
        """Record ``message`` with optional ``exc`` context."""


class LoggingErrorHandler(ErrorHandler):
    """Error handler that logs via ``logfire``."""

    def handle(self, message: str, exc: Exception | None = None) -> None:
        """Log an error message with optional exception context.

        Args:
            message: Description of the error to record.
            exc: Exception instance providing additional context.
        """
        if exc:
            logfire.error(f"{message}: {exc}")
        else:
            logfire.error(message)


class CollectingErrorHandler(ErrorHandler):
    """Error handler that keeps messages in memory and logs them."""

    def __init__(self) -> None:
        self.messages: list[str] = []

    def handle(self, message: str, exc: Exception | None = None) -> None:
        self.messages.append(f"{message}: {exc}" if exc else message)
        logfire.warning(message, error=str(exc) if exc else None)
