# SPDX-License-Identifier: MIT
"""Data models shared by the cache store, resolver and fallback compiler.

Persisted shapes are Pydantic models so that anything read back from disk is
validated before it reaches the in-memory table. Runtime-only results use
lightweight dataclasses because they are created on every module lookup.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from types import CodeType
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from .constants import STORE_FORMAT_VERSION

LoaderKind = Literal["cache", "reduced", "fast", "standard"]


class StrictModel(BaseModel):
    """Base model with strict settings to prevent shape drift."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=False)


class CacheEntry(StrictModel):
    """Cached compiled artifact for a single module.

    Entries are frozen: the table only ever adds, replaces or removes them as
    whole units.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    source_path: str = Field(
        ..., description="Portable-encoded absolute path of the source file."
    )
    token: int = Field(
        ..., description="Source modification time in whole seconds at compile time."
    )
    blob: bytes = Field(..., description="Serialized compiled code object.")

    def as_record(self) -> list[str | int | bytes]:
        """Return the 3-element on-disk record for this entry."""

        return [self.source_path, self.token, self.blob]

    @classmethod
    def from_record(cls, record: tuple[str, int, bytes]) -> "CacheEntry":
        """Build an entry from a validated on-disk record."""

        source_path, token, blob = record
        return cls(source_path=source_path, token=token, blob=blob)


class StoreDocument(StrictModel):
    """Top-level layout of the persisted store file."""

    format: int = Field(
        STORE_FORMAT_VERSION, description="Version of the persisted record layout."
    )
    python: bytes = Field(
        ..., description="Bytecode magic number of the interpreter that wrote it."
    )
    modules: dict[str, tuple[str, int, bytes]] = Field(
        default_factory=dict,
        description="Mapping of slash-form module names to entry records.",
    )


class MissReason(str, Enum):
    """Why the cache could not serve a module."""

    NO_ENTRY = "no entry"
    STALE = "stale"
    CORRUPT = "corrupt"


@dataclass(frozen=True)
class Miss:
    """Cache lookup result signalling the caller should fall back."""

    reason: MissReason

    def __bool__(self) -> bool:
        return False


@dataclass(frozen=True)
class CompiledModule:
    """Executable unit produced from the cache or a fresh compile."""

    name: str
    origin: Path
    code: CodeType
    loader: LoaderKind = "standard"

    @property
    def is_package(self) -> bool:
        """Return ``True`` when the module was loaded from ``__init__.py``."""

        return self.origin.name == "__init__.py"


@dataclass(frozen=True)
class NativeModule:
    """Extension module located by the native fallback; never cached."""

    name: str
    origin: Path


@dataclass
class ProfileRecord:
    """Timing information collected for one module load."""

    resolve: int = 0
    load: int = 0
    loader: str = "standard"

    @property
    def total(self) -> int:
        """Return resolve plus load time in nanoseconds."""

        return self.resolve + self.load


def module_key(name: str) -> str:
    """Return the slash-form table key for a dotted module ``name``."""

    return name.replace(".", "/")


__all__ = [
    "CacheEntry",
    "CompiledModule",
    "LoaderKind",
    "Miss",
    "MissReason",
    "NativeModule",
    "ProfileRecord",
    "StoreDocument",
    "StrictModel",
    "module_key",
]
