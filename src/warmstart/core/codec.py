# SPDX-License-Identifier: MIT
"""Serialize compiled code objects into integrity-checked blobs.

A blob is a 16-byte blake2b digest followed by the ``marshal`` payload. The
digest catches arbitrary byte corruption that ``marshal`` would otherwise load
as a different but well-formed code object.
"""

from __future__ import annotations

import hashlib
import marshal
from types import CodeType

from ..errors import CorruptBlobError

DIGEST_SIZE = 16


def _digest(payload: bytes) -> bytes:
    return hashlib.blake2b(payload, digest_size=DIGEST_SIZE).digest()


def dump_code(code: CodeType) -> bytes:
    """Return the blob for ``code``."""
    payload = marshal.dumps(code)
    return _digest(payload) + payload


def load_code(blob: bytes) -> CodeType:
    """Return the code object stored in ``blob``.

    Raises:
        CorruptBlobError: If the digest does not match or the payload does not
            unmarshal to a code object.
    """
    digest, payload = blob[:DIGEST_SIZE], blob[DIGEST_SIZE:]
    if len(digest) != DIGEST_SIZE or not payload or digest != _digest(payload):
        raise CorruptBlobError("compiled blob failed its integrity check")
    try:
        code = marshal.loads(payload)
    except (EOFError, ValueError, TypeError) as exc:
        raise CorruptBlobError(f"compiled blob could not be unmarshalled: {exc}") from exc
    if not isinstance(code, CodeType):
        raise CorruptBlobError(
            f"compiled blob holds {type(code).__name__}, not a code object"
        )
    return code


__all__ = ["dump_code", "load_code"]
