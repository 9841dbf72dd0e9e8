# SPDX-License-Identifier: MIT
"""Tests for compiled-code blobs."""

import pytest

from warmstart.core.codec import dump_code, load_code
from warmstart.errors import CorruptBlobError


def _code():
    return compile("VALUE = 40 + 2\n", "/src/mod.py", "exec", dont_inherit=True)


def test_blob_loads_back_to_runnable_code() -> None:
    namespace: dict[str, object] = {}
    exec(load_code(dump_code(_code())), namespace)
    assert namespace["VALUE"] == 42


@pytest.mark.parametrize("index", [0, 5, 16, 20, -1])
def test_flipped_byte_is_detected(index: int) -> None:
    blob = bytearray(dump_code(_code()))
    blob[index] ^= 0xFF
    with pytest.raises(CorruptBlobError):
        load_code(bytes(blob))


@pytest.mark.parametrize("blob", [b"", b"short", b"\x00" * 64])
def test_garbage_is_rejected(blob: bytes) -> None:
    with pytest.raises(CorruptBlobError):
        load_code(blob)


def test_non_code_payload_is_rejected() -> None:
    import hashlib
    import marshal

    payload = marshal.dumps({"not": "code"})
    digest = hashlib.blake2b(payload, digest_size=16).digest()
    with pytest.raises(CorruptBlobError, match="not a code object"):
        load_code(digest + payload)
