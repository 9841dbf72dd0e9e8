"""Tests for persistence utilities."""

from pathlib import Path
from unittest.mock import patch

import pytest

from warmstart.io_utils.persistence import atomic_write_bytes, read_bytes


def test_atomic_write_creates_parent_dir(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "store"
    atomic_write_bytes(path, b"\x00\x01")
    assert path.read_bytes() == b"\x00\x01"
    assert not Path(f"{path}.tmp").exists()


def test_atomic_write_syncs(tmp_path: Path) -> None:
    path = tmp_path / "store"
    with patch("warmstart.io_utils.persistence.os.fsync") as fsync:
        atomic_write_bytes(path, b"data")
    fsync.assert_called_once()


def test_failed_replace_keeps_previous_file(tmp_path: Path) -> None:
    path = tmp_path / "store"
    path.write_bytes(b"old")
    with (
        patch(
            "warmstart.io_utils.persistence.os.replace",
            side_effect=OSError("disk full"),
        ),
        pytest.raises(OSError),
    ):
        atomic_write_bytes(path, b"new")
    assert path.read_bytes() == b"old"
    assert not Path(f"{path}.tmp").exists()


def test_read_bytes_missing_returns_none(tmp_path: Path) -> None:
    assert read_bytes(tmp_path / "absent") is None
