"""Unit tests for scoped upload staging."""

from __future__ import annotations

from pathlib import Path

import pytest

from tamilvoice.io.uploads import UploadStaging


def test_stage_writes_bytes_and_removes_file_on_exit(tmp_path: Path) -> None:
    """The staged file should hold the upload and disappear after the block."""

    staging = UploadStaging(tmp_path / "uploads")

    with staging.stage(b"%PDF-1.4 payload", "Report.PDF") as staged:
        assert staged.read_bytes() == b"%PDF-1.4 payload"
        assert staged.suffix == ".pdf"
        assert staged.name.startswith("upload_")

    assert not staged.exists()
    assert list((tmp_path / "uploads").iterdir()) == []


def test_stage_removes_file_when_block_raises(tmp_path: Path) -> None:
    """A failure inside the block should still remove the staged file."""

    staging = UploadStaging(tmp_path)

    with pytest.raises(RuntimeError, match="parser exploded"):
        with staging.stage(b"data", "notes.docx") as staged:
            raise RuntimeError("parser exploded")

    assert not staged.exists()


def test_stage_uses_unique_names(tmp_path: Path) -> None:
    """Nested stagings of the same filename should never collide."""

    staging = UploadStaging(tmp_path)

    with staging.stage(b"a", "same.pdf") as first, staging.stage(b"b", "same.pdf") as second:
        assert first != second
        assert first.read_bytes() == b"a"
        assert second.read_bytes() == b"b"
