"""Scoped staging of uploaded documents on local storage.

Uploads are written under the configured upload directory for the duration of
one extraction and removed on exit, whether extraction succeeded or not.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
import time
import uuid

from ..telemetry.logger import StageLogger


class UploadStaging:
    """Write uploads to uniquely named files and guarantee their removal."""

    def __init__(self, upload_dir: Path, logger: StageLogger | None = None) -> None:
        self.upload_dir = upload_dir
        self.logger = logger or StageLogger()

    @contextmanager
    def stage(self, file_bytes: bytes, original_name: str | None = None) -> Iterator[Path]:
        """Yield a path holding `file_bytes`; the file is deleted when the block exits."""

        self.upload_dir.mkdir(parents=True, exist_ok=True)
        suffix = Path(original_name or "").suffix.lower()
        path = self.upload_dir / f"upload_{time.time_ns()}_{uuid.uuid4().hex}{suffix}"
        try:
            path.write_bytes(file_bytes)
            yield path
        finally:
            self._discard(path)

    def _discard(self, path: Path) -> None:
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            self.logger.log_warning("extract", "upload_cleanup_failed", error_type=type(exc).__name__)
