"""Temporary file ownership for one video composition.

Responsibilities:
- Allocate collision-free temporary paths for audio, image and output files.
- Delete every allocated file on release without letting cleanup errors escape.
"""

from __future__ import annotations

from pathlib import Path
import time
import uuid

from ..models.datatypes import AssetKind, TemporaryAsset
from ..telemetry.logger import StageLogger


class CompositionWorkspace:
    """Set of temporary assets owned by exactly one composition call."""

    def __init__(self, temp_dir: Path, logger: StageLogger | None = None) -> None:
        self.temp_dir = temp_dir
        self.logger = logger or StageLogger()
        self._token = f"{time.time_ns()}_{uuid.uuid4().hex}"
        self._assets: list[TemporaryAsset] = []

    @property
    def assets(self) -> tuple[TemporaryAsset, ...]:
        return tuple(self._assets)

    def allocate(self, kind: AssetKind, suffix: str) -> TemporaryAsset:
        """Reserve a unique path for one asset; nothing is written yet."""

        self.temp_dir.mkdir(parents=True, exist_ok=True)
        asset = TemporaryAsset(
            path=self.temp_dir / f"{kind.value}_{self._token}{suffix}",
            kind=kind,
        )
        self._assets.append(asset)
        return asset

    def write(self, kind: AssetKind, suffix: str, payload: bytes) -> TemporaryAsset:
        """Allocate an asset and write `payload` to it."""

        asset = self.allocate(kind, suffix)
        asset.path.write_bytes(payload)
        return asset

    def release(self) -> list[Path]:
        """Delete every allocated asset and return paths that could not be removed."""

        leftovers: list[Path] = []
        for asset in self._assets:
            try:
                asset.path.unlink(missing_ok=True)
            except OSError as exc:
                leftovers.append(asset.path)
                self.logger.log_warning(
                    "compose",
                    "cleanup_failed",
                    asset=asset.kind.value,
                    error_type=type(exc).__name__,
                )
        self._assets.clear()
        return leftovers
