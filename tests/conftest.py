"""Shared pytest fixtures for the full Tamilvoice test suite."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest
from loguru import logger

from tamilvoice.config import TamilvoiceConfig
from tests.document_builders import build_png, build_wav


@pytest.fixture(autouse=True)
def _silence_loguru() -> Iterator[None]:
    """Drop loguru handlers so CLI runs cannot leave sinks bound to closed streams."""

    logger.remove()
    yield
    logger.remove()


@pytest.fixture
def one_pixel_png() -> bytes:
    """Provide a valid 1x1 PNG logo."""

    return build_png()


@pytest.fixture
def short_wav() -> bytes:
    """Provide a short silent WAV track."""

    return build_wav()


@pytest.fixture
def service_config(tmp_path: Path) -> TamilvoiceConfig:
    """Provide a config whose work directories live under the test's temp path."""

    return TamilvoiceConfig(
        api_key="test-key",
        temp_dir=tmp_path / "temp",
        upload_dir=tmp_path / "uploads",
    )
