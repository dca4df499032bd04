"""Integration-test fixtures for deterministic provider and encoder behavior."""

from __future__ import annotations

import asyncio

import pytest

from tamilvoice.provider_factory import ComponentFactory
from tests.doubles import FakeEncoder, RecordingSynthesizer


@pytest.fixture
def fake_encoder(monkeypatch: pytest.MonkeyPatch) -> FakeEncoder:
    """Route composer subprocess calls to an in-process encoder double."""

    encoder = FakeEncoder()
    monkeypatch.setattr(asyncio, "create_subprocess_exec", encoder)
    return encoder


@pytest.fixture
def recording_synthesizer(monkeypatch: pytest.MonkeyPatch) -> RecordingSynthesizer:
    """Make every factory-built synthesizer the same recording double."""

    synthesizer = RecordingSynthesizer()
    monkeypatch.setattr(ComponentFactory, "create_synthesizer", lambda self: synthesizer)
    return synthesizer
