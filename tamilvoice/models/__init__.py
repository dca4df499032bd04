"""Shared typed data models for Tamilvoice.

This package contains dataclasses and enums used across conversion stages to
avoid cross-module coupling and circular imports.
"""

from .datatypes import (
    VIDEO_MIME_TYPE,
    AssetKind,
    CompositionRequest,
    CompositionResult,
    DocumentFormat,
    ExtractionRequest,
    ExtractionResult,
    Gender,
    Speed,
    SynthesisRequest,
    SynthesisResult,
    TemporaryAsset,
    Tone,
    VoiceSelection,
)

__all__ = [
    "VIDEO_MIME_TYPE",
    "AssetKind",
    "CompositionRequest",
    "CompositionResult",
    "DocumentFormat",
    "ExtractionRequest",
    "ExtractionResult",
    "Gender",
    "Speed",
    "SynthesisRequest",
    "SynthesisResult",
    "TemporaryAsset",
    "Tone",
    "VoiceSelection",
]
