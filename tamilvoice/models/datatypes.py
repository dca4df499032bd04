"""Core datatypes shared across Tamilvoice modules.

Responsibilities:
- Represent immutable request/result records exchanged between conversion stages.
- Provide explicit enums for the document formats and voice settings accepted by callers.

Key types:
- `DocumentFormat`, `ExtractionRequest`, `ExtractionResult`.
- `Gender`, `Tone`, `Speed`, `VoiceSelection`.
- `SynthesisRequest`, `SynthesisResult`.
- `CompositionRequest`, `CompositionResult`, `TemporaryAsset`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path


VIDEO_MIME_TYPE = "video/mp4"


class DocumentFormat(str, Enum):
    """Document formats accepted by the extractor."""

    PDF = "pdf"
    DOC = "doc"
    DOCX = "docx"


class Gender(str, Enum):
    """Voice gender axis."""

    MALE = "male"
    FEMALE = "female"


class Tone(str, Enum):
    """Voice tone axis."""

    SOFT = "soft"
    MEDIUM = "medium"
    HARD = "hard"


class Speed(str, Enum):
    """Speaking speed presets."""

    SLOW = "slow"
    NORMAL = "normal"
    FAST = "fast"


class AssetKind(str, Enum):
    """Role of a temporary file owned by one composition."""

    AUDIO = "audio"
    IMAGE = "image"
    OUTPUT = "output"


@dataclass(frozen=True, slots=True)
class ExtractionRequest:
    """Raw upload bytes and the format the caller declared for them.

    Attributes:
        file_bytes: Uploaded document payload.
        declared_format: Format tag resolved from the upload filename.
    """

    file_bytes: bytes
    declared_format: DocumentFormat


@dataclass(frozen=True, slots=True)
class ExtractionResult:
    """Plain text extracted from one document.

    Attributes:
        text: Extracted text.
        declared_format: Format the text was extracted as.
        page_count: Page count for paginated formats, `None` otherwise.
    """

    text: str
    declared_format: DocumentFormat
    page_count: int | None = None


@dataclass(frozen=True, slots=True)
class VoiceSelection:
    """Caller-facing voice choice on the gender and tone axes."""

    gender: Gender = Gender.FEMALE
    tone: Tone = Tone.MEDIUM


@dataclass(frozen=True, slots=True)
class SynthesisRequest:
    """One speech-synthesis request.

    Attributes:
        text: Literal text to narrate.
        voice_id: Provider-native prebuilt voice name.
        tone_instruction: Natural-language steering sentence prepended to the prompt.
        speaking_rate: Resolved speed multiplier, carried but not sent to the provider.
    """

    text: str
    voice_id: str
    tone_instruction: str
    speaking_rate: float | None = None


@dataclass(frozen=True, slots=True)
class SynthesisResult:
    """Synthesized audio payload.

    Attributes:
        audio_bytes: Audio bytes in a container ffmpeg can read.
        mime_type: MIME type of `audio_bytes`.
        provider_mime_type: MIME type reported by the provider before any rewrapping.
    """

    audio_bytes: bytes
    mime_type: str
    provider_mime_type: str | None = None


@dataclass(frozen=True, slots=True)
class CompositionRequest:
    """Audio and still-image inputs for one MP4 composition."""

    audio_bytes: bytes | None
    image_bytes: bytes | None


@dataclass(frozen=True, slots=True)
class CompositionResult:
    """Encoded video payload ready for transmission to the caller."""

    video_bytes: bytes
    mime_type: str = VIDEO_MIME_TYPE


@dataclass(frozen=True, slots=True)
class TemporaryAsset:
    """Temporary file owned by exactly one composition.

    Attributes:
        path: Filesystem location of the asset.
        kind: Whether the file holds audio input, image input or encoder output.
        created_at: UTC timestamp of allocation.
    """

    path: Path
    kind: AssetKind
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
