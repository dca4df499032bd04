"""TTS synthesizer interfaces and Gemini-backed implementation.

Responsibilities:
- Define the protocol for one-shot speech synthesis.
- Build the tone-steered prompt and request audio from an injected Gemini client.
- Wrap raw PCM provider output into a WAV container the encoder can read.
"""

from __future__ import annotations

import io
import re
import wave
from typing import Protocol

from ..errors import SynthesisFailed, ValidationFailed
from ..models.datatypes import SynthesisRequest, SynthesisResult
from ..telemetry.logger import StageLogger
from .gemini_client import GeminiSpeechClient


DEFAULT_TTS_MODEL = "gemini-2.5-flash-preview-tts"
PROMPT_TEMPLATE = "{tone_instruction} Read the following Tamil text clearly: {text}"

_PCM_MIME_PREFIXES = ("audio/l16", "audio/pcm")
_DEFAULT_PCM_SAMPLE_RATE = 24000


class SpeechSynthesizer(Protocol):
    """Protocol for TTS provider implementations."""

    def synthesize(self, request: SynthesisRequest) -> SynthesisResult:
        """Synthesize audio for one request."""


def build_prompt(text: str, tone_instruction: str) -> str:
    """Concatenate the tone instruction and the literal input text."""

    return PROMPT_TEMPLATE.format(tone_instruction=tone_instruction.strip(), text=text)


class GeminiSpeechSynthesizer:
    """Gemini-backed synthesizer returning WAV audio for the video composer."""

    def __init__(
        self,
        client: GeminiSpeechClient,
        model: str = DEFAULT_TTS_MODEL,
        logger: StageLogger | None = None,
    ) -> None:
        """Initialize the synthesizer with an explicitly injected provider client."""

        self.client = client
        self.model = model
        self.logger = logger or StageLogger()

    def synthesize(self, request: SynthesisRequest) -> SynthesisResult:
        """Request speech for `request` and return container-wrapped audio bytes.

        The speaking rate is carried on the request but is not part of the
        provider's request shape, so it is only recorded in the stage log.
        """

        if not request.text.strip():
            raise ValidationFailed("Text is required for speech synthesis.")

        self.logger.log_stage_start(
            "synthesize",
            model=self.model,
            voice=request.voice_id,
            text_chars=len(request.text),
            speaking_rate=request.speaking_rate if request.speaking_rate is not None else "unset",
        )
        audio = self.client.generate_speech(
            model=self.model,
            voice=request.voice_id,
            prompt=build_prompt(request.text, request.tone_instruction),
        )
        if not audio.data:
            raise SynthesisFailed("Failed to generate audio from AI")

        context: dict[str, object] = {}
        if is_raw_pcm(audio.mime_type):
            audio_bytes = wrap_pcm_as_wav(audio.data, pcm_sample_rate(audio.mime_type))
            mime_type = "audio/wav"
            context["duration_seconds"] = f"{wav_duration_seconds(audio_bytes):.3f}"
        else:
            audio_bytes = audio.data
            mime_type = audio.mime_type

        self.logger.log_stage_complete(
            "synthesize",
            audio_bytes=len(audio_bytes),
            mime_type=mime_type,
            **context,
        )
        return SynthesisResult(
            audio_bytes=audio_bytes,
            mime_type=mime_type,
            provider_mime_type=audio.mime_type,
        )


def is_raw_pcm(mime_type: str) -> bool:
    """Return whether `mime_type` names headerless 16-bit PCM."""

    return mime_type.strip().lower().startswith(_PCM_MIME_PREFIXES)


def pcm_sample_rate(mime_type: str) -> int:
    """Read the `rate=` parameter from a PCM MIME type, defaulting to 24 kHz."""

    match = re.search(r"rate=(\d+)", mime_type)
    if match is None:
        return _DEFAULT_PCM_SAMPLE_RATE
    return int(match.group(1))


def wrap_pcm_as_wav(pcm_bytes: bytes, sample_rate: int = _DEFAULT_PCM_SAMPLE_RATE) -> bytes:
    """Wrap mono 16-bit little-endian PCM in a WAV container."""

    buffer = io.BytesIO()
    with wave.open(buffer, "wb") as wav_file:
        wav_file.setnchannels(1)
        wav_file.setsampwidth(2)
        wav_file.setframerate(sample_rate)
        wav_file.writeframes(pcm_bytes)
    return buffer.getvalue()


def wav_duration_seconds(audio_bytes: bytes) -> float:
    """Compute WAV duration in seconds from container bytes."""

    try:
        with wave.open(io.BytesIO(audio_bytes), "rb") as wav_file:
            frame_count = wav_file.getnframes()
            sample_rate = wav_file.getframerate()
    except (wave.Error, EOFError) as exc:
        raise SynthesisFailed("Speech response is not a readable WAV payload.") from exc
    if sample_rate <= 0:
        raise SynthesisFailed("Speech response has invalid WAV sample rate.")
    return frame_count / float(sample_rate)
