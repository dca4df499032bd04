"""Conversion orchestration for Tamilvoice.

Responsibilities:
- Validate one conversion request before any provider or encoder work.
- Resolve voice, tone and speed selections into a synthesis request.
- Run synthesis then composition sequentially and return the MP4 payload.

Key types:
- `ConversionOrchestrator`: request-scoped conversion facade.
"""

from __future__ import annotations

import asyncio
import uuid

from ..errors import ConversionError, MissingLogo, ValidationFailed
from ..models.datatypes import (
    CompositionRequest,
    CompositionResult,
    Speed,
    SynthesisRequest,
    VoiceSelection,
)
from ..telemetry.logger import StageLogger
from ..tts.synthesizer import SpeechSynthesizer
from ..tts.voices import resolve_voice_profile
from ..video.composer import VideoComposer


class ConversionOrchestrator:
    """Turn text plus a logo image into a narrated MP4.

    The orchestrator holds no per-request state; one instance serves any
    number of concurrent `convert` calls.
    """

    def __init__(
        self,
        synthesizer: SpeechSynthesizer,
        composer: VideoComposer,
        logger: StageLogger | None = None,
    ) -> None:
        self.synthesizer = synthesizer
        self.composer = composer
        self.logger = logger or StageLogger()

    async def convert(
        self,
        text: str,
        voice_selection: VoiceSelection,
        speed: Speed,
        image_bytes: bytes | None,
    ) -> CompositionResult:
        """Synthesize `text` with the selected voice and mux it over `image_bytes`.

        Raises:
            ValidationFailed: If `text` is blank after trimming.
            MissingLogo: If no image bytes were supplied.
            ConversionError: Any synthesis or composition failure, unchanged.
        """

        if not isinstance(text, str) or not text.strip():
            raise ValidationFailed("Text is required")
        if not image_bytes:
            raise MissingLogo()

        profile = resolve_voice_profile(voice_selection, speed)
        request = SynthesisRequest(
            text=text,
            voice_id=profile.provider_voice_id,
            tone_instruction=profile.tone_instruction,
            speaking_rate=profile.speaking_rate,
        )
        logger = self.logger.bind(uuid.uuid4().hex[:12])
        logger.log_stage_start(
            "convert",
            gender=voice_selection.gender.value,
            tone=voice_selection.tone.value,
            speed=speed.value,
            voice=profile.provider_voice_id,
        )

        try:
            synthesis = await asyncio.to_thread(self.synthesizer.synthesize, request)
            result = await self.composer.compose(
                CompositionRequest(audio_bytes=synthesis.audio_bytes, image_bytes=image_bytes)
            )
        except ConversionError as exc:
            logger.log_stage_failure("convert", type(exc).__name__, failed_stage=exc.stage)
            raise

        logger.log_stage_complete("convert", video_bytes=len(result.video_bytes))
        return result
