"""Component factory helpers for the conversion service.

Responsibilities:
- Build extractor, synthesizer, composer and orchestrator instances from config.
- Keep the HTTP app and CLI independent from concrete class construction.
"""

from __future__ import annotations

from .config import TamilvoiceConfig
from .io.document_extractor import DocumentExtractor
from .io.uploads import UploadStaging
from .pipeline.orchestrator import ConversionOrchestrator
from .telemetry.logger import StageLogger
from .tts.gemini_client import GeminiSpeechClient
from .tts.synthesizer import GeminiSpeechSynthesizer, SpeechSynthesizer
from .video.composer import VideoComposer


class ComponentFactory:
    """Factory for config-driven conversion components."""

    def __init__(self, config: TamilvoiceConfig, logger: StageLogger | None = None) -> None:
        self.config = config
        self.logger = logger or StageLogger()

    def create_extractor(self) -> DocumentExtractor:
        return DocumentExtractor(page_limits=self.config.page_limit_policy(), logger=self.logger)

    def create_upload_staging(self) -> UploadStaging:
        return UploadStaging(self.config.upload_dir, logger=self.logger)

    def create_synthesizer(self) -> SpeechSynthesizer:
        """Create the Gemini synthesizer with its HTTP client injected."""

        client = GeminiSpeechClient(
            api_key=self.config.api_key,
            base_url=self.config.api_base_url,
            timeout_seconds=self.config.request_timeout_seconds,
        )
        return GeminiSpeechSynthesizer(client, model=self.config.tts_model, logger=self.logger)

    def create_composer(self) -> VideoComposer:
        return VideoComposer(
            self.config.temp_dir,
            audio_bitrate=self.config.audio_bitrate,
            logger=self.logger,
        )

    def create_orchestrator(
        self,
        synthesizer: SpeechSynthesizer | None = None,
        composer: VideoComposer | None = None,
    ) -> ConversionOrchestrator:
        """Create an orchestrator, substituting any explicitly passed components."""

        return ConversionOrchestrator(
            synthesizer=synthesizer or self.create_synthesizer(),
            composer=composer or self.create_composer(),
            logger=self.logger,
        )
