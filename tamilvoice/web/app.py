"""FastAPI application exposing extraction, composition and conversion endpoints.

Every `ConversionError` is rendered as `{"error": <detail>}` with the status
code its class declares, so callers can tell bad input (4xx) from processing
failures (5xx).
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, File, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel

from .. import __version__
from ..config import ConfigLoader, TamilvoiceConfig
from ..errors import ConversionError, MissingLogo, ValidationFailed
from ..models.datatypes import CompositionRequest, Gender, Speed, Tone
from ..parsing import decode_base64_payload
from ..provider_factory import ComponentFactory
from ..telemetry.logger import StageLogger
from ..tts.synthesizer import pcm_sample_rate, wrap_pcm_as_wav
from ..tts.voices import SPEED_MULTIPLIERS, TONE_INSTRUCTIONS, VOICE_TABLE, parse_speed, parse_voice_selection
from ..video.composer import audio_container_suffix


class GenerateVideoRequest(BaseModel):
    audioBase64: Optional[str] = None
    audioMimeType: Optional[str] = None
    logoBase64: Optional[str] = None


class ConvertRequest(BaseModel):
    text: Optional[str] = None
    gender: str = Gender.FEMALE.value
    tone: str = Tone.MEDIUM.value
    speed: str = Speed.NORMAL.value
    logoBase64: Optional[str] = None


def create_app(
    config: TamilvoiceConfig | None = None,
    factory: ComponentFactory | None = None,
) -> FastAPI:
    """Build the HTTP app; components come from `factory` or are derived from `config`."""

    resolved_config = config or (factory.config if factory is not None else ConfigLoader.load())
    resolved_factory = factory or ComponentFactory(resolved_config)
    resolved_config.ensure_work_dirs()

    app = FastAPI(title="Tamilvoice", version=__version__)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(resolved_config.cors_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.extractor = resolved_factory.create_extractor()
    app.state.uploads = resolved_factory.create_upload_staging()
    app.state.composer = resolved_factory.create_composer()
    app.state.orchestrator = resolved_factory.create_orchestrator(composer=app.state.composer)
    logger = resolved_factory.logger

    _register_error_handlers(app, logger)

    @app.get("/api/health")
    def health_check() -> dict[str, str]:
        return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}

    @app.get("/api/voices")
    def list_voices() -> dict[str, object]:
        """Return the voice table and the accepted tone and speed presets."""

        return {
            "voices": [
                {"gender": gender.value, "tone": tone.value, "voice": voice}
                for (gender, tone), voice in VOICE_TABLE.items()
            ],
            "tones": {tone.value: instruction for tone, instruction in TONE_INSTRUCTIONS.items()},
            "speeds": {speed.value: rate for speed, rate in SPEED_MULTIPLIERS.items()},
        }

    @app.post("/api/extract-text")
    def extract_text(file: Optional[UploadFile] = File(None)) -> dict[str, str]:
        """Extract text from an uploaded PDF, DOC or DOCX document."""

        if file is None:
            raise ValidationFailed("No file uploaded")

        content = file.file.read()
        with app.state.uploads.stage(content, file.filename) as staged_path:
            result = app.state.extractor.extract(staged_path.read_bytes(), file.filename or "")
        return {"text": result.text}

    @app.post("/api/generate-video")
    async def generate_video(payload: GenerateVideoRequest) -> Response:
        """Mux base64 audio over a base64 (or data URL) logo image.

        Audio without a recognised container is treated as mono 16-bit PCM at
        the `rate=` given in `audioMimeType`, or 24 kHz.
        """

        if not payload.audioBase64:
            raise ValidationFailed("Audio data is required")
        if not payload.logoBase64:
            raise MissingLogo()
        audio_bytes = _decode_field(payload.audioBase64, "audioBase64")
        if audio_container_suffix(audio_bytes) is None:
            # Gemini inline audio arrives as headerless L16 PCM.
            audio_bytes = wrap_pcm_as_wav(audio_bytes, pcm_sample_rate(payload.audioMimeType or ""))
        image_bytes = _decode_field(payload.logoBase64, "logoBase64")

        result = await app.state.composer.compose(
            CompositionRequest(audio_bytes=audio_bytes, image_bytes=image_bytes)
        )
        return Response(content=result.video_bytes, media_type=result.mime_type)

    @app.post("/api/convert")
    async def convert(payload: ConvertRequest) -> Response:
        """Run synthesis and composition server-side for one text."""

        if not payload.text or not payload.text.strip():
            raise ValidationFailed("Text is required")
        if not payload.logoBase64:
            raise MissingLogo()
        selection = parse_voice_selection(payload.gender, payload.tone)
        speed = parse_speed(payload.speed)
        image_bytes = _decode_field(payload.logoBase64, "logoBase64")

        result = await app.state.orchestrator.convert(payload.text, selection, speed, image_bytes)
        return Response(content=result.video_bytes, media_type=result.mime_type)

    return app


def _decode_field(value: str, field_name: str) -> bytes:
    try:
        return decode_base64_payload(value, field_name)
    except ValueError as exc:
        raise ValidationFailed(str(exc)) from exc


def _register_error_handlers(app: FastAPI, logger: StageLogger) -> None:
    @app.exception_handler(ConversionError)
    async def conversion_error_handler(request: Request, exc: ConversionError) -> JSONResponse:
        logger.log_stage_failure(
            exc.stage,
            type(exc).__name__,
            path=request.url.path,
            status=exc.status_code,
        )
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        first = exc.errors()[0] if exc.errors() else {}
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = first.get("msg", "Invalid request")
        detail = f"{location}: {message}" if location else message
        return JSONResponse(status_code=400, content={"error": detail})

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.log_stage_failure("request", type(exc).__name__, path=request.url.path, status=500)
        return JSONResponse(status_code=500, content={"error": str(exc) or "Internal server error"})
