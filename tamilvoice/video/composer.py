"""Still-image MP4 composition with ffmpeg.

Responsibilities:
- Write audio and logo bytes to per-call temporary files.
- Loop the still image for exactly the audio duration with a fixed codec profile.
- Return the encoded MP4 bytes and remove every temporary file on all exit paths.
"""

from __future__ import annotations

import asyncio
import contextlib
from enum import Enum
import os
from pathlib import Path

from ..errors import EncodingFailed, MissingLogo, OutputMissing, ValidationFailed
from ..models.datatypes import AssetKind, CompositionRequest, CompositionResult
from ..runtime_tools import resolve_executable
from ..telemetry.logger import StageLogger
from .temp_assets import CompositionWorkspace


_MAX_DIAGNOSTIC_CHARS = 400

# libx264 with yuv420p rejects odd dimensions, so logos are padded up to an even size.
_EVEN_DIMENSIONS_FILTER = "scale='max(2,trunc(iw/2)*2)':'max(2,trunc(ih/2)*2)'"


class CompositionState(str, Enum):
    """Lifecycle of one composition call."""

    IDLE = "idle"
    WRITING_INPUTS = "writing_inputs"
    ENCODING = "encoding"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CLEANED_UP = "cleaned_up"


class VideoComposer:
    """Compose an MP4 from one audio track and one still image."""

    def __init__(
        self,
        temp_dir: Path,
        *,
        audio_bitrate: str = "192k",
        ffmpeg_command: str | None = None,
        logger: StageLogger | None = None,
    ) -> None:
        self.temp_dir = temp_dir
        self.audio_bitrate = audio_bitrate
        self.ffmpeg_command = ffmpeg_command
        self.logger = logger or StageLogger()

    def build_command(self, *, image_path: Path, audio_path: Path, output_path: Path) -> list[str]:
        """Return the ffmpeg argument list for one still-image encode."""

        executable = self.ffmpeg_command or resolve_executable("ffmpeg", env_override="TAMILVOICE_FFMPEG")
        return [
            executable,
            "-y",
            "-hide_banner",
            "-loglevel",
            "error",
            "-loop",
            "1",
            "-i",
            str(image_path),
            "-i",
            str(audio_path),
            "-vf",
            _EVEN_DIMENSIONS_FILTER,
            "-c:v",
            "libx264",
            "-tune",
            "stillimage",
            "-c:a",
            "aac",
            "-b:a",
            self.audio_bitrate,
            "-pix_fmt",
            "yuv420p",
            "-movflags",
            "+faststart",
            "-shortest",
            str(output_path),
        ]

    async def compose(self, request: CompositionRequest) -> CompositionResult:
        """Encode `request` into MP4 bytes.

        Inputs are validated before any temporary file exists. Once files are
        written, every path out of this method passes through the cleanup
        block, and a cleanup problem never replaces the error being raised.
        """

        if not request.audio_bytes:
            raise ValidationFailed("Audio data is required")
        if not request.image_bytes:
            raise MissingLogo()

        workspace = CompositionWorkspace(self.temp_dir, logger=self.logger)
        state = CompositionState.IDLE
        self.logger.log_stage_start(
            "compose",
            audio_bytes=len(request.audio_bytes),
            image_bytes=len(request.image_bytes),
        )
        try:
            state = self._transition(CompositionState.WRITING_INPUTS)
            audio_suffix = audio_container_suffix(request.audio_bytes) or ".audio"
            audio = workspace.write(AssetKind.AUDIO, audio_suffix, request.audio_bytes)
            image = workspace.write(AssetKind.IMAGE, _image_suffix(request.image_bytes), request.image_bytes)
            output = workspace.allocate(AssetKind.OUTPUT, ".mp4")

            state = self._transition(CompositionState.ENCODING)
            await self._run_encoder(
                self.build_command(image_path=image.path, audio_path=audio.path, output_path=output.path)
            )
            if not output.path.exists():
                raise OutputMissing(
                    "Output file not found",
                    hint="ffmpeg exited successfully but did not write the MP4 output.",
                )
            video_bytes = output.path.read_bytes()
            state = self._transition(CompositionState.SUCCEEDED)
        except BaseException as exc:
            state = self._transition(CompositionState.FAILED)
            self.logger.log_stage_failure("compose", type(exc).__name__)
            raise
        finally:
            workspace.release()
            self._transition(CompositionState.CLEANED_UP, previous=state)

        self.logger.log_stage_complete("compose", video_bytes=len(video_bytes))
        return CompositionResult(video_bytes=video_bytes)

    async def _run_encoder(self, command: list[str]) -> None:
        """Run ffmpeg to completion and map failures to `EncodingFailed`."""

        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError as exc:
            raise EncodingFailed(
                "Video generation failed: `ffmpeg` is not available on PATH.",
                hint="Install ffmpeg or set `TAMILVOICE_FFMPEG` to its path.",
            ) from exc

        try:
            _, stderr = await process.communicate()
        except BaseException:
            # ffmpeg must be gone before the workspace is released.
            with contextlib.suppress(ProcessLookupError):
                process.kill()
            await process.wait()
            raise

        if process.returncode != 0:
            diagnostics = stderr.decode("utf-8", errors="replace").strip()
            path_free = diagnostics.replace(f"{self.temp_dir}{os.sep}", "")
            summary = _short_diagnostics(path_free) or f"ffmpeg exited with code {process.returncode}"
            raise EncodingFailed(
                f"Video generation failed: {summary}",
                diagnostics=diagnostics,
            )

    def _transition(
        self, state: CompositionState, previous: CompositionState | None = None
    ) -> CompositionState:
        context = {"from": previous.value} if previous is not None else {}
        self.logger.log_state("compose", state.value, **context)
        return state


def _short_diagnostics(text: str) -> str:
    compact = " ".join(text.split())
    if len(compact) <= _MAX_DIAGNOSTIC_CHARS:
        return compact
    return f"...{compact[-(_MAX_DIAGNOSTIC_CHARS - 3):]}"


def audio_container_suffix(payload: bytes) -> str | None:
    """Return a file suffix for a recognised audio container, or `None` for headerless data."""

    if payload[:4] == b"RIFF" and payload[8:12] == b"WAVE":
        return ".wav"
    if payload[:3] == b"ID3" or payload[:2] in {b"\xff\xfb", b"\xff\xf3", b"\xff\xf2"}:
        return ".mp3"
    if payload[:4] == b"OggS":
        return ".ogg"
    if payload[:4] == b"fLaC":
        return ".flac"
    if payload[4:8] == b"ftyp":
        return ".m4a"
    return None


def _image_suffix(payload: bytes) -> str:
    """Pick a file suffix from the image signature."""

    if payload[:8] == b"\x89PNG\r\n\x1a\n":
        return ".png"
    if payload[:3] == b"\xff\xd8\xff":
        return ".jpg"
    if payload[:4] == b"RIFF" and payload[8:12] == b"WEBP":
        return ".webp"
    return ".img"
