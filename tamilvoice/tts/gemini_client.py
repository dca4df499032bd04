"""Gemini HTTP client utilities for the speech-synthesis stage.

Responsibilities:
- Send minimal `generateContent` requests with audio-only output to the Gemini REST API.
- Normalize inline-audio extraction from the response payload.
- Raise actionable provider exceptions for stage-level error mapping.
"""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass
import json
import re
import socket
from typing import Any

import requests

from ..errors import ProviderError, SynthesisFailed


DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"


@dataclass(frozen=True, slots=True)
class InlineAudio:
    """Audio payload decoded from a Gemini `inlineData` part."""

    data: bytes
    mime_type: str


class GeminiSpeechClient:
    """Minimal requests-based Gemini client for speech generation."""

    _MAX_PROVIDER_MESSAGE_CHARS = 180

    def __init__(
        self,
        *,
        api_key: str | None,
        base_url: str = DEFAULT_BASE_URL,
        timeout_seconds: float = 120.0,
    ) -> None:
        """Initialize Gemini HTTP client settings."""

        self.api_key = api_key.strip() if isinstance(api_key, str) else ""
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds

    def generate_speech(self, *, model: str, voice: str, prompt: str) -> InlineAudio:
        """Return the first inline audio part produced for `prompt` with `voice`."""

        self._require_api_key()

        payload = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "responseModalities": ["AUDIO"],
                "speechConfig": {
                    "voiceConfig": {
                        "prebuiltVoiceConfig": {"voiceName": voice},
                    },
                },
            },
        }
        raw_payload = self._post_json(
            endpoint_path=f"/models/{model}:generateContent",
            payload=payload,
        )
        return self._extract_inline_audio(raw_payload)

    def _require_api_key(self) -> None:
        """Require API key presence before issuing Gemini requests."""

        if not self.api_key:
            raise ProviderError(
                "Missing Gemini API key.",
                failure_kind="invalid_api_key",
                hint="Set `GEMINI_API_KEY` in the environment or the config file.",
            )

    def _post_json(self, *, endpoint_path: str, payload: dict[str, Any]) -> bytes:
        """Execute a Gemini JSON POST request and map failures consistently."""

        endpoint = f"{self.base_url}{endpoint_path}"
        headers = {
            "x-goog-api-key": self.api_key,
            "Content-Type": "application/json",
        }
        try:
            response = requests.post(
                endpoint,
                headers=headers,
                json=payload,
                timeout=self.timeout_seconds,
            )
            response.raise_for_status()
            return bytes(response.content)
        except requests.HTTPError as exc:
            raise self._http_error_to_provider_error(exc) from exc
        except requests.RequestException as exc:
            failure_kind = self._classify_transport_failure(exc)
            if failure_kind == "timeout":
                detail = "Gemini request timed out."
            else:
                detail = f"Gemini request transport error: {self._short_message(str(exc))}"
            raise ProviderError(detail, failure_kind=failure_kind) from exc
        except TimeoutError as exc:
            raise ProviderError("Gemini request timed out.", failure_kind="timeout") from exc

    @classmethod
    def _extract_inline_audio(cls, raw_payload: bytes) -> InlineAudio:
        """Extract and decode the first inline audio part from a response payload."""

        try:
            payload = json.loads(raw_payload.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise ProviderError("Gemini returned invalid JSON payload.") from exc

        for part in cls._iter_parts(payload):
            inline = part.get("inlineData") or part.get("inline_data")
            if not isinstance(inline, dict):
                continue
            encoded = inline.get("data")
            if not isinstance(encoded, str) or not encoded:
                continue
            try:
                data = base64.b64decode(encoded, validate=True)
            except (binascii.Error, ValueError) as exc:
                raise SynthesisFailed("Gemini returned undecodable audio data.") from exc
            mime_type = inline.get("mimeType") or inline.get("mime_type") or "audio/L16;rate=24000"
            return InlineAudio(data=data, mime_type=str(mime_type))

        raise SynthesisFailed(
            "Failed to generate audio from AI",
            hint="The provider response contained no audio payload.",
        )

    @staticmethod
    def _iter_parts(payload: object) -> list[dict[str, Any]]:
        """Return response parts of the first candidate, tolerating malformed shapes."""

        if not isinstance(payload, dict):
            return []
        candidates = payload.get("candidates")
        if not isinstance(candidates, list) or not candidates:
            return []
        first = candidates[0]
        if not isinstance(first, dict):
            return []
        content = first.get("content")
        if not isinstance(content, dict):
            return []
        parts = content.get("parts")
        if not isinstance(parts, list):
            return []
        return [part for part in parts if isinstance(part, dict)]

    @staticmethod
    def _decode_error_body(exc: requests.HTTPError) -> str:
        """Decode an HTTP error body into a best-effort UTF-8 payload string."""

        response = exc.response
        if response is None:
            return ""
        return bytes(response.content).decode("utf-8", errors="replace").strip()

    @classmethod
    def _redact_sensitive_tokens(cls, text: str) -> str:
        """Redact API-key-like tokens from provider error content."""

        redacted = re.sub(r"\bAIza[0-9A-Za-z_-]{20,}\b", "[redacted-key]", text)
        return re.sub(r"(?i)(key=)[^&\s]+", r"\1[redacted-key]", redacted)

    @classmethod
    def _short_message(cls, text: str) -> str:
        """Normalize and cap user-facing provider message length."""

        compact = " ".join(cls._redact_sensitive_tokens(text).split())
        if len(compact) <= cls._MAX_PROVIDER_MESSAGE_CHARS:
            return compact
        return f"{compact[: cls._MAX_PROVIDER_MESSAGE_CHARS - 1]}..."

    @classmethod
    def _extract_provider_message(cls, body: str) -> tuple[str, str | None]:
        """Extract a concise provider message and optional provider status token."""

        if not body:
            return "", None
        try:
            payload = json.loads(body)
        except json.JSONDecodeError:
            return cls._short_message(body), None

        message: str | None = None
        provider_status: str | None = None
        if isinstance(payload, dict) and isinstance(payload.get("error"), dict):
            error_payload = payload["error"]
            if isinstance(error_payload.get("message"), str):
                message = error_payload["message"].strip() or None
            if isinstance(error_payload.get("status"), str):
                provider_status = error_payload["status"].strip() or None
        return cls._short_message(message or body), provider_status

    @staticmethod
    def _classify_http_failure(status_code: int, provider_status: str | None) -> str:
        """Classify Gemini HTTP errors into diagnostic kinds."""

        normalized = (provider_status or "").upper()
        if status_code in {401, 403} or normalized in {"UNAUTHENTICATED", "PERMISSION_DENIED"}:
            return "invalid_api_key"
        if status_code == 429 or normalized == "RESOURCE_EXHAUSTED":
            return "insufficient_quota"
        if status_code == 404 or normalized == "NOT_FOUND":
            return "invalid_model"
        if status_code in {408, 504} or normalized == "DEADLINE_EXCEEDED":
            return "timeout"
        return "http_error"

    @staticmethod
    def _classify_transport_failure(reason: object) -> str:
        """Classify network-layer failures into diagnostic kinds."""

        if isinstance(reason, TimeoutError | socket.timeout | requests.Timeout):
            return "timeout"
        return "transport"

    @classmethod
    def _http_error_to_provider_error(cls, exc: requests.HTTPError) -> ProviderError:
        """Convert HTTP errors into normalized provider exceptions with metadata."""

        status_code = exc.response.status_code if exc.response is not None else 0
        provider_message, provider_status = cls._extract_provider_message(
            cls._decode_error_body(exc)
        )
        failure_kind = cls._classify_http_failure(status_code, provider_status)
        headline = {
            "invalid_api_key": "Gemini authentication failed",
            "insufficient_quota": "Gemini quota is insufficient for this request",
            "invalid_model": "Gemini rejected the selected model",
            "timeout": "Gemini request timed out",
        }.get(failure_kind, "Gemini request failed")

        if provider_message:
            detail = f"{headline} (HTTP {status_code}): {provider_message}"
        else:
            detail = f"{headline} (HTTP {status_code})."
        return ProviderError(detail, failure_kind=failure_kind, provider_status=status_code)
