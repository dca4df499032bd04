"""Configuration model and loaders for Tamilvoice.

Responsibilities:
- Define runtime configuration as a typed dataclass.
- Provide loader entry points for file- and environment-based configuration.
- Resolve values with deterministic precedence: environment > YAML file > defaults.

Key types:
- `TamilvoiceConfig`: normalized runtime settings for the service and CLI.
- `ConfigLoader`: static construction helpers for `TamilvoiceConfig`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import os
from pathlib import Path
import tempfile
from typing import Any, Mapping

import yaml

from .io.document_extractor import PageLimitPolicy
from .parsing import normalize_optional_string, parse_csv_tokens
from .tts.gemini_client import DEFAULT_BASE_URL
from .tts.synthesizer import DEFAULT_TTS_MODEL


_DEFAULT_PDF_PAGE_LIMIT = 25
_DEFAULT_AUDIO_BITRATE = "192k"
_DEFAULT_PORT = 3000
_VALID_LOG_LEVELS = frozenset({"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"})


def _default_work_root() -> Path:
    return Path(tempfile.gettempdir()) / "tamilvoice"


@dataclass(slots=True)
class TamilvoiceConfig:
    """Runtime configuration for the conversion service.

    Attributes:
        api_key: Gemini API key; requests fail with a provider error when absent.
        tts_model: Gemini speech model identifier.
        api_base_url: Gemini REST base URL.
        request_timeout_seconds: Per-request HTTP timeout for the provider call.
        temp_dir: Directory for composition temporary files.
        upload_dir: Directory where uploads are staged during extraction.
        pdf_page_limit: Maximum accepted PDF page count.
        audio_bitrate: AAC bitrate passed to ffmpeg.
        host: HTTP bind address.
        port: HTTP bind port.
        cors_origins: Allowed CORS origins for the HTTP app.
        log_level: Minimum loguru level.
    """

    api_key: str | None = None
    tts_model: str = DEFAULT_TTS_MODEL
    api_base_url: str = DEFAULT_BASE_URL
    request_timeout_seconds: float = 120.0
    temp_dir: Path = field(default_factory=lambda: _default_work_root() / "temp")
    upload_dir: Path = field(default_factory=lambda: _default_work_root() / "uploads")
    pdf_page_limit: int = _DEFAULT_PDF_PAGE_LIMIT
    audio_bitrate: str = _DEFAULT_AUDIO_BITRATE
    host: str = "0.0.0.0"
    port: int = _DEFAULT_PORT
    cors_origins: tuple[str, ...] = ("*",)
    log_level: str = "INFO"

    def validate(self) -> None:
        """Validate runtime configuration values before serving requests."""

        self._require_non_empty(self.tts_model, "tts_model")
        self._require_non_empty(self.api_base_url, "api_base_url")
        self._require_non_empty(self.audio_bitrate, "audio_bitrate")
        self._require_non_empty(self.host, "host")
        if self.request_timeout_seconds <= 0:
            raise ValueError("`request_timeout_seconds` must be a positive number.")
        if self.pdf_page_limit <= 0:
            raise ValueError("`pdf_page_limit` must be a positive integer.")
        if not 0 < self.port < 65536:
            raise ValueError("`port` must be between 1 and 65535.")
        if self.log_level.upper() not in _VALID_LOG_LEVELS:
            supported = ", ".join(sorted(_VALID_LOG_LEVELS))
            raise ValueError(f"`log_level` must be one of: {supported}.")

    def page_limit_policy(self) -> PageLimitPolicy:
        """Return the per-format page ceiling rule derived from this config."""

        return PageLimitPolicy.pdf_only(self.pdf_page_limit)

    def ensure_work_dirs(self) -> None:
        """Create temp and upload directories when missing."""

        self.temp_dir.mkdir(parents=True, exist_ok=True)
        self.upload_dir.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def _require_non_empty(value: str, field_name: str) -> None:
        """Validate that runtime string fields are not empty."""

        if not isinstance(value, str) or not value.strip():
            raise ValueError(f"`{field_name}` must be a non-empty string.")


class ConfigLoader:
    """Factory methods for creating `TamilvoiceConfig` from external sources."""

    _ENV_KEYS = {
        "api_key": "GEMINI_API_KEY",
        "tts_model": "TAMILVOICE_TTS_MODEL",
        "api_base_url": "TAMILVOICE_API_BASE_URL",
        "request_timeout_seconds": "TAMILVOICE_REQUEST_TIMEOUT",
        "temp_dir": "TAMILVOICE_TEMP_DIR",
        "upload_dir": "TAMILVOICE_UPLOAD_DIR",
        "pdf_page_limit": "TAMILVOICE_PDF_PAGE_LIMIT",
        "audio_bitrate": "TAMILVOICE_AUDIO_BITRATE",
        "host": "TAMILVOICE_HOST",
        "port": "TAMILVOICE_PORT",
        "cors_origins": "TAMILVOICE_CORS_ORIGINS",
        "log_level": "TAMILVOICE_LOG_LEVEL",
    }
    _SUPPORTED_YAML_KEYS = frozenset(_ENV_KEYS)

    @staticmethod
    def load(path: Path | None = None, env: Mapping[str, str] | None = None) -> TamilvoiceConfig:
        """Create a validated config from an optional YAML file overlaid with environment values."""

        payload: dict[str, Any] = {}
        if path is not None:
            payload.update(ConfigLoader._read_yaml_payload(path))
        payload.update(ConfigLoader._env_payload(os.environ if env is None else env))
        return ConfigLoader._build_config_from_mapping(payload, source_label="configuration")

    @staticmethod
    def from_yaml(path: Path) -> TamilvoiceConfig:
        """Create a validated config from a YAML file only."""

        payload = ConfigLoader._read_yaml_payload(path)
        return ConfigLoader._build_config_from_mapping(payload, source_label=f"YAML `{path}`")

    @staticmethod
    def from_env(env: Mapping[str, str] | None = None) -> TamilvoiceConfig:
        """Create a validated config from environment variables only."""

        payload = ConfigLoader._env_payload(os.environ if env is None else env)
        return ConfigLoader._build_config_from_mapping(payload, source_label="environment")

    @staticmethod
    def _read_yaml_payload(path: Path) -> dict[str, Any]:
        """Parse a YAML file and enforce a mapping root with known keys."""

        try:
            payload = yaml.safe_load(path.read_text(encoding="utf-8"))
        except yaml.YAMLError as exc:
            raise ValueError(f"YAML config `{path}` is not valid YAML: {exc}") from exc
        if payload is None:
            return {}
        if not isinstance(payload, Mapping):
            raise ValueError(f"YAML config `{path}` must contain a top-level mapping/object.")

        unknown = sorted(set(payload).difference(ConfigLoader._SUPPORTED_YAML_KEYS))
        if unknown:
            raise ValueError(
                f"YAML config `{path}` includes unsupported key(s): {', '.join(unknown)}."
            )
        return dict(payload)

    @staticmethod
    def _env_payload(env: Mapping[str, str]) -> dict[str, Any]:
        """Collect non-blank environment overrides keyed by config field name."""

        payload: dict[str, Any] = {}
        for field_name, env_key in ConfigLoader._ENV_KEYS.items():
            value = normalize_optional_string(env.get(env_key))
            if value is not None:
                payload[field_name] = value
        return payload

    @staticmethod
    def _build_config_from_mapping(payload: Mapping[str, Any], source_label: str) -> TamilvoiceConfig:
        """Build a validated config from a merged mapping payload."""

        defaults = TamilvoiceConfig()
        config = TamilvoiceConfig(
            api_key=normalize_optional_string(payload.get("api_key")),
            tts_model=ConfigLoader._string(payload, "tts_model", defaults.tts_model),
            api_base_url=ConfigLoader._string(payload, "api_base_url", defaults.api_base_url),
            request_timeout_seconds=ConfigLoader._positive_float(
                payload, "request_timeout_seconds", defaults.request_timeout_seconds, source_label
            ),
            temp_dir=ConfigLoader._path(payload, "temp_dir", defaults.temp_dir),
            upload_dir=ConfigLoader._path(payload, "upload_dir", defaults.upload_dir),
            pdf_page_limit=ConfigLoader._positive_int(
                payload, "pdf_page_limit", defaults.pdf_page_limit, source_label
            ),
            audio_bitrate=ConfigLoader._string(payload, "audio_bitrate", defaults.audio_bitrate),
            host=ConfigLoader._string(payload, "host", defaults.host),
            port=ConfigLoader._positive_int(payload, "port", defaults.port, source_label),
            cors_origins=ConfigLoader._origins(payload, defaults.cors_origins),
            log_level=ConfigLoader._string(payload, "log_level", defaults.log_level).upper(),
        )
        config.validate()
        return config

    @staticmethod
    def _string(payload: Mapping[str, Any], key: str, default: str) -> str:
        return normalize_optional_string(payload.get(key)) or default

    @staticmethod
    def _path(payload: Mapping[str, Any], key: str, default: Path) -> Path:
        value = normalize_optional_string(payload.get(key))
        return Path(value).expanduser() if value is not None else default

    @staticmethod
    def _origins(payload: Mapping[str, Any], default: tuple[str, ...]) -> tuple[str, ...]:
        raw = payload.get("cors_origins")
        if isinstance(raw, (list, tuple)):
            origins = tuple(token for token in (normalize_optional_string(item) for item in raw) if token)
        else:
            origins = parse_csv_tokens(raw)
        return origins or default

    @staticmethod
    def _positive_int(payload: Mapping[str, Any], key: str, default: int, source_label: str) -> int:
        """Read and validate a positive integer field."""

        raw_value = payload.get(key)
        if raw_value is None:
            return default
        if isinstance(raw_value, bool):
            raise ValueError(f"{source_label} field `{key}` must be a positive integer.")
        try:
            parsed = int(str(raw_value).strip())
        except ValueError as exc:
            raise ValueError(f"{source_label} field `{key}` must be a positive integer.") from exc
        if parsed <= 0:
            raise ValueError(f"{source_label} field `{key}` must be a positive integer.")
        return parsed

    @staticmethod
    def _positive_float(
        payload: Mapping[str, Any], key: str, default: float, source_label: str
    ) -> float:
        """Read and validate a positive number field."""

        raw_value = payload.get(key)
        if raw_value is None:
            return default
        if isinstance(raw_value, bool):
            raise ValueError(f"{source_label} field `{key}` must be a positive number.")
        try:
            parsed = float(str(raw_value).strip())
        except ValueError as exc:
            raise ValueError(f"{source_label} field `{key}` must be a positive number.") from exc
        if parsed <= 0:
            raise ValueError(f"{source_label} field `{key}` must be a positive number.")
        return parsed
