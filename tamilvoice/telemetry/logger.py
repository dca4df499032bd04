"""Structured stage logging utilities.

Responsibilities:
- Configure the process-wide `loguru` sink once per entrypoint.
- Emit concise, deterministic stage-level runtime logs.
"""

from __future__ import annotations

import sys
from typing import TextIO

from loguru import logger as _loguru_logger


_LOG_FORMAT = "{time:YYYY-MM-DDTHH:mm:ss.SSSZ} {message}"


def configure_logging(level: str = "INFO", sink: TextIO | None = None) -> None:
    """Replace loguru's default handler with one deterministic line sink."""

    _loguru_logger.remove()
    _loguru_logger.add(
        sink or sys.stderr,
        format=_LOG_FORMAT,
        level=level.upper(),
        colorize=False,
    )


def _sanitize_context_value(value: object) -> str:
    """Convert context values into stable, shell-safe tokens."""

    raw = str(value).strip()
    if not raw:
        return "none"
    return "".join(
        character if character.isalnum() or character in {"-", "_", ".", ":", "/"} else "_"
        for character in raw
    )


def _format_context(context: dict[str, object]) -> str:
    """Serialize context key/value pairs in deterministic key order."""

    if not context:
        return ""
    tokens = [
        f"{key}={_sanitize_context_value(context[key])}"
        for key in sorted(context.keys())
    ]
    return " " + " ".join(tokens)


class StageLogger:
    """Emit deterministic stage logs for conversion activity.

    Payloads (document text, audio, API keys) are never logged; callers pass
    sizes and identifiers as context instead.
    """

    def __init__(self, request_id: str | None = None) -> None:
        self._request_id = request_id

    def bind(self, request_id: str) -> StageLogger:
        """Return a logger that tags every line with `request_id`."""

        return StageLogger(request_id=request_id)

    def _emit(self, level: str, event: str, stage: str, **context: object) -> None:
        """Emit one structured runtime log line."""

        if self._request_id is not None:
            context["request"] = self._request_id
        line = f"[stage] level={level} stage={stage} event={event}{_format_context(context)}"
        _loguru_logger.log(level, line)

    def log_stage_start(self, stage: str, **context: object) -> None:
        """Emit a stage-start runtime event."""

        self._emit("INFO", "start", stage, **context)

    def log_stage_complete(self, stage: str, **context: object) -> None:
        """Emit a stage-complete runtime event."""

        self._emit("INFO", "complete", stage, **context)

    def log_stage_failure(self, stage: str, error_type: str, **context: object) -> None:
        """Emit a stage-failure runtime event without sensitive payload details."""

        self._emit("ERROR", "failure", stage, error_type=error_type, **context)

    def log_state(self, stage: str, state: str, **context: object) -> None:
        """Emit a state-machine transition for a long-running stage."""

        self._emit("DEBUG", "state", stage, state=state, **context)

    def log_warning(self, stage: str, event: str, **context: object) -> None:
        """Emit a non-fatal warning event."""

        self._emit("WARNING", event, stage, **context)
