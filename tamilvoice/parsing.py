"""Shared parsing helpers for configuration values and request payloads."""

from __future__ import annotations

import base64
import binascii


def normalize_optional_string(value: object) -> str | None:
    """Normalize an optional value to a stripped non-empty string.

    Args:
        value: Arbitrary input value.

    Returns:
        Stripped string value, or `None` when the value is empty after trimming.
    """

    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    return text


def parse_csv_tokens(value: object) -> tuple[str, ...]:
    """Split a comma-separated value into stripped non-empty tokens."""

    normalized = normalize_optional_string(value)
    if normalized is None:
        return tuple()
    return tuple(token.strip() for token in normalized.split(",") if token.strip())


def decode_base64_payload(value: str, field_name: str) -> bytes:
    """Decode a base64 string or `data:` URL into raw bytes.

    Args:
        value: Plain base64 text, or a data URL such as `data:image/png;base64,...`.
        field_name: Request field name used in the error message.

    Raises:
        ValueError: If the payload is empty or not valid base64.
    """

    payload = value.strip()
    if payload.startswith("data:"):
        _, separator, payload = payload.partition(",")
        if not separator:
            raise ValueError(f"`{field_name}` is a data URL without a payload.")
    if not payload:
        raise ValueError(f"`{field_name}` is empty.")

    try:
        decoded = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValueError(f"`{field_name}` is not valid base64 data.") from exc
    if not decoded:
        raise ValueError(f"`{field_name}` decoded to an empty payload.")
    return decoded
