"""Voice, tone and speed resolution tables for synthesis configuration.

Responsibilities:
- Map caller-facing (gender, tone) selections to provider-native voice names.
- Map tones to the natural-language instruction prepended to the prompt.
- Map speed presets to speaking-rate multipliers.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from ..errors import ValidationFailed
from ..models.datatypes import Gender, Speed, Tone, VoiceSelection


VOICE_TABLE: Mapping[tuple[Gender, Tone], str] = MappingProxyType(
    {
        (Gender.MALE, Tone.SOFT): "Fenrir",
        (Gender.MALE, Tone.MEDIUM): "Charon",
        (Gender.MALE, Tone.HARD): "Puck",
        (Gender.FEMALE, Tone.SOFT): "Kore",
        (Gender.FEMALE, Tone.MEDIUM): "Zephyr",
        (Gender.FEMALE, Tone.HARD): "Zephyr",
    }
)

TONE_INSTRUCTIONS: Mapping[Tone, str] = MappingProxyType(
    {
        Tone.SOFT: "Speak in a very soft, gentle, and calm voice.",
        Tone.MEDIUM: "Speak in a natural, clear, and professional voice.",
        Tone.HARD: "Speak in a firm, powerful, and authoritative voice.",
    }
)

SPEED_MULTIPLIERS: Mapping[Speed, float] = MappingProxyType(
    {
        Speed.SLOW: 0.8,
        Speed.NORMAL: 1.0,
        Speed.FAST: 1.2,
    }
)


@dataclass(frozen=True, slots=True)
class VoiceProfile:
    """Resolved voice settings for one synthesis request.

    Attributes:
        selection: Caller-facing gender/tone selection.
        provider_voice_id: Provider-native voice identifier.
        tone_instruction: Steering sentence for the selected tone.
        speaking_rate: Relative speaking rate multiplier.
    """

    selection: VoiceSelection
    provider_voice_id: str
    tone_instruction: str
    speaking_rate: float = 1.0


def parse_voice_selection(gender: object, tone: object) -> VoiceSelection:
    """Parse raw gender/tone tokens into a `VoiceSelection`."""

    return VoiceSelection(
        gender=_parse_enum(Gender, gender, "gender"),
        tone=_parse_enum(Tone, tone, "tone"),
    )


def parse_speed(speed: object) -> Speed:
    """Parse a raw speed token into a `Speed` preset."""

    return _parse_enum(Speed, speed, "speed")


def resolve_voice_id(selection: VoiceSelection) -> str:
    """Return the provider voice name for one (gender, tone) pair."""

    return VOICE_TABLE[(selection.gender, selection.tone)]


def resolve_tone_instruction(tone: Tone) -> str:
    """Return the steering sentence for one tone."""

    return TONE_INSTRUCTIONS[tone]


def resolve_speaking_rate(speed: Speed) -> float:
    """Return the speaking-rate multiplier for one speed preset."""

    return SPEED_MULTIPLIERS[speed]


def resolve_voice_profile(selection: VoiceSelection, speed: Speed = Speed.NORMAL) -> VoiceProfile:
    """Resolve voice name, tone instruction and speaking rate in one step."""

    return VoiceProfile(
        selection=selection,
        provider_voice_id=resolve_voice_id(selection),
        tone_instruction=resolve_tone_instruction(selection.tone),
        speaking_rate=resolve_speaking_rate(speed),
    )


def _parse_enum(enum_type, value: object, field_name: str):
    if isinstance(value, enum_type):
        return value
    token = str(value).strip().lower() if value is not None else ""
    try:
        return enum_type(token)
    except ValueError as exc:
        allowed = ", ".join(f"`{member.value}`" for member in enum_type)
        raise ValidationFailed(
            f"Unsupported {field_name} `{value}`. Supported: {allowed}.",
        ) from exc
