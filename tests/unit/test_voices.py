"""Unit tests for voice, tone and speed resolution tables."""

from __future__ import annotations

import itertools

import pytest

from tamilvoice.errors import ValidationFailed
from tamilvoice.models.datatypes import Gender, Speed, Tone, VoiceSelection
from tamilvoice.tts.voices import (
    SPEED_MULTIPLIERS,
    TONE_INSTRUCTIONS,
    parse_speed,
    parse_voice_selection,
    resolve_voice_id,
    resolve_voice_profile,
)


def test_voice_table_is_total_over_gender_and_tone() -> None:
    """Every (gender, tone) pair should resolve to a non-empty voice name."""

    for gender, tone in itertools.product(Gender, Tone):
        voice = resolve_voice_id(VoiceSelection(gender=gender, tone=tone))
        assert isinstance(voice, str)
        assert voice.strip()


def test_voice_table_matches_product_choices() -> None:
    """Known selections should map to their provider voice names."""

    assert resolve_voice_id(VoiceSelection(Gender.FEMALE, Tone.SOFT)) == "Kore"
    assert resolve_voice_id(VoiceSelection(Gender.MALE, Tone.HARD)) == "Puck"
    assert resolve_voice_id(VoiceSelection(Gender.FEMALE, Tone.HARD)) == "Zephyr"


def test_speed_multipliers_are_positive_and_ordered() -> None:
    """Speed presets should map to 0.8, 1.0 and 1.2."""

    assert SPEED_MULTIPLIERS[Speed.SLOW] == pytest.approx(0.8)
    assert SPEED_MULTIPLIERS[Speed.NORMAL] == pytest.approx(1.0)
    assert SPEED_MULTIPLIERS[Speed.FAST] == pytest.approx(1.2)
    assert all(rate > 0 for rate in SPEED_MULTIPLIERS.values())


def test_every_tone_has_an_instruction() -> None:
    """Each tone should carry a distinct steering sentence."""

    instructions = [TONE_INSTRUCTIONS[tone] for tone in Tone]

    assert len(set(instructions)) == len(Tone)
    assert TONE_INSTRUCTIONS[Tone.SOFT].startswith("Speak in a very soft")


def test_resolve_voice_profile_combines_all_tables() -> None:
    """A profile should carry voice name, tone instruction and speaking rate."""

    profile = resolve_voice_profile(VoiceSelection(Gender.MALE, Tone.MEDIUM), Speed.FAST)

    assert profile.provider_voice_id == "Charon"
    assert profile.tone_instruction == TONE_INSTRUCTIONS[Tone.MEDIUM]
    assert profile.speaking_rate == pytest.approx(1.2)


def test_parse_voice_selection_is_case_insensitive() -> None:
    """Raw tokens from forms should parse regardless of case and padding."""

    selection = parse_voice_selection(" Female ", "HARD")

    assert selection == VoiceSelection(Gender.FEMALE, Tone.HARD)
    assert parse_speed("Slow") is Speed.SLOW


@pytest.mark.parametrize(
    ("gender", "tone"),
    [("robot", "soft"), ("male", "loud"), (None, "soft")],
)
def test_parse_voice_selection_rejects_unknown_tokens(gender: object, tone: object) -> None:
    """Unknown tokens should fail validation with the allowed values listed."""

    with pytest.raises(ValidationFailed) as excinfo:
        parse_voice_selection(gender, tone)

    assert "Supported:" in excinfo.value.detail
    assert excinfo.value.status_code == 400


def test_parse_speed_rejects_unknown_token() -> None:
    """Speeds other than slow, normal and fast should fail validation."""

    with pytest.raises(ValidationFailed):
        parse_speed("ludicrous")
