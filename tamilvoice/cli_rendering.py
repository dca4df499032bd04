"""CLI output and error rendering helpers.

This module centralizes user-facing CLI presentation for command diagnostics
and the voice table listing.
"""

from __future__ import annotations

from typing import NoReturn

import typer

from .errors import ConversionError
from .tts.voices import SPEED_MULTIPLIERS, TONE_INSTRUCTIONS, VOICE_TABLE


def exit_with_command_error(command_name: str, exc: Exception) -> NoReturn:
    """Print concise diagnostics for command failures and exit with code 1."""

    if isinstance(exc, ConversionError):
        typer.secho(
            f"{command_name} failed at stage `{exc.stage}`: {exc.detail}",
            fg=typer.colors.RED,
            err=True,
        )
        if exc.hint:
            typer.secho(f"Hint: {exc.hint}", fg=typer.colors.YELLOW, err=True)
    else:
        typer.secho(f"{command_name} failed: {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1) from exc


def echo_voice_table() -> None:
    """Print voice rows, tone instructions and speed multipliers."""

    for (gender, tone), voice in VOICE_TABLE.items():
        typer.echo(f"{gender.value:<6} {tone.value:<6} {voice}")
    typer.echo("")
    for tone, instruction in TONE_INSTRUCTIONS.items():
        typer.echo(f"tone {tone.value}: {instruction}")
    for speed, rate in SPEED_MULTIPLIERS.items():
        typer.echo(f"speed {speed.value}: {rate:.1f}x")
