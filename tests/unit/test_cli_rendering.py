"""Unit tests for CLI output and error rendering helpers."""

from __future__ import annotations

import pytest
import typer

from tamilvoice.cli_rendering import echo_voice_table, exit_with_command_error
from tamilvoice.errors import DocumentTooLarge


def test_exit_with_command_error_renders_stage_error_with_hint(
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Renderer should print stage diagnostics and hint before exiting with code 1."""

    error = DocumentTooLarge(30, 25, hint="Split the PDF into parts of at most 25 pages.")

    with pytest.raises(typer.Exit) as exc_info:
        exit_with_command_error("extract", error)

    captured = capsys.readouterr()
    assert exc_info.value.exit_code == 1
    assert "extract failed at stage `extract`: Document exceeds 25 page limit." in captured.err
    assert "Hint: Split the PDF into parts of at most 25 pages." in captured.err


def test_exit_with_command_error_renders_non_stage_fallback(
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Renderer should print fallback exception text for non-stage failures."""

    with pytest.raises(typer.Exit) as exc_info:
        exit_with_command_error("convert", RuntimeError("disk full"))

    captured = capsys.readouterr()
    assert exc_info.value.exit_code == 1
    assert "convert failed: disk full" in captured.err


def test_echo_voice_table_lists_all_rows(capsys: pytest.CaptureFixture[str]) -> None:
    """The voice table should print six voices, three tones and three speeds."""

    echo_voice_table()

    lines = capsys.readouterr().out.splitlines()
    assert "female medium Zephyr" in lines
    assert sum(1 for line in lines if line.startswith("tone ")) == 3
    assert "speed fast: 1.2x" in lines
