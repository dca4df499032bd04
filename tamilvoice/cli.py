"""Command-line interface for Tamilvoice.

Responsibilities:
- Serve the HTTP API with uvicorn.
- Run extraction and full text-to-MP4 conversion locally.

Key public functions:
- `app`: Typer application instance.
- `main`: invoke the Typer application.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Annotated

import typer

from .cli_rendering import echo_voice_table, exit_with_command_error
from .config import ConfigLoader, TamilvoiceConfig
from .errors import ConversionError, ValidationFailed
from .provider_factory import ComponentFactory
from .telemetry.logger import configure_logging
from .tts.voices import parse_speed, parse_voice_selection

app = typer.Typer(
    name="tamilvoice",
    no_args_is_help=True,
    help="Tamilvoice CLI: Tamil text and documents to narrated MP4.",
)

ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", help="Path to YAML config file; environment values override it."),
]


def _load_config(config_file: Path | None) -> TamilvoiceConfig:
    """Load config and map failures to stage errors."""

    try:
        config = ConfigLoader.load(config_file)
    except FileNotFoundError as exc:
        raise ConversionError(
            f"Config file not found: `{config_file}`.",
            stage="config",
            hint="Provide an existing path via `--config <path.yaml>`.",
        ) from exc
    except ValueError as exc:
        raise ConversionError(
            f"Invalid configuration: {exc}",
            stage="config",
            hint="Fix config file or environment values and rerun.",
        ) from exc
    configure_logging(config.log_level)
    return config


@app.command("serve")
def serve_command(
    config_file: ConfigOption = None,
    host: Annotated[str | None, typer.Option("--host", help="Bind address override.")] = None,
    port: Annotated[int | None, typer.Option("--port", help="Bind port override.")] = None,
) -> None:
    """Run the HTTP API."""

    try:
        config = _load_config(config_file)
    except Exception as exc:
        exit_with_command_error("serve", exc)

    import uvicorn

    from .web.app import create_app

    uvicorn.run(
        create_app(config),
        host=host or config.host,
        port=port or config.port,
        log_level=config.log_level.lower() if config.log_level != "SUCCESS" else "info",
    )


@app.command("extract")
def extract_command(
    document: Annotated[Path, typer.Argument(help="PDF, DOC or DOCX document.")],
    config_file: ConfigOption = None,
) -> None:
    """Print the text extracted from a document."""

    try:
        config = _load_config(config_file)
        result = ComponentFactory(config).create_extractor().extract_path(document)
    except Exception as exc:
        exit_with_command_error("extract", exc)

    typer.echo(result.text)


@app.command("convert")
def convert_command(
    logo: Annotated[Path, typer.Option("--logo", help="Still image used as the video background.")],
    out: Annotated[Path, typer.Option("--out", help="Destination MP4 path.")],
    text: Annotated[str | None, typer.Option("--text", help="Text to narrate.")] = None,
    document: Annotated[
        Path | None,
        typer.Option("--document", help="PDF, DOC or DOCX document to narrate instead of `--text`."),
    ] = None,
    gender: Annotated[str, typer.Option("--gender", help="`male` or `female`.")] = "female",
    tone: Annotated[str, typer.Option("--tone", help="`soft`, `medium` or `hard`.")] = "medium",
    speed: Annotated[str, typer.Option("--speed", help="`slow`, `normal` or `fast`.")] = "normal",
    config_file: ConfigOption = None,
) -> None:
    """Narrate text or a document and write an MP4."""

    try:
        if (text is None) == (document is None):
            raise ValidationFailed(
                "Provide exactly one of `--text` or `--document`.",
                hint="Use `--text \"...\"` for inline text or `--document <file>`.",
            )
        config = _load_config(config_file)
        factory = ComponentFactory(config)
        selection = parse_voice_selection(gender, tone)
        speed_preset = parse_speed(speed)
        if document is not None:
            text = factory.create_extractor().extract_path(document).text
        try:
            image_bytes = logo.read_bytes()
        except OSError as exc:
            raise ValidationFailed(f"Could not read logo image `{logo}`: {exc}") from exc

        result = asyncio.run(
            factory.create_orchestrator().convert(text or "", selection, speed_preset, image_bytes)
        )
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_bytes(result.video_bytes)
    except Exception as exc:
        exit_with_command_error("convert", exc)

    typer.echo(f"Video: {out} ({len(result.video_bytes)} bytes, {result.mime_type})")


@app.command("voices")
def voices_command() -> None:
    """List voice, tone and speed presets."""

    echo_voice_table()


def main() -> None:
    """CLI entrypoint for console scripts."""
    app()


if __name__ == "__main__":
    main()
