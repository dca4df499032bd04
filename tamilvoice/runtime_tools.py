"""Executable resolution helpers for external media tools.

Responsibilities:
- Resolve external executables with an explicit override, then bundled copies, then PATH.
- Support frozen app layouts (for example PyInstaller) and local development runs.
"""

from __future__ import annotations

import os
from pathlib import Path
import shutil
import sys


def resolve_executable(command_name: str, env_override: str | None = None) -> str:
    """Resolve an executable path for an external tool.

    Resolution order:
    1. The environment variable named by `env_override`, when set.
    2. Bundled app directories (`./bin/<tool>` then `./<tool>` from app root).
    3. System `PATH`.
    4. Raw command name (allowing subprocess to raise a native missing-binary error).
    """

    normalized = command_name.strip()
    if not normalized:
        return command_name

    if env_override:
        override = os.environ.get(env_override, "").strip()
        if override:
            return override

    for candidate in _bundled_candidates(normalized):
        if candidate.is_file():
            return str(candidate)

    return shutil.which(normalized) or normalized


def _bundled_candidates(command_name: str) -> list[Path]:
    """Return bundled candidate paths for one executable name."""

    app_root = _app_root()
    candidates: list[Path] = []
    for name in _candidate_names(command_name):
        candidates.append(app_root / "bin" / name)
        candidates.append(app_root / name)
    return candidates


def _candidate_names(command_name: str) -> tuple[str, ...]:
    """Return command name variants including the Windows `.exe` spelling."""

    if command_name.lower().endswith(".exe"):
        return (command_name,)
    return (command_name, f"{command_name}.exe")


def _app_root() -> Path:
    """Resolve runtime application root for frozen and non-frozen execution."""

    if getattr(sys, "frozen", False):
        return Path(sys.executable).resolve().parent
    return Path(__file__).resolve().parents[1]
