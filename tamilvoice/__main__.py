"""Module entrypoint for running Tamilvoice as ``python -m tamilvoice``."""

from __future__ import annotations

from tamilvoice.cli import main


if __name__ == "__main__":
    main()
