"""HTTP surface for Tamilvoice."""

from .app import create_app

__all__ = ["create_app"]
