"""Telemetry and observability helpers.

This package emits deterministic stage events for conversion requests.
"""

from .logger import StageLogger, configure_logging

__all__ = ["StageLogger", "configure_logging"]
