"""Tamilvoice conversion pipeline package.

This package contains the orchestrator that runs speech synthesis and video
composition for one request.
"""

from .orchestrator import ConversionOrchestrator

__all__ = ["ConversionOrchestrator"]
