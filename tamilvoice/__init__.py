"""Top-level package for Tamilvoice.

This package converts Tamil text, typed or extracted from PDF/Word documents,
into a narrated MP4 over a still logo image. The main orchestration entry point
is `ConversionOrchestrator`.
"""

__version__ = "0.1.0"

from .pipeline import ConversionOrchestrator

__all__ = ["ConversionOrchestrator", "__version__"]
