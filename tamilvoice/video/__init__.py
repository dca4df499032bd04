"""Video composition components.

This package turns synthesized audio plus a still logo image into an MP4 and
owns the temporary files each encode needs.
"""

from .composer import CompositionState, VideoComposer, audio_container_suffix
from .temp_assets import CompositionWorkspace

__all__ = ["CompositionState", "CompositionWorkspace", "VideoComposer", "audio_container_suffix"]
