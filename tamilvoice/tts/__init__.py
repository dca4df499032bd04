"""Text-to-speech provider abstractions.

This package contains the voice/tone/speed tables, the Gemini HTTP client and
the synthesizer used by the conversion orchestrator.
"""

from .gemini_client import GeminiSpeechClient, InlineAudio
from .synthesizer import GeminiSpeechSynthesizer, SpeechSynthesizer, build_prompt
from .voices import VoiceProfile, resolve_voice_profile

__all__ = [
    "GeminiSpeechClient",
    "GeminiSpeechSynthesizer",
    "InlineAudio",
    "SpeechSynthesizer",
    "VoiceProfile",
    "build_prompt",
    "resolve_voice_profile",
]
