"""Speech backends, audio playback and backend selection.

Backends render text to speech for the languages they support. The BackendManager selects one
backend per request and owns the session language.
"""

from core.speech.engines import CachedAudioBackend, NativeSynthesizer
from core.speech.interface import (
    BackendError,
    NoCapableBackendError,
    SpeechBackend,
    SpeechError,
    UnknownBackendError,
)
from core.speech.manager import BackendManager
from core.speech.player import AudioPlayer

__all__: list[str] = [
    "AudioPlayer",
    "BackendError",
    "BackendManager",
    "CachedAudioBackend",
    "NativeSynthesizer",
    "NoCapableBackendError",
    "SpeechBackend",
    "SpeechError",
    "UnknownBackendError",
]
