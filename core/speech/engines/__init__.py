"""Speech backend implementations.

Modules:
- CachedAudioBackend: Plays recordings located through the resource cascade.
- NativeSynthesizer: Runs an operating system speech utility such as espeak.
"""

from core.speech.engines.cached_audio import CachedAudioBackend, Player
from core.speech.engines.native import NativeSynthesizer

__all__: list[str] = ["CachedAudioBackend", "NativeSynthesizer", "Player"]
