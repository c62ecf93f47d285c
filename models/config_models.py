"""Configuration data models for Typepad.

Each dataclass mirrors one section of ``typepad.ini``. Field names match the INI keys,
and the default value of each field decides how the loader parses the INI string
(bool/int/float directly, everything else as a Python literal).
"""

from __future__ import annotations

from dataclasses import dataclass, field

__all__: list[str] = [
    "BuffersSection",
    "CachedAudioSection",
    "Config",
    "General",
    "NativeSection",
    "PlayerSection",
    "SpeechSection",
]


@dataclass
class General:
    DEBUG: bool = False
    APP_NAME: str = "Typepad"
    HOME_DIR: str = "~"
    LOG_FILE: str = "typepad.log"


@dataclass
class SpeechSection:
    DEFAULT_LANGUAGE: str = "en"
    LANGUAGES: list[str] = field(default_factory=lambda: ["en", "de"])
    # Registration order; also the order used when reselecting a capable backend.
    BACKENDS: list[str] = field(default_factory=lambda: ["google-translate", "espeak"])
    DEFAULT_BACKEND: str = ""
    RETRY_ONCE: bool = False


@dataclass
class NativeSection:
    NAME: str = "espeak"
    EXECUTE_PATH: str = "espeak"
    VOICE_FLAG: str = "-v"
    VOICES: dict[str, str] = field(default_factory=lambda: {"en": "en", "de": "de"})


@dataclass
class CachedAudioSection:
    NAME: str = "google-translate"
    LANGUAGES: list[str] = field(default_factory=lambda: ["en", "de"])
    TLD: str = "com"
    SLOW: bool = False
    TIMEOUT: float = 10.0


@dataclass
class PlayerSection:
    VOLUME: int = 100


@dataclass
class BuffersSection:
    COUNT: int = 10
    DIRECTORY: str = "buffers"


@dataclass
class Config:
    GENERAL: General = field(default_factory=General)
    SPEECH: SpeechSection = field(default_factory=SpeechSection)
    NATIVE: NativeSection = field(default_factory=NativeSection)
    CACHED_AUDIO: CachedAudioSection = field(default_factory=CachedAudioSection)
    PLAYER: PlayerSection = field(default_factory=PlayerSection)
    BUFFERS: BuffersSection = field(default_factory=BuffersSection)
