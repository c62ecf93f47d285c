"""Data models for Typepad.

This package contains dataclass definitions for configuration, speech resource lookup,
and the regular expression patterns used throughout the application.
"""

from __future__ import annotations

from models.config_models import (
    BuffersSection,
    CachedAudioSection,
    Config,
    General,
    NativeSection,
    PlayerSection,
    SpeechSection,
)
from models.re_models import LANGUAGE_CODE_PATTERN, WORD_PATTERN
from models.speech_models import ResolvedResource, ResourceKey, ResourceOrigin

__all__: list[str] = [
    "LANGUAGE_CODE_PATTERN",
    "WORD_PATTERN",
    "BuffersSection",
    "CachedAudioSection",
    "Config",
    "General",
    "NativeSection",
    "PlayerSection",
    "ResolvedResource",
    "ResourceKey",
    "ResourceOrigin",
    "SpeechSection",
]
