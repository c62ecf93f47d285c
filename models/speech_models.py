"""Data models for speech resource lookup.

This module defines:
- ResourceKey: What to look up (language + text or voice identifier).
- ResourceOrigin: Which strategy produced a resource.
- ResolvedResource: Where the resource lives on the local disk.
"""

from __future__ import annotations

import hashlib
import unicodedata
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Final
from urllib.parse import quote

if TYPE_CHECKING:
    from pathlib import Path

__all__: list[str] = [
    "ResolvedResource",
    "ResourceKey",
    "ResourceOrigin",
]

# Longest encoded identifier used verbatim as a file name; longer ones are hashed.
MAX_FILE_STEM_LENGTH: Final[int] = 200


@dataclass(frozen=True)
class ResourceKey:
    """Identifies one speech resource.

    Attributes:
        language (str): Short language code, e.g. 'en' or 'de'.
        identifier (str): Text to be spoken, or a voice identifier.
    """

    language: str
    identifier: str

    @classmethod
    def for_text(cls, language: str, text: str) -> ResourceKey:
        """Build the key for spoken *text*.

        The language code is lower-cased. The text is whitespace-compressed and NFC-normalised so that
        "Hello" and " Hello " share one cached recording. Case is kept: the identifier is also the text
        sent to the speech service.
        """
        identifier: str = unicodedata.normalize("NFC", " ".join(text.split()))
        return cls(language=language.strip().lower(), identifier=identifier)

    def __str__(self) -> str:
        return f"{self.language}:{self.identifier}"

    def file_name(self, suffix: str = "mp3") -> str:
        """Return the deterministic file name for this key.

        The identifier is percent-encoded so that any text maps to exactly one path component
        ("good night" -> "good%20night.mp3"). Identifiers whose encoded form is too long for a
        file system, and identifiers containing upper-case letters, are replaced by their SHA-256
        digest. "US" and "us" must not share a file on a case-insensitive file system.

        Args:
            suffix (str): File extension without the dot.

        Returns:
            str: File name, without any directory part.
        """
        stem: str = quote(self.identifier, safe="")
        if (
            not stem
            or len(stem) > MAX_FILE_STEM_LENGTH
            or stem.startswith(".")
            or self.identifier != self.identifier.lower()
        ):
            stem = hashlib.sha256(self.identifier.encode("utf-8")).hexdigest()
        return f"{stem}.{suffix}"

    def relative_path(self, suffix: str = "mp3") -> str:
        """Return ``<language>/<file name>``, the layout shared by the cache and bundled resources."""
        return f"{self.language}/{self.file_name(suffix)}"


class ResourceOrigin(StrEnum):
    LOCAL = "local"
    BUNDLED = "bundled"
    REMOTE = "remote"


@dataclass(frozen=True)
class ResolvedResource:
    """A speech resource available on the local disk.

    Attributes:
        path (Path): Absolute path of the audio file.
        origin (ResourceOrigin): Strategy that produced the file.
    """

    path: Path
    origin: ResourceOrigin
