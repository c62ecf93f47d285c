"""Regular expressions shared by the configuration loader and text helpers."""

from __future__ import annotations

import re
from re import Pattern
from typing import Final

__all__: list[str] = [
    "LANGUAGE_CODE_PATTERN",
    "WORD_PATTERN",
]

# Short language code, optionally with a region or script subtag.
# Example: "en", "de", "pt-br", "zh-cn"
LANGUAGE_CODE_PATTERN: Final[Pattern[str]] = re.compile(r"^[a-z]{2,3}(?:-[a-z0-9]{2,8})?$")

# A word as the editor sees it: letters and digits, with inner apostrophes or hyphens.
# Example: "don't", "Straßen-Bahn", "42"
WORD_PATTERN: Final[Pattern[str]] = re.compile(r"\w+(?:['’-]\w+)*")
