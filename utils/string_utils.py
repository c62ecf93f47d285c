from __future__ import annotations

import re

from models.re_models import WORD_PATTERN

__all__: list[str] = ["StringUtils"]


class StringUtils:
    """Utility class for string manipulation and processing.

    Provides static methods for cleaning up document text and extracting words from it.
    """

    @staticmethod
    def ensure_str(value: str | None) -> str:
        """Ensure that the value is a string, returning an empty string if None.

        Args:
            value (str | None): The value to ensure as a string.

        Returns:
            str: The value as a string, or empty string if None.
        """
        if not isinstance(value, str):
            value = str(value) if value is not None else ""
        return value

    @staticmethod
    def compress_blanks(value: str) -> str:
        """Compress runs of whitespace into a single space and strip both ends.

        Args:
            value (str): The string to compress.

        Returns:
            str: The compressed string.
        """
        value = StringUtils.ensure_str(value)
        return " ".join(value.split())

    @staticmethod
    def last_word(text: str) -> str:
        """Return the last word of *text*, or an empty string if it contains none.

        Trailing punctuation and whitespace are ignored, so "I like cats. " yields "cats".
        """
        words: list[str] = re.findall(WORD_PATTERN, StringUtils.ensure_str(text))
        return words[-1] if words else ""
