from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging


__all__: list[str] = [
    "BackendError",
    "NoCapableBackendError",
    "SpeechBackend",
    "SpeechError",
    "UnknownBackendError",
]

logger: logging.Logger = LoggerUtils.get_logger(__name__)


class SpeechError(Exception):
    """Base class for speech exceptions."""


class BackendError(SpeechError):
    """The selected backend failed to render the text.

    Raised for process launch failures, non-zero exit codes and audio decode or device errors.
    """


class NoCapableBackendError(SpeechError):
    """No registered backend can render the requested language.

    Attributes:
        language (str): The language that could not be served.
    """

    def __init__(self, language: str) -> None:
        self.language: str = language
        super().__init__(f"No speech backend supports language '{language}'")


class UnknownBackendError(SpeechError, ValueError):
    """No backend is registered under the requested name."""


class SpeechBackend(ABC):
    """Base class for interchangeable speech backends.

    A backend is registered once under a unique, user-facing *name* and renders text for the
    languages it reports as capable.

    Args:
        name (str): User-facing backend name, e.g. 'espeak'.
    """

    def __init__(self, name: str) -> None:
        if not name:
            msg = "Backend name must not be empty"
            raise ValueError(msg)
        self.name: str = name

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"

    @staticmethod
    @abstractmethod
    def fetch_engine_name() -> str:
        """Get the distinguished name of the backend implementation.

        Returns:
            str: The distinguished name, independent of the configured backend name.
        """
        raise NotImplementedError

    @abstractmethod
    def can_render(self, language: str) -> bool:
        """Return True if this backend can speak *language*."""
        raise NotImplementedError

    @abstractmethod
    async def render(self, text: str, language: str) -> None:
        """Speak *text* in *language* and return when playback has finished.

        Args:
            text (str): Text to speak.
            language (str): Language code of the text.

        Raises:
            BackendError: If the backend failed to produce speech.
        """
        raise NotImplementedError

    async def close(self) -> None:
        """Termination process (override if necessary)"""
        logger.info("%s '%s' closed", self.__class__.__name__, self.name)
