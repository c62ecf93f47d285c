from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Final

from core.speech.interface import BackendError, SpeechBackend
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging
    from collections.abc import Mapping

    from models.config_models import NativeSection


__all__: list[str] = ["NativeSynthesizer"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

ENGLISH: Final[str] = "en"
# Single letters that must always be spoken with the English voice in an English session.
SENTINEL_TEXTS: Final[frozenset[str]] = frozenset({"z", "Z"})
SENTINEL_VOICE: Final[str] = "en"


class NativeSynthesizer(SpeechBackend):
    """Speaks text by launching an operating system speech utility such as espeak.

    The utility is invoked as ``<execute path> <voice flag> <voice> <text>`` and awaited.
    Nothing is cached.

    Args:
        name (str): User-facing backend name.
        voices (Mapping[str, str]): Voice to use for each supported language code.
        execute_path (str): Executable name or path.
        voice_flag (str): Command line flag that selects the voice.
    """

    def __init__(
        self,
        name: str,
        voices: Mapping[str, str],
        *,
        execute_path: str = "espeak",
        voice_flag: str = "-v",
    ) -> None:
        super().__init__(name)
        self.voices: dict[str, str] = {lang.lower(): voice for lang, voice in voices.items()}
        self.execute_path: str = execute_path
        self.voice_flag: str = voice_flag

    @classmethod
    def from_config(cls, section: NativeSection) -> NativeSynthesizer:
        return cls(section.NAME, section.VOICES, execute_path=section.EXECUTE_PATH, voice_flag=section.VOICE_FLAG)

    @staticmethod
    def fetch_engine_name() -> str:
        return "native"

    def can_render(self, language: str) -> bool:
        return language.lower() in self.voices

    def voice_for(self, text: str, language: str) -> str:
        """Return the voice for *text* spoken in *language*.

        In an English session "z" and "Z" always use the English sentinel voice.
        """
        if language.lower() == ENGLISH and text in SENTINEL_TEXTS:
            return SENTINEL_VOICE
        try:
            return self.voices[language.lower()]
        except KeyError:
            msg: str = f"'{self.name}' has no voice for language '{language}'"
            raise BackendError(msg) from None

    def build_command(self, text: str, language: str) -> list[str]:
        return [self.execute_path, self.voice_flag, self.voice_for(text, language), text]

    async def render(self, text: str, language: str) -> None:
        command: list[str] = self.build_command(text, language)
        logger.debug("Launching: %s", command)
        try:
            process: asyncio.subprocess.Process = await asyncio.create_subprocess_exec(
                *command, stdout=asyncio.subprocess.DEVNULL, stderr=asyncio.subprocess.PIPE
            )
            _, stderr = await process.communicate()
        except FileNotFoundError as err:
            msg: str = f"Executable file not found: '{self.execute_path}'"
            raise BackendError(msg) from err
        except OSError as err:
            msg = f"Failed to execute '{self.execute_path}': {err}"
            raise BackendError(msg) from err

        if process.returncode != 0:
            detail: str = stderr.decode(errors="replace").strip() if stderr else ""
            msg = f"'{self.execute_path}' exited with status {process.returncode}"
            if detail:
                msg = f"{msg}: {detail}"
            raise BackendError(msg)
