"""Console commands for Typepad.

Plain input lines are appended to the document and spoken. Lines starting with ':' are commands
that speak parts of the document, switch language or backend, and switch text buffers.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from core.speech.interface import NoCapableBackendError, UnknownBackendError
from utils.file_utils import FileUtilsError
from utils.logger_utils import LoggerUtils
from utils.string_utils import StringUtils

if TYPE_CHECKING:
    import logging
    from collections.abc import Awaitable, Callable

    from core.buffers.text_files import TextBuffers
    from core.speech.manager import BackendManager


__all__: list[str] = ["CommandHandler"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

COMMAND_PREFIX: Final[str] = ":"
USAGE: Final[str] = "Commands: :word, :all, :lang [code], :backend [name], :buffer, :status, :help, :quit"


class CommandHandler:
    """Dispatches console input to the speech manager and the text buffers.

    Args:
        backend_manager (BackendManager): Speech backend manager.
        buffers (TextBuffers): Text buffer store. The current slot is loaded as the initial document.
        output (Callable[[str], None]): Receives messages for the user.
    """

    def __init__(
        self, backend_manager: BackendManager, buffers: TextBuffers, output: Callable[[str], None] = print
    ) -> None:
        self.backend_manager: BackendManager = backend_manager
        self.buffers: TextBuffers = buffers
        self.output: Callable[[str], None] = output
        self.document: str = self._load_buffer()
        self._commands: dict[str, Callable[[str], Awaitable[bool]]] = {
            "word": self.speak_word,
            "all": self.speak_all,
            "lang": self.change_language,
            "backend": self.change_backend,
            "buffer": self.switch_buffer,
            "status": self.status,
            "help": self.show_help,
            "quit": self.leave,
        }

    async def handle(self, line: str) -> bool:
        """Process one line of input.

        Returns:
            bool: False when the user asked to quit, True otherwise.
        """
        line = line.rstrip("\r\n")
        if not line.startswith(COMMAND_PREFIX):
            if line.strip():
                self.document += f"{line}\n"
                self.backend_manager.dispatch(line)
            return True

        name, _, argument = line.removeprefix(COMMAND_PREFIX).strip().partition(" ")
        command: Callable[[str], Awaitable[bool]] | None = self._commands.get(name.lower())
        if command is None:
            logger.debug("Unknown command: '%s'", name)
            self.output(USAGE)
            return True
        logger.debug("Command '%s' invoked", name)
        return await command(argument.strip())

    async def speak_word(self, _argument: str) -> bool:
        """Speak the last word of the document."""
        word: str = StringUtils.last_word(self.document)
        if not word:
            self.output("Nothing to speak.")
            return True
        self.backend_manager.dispatch(word)
        return True

    async def speak_all(self, _argument: str) -> bool:
        """Speak the whole document."""
        text: str = StringUtils.compress_blanks(self.document)
        if not text:
            self.output("Nothing to speak.")
            return True
        self.backend_manager.dispatch(text)
        return True

    async def change_language(self, argument: str) -> bool:
        """Switch to the given language, or to the next configured one."""
        try:
            if argument:
                await self.backend_manager.switch_language(argument)
            else:
                await self.backend_manager.next_language()
        except NoCapableBackendError as err:
            logger.warning("Language switch failed: %s", err)
            self.output(str(err))
            return True
        return await self.status("")

    async def change_backend(self, argument: str) -> bool:
        """Switch to the given backend, or to the next capable one."""
        try:
            if argument:
                await self.backend_manager.switch_backend(argument)
            else:
                await self.backend_manager.next_backend()
        except (UnknownBackendError, NoCapableBackendError) as err:
            logger.warning("Backend switch failed: %s", err)
            self.output(str(err))
            return True
        return await self.status("")

    async def switch_buffer(self, _argument: str) -> bool:
        """Save the document, move to the next buffer slot and load it."""
        if not self._save_buffer():
            return True
        self.buffers.next_buffer()
        self.document = self._load_buffer()
        self.output(f"Buffer {self.buffers.index}:")
        self.output(self.document)
        return True

    async def status(self, _argument: str) -> bool:
        backend, language = await self.backend_manager.selection()
        self.output(f"Backend: {backend}, language: {language}, buffer: {self.buffers.index}")
        return True

    async def show_help(self, _argument: str) -> bool:
        self.output(USAGE)
        return True

    async def leave(self, _argument: str) -> bool:
        return False

    def shutdown(self) -> None:
        """Save the trimmed document to the current buffer."""
        self._save_buffer()

    def _save_buffer(self) -> bool:
        try:
            self.buffers.save(self.document.strip())
        except FileUtilsError as err:
            logger.error("Failed to save buffer %d: %s", self.buffers.index, err)
            self.output(f"Could not save buffer {self.buffers.index}.")
            return False
        return True

    def _load_buffer(self) -> str:
        try:
            text: str = self.buffers.load()
        except (OSError, UnicodeDecodeError) as err:
            logger.error("Failed to load buffer %d: %s", self.buffers.index, err)
            self.output(f"Could not load buffer {self.buffers.index}.")
            return ""
        return f"{text}\n" if text else ""
