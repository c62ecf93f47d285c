from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Final

from utils.file_utils import FileUtils
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging
    from pathlib import Path


__all__: list[str] = ["TextBuffers", "TextFileBuffers"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

DEFAULT_BUFFER_COUNT: Final[int] = 10
FILE_PREFIX: Final[str] = "buffer_"


class TextBuffers(ABC):
    """Saves and loads text by slot number from a persistent store."""

    @property
    @abstractmethod
    def index(self) -> int:
        """The current slot number."""
        raise NotImplementedError

    @abstractmethod
    def save(self, text: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def load(self) -> str:
        raise NotImplementedError

    @abstractmethod
    def next_buffer(self) -> None:
        raise NotImplementedError


class TextFileBuffers(TextBuffers):
    """Text buffers stored as ``buffer_<index>.txt`` files (UTF-8) in one directory.

    The slot index wraps around after *count* slots. A slot that was never written loads as an
    empty string.

    Args:
        directory (Path): Directory that holds the buffer files. Created on the first save.
        count (int): Number of slots.
        index (int): Initial slot.

    Raises:
        ValueError: If *count* is less than 1.
    """

    def __init__(self, directory: Path, count: int = DEFAULT_BUFFER_COUNT, index: int = 0) -> None:
        if count < 1:
            msg: str = f"Buffer count must be at least 1, got {count}"
            raise ValueError(msg)
        self.directory: Path = directory
        self.count: int = count
        self._index: int = index % count

    @property
    def index(self) -> int:
        return self._index

    @property
    def path(self) -> Path:
        return self.directory / f"{FILE_PREFIX}{self._index}.txt"

    def save(self, text: str) -> None:
        """Write *text* to the current slot.

        Raises:
            FileWriteError: If the file cannot be written.
        """
        if FileUtils.write_atomic(self.path, text.encode("utf-8")):
            logger.info("Saved buffer %d to '%s'", self._index, self.path)

    def load(self) -> str:
        """Return the text of the current slot, or an empty string if it was never written.

        Raises:
            OSError: If the file exists but cannot be read.
        """
        try:
            text: str = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.debug("Buffer %d is empty", self._index)
            return ""
        logger.info("Loaded buffer %d from '%s'", self._index, self.path)
        return text

    def next_buffer(self) -> None:
        self._index = (self._index + 1) % self.count
        logger.debug("Switched to buffer %d", self._index)
