from __future__ import annotations

from enum import Enum, auto
from pathlib import Path
from typing import TYPE_CHECKING

from utils.file_utils import FileUtils
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging

__all__: list[str] = ["PathHelper", "PathType"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)


class PathType(Enum):
    FILE = auto()
    DIRECTORY = auto()


class PathHelper:
    """Locates the per-user application directory and the files below it.

    The application directory is ``<home>/.<app name in lower case>``, e.g. ``~/.typepad``.
    It holds the resource cache, the text buffers and the log file.
    """

    def __init__(self, app_name: str, home_dir: str | Path) -> None:
        if not app_name.strip():
            msg = "Application name is empty"
            raise ValueError(msg)
        self.app_name: str = app_name
        self.home_dir: Path = FileUtils.resolve_path(home_dir)
        self.app_dir: Path = self.home_dir / f".{app_name.strip().lower()}"
        logger.debug("Application directory: '%s'", self.app_dir)

    def resolve(self, name: str | Path) -> Path:
        """Return *name* below the application directory (absolute paths are returned unchanged)."""
        path = Path(name).expanduser()
        return path if path.is_absolute() else self.app_dir / path

    def find_or_create(self, name: str | Path, path_type: PathType) -> Path:
        """Return the path of *name*, creating it (and its parents) if it does not exist yet.

        Args:
            name (str | Path): Relative name below the application directory, or an absolute path.
            path_type (PathType): Whether *name* denotes a file or a directory.

        Returns:
            Path: The existing or newly created path.

        Raises:
            OSError: If the path cannot be created.
        """
        path: Path = self.resolve(name)
        if path.exists():
            return path

        if path_type is PathType.DIRECTORY:
            path.mkdir(parents=True, exist_ok=True)
        else:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.touch(exist_ok=True)
        logger.info("Created %s: '%s'", path_type.name.lower(), path)
        return path
