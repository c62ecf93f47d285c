from __future__ import annotations

import contextlib
import os
import tempfile
from pathlib import Path

__all__: list[str] = [
    "FileUtils",
    "FileUtilsError",
    "FileWriteError",
]


class FileUtils:
    """Utility class for path handling and crash-safe file writes."""

    @staticmethod
    def resolve_path(path: str | Path, *, strict: bool = False) -> Path:
        """Convert a user-input path to an absolute path.

        Expands environment variables (e.g., $HOME, %APPDATA%), expands ~ to the home directory,
        and resolves relative paths against the current working directory.

        Args:
            path (str | Path): The input path (e.g., "~/typepad/$USER").
            strict (bool): Whether to raise an exception if the path does not exist. Defaults to False.

        Returns:
            Path: The converted absolute `Path` object.
        """
        expanded: str = os.path.expandvars(str(path))
        user_expanded: Path = Path(expanded).expanduser()

        if user_expanded.is_absolute():
            return user_expanded.resolve(strict=strict)
        return (Path.cwd() / user_expanded).resolve(strict=strict)

    @staticmethod
    def has_same_content(file_path: Path, data: bytes) -> bool:
        """Return True if *file_path* is a regular file whose bytes equal *data*."""
        try:
            if not file_path.is_file() or file_path.stat().st_size != len(data):
                return False
            return file_path.read_bytes() == data
        except OSError:
            return False

    @staticmethod
    def write_atomic(file_path: Path, data: bytes) -> bool:
        """Write *data* to *file_path* so that readers never observe a partial file.

        The bytes go to a temporary file in the destination directory which then replaces the
        destination in one ``os.replace`` call. Parent directories are created as needed.
        Writing content identical to what is already on disk is a no-op.

        Args:
            file_path (Path): Destination file.
            data (bytes): Complete file content.

        Returns:
            bool: True if the file was (re)written, False if it already held *data*.

        Raises:
            FileWriteError: If the directory cannot be created or the file cannot be written.
        """
        if FileUtils.has_same_content(file_path, data):
            return False

        tmp_name: str | None = None
        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{file_path.name}.", suffix=".tmp", dir=file_path.parent)
            with os.fdopen(fd, "wb") as fhdl:
                fhdl.write(data)
                fhdl.flush()
                os.fsync(fhdl.fileno())
            os.replace(tmp_name, file_path)
        except OSError as err:
            if tmp_name is not None:
                with contextlib.suppress(OSError):
                    Path(tmp_name).unlink(missing_ok=True)
            msg: str = f"Could not write file: '{file_path}'"
            raise FileWriteError(msg) from err
        return True


class FileUtilsError(Exception):
    """Custom exception for FileUtils-related errors."""


class FileWriteError(FileUtilsError):
    """Custom exception for failed file writes."""
