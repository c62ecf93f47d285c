from __future__ import annotations

from typing import TYPE_CHECKING

from core.resources.interface import ResourceStrategy
from models.speech_models import ResolvedResource, ResourceOrigin
from utils.file_utils import FileUtils
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging
    from pathlib import Path

    from models.speech_models import ResourceKey


__all__: list[str] = ["LocalFileStrategy"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)


class LocalFileStrategy(ResourceStrategy):
    """Looks up previously fetched resources in the local cache directory.

    The cache layout is ``<root>/<language>/<file name>``. This strategy also performs the
    cache writes, so a resource stored once is found here on every later lookup.

    Args:
        root (Path): Cache root directory. It is created on the first write.
        suffix (str): File extension of cached resources.
    """

    def __init__(self, root: Path, *, suffix: str = "mp3") -> None:
        self.root: Path = root
        self.suffix: str = suffix

    @staticmethod
    def fetch_strategy_name() -> str:
        return "local"

    def path_for(self, key: ResourceKey) -> Path:
        return self.root / key.relative_path(self.suffix)

    async def locate(self, key: ResourceKey) -> ResolvedResource | None:
        path: Path = self.path_for(key)
        try:
            if not path.is_file():
                return None
        except OSError as err:
            logger.debug("Cache probe failed for '%s': %s", path, err)
            return None
        logger.debug("Cache hit: '%s'", key)
        return ResolvedResource(path=path.resolve(), origin=ResourceOrigin.LOCAL)

    def store(self, key: ResourceKey, data: bytes) -> Path:
        """Write *data* to the cache entry of *key*.

        The write is atomic and idempotent: identical content already on disk is left untouched,
        different content replaces it, and a failed write leaves no partial file.

        Args:
            key (ResourceKey): Cache key.
            data (bytes): Complete resource content.

        Returns:
            Path: Absolute path of the cache entry.

        Raises:
            FileWriteError: If the entry could not be written.
        """
        path: Path = self.path_for(key)
        if FileUtils.write_atomic(path, data):
            logger.debug("Cached '%s' at '%s'", key, path)
        else:
            logger.debug("Cache entry unchanged: '%s'", path)
        return path.resolve()
