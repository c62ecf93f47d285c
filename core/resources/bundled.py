from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Final

from core.resources.interface import ResourceStrategy
from models.speech_models import ResolvedResource, ResourceOrigin
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging

    from models.speech_models import ResourceKey


__all__: list[str] = ["BundledResourceStrategy"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

# Recordings shipped with the package, laid out like the cache.
DEFAULT_BUNDLE_ROOT: Final[Path] = Path(__file__).resolve().parent / "audio"


class BundledResourceStrategy(ResourceStrategy):
    """Looks up recordings shipped with the application. Read-only."""

    def __init__(self, root: Path | None = None, *, suffix: str = "mp3") -> None:
        self.root: Path = root if root is not None else DEFAULT_BUNDLE_ROOT
        self.suffix: str = suffix

    @staticmethod
    def fetch_strategy_name() -> str:
        return "bundled"

    async def locate(self, key: ResourceKey) -> ResolvedResource | None:
        path: Path = self.root / key.relative_path(self.suffix)
        try:
            if not path.is_file():
                return None
        except OSError as err:
            logger.debug("Bundle probe failed for '%s': %s", path, err)
            return None
        logger.debug("Bundled resource hit: '%s'", key)
        return ResolvedResource(path=path.resolve(), origin=ResourceOrigin.BUNDLED)
