from __future__ import annotations

from typing import TYPE_CHECKING

from core.resources.interface import ResourceNotFoundError, ResourceTransientError
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging
    from collections.abc import Sequence

    from core.resources.interface import ResourceStrategy
    from models.speech_models import ResolvedResource, ResourceKey


__all__: list[str] = ["CascadingResolver"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)


class CascadingResolver:
    """Resolves a resource by trying strategies in a fixed priority order.

    The first strategy that returns a resource wins. A strategy that has nothing (None) or fails
    transiently is skipped. Typical order: local cache, bundled resources, remote fetch.

    Args:
        strategies (Sequence[ResourceStrategy]): Strategies in priority order.
    """

    def __init__(self, strategies: Sequence[ResourceStrategy]) -> None:
        if not strategies:
            msg = "At least one resource strategy is required"
            raise ValueError(msg)
        self.strategies: tuple[ResourceStrategy, ...] = tuple(strategies)

    async def resolve(self, key: ResourceKey) -> ResolvedResource:
        """Return the first available resource for *key*.

        Raises:
            ResourceNotFoundError: If every strategy is absent or failed.
        """
        for strategy in self.strategies:
            name: str = strategy.fetch_strategy_name()
            try:
                resource: ResolvedResource | None = await strategy.locate(key)
            except ResourceTransientError as err:
                logger.warning("'%s' lookup failed: %s", name, err)
                continue
            except Exception:  # noqa: BLE001
                logger.exception("Unexpected error in '%s' lookup for '%s'", name, key)
                continue

            if resource is not None:
                logger.debug("Resolved '%s' via '%s': '%s'", key, name, resource.path)
                return resource

        logger.info("No speech resource for '%s'", key)
        raise ResourceNotFoundError(key)

    async def close(self) -> None:
        for strategy in self.strategies:
            await strategy.close()
