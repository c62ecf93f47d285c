from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging

    from models.speech_models import ResolvedResource, ResourceKey


__all__: list[str] = [
    "ResourceError",
    "ResourceNotFoundError",
    "ResourceStrategy",
    "ResourceTransientError",
]

logger: logging.Logger = LoggerUtils.get_logger(__name__)


class ResourceError(Exception):
    """Base class for resource lookup exceptions."""


class ResourceTransientError(ResourceError):
    """A strategy failed for a reason that may not recur (network error, failed download).

    The resolver logs it and moves on to the next strategy.
    """


class ResourceNotFoundError(ResourceError):
    """No strategy could provide the requested resource.

    Attributes:
        key (ResourceKey): The key that could not be resolved.
    """

    def __init__(self, key: ResourceKey) -> None:
        self.key: ResourceKey = key
        super().__init__(f"Speech resource not found: '{key}'")


class ResourceStrategy(ABC):
    """One way of locating a speech resource.

    A strategy returns the resource if it can provide it, or None (absent) if it cannot.
    Absence is not an error. Strategies that can fail transiently raise ResourceTransientError.
    """

    @staticmethod
    @abstractmethod
    def fetch_strategy_name() -> str:
        """Get the distinguished name of the strategy, used in log messages."""
        raise NotImplementedError

    @abstractmethod
    async def locate(self, key: ResourceKey) -> ResolvedResource | None:
        """Locate the resource identified by *key*.

        Args:
            key (ResourceKey): What to look for.

        Returns:
            ResolvedResource | None: The resource, or None if this strategy does not have it.

        Raises:
            ResourceTransientError: If the lookup failed in a way that may succeed later.
        """
        raise NotImplementedError

    async def close(self) -> None:
        """Release resources held by the strategy (override if necessary)"""
        logger.debug("%s closed", self.__class__.__name__)
