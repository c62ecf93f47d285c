from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from core.speech.interface import SpeechBackend
from models.speech_models import ResourceKey
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging
    from collections.abc import Iterable
    from pathlib import Path

    from core.resources.resolver import CascadingResolver
    from models.speech_models import ResolvedResource


__all__: list[str] = ["CachedAudioBackend", "Player"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)


class Player(Protocol):
    async def play(self, path: Path) -> None: ...


class CachedAudioBackend(SpeechBackend):
    """Speaks text by playing a recording located through the resource cascade.

    Recordings come from the local cache, the bundled resources or a remote download, in that
    order. ``ResourceNotFoundError`` from the resolver propagates unchanged.

    Args:
        name (str): User-facing backend name.
        languages (Iterable[str]): Language codes this backend is configured for.
        resolver (CascadingResolver): Resolver used to find the recording.
        player (Player): Plays the resolved audio file.
    """

    def __init__(self, name: str, languages: Iterable[str], resolver: CascadingResolver, player: Player) -> None:
        super().__init__(name)
        self.languages: frozenset[str] = frozenset(lang.lower() for lang in languages)
        self.resolver: CascadingResolver = resolver
        self.player: Player = player

    @staticmethod
    def fetch_engine_name() -> str:
        return "cached_audio"

    def can_render(self, language: str) -> bool:
        return language.lower() in self.languages

    async def render(self, text: str, language: str) -> None:
        key: ResourceKey = ResourceKey.for_text(language, text)
        resource: ResolvedResource = await self.resolver.resolve(key)
        logger.debug("Playing '%s' from %s", key, resource.origin)
        await self.player.play(resource.path)

    async def close(self) -> None:
        await self.resolver.close()
        await super().close()
