"""Shared application objects for Typepad.

This module defines the AppContext class, which builds and holds the services used by the console
driver: the resource cascade, the speech backends and their manager, and the text buffers.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final

from core.buffers.text_files import TextFileBuffers
from core.resources.bundled import BundledResourceStrategy
from core.resources.local_file import LocalFileStrategy
from core.resources.remote_fetch import RemoteFetchStrategy
from core.resources.resolver import CascadingResolver
from core.speech.engines.cached_audio import CachedAudioBackend
from core.speech.engines.native import NativeSynthesizer
from core.speech.manager import BackendManager
from core.speech.player import AudioPlayer
from utils.logger_utils import LoggerUtils
from utils.path_helper import PathHelper, PathType

if TYPE_CHECKING:
    import logging
    from pathlib import Path

    from core.speech.interface import SpeechBackend
    from models.config_models import Config


__all__: list[str] = ["AppContext"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

CACHE_DIRECTORY: Final[str] = "cache"


@dataclass
class AppContext:
    _config: Config = field()
    _path_helper: PathHelper = field(init=False)
    _player: AudioPlayer = field(init=False)
    _resolver: CascadingResolver = field(init=False)
    _backend_manager: BackendManager = field(init=False)
    _buffers: TextFileBuffers = field(init=False)

    async def async_init(self) -> None:
        self._path_helper = PathHelper(self.config.GENERAL.APP_NAME, self.config.GENERAL.HOME_DIR)
        cache_dir: Path = self._path_helper.find_or_create(CACHE_DIRECTORY, PathType.DIRECTORY)

        local = LocalFileStrategy(cache_dir)
        self._resolver = CascadingResolver(
            [local, BundledResourceStrategy(), RemoteFetchStrategy.from_config(local, self.config.CACHED_AUDIO)]
        )
        self._player = AudioPlayer(self.config.PLAYER.VOLUME)

        available: dict[str, SpeechBackend] = {
            self.config.CACHED_AUDIO.NAME: CachedAudioBackend(
                self.config.CACHED_AUDIO.NAME, self.config.CACHED_AUDIO.LANGUAGES, self._resolver, self._player
            ),
            self.config.NATIVE.NAME: NativeSynthesizer.from_config(self.config.NATIVE),
        }
        speech = self.config.SPEECH
        self._backend_manager = BackendManager(
            [available[name] for name in speech.BACKENDS],
            language=speech.DEFAULT_LANGUAGE,
            languages=speech.LANGUAGES,
            default_backend=speech.DEFAULT_BACKEND or None,
            retry_once=speech.RETRY_ONCE,
        )

        self._buffers = TextFileBuffers(
            self._path_helper.find_or_create(self.config.BUFFERS.DIRECTORY, PathType.DIRECTORY),
            self.config.BUFFERS.COUNT,
        )
        logger.info("Application directory: '%s'", self._path_helper.app_dir)

    async def close(self) -> None:
        await self._backend_manager.close()
        await asyncio.to_thread(self._player.close)

    @property
    def config(self) -> Config:
        return self._config

    @property
    def path_helper(self) -> PathHelper:
        return self._path_helper

    @property
    def resolver(self) -> CascadingResolver:
        return self._resolver

    @property
    def backend_manager(self) -> BackendManager:
        return self._backend_manager

    @property
    def buffers(self) -> TextFileBuffers:
        return self._buffers
