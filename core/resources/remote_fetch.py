from __future__ import annotations

import asyncio
from io import BytesIO
from typing import TYPE_CHECKING

from gtts import gTTS, gTTSError
from gtts.lang import tts_langs

from core.resources.interface import ResourceStrategy, ResourceTransientError
from models.speech_models import ResolvedResource, ResourceOrigin
from utils.file_utils import FileWriteError
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging
    from pathlib import Path

    from core.resources.local_file import LocalFileStrategy
    from models.config_models import CachedAudioSection
    from models.speech_models import ResourceKey


__all__: list[str] = ["RemoteFetchStrategy"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)


class RemoteFetchStrategy(ResourceStrategy):
    """Downloads spoken text from the Google Translate text-to-speech service using gTTS.

    The MP3 stream is written to the local cache through *cache*, and the cached file is returned.
    Requests for the same key that arrive while a download is running wait for that download
    instead of starting another one.

    Args:
        cache (LocalFileStrategy): Cache that receives the downloaded files.
        tld (str): Top-level domain of the Google Translate host.
        slow (bool): Request slower speech.
        timeout (float | None): Request timeout in seconds.
    """

    def __init__(
        self, cache: LocalFileStrategy, *, tld: str = "com", slow: bool = False, timeout: float | None = None
    ) -> None:
        self.cache: LocalFileStrategy = cache
        self.tld: str = tld
        self.slow: bool = slow
        self.timeout: float | None = timeout
        # gTTS language codes are case sensitive ("zh-CN"); configured codes are lower case.
        self._languages: dict[str, str] = {code.lower(): code for code in tts_langs()}
        self._inflight: dict[ResourceKey, asyncio.Future[ResolvedResource]] = {}
        self._lock: asyncio.Lock = asyncio.Lock()

    @classmethod
    def from_config(cls, cache: LocalFileStrategy, section: CachedAudioSection) -> RemoteFetchStrategy:
        return cls(cache, tld=section.TLD, slow=section.SLOW, timeout=section.TIMEOUT)

    @staticmethod
    def fetch_strategy_name() -> str:
        return "remote"

    def supports(self, language: str) -> bool:
        return language.lower() in self._languages

    async def locate(self, key: ResourceKey) -> ResolvedResource | None:
        if not key.identifier.strip():
            return None
        if not self.supports(key.language):
            logger.debug("Language '%s' is not supported by gTTS", key.language)
            return None

        async with self._lock:
            fut: asyncio.Future[ResolvedResource] | None = self._inflight.get(key)
            owner: bool = fut is None
            if fut is None:
                fut = asyncio.get_running_loop().create_future()
                self._inflight[key] = fut

        if not owner:
            logger.debug("Download already in progress for '%s'", key)
            try:
                return await asyncio.shield(fut)
            except asyncio.CancelledError:
                if fut.cancelled():
                    msg: str = f"Download for '{key}' was cancelled"
                    raise ResourceTransientError(msg) from None
                raise

        try:
            fut.set_result(await self._fetch(key))
        except asyncio.CancelledError:
            fut.cancel()
            raise
        except Exception as err:  # noqa: BLE001
            fut.set_exception(err)
        finally:
            async with self._lock:
                if self._inflight.get(key) is fut:
                    del self._inflight[key]
        return await fut

    async def _fetch(self, key: ResourceKey) -> ResolvedResource:
        """Download *key* and store it in the cache.

        Raises:
            ResourceTransientError: If the download or the cache write failed.
        """
        mp3_data = BytesIO()
        try:
            gtts: gTTS = gTTS(
                key.identifier,
                tld=self.tld,
                lang=self._languages[key.language.lower()],
                slow=self.slow,
                lang_check=False,
                timeout=self.timeout,
            )
            await asyncio.to_thread(gtts.write_to_fp, mp3_data)
        except gTTSError as err:
            msg: str = f"gTTS request failed for '{key}': {err}"
            raise ResourceTransientError(msg) from err
        except (AssertionError, OSError, ValueError) as err:
            msg = f"Download failed for '{key}': {err}"
            raise ResourceTransientError(msg) from err

        data: bytes = mp3_data.getvalue()
        if not data:
            msg = f"Empty response for '{key}'"
            raise ResourceTransientError(msg)
        logger.debug("Downloaded %d bytes for '%s'", len(data), key)

        try:
            path: Path = await asyncio.to_thread(self.cache.store, key, data)
        except FileWriteError as err:
            msg = f"Could not cache '{key}': {err}"
            raise ResourceTransientError(msg) from err
        return ResolvedResource(path=path, origin=ResourceOrigin.REMOTE)
