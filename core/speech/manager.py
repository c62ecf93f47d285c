from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from core.resources.interface import ResourceError
from core.speech.interface import BackendError, NoCapableBackendError, SpeechError, UnknownBackendError
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging
    from collections.abc import Sequence

    from core.speech.interface import SpeechBackend


__all__: list[str] = ["BackendManager"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)


class BackendManager:
    """Owns the registered speech backends and the active backend/language selection.

    The selection is guarded by one asyncio lock. A switch that races with a speak request
    either fully precedes or fully follows that request's backend selection. Rendering runs
    outside the lock, so a slow backend never blocks switching.

    Invariant: the active backend can render the active language, or it is the default backend
    when no registered backend can.

    Args:
        backends (Sequence[SpeechBackend]): Backends in registration order. Names must be unique.
        language (str): Initial session language.
        languages (Sequence[str] | None): Languages cycled by ``next_language``. Defaults to [language].
        default_backend (str | None): Name of the preferred initial backend. Defaults to the first one.
        retry_once (bool): Retry a failed render once with the same backend.

    Raises:
        ValueError: If no backend is given or names are not unique.
        UnknownBackendError: If *default_backend* is not registered.
    """

    def __init__(
        self,
        backends: Sequence[SpeechBackend],
        *,
        language: str,
        languages: Sequence[str] | None = None,
        default_backend: str | None = None,
        retry_once: bool = False,
    ) -> None:
        if not backends:
            msg = "At least one speech backend is required"
            raise ValueError(msg)
        names: list[str] = [backend.name for backend in backends]
        if len(set(names)) != len(names):
            msg = f"Backend names must be unique: {names}"
            raise ValueError(msg)

        self._backends: tuple[SpeechBackend, ...] = tuple(backends)
        self._language: str = language.lower()
        self._languages: tuple[str, ...] = tuple(lang.lower() for lang in languages) if languages else (self._language,)
        self._default: int = self._index_of(default_backend) if default_backend else 0
        self._active: int = self._initial_index()
        self.retry_once: bool = retry_once
        self._lock: asyncio.Lock = asyncio.Lock()
        self.background_tasks: set[asyncio.Task[None]] = set()
        logger.info("Speech backend '%s' selected for language '%s'", self._backends[self._active].name, self._language)

    @property
    def backend_names(self) -> list[str]:
        return [backend.name for backend in self._backends]

    async def selection(self) -> tuple[str, str]:
        """Return the active backend name and the active language."""
        async with self._lock:
            return self._backends[self._active].name, self._language

    async def speak(self, text: str, language: str | None = None) -> None:
        """Speak *text* with the active backend.

        If the active backend cannot render the language, the first registered backend that can is
        used. It becomes the active one only when the language is the session language; a request
        in another language leaves the selection unchanged. A render failure is raised to the
        caller; no other backend is tried.

        Args:
            text (str): Text to speak. Blank text is ignored.
            language (str | None): Language of the text. Defaults to the session language.

        Raises:
            NoCapableBackendError: If no backend can render the language.
            BackendError: If the backend failed.
            ResourceNotFoundError: If the backend could not find a recording for the text.
        """
        if not text.strip():
            logger.debug("Ignoring blank speech request")
            return

        async with self._lock:
            lang: str = (language or self._language).lower()
            backend: SpeechBackend = self._backends[self._active]
            if not backend.can_render(lang):
                index: int | None = self._first_capable(lang)
                if index is None:
                    raise NoCapableBackendError(lang)
                if lang == self._language:
                    logger.info(
                        "'%s' cannot speak '%s'; switching to '%s'", backend.name, lang, self._backends[index].name
                    )
                    self._active = index
                else:
                    # The active backend must keep supporting the session language.
                    logger.debug("'%s' speaks '%s' for this request only", self._backends[index].name, lang)
                backend = self._backends[index]

        logger.debug("'%s' speaking %r in '%s'", backend.name, text, lang)
        try:
            await backend.render(text, lang)
        except BackendError as err:
            if not self.retry_once:
                raise
            logger.warning("'%s' failed, retrying once: %s", backend.name, err)
            await backend.render(text, lang)

    def dispatch(self, text: str, language: str | None = None) -> asyncio.Task[None]:
        """Speak *text* in a background task; failures are logged, never raised."""
        task: asyncio.Task[None] = asyncio.create_task(self.speak(text, language), name=f"speak:{text[:20]}")
        self.background_tasks.add(task)
        task.add_done_callback(self._on_speak_done)
        return task

    def _on_speak_done(self, task: asyncio.Task[None]) -> None:
        self.background_tasks.discard(task)
        if task.cancelled():
            logger.debug("Task '%s' was cancelled", task.get_name())
            return
        err: BaseException | None = task.exception()
        if err is None:
            return
        if isinstance(err, (SpeechError, ResourceError)):
            logger.warning("Speech failed: %s", err)
        else:
            logger.error("Unexpected error in task '%s'", task.get_name(), exc_info=err)

    async def switch_backend(self, name: str) -> None:
        """Make the backend registered as *name* the active one.

        Raises:
            UnknownBackendError: If no backend has that name.
            NoCapableBackendError: If that backend cannot render the active language.
        """
        async with self._lock:
            index: int = self._index_of(name)
            if not self._backends[index].can_render(self._language):
                raise NoCapableBackendError(self._language)
            self._active = index
        logger.info("Speech backend switched to '%s'", name)

    async def switch_language(self, language: str) -> None:
        """Change the session language, reselecting the backend if the active one cannot render it.

        Raises:
            NoCapableBackendError: If no backend can render *language*. Nothing is changed.
        """
        async with self._lock:
            self._apply_language(language.lower())

    async def next_backend(self) -> str:
        """Activate the next registered backend that can render the session language.

        Returns:
            str: Name of the active backend (unchanged when no other backend is capable).
        """
        async with self._lock:
            count: int = len(self._backends)
            for step in range(1, count):
                index: int = (self._active + step) % count
                if self._backends[index].can_render(self._language):
                    self._active = index
                    logger.info("Speech backend switched to '%s'", self._backends[index].name)
                    break
            else:
                logger.info("No other backend can speak '%s'", self._language)
            return self._backends[self._active].name

    async def next_language(self) -> str:
        """Switch to the next configured language.

        Returns:
            str: The new session language.

        Raises:
            NoCapableBackendError: If no backend can render the next language.
        """
        async with self._lock:
            try:
                position: int = self._languages.index(self._language)
            except ValueError:
                position = -1
            self._apply_language(self._languages[(position + 1) % len(self._languages)])
            return self._language

    async def close(self) -> None:
        """Wait for running speech tasks, then close every backend."""
        if self.background_tasks:
            logger.debug("Waiting for speech tasks to finish")
            _, remaining_tasks = await asyncio.wait(set(self.background_tasks), timeout=2.0)
            if remaining_tasks:
                logger.warning("Some tasks are still pending: %s", [task.get_name() for task in remaining_tasks])
            self.background_tasks.clear()

        for backend in self._backends:
            await backend.close()
        logger.info("BackendManager closed successfully")

    def _apply_language(self, language: str) -> None:
        # Caller holds the lock.
        if not self._backends[self._active].can_render(language):
            index: int | None = self._first_capable(language)
            if index is None:
                raise NoCapableBackendError(language)
            self._active = index
        self._language = language
        logger.info("Language '%s' with speech backend '%s'", language, self._backends[self._active].name)

    def _first_capable(self, language: str) -> int | None:
        for index, backend in enumerate(self._backends):
            if backend.can_render(language):
                return index
        return None

    def _index_of(self, name: str) -> int:
        for index, backend in enumerate(self._backends):
            if backend.name == name:
                return index
        msg: str = f"No such speech backend: '{name}'. Available: {self.backend_names}"
        raise UnknownBackendError(msg)

    def _initial_index(self) -> int:
        if self._backends[self._default].can_render(self._language):
            return self._default
        index: int | None = self._first_capable(self._language)
        return self._default if index is None else index
