from __future__ import annotations

import asyncio
import logging

import pytest

from core.speech.interface import BackendError, NoCapableBackendError, SpeechBackend, UnknownBackendError
from core.speech.manager import BackendManager


class FakeBackend(SpeechBackend):
    def __init__(self, name: str, languages: set[str], *, failures: int = 0, delay: float = 0.0) -> None:
        super().__init__(name)
        self.languages: set[str] = languages
        self.failures: int = failures
        self.delay: float = delay
        self.rendered: list[tuple[str, str]] = []
        self.closed: bool = False

    @staticmethod
    def fetch_engine_name() -> str:
        return "fake"

    def can_render(self, language: str) -> bool:
        return language in self.languages

    async def render(self, text: str, language: str) -> None:
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.failures > 0:
            self.failures -= 1
            msg = f"{self.name} failed"
            raise BackendError(msg)
        self.rendered.append((text, language))

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def google() -> FakeBackend:
    return FakeBackend("google-translate", {"en", "de"})


@pytest.fixture
def espeak() -> FakeBackend:
    return FakeBackend("espeak", {"en", "fr"})


def test_manager_requires_backends() -> None:
    with pytest.raises(ValueError, match="At least one"):
        BackendManager([], language="en")


def test_manager_rejects_duplicate_names() -> None:
    with pytest.raises(ValueError, match="unique"):
        BackendManager([FakeBackend("a", {"en"}), FakeBackend("a", {"de"})], language="en")


def test_unknown_default_backend_raises(google: FakeBackend) -> None:
    with pytest.raises(UnknownBackendError):
        BackendManager([google], language="en", default_backend="missing")


@pytest.mark.asyncio
async def test_initial_selection_prefers_capable_backend(google: FakeBackend, espeak: FakeBackend) -> None:
    manager = BackendManager([google, espeak], language="fr")

    assert await manager.selection() == ("espeak", "fr")


@pytest.mark.asyncio
async def test_initial_selection_falls_back_to_default(google: FakeBackend, espeak: FakeBackend) -> None:
    manager = BackendManager([google, espeak], language="ja", default_backend="espeak")

    assert await manager.selection() == ("espeak", "ja")


@pytest.mark.asyncio
async def test_speak_uses_active_backend_and_session_language(google: FakeBackend, espeak: FakeBackend) -> None:
    manager = BackendManager([google, espeak], language="de")

    await manager.speak("Hallo")

    assert google.rendered == [("Hallo", "de")]
    assert espeak.rendered == []


@pytest.mark.asyncio
async def test_speak_in_other_language_uses_capable_backend_for_request_only(
    google: FakeBackend, espeak: FakeBackend
) -> None:
    manager = BackendManager([google, espeak], language="en")

    await manager.speak("Bonjour", "fr")

    assert espeak.rendered == [("Bonjour", "fr")]
    assert await manager.selection() == ("google-translate", "en")


@pytest.mark.asyncio
async def test_speak_in_other_language_keeps_backend_for_session_language(
    google: FakeBackend, espeak: FakeBackend
) -> None:
    manager = BackendManager([google, espeak], language="de")

    await manager.speak("Bonjour", "fr")
    await manager.speak("Hallo")

    assert espeak.rendered == [("Bonjour", "fr")]
    assert google.rendered == [("Hallo", "de")]
    assert await manager.selection() == ("google-translate", "de")


@pytest.mark.asyncio
async def test_speak_reselects_first_capable_backend_for_session_language(
    google: FakeBackend, espeak: FakeBackend
) -> None:
    manager = BackendManager([google, espeak], language="en")
    google.languages.discard("en")

    await manager.speak("Hello")

    assert espeak.rendered == [("Hello", "en")]
    assert await manager.selection() == ("espeak", "en")


@pytest.mark.asyncio
async def test_speak_without_capable_backend_raises(google: FakeBackend, espeak: FakeBackend) -> None:
    manager = BackendManager([google, espeak], language="en")

    with pytest.raises(NoCapableBackendError) as exc_info:
        await manager.speak("Konnichiwa", "ja")

    assert exc_info.value.language == "ja"
    assert await manager.selection() == ("google-translate", "en")


@pytest.mark.asyncio
async def test_speak_ignores_blank_text(google: FakeBackend) -> None:
    manager = BackendManager([google], language="en")

    await manager.speak("   ")

    assert google.rendered == []


@pytest.mark.asyncio
async def test_render_failure_is_surfaced_without_fallback(espeak: FakeBackend) -> None:
    failing = FakeBackend("google-translate", {"en"}, failures=1)
    manager = BackendManager([failing, espeak], language="en")

    with pytest.raises(BackendError):
        await manager.speak("Hello")

    assert espeak.rendered == []


@pytest.mark.asyncio
async def test_retry_once_retries_same_backend(espeak: FakeBackend) -> None:
    flaky = FakeBackend("google-translate", {"en"}, failures=1)
    manager = BackendManager([flaky, espeak], language="en", retry_once=True)

    await manager.speak("Hello")

    assert flaky.rendered == [("Hello", "en")]
    assert espeak.rendered == []


@pytest.mark.asyncio
async def test_retry_once_gives_up_after_second_failure() -> None:
    broken = FakeBackend("google-translate", {"en"}, failures=2)
    manager = BackendManager([broken], language="en", retry_once=True)

    with pytest.raises(BackendError):
        await manager.speak("Hello")

    assert broken.failures == 0


@pytest.mark.asyncio
async def test_switch_backend_unknown_name_leaves_state(google: FakeBackend, espeak: FakeBackend) -> None:
    manager = BackendManager([google, espeak], language="en")

    with pytest.raises(UnknownBackendError):
        await manager.switch_backend("festival")

    assert await manager.selection() == ("google-translate", "en")


@pytest.mark.asyncio
async def test_switch_backend_incapable_of_language_raises(google: FakeBackend, espeak: FakeBackend) -> None:
    manager = BackendManager([google, espeak], language="de")

    with pytest.raises(NoCapableBackendError):
        await manager.switch_backend("espeak")

    assert await manager.selection() == ("google-translate", "de")


@pytest.mark.asyncio
async def test_concurrent_switches_leave_one_requested_backend_active() -> None:
    backends: list[FakeBackend] = [FakeBackend(f"backend-{i}", {"en"}) for i in range(8)]
    manager = BackendManager(backends, language="en")
    names: list[str] = [backend.name for backend in backends]

    await asyncio.gather(*(manager.switch_backend(name) for name in reversed(names)))

    active, language = await manager.selection()
    assert active in names
    assert language == "en"


@pytest.mark.asyncio
async def test_switch_racing_with_speak_uses_a_consistent_backend() -> None:
    first = FakeBackend("first", {"en"}, delay=0.01)
    second = FakeBackend("second", {"en"}, delay=0.01)
    manager = BackendManager([first, second], language="en")

    await asyncio.gather(manager.speak("one"), manager.switch_backend("second"), manager.speak("two"))

    assert len(first.rendered) + len(second.rendered) == 2
    assert await manager.selection() == ("second", "en")


@pytest.mark.asyncio
async def test_switch_language_keeps_capable_backend(google: FakeBackend, espeak: FakeBackend) -> None:
    manager = BackendManager([google, espeak], language="en")

    await manager.switch_language("de")

    assert await manager.selection() == ("google-translate", "de")


@pytest.mark.asyncio
async def test_switch_language_reselects_capable_backend(google: FakeBackend, espeak: FakeBackend) -> None:
    manager = BackendManager([google, espeak], language="en")

    await manager.switch_language("FR")

    assert await manager.selection() == ("espeak", "fr")


@pytest.mark.asyncio
async def test_switch_to_unsupported_language_leaves_state(google: FakeBackend, espeak: FakeBackend) -> None:
    manager = BackendManager([google, espeak], language="en")
    await manager.switch_backend("espeak")

    with pytest.raises(NoCapableBackendError):
        await manager.switch_language("ja")

    assert await manager.selection() == ("espeak", "en")


@pytest.mark.asyncio
async def test_next_backend_skips_incapable_backends() -> None:
    a = FakeBackend("a", {"en"})
    b = FakeBackend("b", {"de"})
    c = FakeBackend("c", {"en"})
    manager = BackendManager([a, b, c], language="en")

    assert await manager.next_backend() == "c"
    assert await manager.next_backend() == "a"


@pytest.mark.asyncio
async def test_next_backend_stays_when_no_other_is_capable(google: FakeBackend, espeak: FakeBackend) -> None:
    manager = BackendManager([google, espeak], language="de")

    assert await manager.next_backend() == "google-translate"


@pytest.mark.asyncio
async def test_next_language_cycles_configured_languages(google: FakeBackend, espeak: FakeBackend) -> None:
    manager = BackendManager([google, espeak], language="en", languages=["en", "de"])

    assert await manager.next_language() == "de"
    assert await manager.next_language() == "en"


@pytest.mark.asyncio
async def test_dispatch_logs_failure_instead_of_raising(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.WARNING, logger="Typepad")
    broken = FakeBackend("broken", {"en"}, failures=1)
    manager = BackendManager([broken], language="en")

    task: asyncio.Task[None] = manager.dispatch("Hello")
    await asyncio.wait({task})
    await asyncio.sleep(0)

    assert "Speech failed: broken failed" in caplog.text
    assert manager.background_tasks == set()


@pytest.mark.asyncio
async def test_close_waits_for_tasks_and_closes_backends(google: FakeBackend, espeak: FakeBackend) -> None:
    slow = FakeBackend("slow", {"en"}, delay=0.01)
    manager = BackendManager([slow, google, espeak], language="en")

    manager.dispatch("Hello")
    await manager.close()

    assert slow.rendered == [("Hello", "en")]
    assert slow.closed and google.closed and espeak.closed
    assert manager.background_tasks == set()
