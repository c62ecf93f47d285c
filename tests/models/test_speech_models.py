from __future__ import annotations

import hashlib
from dataclasses import FrozenInstanceError

import pytest

from models.speech_models import MAX_FILE_STEM_LENGTH, ResourceKey, ResourceOrigin


def test_keys_compare_by_value_and_hash() -> None:
    assert ResourceKey("en", "hello") == ResourceKey("en", "hello")
    assert ResourceKey("en", "hello") != ResourceKey("de", "hello")
    assert len({ResourceKey("en", "a"), ResourceKey("en", "a")}) == 1


def test_key_is_immutable() -> None:
    key = ResourceKey("en", "hello")

    with pytest.raises(FrozenInstanceError):
        key.language = "de"  # type: ignore[misc]


def test_for_text_normalizes_language_and_blanks() -> None:
    assert ResourceKey.for_text(" EN ", "  Hello \n World ") == ResourceKey("en", "Hello World")
    assert ResourceKey.for_text("fr", "café") == ResourceKey("fr", "café")


def test_for_text_keeps_case_and_sharp_s() -> None:
    assert ResourceKey.for_text("de", "Maße").identifier == "Maße"
    assert ResourceKey.for_text("en", "US") != ResourceKey.for_text("en", "us")


def test_upper_case_identifiers_get_distinct_hashed_file_names() -> None:
    upper = ResourceKey("en", "US")
    lower = ResourceKey("en", "us")

    assert lower.file_name() == "us.mp3"
    assert upper.file_name() == f"{hashlib.sha256(b'US').hexdigest()}.mp3"
    assert upper.file_name().lower() != lower.file_name().lower()


def test_file_name_is_percent_encoded_single_component() -> None:
    assert ResourceKey("en", "good night").file_name() == "good%20night.mp3"
    assert ResourceKey("en", "a/b").file_name() == "a%2Fb.mp3"
    assert ResourceKey("de", "ä").relative_path() == "de/%C3%A4.mp3"


@pytest.mark.parametrize("identifier", ["x" * (MAX_FILE_STEM_LENGTH + 1), "", "..", ".hidden"])
def test_unsafe_file_names_are_hashed(identifier: str) -> None:
    digest: str = hashlib.sha256(identifier.encode("utf-8")).hexdigest()

    assert ResourceKey("en", identifier).file_name("wav") == f"{digest}.wav"


def test_origin_values() -> None:
    assert [origin.value for origin in ResourceOrigin] == ["local", "bundled", "remote"]
