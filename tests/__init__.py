"""Unit tests for Typepad.

Tests use pytest with asyncio support. Speech engines, gTTS downloads, subprocesses and the audio
device are replaced with fakes via monkeypatch and unittest.mock, so no network or sound card is needed.
"""
