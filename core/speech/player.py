from __future__ import annotations

import asyncio
import threading
from typing import TYPE_CHECKING, Any, Final

import numpy as np
import pyaudio
import soundfile

from core.speech.interface import BackendError
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging
    from pathlib import Path

    from numpy import dtype


__all__: list[str] = ["AudioPlayer"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

MAX_VOLUME: Final[int] = 200


class AudioPlayer:
    """Plays audio files through the default output device.

    Files are decoded with soundfile to float32 PCM, scaled by the configured volume and written
    to a blocking PyAudio stream in a worker thread. One file plays at a time.

    Args:
        volume (int): Output volume in percent, 0-200.
    """

    def __init__(self, volume: int = 100) -> None:
        self.volume: int = max(min(volume, MAX_VOLUME), 0)
        self._pyaudio: pyaudio.PyAudio | None = None
        self._device_lock: threading.Lock = threading.Lock()

    async def play(self, path: Path) -> None:
        """Play *path* and return when playback has finished.

        Raises:
            BackendError: If the file cannot be decoded or the audio device fails.
        """
        logger.debug("Audio file: '%s'", path)
        await asyncio.to_thread(self._play_blocking, path)

    def _play_blocking(self, path: Path) -> None:
        try:
            raw_pcm, samplerate = soundfile.read(path, dtype="float32", always_2d=True)
        except (soundfile.LibsndfileError, soundfile.SoundFileRuntimeError, OSError) as err:
            msg: str = f"Could not decode '{path}': {err}"
            raise BackendError(msg) from err

        pcm: np.ndarray[Any, dtype[np.float32]] = self._apply_volume(raw_pcm)
        try:
            with self._device_lock:
                audio: pyaudio.PyAudio = self._get_pyaudio()
                stream = audio.open(
                    format=pyaudio.paFloat32, channels=pcm.shape[1], rate=int(samplerate), output=True
                )
                try:
                    stream.write(pcm.tobytes())
                    stream.stop_stream()
                finally:
                    stream.close()
        except OSError as err:
            msg = f"Audio device error while playing '{path}': {err}"
            raise BackendError(msg) from err
        logger.debug("Playback completed: '%s'", path)

    def _apply_volume(self, raw_pcm: np.ndarray[Any, dtype[np.float32]]) -> np.ndarray[Any, dtype[np.float32]]:
        # Skip volume conversion when volume is 100
        if self.volume == 100:
            return raw_pcm
        # Broadcasting keeps float32; pyaudio does not support float64.
        return (raw_pcm * np.float32(self.volume / 100.0)).astype(np.float32, copy=False)

    def _get_pyaudio(self) -> pyaudio.PyAudio:
        if self._pyaudio is None:
            self._pyaudio = pyaudio.PyAudio()
        return self._pyaudio

    def close(self) -> None:
        """Release the PyAudio instance."""
        with self._device_lock:
            if self._pyaudio is not None:
                self._pyaudio.terminate()
                self._pyaudio = None
                logger.debug("PyAudio terminated")
