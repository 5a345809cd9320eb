import logging
import os
import wave
from pathlib import Path
from typing import Union

from namesynth import BITS_PER_SAMPLE, SAMPLE_RATE
from namesynth.buffer import PCMBuffer
from namesynth.errors import OutOfMemoryError, OutputOpenError, OutputWriteError

_LOGGER = logging.getLogger("namesynth.io")


def save_wav(path: Union[str, Path], buffer: PCMBuffer, sr: int = SAMPLE_RATE) -> Path:
    """
    Export the populated frames as 16-bit PCM WAV, interleaved L,R,L,R for stereo.

    Samples beyond the int16 range are hard clipped. A failed write removes
    the partial file instead of leaving a broken WAV behind.
    """
    path = Path(path)
    try:
        pcm = buffer.pcm16()
        payload = pcm.tobytes()
    except MemoryError as exc:
        raise OutOfMemoryError(f"Cannot allocate {buffer.used} frame interleave buffer") from exc

    try:
        handle = open(path, "wb")
    except OSError as exc:
        _LOGGER.warning("Cannot create %s: %s", path, exc)
        raise OutputOpenError(f"Cannot create {path}: {exc}") from exc

    try:
        with handle, wave.open(handle, "wb") as f:
            f.setnchannels(buffer.channels)
            f.setsampwidth(BITS_PER_SAMPLE // 8)
            f.setframerate(sr)
            f.setnframes(buffer.used)
            f.writeframes(payload)
    except OSError as exc:
        _LOGGER.warning("Write to %s failed: %s", path, exc)
        try:
            os.remove(path)
        except OSError:
            _LOGGER.warning("Could not remove partial file %s", path, exc_info=True)
        raise OutputWriteError(f"Failed writing {path}: {exc}") from exc

    _LOGGER.info("Wrote %d frames x %d channels to %s", buffer.used, buffer.channels, path)
    return path
