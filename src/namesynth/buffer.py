# ===== Where the samples live =====
import logging
import math
from typing import Optional, Tuple

import numpy as np

from namesynth import STEREO_MAX_FRAMES
from namesynth.errors import OutOfMemoryError

_LOGGER = logging.getLogger("namesynth.buffer")

INT16_MIN, INT16_MAX = -32768, 32767
INT32_MIN, INT32_MAX = -(2**31), 2**31 - 1


def round_half_away(x: np.ndarray) -> np.ndarray:
    """
    Round to nearest, ties away from zero (C `round`, not numpy's banker's rounding).
    """
    x = np.asarray(x, dtype=np.float64)
    return np.where(x >= 0.0, np.floor(x + 0.5), np.ceil(x - 0.5))


def pan_gains(pan: float) -> Tuple[float, float]:
    """
    Constant-power pan law: 0 = hard left, 0.5 = centre (~0.707 each), 1 = hard right.
    """
    angle = pan * math.pi / 2.0
    return math.cos(angle), math.sin(angle)


class PCMBuffer:
    """
    Fixed-capacity sample accumulators, one track per channel.

    Stereo tracks are int32 so that piles of overlapping voices and reverb
    echoes have headroom before the final clip to 16 bits on export. Mono
    keeps the old single int16 track, saturates on every mix and truncates
    toward zero like the old integer cast instead of rounding.

    `used` is the exclusive upper bound of frames written so far and is
    shared by all tracks.
    """

    def __init__(self, channels: int = 2, max_frames: int = STEREO_MAX_FRAMES) -> None:
        if channels not in (1, 2):
            raise ValueError(f"channels must be 1 or 2, got {channels}")
        if max_frames < 0:
            raise ValueError(f"max_frames must be >= 0, got {max_frames}")
        self.channels = channels
        self.max_frames = max_frames
        self.dtype = np.int32 if channels == 2 else np.int16
        self.truncate = channels == 1
        try:
            self.tracks = np.zeros((channels, max_frames), dtype=self.dtype)
        except MemoryError as exc:
            raise OutOfMemoryError(
                f"Cannot allocate {channels} x {max_frames} frame buffer"
            ) from exc
        self.used = 0

    @property
    def left(self) -> np.ndarray:
        return self.tracks[0]

    @property
    def right(self) -> np.ndarray:
        return self.tracks[-1]

    @property
    def limits(self) -> Tuple[int, int]:
        info = np.iinfo(self.dtype)
        return int(info.min), int(info.max)

    def saturating_add(self, start: int, end: int, values: np.ndarray) -> None:
        """
        tracks[:, start:end] += values, rounded (or truncated in mono) and
        saturated to the track type.
        """
        lo, hi = self.limits
        # Clip before rounding so absurd gains can't overflow int64 either
        values = np.clip(values, INT32_MIN, INT32_MAX)
        inc = (np.trunc(values) if self.truncate else round_half_away(values)).astype(np.int64)
        acc = self.tracks[:, start:end].astype(np.int64) + inc
        self.tracks[:, start:end] = np.clip(acc, lo, hi).astype(self.dtype)

    def mix(self, start: int, block: np.ndarray) -> Optional[Tuple[int, int]]:
        """
        Add a (channels, n) block of float samples starting at frame `start`.

        Frames falling outside [0, max_frames) are dropped on the floor, not an
        error. Returns the (first, last + 1) frame span actually written, or None.
        """
        block = np.asarray(block, dtype=np.float64)
        if block.ndim == 1:
            block = block[np.newaxis, :]
        if block.shape[0] != self.channels:
            raise ValueError(
                f"Block has {block.shape[0]} channels, buffer has {self.channels}"
            )
        n = block.shape[1]
        first = max(0, -start)
        last = min(n, self.max_frames - start)
        if last <= first:
            if n:
                _LOGGER.debug("Dropped %d frames starting at frame %d", n, start)
            return None
        if first > 0 or last < n:
            _LOGGER.debug("Dropped %d out of range frames", n - (last - first))
        self.saturating_add(start + first, start + last, block[:, first:last])
        self.used = max(self.used, start + last)
        return start + first, start + last

    def pcm16(self) -> np.ndarray:
        """
        Populated frames clipped to int16, shape (used, channels), ready to interleave.
        """
        clipped = np.clip(self.tracks[:, : self.used], INT16_MIN, INT16_MAX)
        return clipped.T.astype("<i2")
