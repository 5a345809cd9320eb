# ===== FX: the room =====
import logging
from typing import Sequence, Tuple

from namesynth.buffer import PCMBuffer

_LOGGER = logging.getLogger("namesynth.reverb")

# (delay in frames, gain) ~ 100 / 167 / 250 / 360 / 490 ms at 44.1 kHz
REVERB_TAPS: Tuple[Tuple[int, float], ...] = (
    (4410, 0.25),
    (7350, 0.18),
    (11025, 0.13),
    (15876, 0.09),
    (21609, 0.05),
)


def comb_reverb(buffer: PCMBuffer, taps: Sequence[Tuple[int, float]] = REVERB_TAPS) -> None:
    """
    In-place multi-tap comb over the populated frames of every track.

    For each tap, frame i picks up round(gain * frame[i - delay]) for i in
    [delay, used). The read side sees frames this same tap already updated,
    so each tap is a recursive feedback comb rather than a plain delay, and
    later taps stack on top of the echoes of earlier ones. `used` is never
    extended; the tail past it is cut.
    """
    used = buffer.used
    for delay, gain in taps:
        if delay <= 0:
            raise ValueError(f"Tap delay must be positive, got {delay}")
        if delay >= used:
            continue
        _LOGGER.debug("Tap %d frames x %.2f over %d frames", delay, gain, used)
        # One delay-sized block at a time: every block reads only from frames
        # already final for this tap, which matches the sample-by-sample loop.
        for start in range(delay, used, delay):
            end = min(start + delay, used)
            source = buffer.tracks[:, start - delay : end - delay] * gain
            buffer.saturating_add(start, end, source)
