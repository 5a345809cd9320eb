# ===== Audacity? Never met her =====
import logging
import math
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

import numpy as np

from namesynth import SAMPLE_RATE
from namesynth.buffer import PCMBuffer, pan_gains
from namesynth.config import STEREO, RenderProfile
from namesynth.envelope import adsr_env, ar_env
from namesynth.oscilators import TIMBRES, oscillate

_LOGGER = logging.getLogger("namesynth.sequencer")


@dataclass(frozen=True)
class Voice:
    """
    One note to be mixed into the buffer.

    Times are in seconds. `pan` runs from 0 (left) to 1 (right).
    attack / decay / sustain / release follow the usual ADSR meaning,
    with `sustain` a level and the rest durations.
    """

    freq: float
    start: float
    duration: float
    volume: float = 1.0
    pan: float = 0.5
    timbre: str = "piano"
    attack: float = 0.01
    decay: float = 0.08
    sustain: float = 0.6
    release: float = 0.12

    def __post_init__(self) -> None:
        if self.freq <= 0.0:
            raise ValueError(f"freq must be positive, got {self.freq}")
        if self.start < 0.0 or self.duration < 0.0:
            raise ValueError("start and duration must be >= 0")
        if not 0.0 <= self.pan <= 1.0:
            raise ValueError(f"pan must be within [0, 1], got {self.pan}")
        if not 0.0 <= self.sustain <= 1.0:
            raise ValueError(f"sustain must be within [0, 1], got {self.sustain}")
        if min(self.attack, self.decay, self.release) < 0.0:
            raise ValueError("attack, decay and release must be >= 0")
        if self.timbre not in TIMBRES:
            raise ValueError(f"Unknown timbre: {self.timbre}")


def voice_signal(voice: Voice, profile: RenderProfile = STEREO) -> np.ndarray:
    """
    Mono float signal of one voice, already scaled by volume and amp_scale.
    """
    n = int(math.floor(voice.duration * SAMPLE_RATE))
    if n <= 0:
        return np.zeros(0, dtype=np.float64)
    t = np.arange(n, dtype=np.float64) / SAMPLE_RATE
    if profile.envelope == "ar":
        env = ar_env(t, voice.duration, voice.attack, voice.release)
    else:
        env = adsr_env(
            t, voice.duration, voice.attack, voice.decay, voice.sustain, voice.release
        )
    raw = oscillate(voice.freq, t, voice.timbre)
    return raw * env * voice.volume * profile.amp_scale


def render_voice(
    buffer: PCMBuffer, voice: Voice, profile: RenderProfile = STEREO
) -> Optional[Tuple[int, int]]:
    """
    Mix one voice into the buffer.

    Mixing is additive, so overlapping voices simply sum and the order of
    calls does not matter. Stereo buffers get the constant-power pan,
    mono buffers ignore it. Returns the frame span written, if any.
    """
    start_idx = int(math.floor(voice.start * SAMPLE_RATE))
    sig = voice_signal(voice, profile)
    if sig.size == 0:
        return None
    if buffer.channels == 2:
        l_gain, r_gain = pan_gains(voice.pan)
        block = np.vstack((sig * l_gain, sig * r_gain))
    else:
        block = sig[np.newaxis, :]
    span = buffer.mix(start_idx, block)
    if span is None:
        _LOGGER.debug(
            "Voice %.2f Hz at %.3fs fell outside the buffer", voice.freq, voice.start
        )
    return span


def render_chord(
    buffer: PCMBuffer,
    freqs: Iterable[float],
    start: float,
    duration: float,
    volume: float,
    profile: RenderProfile = STEREO,
    **voice_args,
) -> None:
    """
    All notes at once, same envelope and gain.
    """
    for freq in freqs:
        render_voice(buffer, Voice(freq, start, duration, volume, **voice_args), profile)
