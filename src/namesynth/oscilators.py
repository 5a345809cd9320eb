# ===== Wibbly Wobbly Bois =====
import math
from typing import Callable, Dict, Sequence, Tuple, Union

import numpy as np

TimeLike = Union[float, np.ndarray]
Partials = Sequence[Tuple[float, float]]

# (frequency multiplier, weight)
PIANO_PARTIALS: Partials = (
    (1.0, 0.50),
    (2.0, 0.20),
    (3.0, 0.12),
    (4.0, 0.06),
    (5.0, 0.03),
    (1.002, 0.05),
)
PAD_PARTIALS: Partials = (
    (1.0, 0.60),
    (1.001, 0.30),
    (2.0, 0.08),
)
BASS_PARTIALS: Partials = (
    (1.0, 0.55),
    (0.5, 0.25),
    (2.0, 0.10),
    (3.0, 0.05),
)
WARM_PARTIALS: Partials = (
    (1.0, 0.70),
    (2.0, 0.15),
    (3.0, 0.08),
)


def additive(freq: float, t: TimeLike, partials: Partials) -> TimeLike:
    """
    Sum of weighted sines at multiples of `freq`, evaluated at time(s) `t` in seconds.
    """
    t = np.asarray(t, dtype=np.float64)
    y = np.zeros_like(t)
    for mult, weight in partials:
        y += np.sin(2.0 * math.pi * freq * mult * t) * weight
    return y


def osc_piano(freq: float, t: TimeLike) -> TimeLike:
    """
    Bright harmonic stack. The 1.002 partial beats slowly against the fundamental.
    """
    return additive(freq, t, PIANO_PARTIALS)


def osc_pad(freq: float, t: TimeLike) -> TimeLike:
    """
    Two nearly unison sines for a lazy chorus, plus a touch of octave.
    """
    return additive(freq, t, PAD_PARTIALS)


def osc_bass(freq: float, t: TimeLike) -> TimeLike:
    """
    Sub octave + low harmonics through a tanh soft clipper.
    """
    y = additive(freq, t, BASS_PARTIALS)
    return np.tanh(1.5 * y) * 0.7


def osc_warm(freq: float, t: TimeLike) -> TimeLike:
    """
    Sine with a softer 2nd and 3rd harmonic. Beep, but cozy.
    """
    return additive(freq, t, WARM_PARTIALS)


TIMBRES: Dict[str, Callable[[float, TimeLike], TimeLike]] = {
    "piano": osc_piano,
    "pad": osc_pad,
    "bass": osc_bass,
    "warm": osc_warm,
}


def oscillate(freq: float, t: TimeLike, timbre: str) -> TimeLike:
    try:
        osc_fn = TIMBRES[timbre]
    except KeyError:
        raise ValueError(f"Unknown timbre: {timbre}") from None
    return osc_fn(freq, t)
