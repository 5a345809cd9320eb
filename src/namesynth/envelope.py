# ===== ADSR Envelope =====
from typing import Union

import numpy as np

TimeLike = Union[float, np.ndarray]

ADSR_RELEASE_FRACTION = 0.4
AR_RELEASE_FRACTION = 0.3


def adsr_env(
    t: TimeLike,
    duration: float,
    a: float,
    d: float,
    s: float,
    r: float,
    release_fraction: float = ADSR_RELEASE_FRACTION,
) -> TimeLike:
    """
    Linear ADSR amplitude at time(s) `t` seconds into a note of `duration` seconds.

    Release is shortened to `release_fraction * duration` on short notes so the
    tail always fits inside the note. Zero-length attack or decay segments are
    skipped. Works on scalars and numpy arrays alike; the result is in [0, 1].
    """
    scalar = np.ndim(t) == 0
    t = np.asarray(t, dtype=np.float64)
    r = min(r, release_fraction * duration)
    sustain_end = duration - r

    env = np.full(t.shape, s, dtype=np.float64)
    # Each later segment wins over the previous one, same as walking the stages in order
    tail = t >= sustain_end
    if r > 0.0:
        env[tail] = s * (duration - t[tail]) / r
    else:
        env[tail] = 0.0
    if d > 0.0:
        decaying = (t >= a) & (t < a + d)
        env[decaying] = 1.0 - (1.0 - s) * (t[decaying] - a) / d
    if a > 0.0:
        attacking = t < a
        env[attacking] = t[attacking] / a
    env = np.clip(env, 0.0, 1.0)
    return float(env) if scalar else env


def ar_env(t: TimeLike, duration: float, a: float = 0.02, r: float = 0.08) -> TimeLike:
    """
    The old two-stage envelope: ramp up, hold at full, ramp down.
    """
    return adsr_env(t, duration, a, 0.0, 1.0, r, release_fraction=AR_RELEASE_FRACTION)
