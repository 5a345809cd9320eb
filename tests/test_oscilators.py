import math

import numpy as np
import pytest

from namesynth.oscilators import TIMBRES, osc_bass, osc_pad, osc_piano, oscillate


def test_all_timbres_start_at_zero() -> None:
    for name in TIMBRES:
        assert float(oscillate(220.0, 0.0, name)) == pytest.approx(0.0)


def test_piano_recipe() -> None:
    freq, t = 261.63, 0.0123
    phi = 2.0 * math.pi * freq * t
    expected = (
        0.50 * math.sin(phi)
        + 0.20 * math.sin(2 * phi)
        + 0.12 * math.sin(3 * phi)
        + 0.06 * math.sin(4 * phi)
        + 0.03 * math.sin(5 * phi)
        + 0.05 * math.sin(1.002 * phi)
    )
    assert float(osc_piano(freq, t)) == pytest.approx(expected, abs=1e-12)


def test_pad_recipe() -> None:
    freq, t = 110.0, 0.3
    phi = 2.0 * math.pi * freq * t
    expected = 0.6 * math.sin(phi) + 0.3 * math.sin(1.001 * phi) + 0.08 * math.sin(2 * phi)
    assert float(osc_pad(freq, t)) == pytest.approx(expected, abs=1e-12)


def test_bass_is_soft_clipped() -> None:
    t = np.arange(44100) / 44100.0
    y = osc_bass(55.0, t)
    assert np.max(np.abs(y)) <= 0.7


def test_nominal_range() -> None:
    t = np.arange(44100) / 44100.0
    for name in TIMBRES:
        assert np.max(np.abs(oscillate(440.0, t, name))) <= 1.0


def test_unknown_timbre() -> None:
    with pytest.raises(ValueError):
        oscillate(440.0, 0.1, "kazoo")
