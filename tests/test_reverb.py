import numpy as np
import pytest

from namesynth.buffer import PCMBuffer
from namesynth.reverb import REVERB_TAPS, comb_reverb


def impulse_buffer(frames: int = 30000, value: float = 10000.0) -> PCMBuffer:
    buf = PCMBuffer(2, 50000)
    block = np.zeros((2, frames))
    block[:, 0] = value
    buf.mix(0, block)
    return buf


def reachable_delays(limit: int) -> np.ndarray:
    """Frames reachable as sums of tap delays (with repeats), frame 0 included."""
    ok = np.zeros(limit, dtype=bool)
    ok[0] = True
    for i in range(1, limit):
        ok[i] = any(i >= d and ok[i - d] for d, _ in REVERB_TAPS)
    return ok


def test_impulse_echoes_only_at_tap_sums() -> None:
    buf = impulse_buffer()
    comb_reverb(buf)
    ok = reachable_delays(buf.used)
    for track in (buf.left, buf.right):
        live = track[: buf.used] != 0
        assert live[0]
        for delay, _ in REVERB_TAPS:
            assert live[delay]
        assert not np.any(live & ~ok)
        assert not live[1 : REVERB_TAPS[0][0]].any()


def test_first_echo_levels() -> None:
    buf = impulse_buffer()
    comb_reverb(buf)
    assert buf.left[4410] == 2500
    assert buf.left[7350] == 1800
    assert buf.left[21609] == 500


def test_tap_feeds_back_on_itself() -> None:
    buf = impulse_buffer(frames=400)
    comb_reverb(buf, taps=[(100, 0.5)])
    assert buf.left[[0, 100, 200, 300]].tolist() == [10000, 5000, 2500, 1250]


def test_later_taps_hear_earlier_taps() -> None:
    buf = impulse_buffer(frames=400)
    comb_reverb(buf, taps=[(100, 0.5), (150, 0.5)])
    # 250 = 100 + 150: the second tap reads the first tap's echo at 100
    assert buf.left[250] != 0


def test_used_is_not_extended() -> None:
    buf = impulse_buffer(frames=5000)
    comb_reverb(buf)
    assert buf.used == 5000
    assert not buf.tracks[:, 5000:].any()


def test_empty_buffer_is_untouched() -> None:
    buf = PCMBuffer(2, 1000)
    comb_reverb(buf)
    assert buf.used == 0
    assert not buf.tracks.any()


def test_matches_sample_by_sample_loop() -> None:
    rng = np.random.default_rng(7)
    buf = PCMBuffer(2, 3000)
    buf.mix(0, rng.uniform(-20000, 20000, size=(2, 2500)))
    taps = [(300, 0.25), (470, 0.18), (1100, 0.05)]
    expected = buf.tracks[:, : buf.used].astype(np.int64)
    for delay, gain in taps:
        for ch in range(2):
            for i in range(delay, buf.used):
                x = expected[ch, i - delay] * gain
                expected[ch, i] += int(np.floor(x + 0.5)) if x >= 0 else int(np.ceil(x - 0.5))
    comb_reverb(buf, taps)
    assert np.array_equal(buf.tracks[:, : buf.used], expected)


def test_rejects_bad_delay() -> None:
    with pytest.raises(ValueError):
        comb_reverb(impulse_buffer(frames=10), taps=[(0, 0.5)])
