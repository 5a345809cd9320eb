from pathlib import Path

import numpy as np

from namesynth import SAMPLE_RATE
from namesynth.buffer import PCMBuffer
from namesynth.composer import (
    ARPEGGIOS,
    PROGRESSIONS,
    RHYTHMS,
    NameRng,
    compose_mono,
    compose_stereo,
    derive_plan,
    hash_name,
    melody_notes,
    render_name,
)
from namesynth.config import MONO, STEREO


def test_hash_name_is_djb2() -> None:
    assert hash_name("") == 5381
    assert hash_name("a") == 5381 * 33 + 97
    assert 0 <= hash_name("Gustav Mahler " * 50) < 2**32


def test_rng_is_a_32_bit_lcg() -> None:
    rng = NameRng(0)
    assert rng.next() == 12345
    assert rng.next() == (12345 * 1103515245 + 12345) % 2**32
    draws = [NameRng(42).randint(10) for _ in range(3)]
    assert len(set(draws)) == 1
    rng = NameRng(42)
    assert all(0 <= rng.randint(10) < 10 for _ in range(100))
    assert NameRng(42).fork(7).state == 42 ^ 7


def test_plan_fields_follow_hash_bits() -> None:
    for name in ("Mahler", "Bach", "Clara Schumann", "Nadia", "ÿ"):
        plan = derive_plan(name)
        h = hash_name(name)
        assert plan.hash == h
        assert plan.root.tone == h % 7
        assert plan.root.acci in (-1, 0, 1)
        assert 90 <= plan.tempo < 170
        assert plan.progression == PROGRESSIONS[(h >> 5) % 5]
        assert plan.is_minor == ((h >> 5) % 5 >= 3)
        assert plan.rhythm == RHYTHMS[(h >> 8) % 4]
        assert plan.arpeggio in ARPEGGIOS
        assert len(plan.scale) == 7
        assert len(plan.progression_names()) == 4


def test_plan_is_deterministic() -> None:
    assert derive_plan("Mahler") == derive_plan("Mahler")


def test_melody_walk() -> None:
    plan = derive_plan("Mahler")
    notes = melody_notes(plan, 0, 0, 0.0)
    assert notes == melody_notes(plan, 0, 0, 0.0)
    assert 0 < len(notes) <= len(plan.rhythm)
    assert all(note.octave == 5 for note, _, _ in notes)
    starts = [start for _, start, _ in notes]
    assert starts == sorted(starts)


def test_stereo_piece_fits_the_buffer() -> None:
    plan = derive_plan("Mahler")
    buf = PCMBuffer(STEREO.channels, STEREO.max_frames)
    end = compose_stereo(plan, buf, STEREO)
    assert abs(buf.used - int(np.floor(end * SAMPLE_RATE))) <= 1
    assert buf.used <= buf.max_frames
    assert buf.left.any() and buf.right.any()
    assert not np.array_equal(buf.left[: buf.used], buf.right[: buf.used])


def test_mono_piece_fits_the_buffer() -> None:
    plan = derive_plan("Mahler")
    buf = PCMBuffer(MONO.channels, MONO.max_frames)
    end = compose_mono(plan, buf, MONO)
    assert 0 < buf.used <= MONO.max_frames
    assert abs(buf.used - int(np.floor(end * SAMPLE_RATE))) <= 1


def test_same_name_same_bytes(tmp_path: Path) -> None:
    first, second = tmp_path / "a.wav", tmp_path / "b.wav"
    render_name("Mahler", first)
    render_name("Mahler", second)
    assert first.read_bytes() == second.read_bytes()


def test_different_names_differ(tmp_path: Path) -> None:
    first, second = tmp_path / "a.wav", tmp_path / "b.wav"
    render_name("Mahler", first, MONO)
    render_name("Bruckner", second, MONO)
    assert first.read_bytes() != second.read_bytes()


def test_render_name_mono(tmp_path: Path) -> None:
    target = tmp_path / "mono.wav"
    plan, buf = render_name("Alma", target, MONO)
    assert plan.name == "Alma"
    raw = target.read_bytes()
    assert raw[22] == 1
    assert len(raw) == 44 + buf.used * 2
