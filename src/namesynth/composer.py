# -*- coding: utf-8 -*-
"""
Name -> hash -> plan -> voices.

Everything here is deterministic: the same name always yields the same
stream of voice requests, so the same WAV bytes.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple, Union

from namesynth import SAMPLE_RATE
from namesynth.buffer import PCMBuffer
from namesynth.config import MONO, STEREO, RenderProfile
from namesynth.io import save_wav
from namesynth.reverb import comb_reverb
from namesynth.sequencer import Voice, render_chord, render_voice
from namesynth.theory import (
    MAJOR_STEPS,
    NATURAL_MINOR_STEPS,
    SCALE_NAMES,
    build_scale,
    build_triad,
    format_note,
    with_octave,
)
from namesynth.tones import Note, note_to_freq

_LOGGER = logging.getLogger("namesynth.composer")

MASK32 = 0xFFFFFFFF

# (scale degree, minor chord) x 4
PROGRESSIONS: Tuple[Tuple[Tuple[int, bool], ...], ...] = (
    ((0, False), (3, False), (4, False), (0, False)),  # I  - IV - V   - I
    ((0, False), (5, True), (3, False), (4, False)),  # I  - vi - IV  - V
    ((0, False), (4, False), (5, True), (3, False)),  # I  - V  - vi  - IV
    ((0, True), (3, False), (4, False), (0, True)),  # i  - IV - V   - i
    ((0, True), (5, False), (2, False), (4, False)),  # i  - VI - III - V
)
MINOR_FROM = 3

# Melody note lengths in eighths
RHYTHMS: Tuple[Tuple[int, ...], ...] = (
    (2, 2, 1, 1, 2, 2, 2, 4),
    (1, 1, 2, 2, 1, 1, 2, 2),
    (4, 2, 2, 1, 1, 1, 1, 4),
    (2, 1, 1, 4, 2, 2, 2, 2),
)

# Arpeggio steps as indices into (root, third, fifth, octave), one per eighth
ARPEGGIOS: Tuple[Tuple[int, ...], ...] = (
    (0, 1, 2, 3, 2, 1, 0, 1),
    (0, 2, 1, 2, 3, 2, 1, 2),
    (0, 1, 2, 1, 0, 1, 2, 3),
    (3, 2, 1, 0, 1, 2, 3, 2),
)

REVIEWS = (
    "This is either a masterpiece or a war crime. Possibly both.",
    "Debussy would weep. Not from beauty, but from confusion.",
    "If elevator music had an evil twin, this would be it.",
    "Certified banger. In the sense that it bangs pots and pans.",
    "This composition has been reported to the Geneva Convention.",
    "Your neighbors will love this. Play it at 3am for best results.",
    "Mozart rolled over in his grave. Then rolled back. Then left.",
    "This is what happens when math tries to be art.",
)

PASSES = 2
BEATS_PER_CHORD = 4
FINAL_BEATS = 6
CHORD_OCTAVE = 3
BASS_OCTAVE = 2
ARP_OCTAVE = 4
MELODY_OCTAVE = 5


def hash_name(name: str) -> int:
    """
    djb2 over the UTF-8 bytes of `name`, kept to 32 bits.
    """
    h = 5381
    for byte in name.encode("utf-8"):
        h = (h * 33 + byte) & MASK32
    return h


class NameRng:
    """
    Tiny 32-bit LCG. Not random at all, which is the point.
    """

    def __init__(self, seed: int) -> None:
        self.state = seed & MASK32

    def next(self) -> int:
        self.state = (self.state * 1103515245 + 12345) & MASK32
        return self.state

    def fork(self, salt: int) -> "NameRng":
        return NameRng(self.state ^ salt)

    def randint(self, n: int) -> int:
        """
        Value in [0, n), from the high bits since the low ones of an LCG are lazy.
        """
        return (self.next() >> 16) % n


@dataclass(frozen=True)
class Plan:
    name: str
    hash: int
    root: Note
    is_minor: bool
    tempo: int
    progression: Tuple[Tuple[int, bool], ...]
    rhythm: Tuple[int, ...]
    arpeggio: Tuple[int, ...]
    scale: Tuple[Note, ...]
    review: str

    @property
    def beat(self) -> float:
        return 60.0 / self.tempo

    @property
    def eighth(self) -> float:
        return self.beat / 2.0

    @property
    def scale_name(self) -> str:
        return SCALE_NAMES[NATURAL_MINOR_STEPS if self.is_minor else MAJOR_STEPS]

    @property
    def key_name(self) -> str:
        return f"{format_note(self.root)} {'minor' if self.is_minor else 'major'}"

    def chord_root(self, degree: int) -> Note:
        return with_octave(self.scale[degree % len(self.scale)], CHORD_OCTAVE)

    def progression_names(self) -> List[str]:
        return [
            format_note(self.chord_root(degree)) + ("m" if minor else "")
            for degree, minor in self.progression
        ]


def derive_plan(name: str) -> Plan:
    """
    Pull every musical decision out of different bits of the name hash.
    """
    h = hash_name(name)
    prog_idx = (h >> 5) % len(PROGRESSIONS)
    is_minor = prog_idx >= MINOR_FROM
    # Keep it playable: one accidental at most
    root = Note(h % 7, (h >> 3) % 3 - 1, CHORD_OCTAVE)
    scale = build_scale(root, NATURAL_MINOR_STEPS if is_minor else MAJOR_STEPS)
    return Plan(
        name=name,
        hash=h,
        root=root,
        is_minor=is_minor,
        tempo=90 + (h >> 11) % 80,
        progression=PROGRESSIONS[prog_idx],
        rhythm=RHYTHMS[(h >> 8) % len(RHYTHMS)],
        arpeggio=ARPEGGIOS[(h >> 14) % len(ARPEGGIOS)],
        scale=tuple(scale),
        review=REVIEWS[h % len(REVIEWS)],
    )


def melody_notes(plan: Plan, rep: int, chord_idx: int, start: float) -> List[Tuple[Note, float, float]]:
    """
    The hash walk over the scale for one chord: (note, start, slot length) per
    sounding note. Roughly one slot in seven is a rest.
    """
    rng = NameRng(plan.hash).fork(rep * 7 + chord_idx * 13)
    notes = []
    cursor = start
    for n, eighths in enumerate(plan.rhythm):
        length = plan.eighth * eighths
        degree = (rng.state >> (n * 3)) % len(plan.scale)
        if (rng.state >> (n * 2 + 1)) % 7 != 0:
            notes.append((with_octave(plan.scale[degree], MELODY_OCTAVE), cursor, length))
        cursor += length
        rng.next()
    return notes


def triad_freqs(root: Note, minor: bool) -> List[float]:
    return [note_to_freq(n) for n in build_triad(root, minor)]


def compose_mono(plan: Plan, buffer: PCMBuffer, profile: RenderProfile = MONO) -> float:
    """
    The original arrangement: block chords plus a melody on the warm sine.
    Returns the end of the piece in seconds.
    """
    voice_args = dict(timbre="warm", attack=0.02, release=0.08)
    chord_dur = plan.beat * BEATS_PER_CHORD
    cursor = 0.0
    for rep in range(PASSES):
        for c, (degree, minor) in enumerate(plan.progression):
            chord = triad_freqs(plan.chord_root(degree), minor)
            render_chord(buffer, chord, cursor, chord_dur * 0.95, 0.5, profile, **voice_args)
            for note, start, length in melody_notes(plan, rep, c, cursor):
                render_voice(
                    buffer,
                    Voice(note_to_freq(note), start, length * 0.85, 0.7, **voice_args),
                    profile,
                )
            cursor += chord_dur

    final_dur = plan.beat * FINAL_BEATS
    tonic = plan.chord_root(0)
    render_chord(buffer, triad_freqs(tonic, plan.is_minor), cursor, final_dur, 0.6, profile, **voice_args)
    high = with_octave(tonic, MELODY_OCTAVE)
    render_voice(buffer, Voice(note_to_freq(high), cursor, final_dur, 0.5, **voice_args), profile)
    return cursor + final_dur


def compose_stereo(
    plan: Plan,
    buffer: PCMBuffer,
    profile: RenderProfile = STEREO,
    rng: Optional[NameRng] = None,
) -> float:
    """
    Pad chords spread across the field, bass on the roots, a ping-pong
    piano arpeggio on the second pass and the hash melody on top.
    Returns the end of the piece in seconds.
    """
    if rng is None:
        rng = NameRng(plan.hash)
    beat = plan.beat
    chord_dur = beat * BEATS_PER_CHORD
    pad_args = dict(timbre="pad", attack=0.25, decay=0.4, sustain=0.7, release=0.6)
    bass_args = dict(timbre="bass", attack=0.005, decay=0.12, sustain=0.7, release=0.08)
    arp_args = dict(timbre="piano", attack=0.005, decay=0.1, sustain=0.4, release=0.08)
    cursor = 0.0

    for rep in range(PASSES):
        for c, (degree, minor) in enumerate(plan.progression):
            root = plan.chord_root(degree)
            triad = build_triad(root, minor)

            # Pad: third left of centre, fifth right
            for note, pan in zip(triad, (0.5, 0.35, 0.65)):
                render_voice(
                    buffer,
                    Voice(note_to_freq(note), cursor, chord_dur * 0.98, 0.22, pan=pan, **pad_args),
                    profile,
                )

            # Bass: root on beats 1 and 3
            bass_f = note_to_freq(with_octave(root, BASS_OCTAVE))
            for b in range(0, BEATS_PER_CHORD, 2):
                render_voice(
                    buffer,
                    Voice(bass_f, cursor + b * beat, 2 * beat * 0.9, 0.5, **bass_args),
                    profile,
                )

            # Arp only once the song has warmed up
            if rep > 0:
                arp_notes = [with_octave(n, ARP_OCTAVE) for n in triad]
                arp_notes.append(with_octave(root, ARP_OCTAVE + 1))
                for step, idx in enumerate(plan.arpeggio):
                    pan = 0.62 if step % 2 else 0.38
                    render_voice(
                        buffer,
                        Voice(
                            note_to_freq(arp_notes[idx]),
                            cursor + step * plan.eighth,
                            plan.eighth * 0.9,
                            0.2,
                            pan=pan,
                            **arp_args,
                        ),
                        profile,
                    )

            for note, start, length in melody_notes(plan, rep, c, cursor):
                # A little velocity wobble so repeats don't sound pasted
                volume = 0.36 + rng.randint(8) / 100.0
                render_voice(
                    buffer,
                    Voice(note_to_freq(note), start, length * 0.85, volume, pan=0.45),
                    profile,
                )
            cursor += chord_dur

    # Bring it home
    final_dur = beat * FINAL_BEATS
    tonic = plan.chord_root(0)
    for note, pan in zip(build_triad(tonic, plan.is_minor), (0.5, 0.3, 0.7)):
        render_voice(buffer, Voice(note_to_freq(note), cursor, final_dur, 0.26, pan=pan, **pad_args), profile)
    render_voice(
        buffer,
        Voice(note_to_freq(with_octave(tonic, BASS_OCTAVE)), cursor, final_dur, 0.5, **bass_args),
        profile,
    )
    render_voice(
        buffer,
        Voice(note_to_freq(with_octave(tonic, MELODY_OCTAVE)), cursor, final_dur, 0.4, pan=0.5),
        profile,
    )
    return cursor + final_dur


def render_name(
    name: str, out_path: Union[str, Path], profile: RenderProfile = STEREO
) -> Tuple[Plan, PCMBuffer]:
    """
    Whole pipeline: plan, render every voice, reverb once, write once.
    """
    plan = derive_plan(name)
    _LOGGER.info("Composing for %r: %s, %d BPM", name, plan.key_name, plan.tempo)
    buffer = PCMBuffer(profile.channels, profile.max_frames)
    if profile.channels == 2:
        compose_stereo(plan, buffer, profile)
    else:
        compose_mono(plan, buffer, profile)
    if profile.reverb:
        comb_reverb(buffer)
    save_wav(out_path, buffer, SAMPLE_RATE)
    return plan, buffer
