# ===== Just enough theory to get by =====
from typing import List, Sequence

from namesynth.tones import NATS, Note, note_to_midi

MAJOR_STEPS = (2, 2, 1, 2, 2, 2, 1)
NATURAL_MINOR_STEPS = (2, 1, 2, 2, 1, 2, 2)

SCALE_NAMES = {
    MAJOR_STEPS: "Major",
    NATURAL_MINOR_STEPS: "Natural Minor",
}

_ACCI_TEXT = {-2: "bb", -1: "b", 0: "", 1: "#", 2: "x"}


def interval_up(note: Note, letters: int, semitones: int) -> Note:
    """
    Spell the note `letters` diatonic steps and `semitones` half steps above `note`.

    The letter name is fixed by `letters`, the accidental is whatever makes the
    distance come out right (so a major third above E is G#, never Ab).
    """
    tone = (note.tone + letters) % 7
    octave = note.octave + (note.tone + letters) // 7
    natural = Note(tone, 0, octave)
    acci = note_to_midi(note) + semitones - note_to_midi(natural)
    return Note(tone, acci, octave)


def build_scale(root: Note, steps: Sequence[int] = MAJOR_STEPS) -> List[Note]:
    """
    Heptatonic scale from `root`, ascending, without the closing octave.
    """
    notes = [root]
    total = 0
    for letters, step in enumerate(steps[:-1], start=1):
        total += step
        notes.append(interval_up(root, letters, total))
    return notes


def build_triad(root: Note, minor: bool = False) -> List[Note]:
    third = interval_up(root, 2, 3 if minor else 4)
    fifth = interval_up(root, 4, 7)
    return [root, third, fifth]


def with_octave(note: Note, octave: int) -> Note:
    return note._replace(octave=octave)


def format_note(note: Note, octave: bool = False) -> str:
    """
    Display name, e.g. "F#" or "Bb3".
    """
    acci = _ACCI_TEXT.get(note.acci)
    if acci is None:
        acci = ("#" if note.acci > 0 else "b") * abs(note.acci)
    text = NATS[note.tone] + acci
    return f"{text}{note.octave}" if octave else text
