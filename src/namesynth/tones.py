# ===== Tone Map =====
import re
from typing import NamedTuple, Tuple

NATS = "CDEFGAB"
SEMITONES = (0, 2, 4, 5, 7, 9, 11)  # C D E F G A B
ACCIDENTALS = {"#": 1, "X": 2, "B": -1}

MIDI_MIN = 0
MIDI_MAX = 127
A4_MIDI = 69
A4_FREQ = 440.0

_NOTE_RE = re.compile(r"^([A-G])((?:#|X|B)*)(-?\d+)$")


class Note(NamedTuple):
    """
    A spelled pitch: diatonic tone index (0=C .. 6=B), accidental offset
    in semitones and octave number (C4 is middle C).
    """

    tone: int
    acci: int
    octave: int


def note_fields(note: Note) -> Tuple[int, int, int]:
    return note.tone, note.acci, note.octave


def parse_note(name: str) -> Note:
    """
    Parse conventional pitch notation such as "A4", "C#3", "Bb2", "Ebb5" or "C-1".
    """
    name = name.strip()
    if len(name) < 2:
        raise ValueError(f"Bad note name: {name}")
    # Upper-case only the letter, "b" is a flat and "B" is a tone
    head, tail = name[0].upper(), name[1:].upper()
    match = _NOTE_RE.match(head + tail)
    if match is None:
        raise ValueError(f"Bad note name: {name}")
    letter, accs, octave = match.groups()
    acci = sum(ACCIDENTALS[a] for a in accs)
    return Note(NATS.index(letter), acci, int(octave))


def note_to_midi(note: Note) -> int:
    """
    MIDI number of a note, unclamped. C4 = 60, A4 = 69.
    """
    tone, acci, octave = note_fields(note)
    return 12 * (octave + 1) + SEMITONES[tone] + acci


def midi_to_freq(midi: int) -> float:
    """
    Equal temperament with A4 = 440 Hz, midi clamped to [0, 127].
    """
    midi = min(max(midi, MIDI_MIN), MIDI_MAX)
    return A4_FREQ * (2.0 ** ((midi - A4_MIDI) / 12.0))


def note_to_freq(note) -> float:
    """
    Convert a Note (or a note name) to frequency in Hz.

    Out of range pitches are clamped to the MIDI range instead of raising,
    so extreme octaves still give a bounded, playable frequency.
    """
    if isinstance(note, str):
        note = parse_note(note)
    return midi_to_freq(note_to_midi(note))
