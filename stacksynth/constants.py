"""Tuning and sizing constants for the synthesiser."""

from .cxmath import power

# Time a changed board connection must hold steady before it is acted on.
CONN_TIME_MS = 10

# Number of notes that may sound at once (ten fingers).
ACCUMULATORS = 10

# Number of bits in one full scan of the key matrix.
INPUT_BITS = 28

# The low twelve input bits are the piano keys.
NOTE_MASK = 0xFFF

# Marks an empty slot in the list of playing notes.
NO_NOTE = 999

NOTE_NAMES = ("C", "C#", "D", "Eb", "E", "F", "F#", "G", "G#", "A", "Bb", "B")

INDEX_A = 10
FREQ_A = 440
SAMPLE_RATE = 22000

_UINT32_MASK = 0xFFFFFFFF


def construct_step_size(index):
    """Return the 32-bit phase increment for note ``index`` of octave 4."""
    frequency = int(FREQ_A * power(2, (index - INDEX_A) / 12.0))
    scalar = int(power(2, 32) / SAMPLE_RATE)
    return (scalar * frequency) & _UINT32_MASK


STEP_SIZES = tuple(construct_step_size(index) for index in range(len(NOTE_NAMES)))