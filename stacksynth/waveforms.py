"""Oscillator waveforms and joystick pitch bend."""

import math
from enum import IntEnum

_UINT32_MASK = 0xFFFFFFFF
_TABLE_SIZE = 256
_AMPLITUDE = 127

# One full sine period sampled at 256 points, scaled to signed 8-bit levels.
SINE_TABLE = tuple(
    round(_AMPLITUDE * math.sin(2 * math.pi * i / _TABLE_SIZE))
    for i in range(_TABLE_SIZE)
)


class Waveform(IntEnum):
    """Oscillator shapes, numbered as selected by the waveform knob."""

    SAWTOOTH = 0
    SINE = 1
    SQUARE = 2
    TRIANGLE = 3

    @property
    def label(self):
        return self.name.capitalize()


def sawtooth(scaled_phase):
    """Sawtooth: the phase itself."""
    return scaled_phase


def sine(scaled_phase):
    """Sine looked up in a 256-entry table."""
    return SINE_TABLE[(scaled_phase + 128) & 0xFF]


def square(scaled_phase):
    """Square wave at the extremes of the signed 8-bit range."""
    return -128 if scaled_phase < 0 else 127


def triangle(scaled_phase):
    """Triangle wave peaking at zero phase."""
    if scaled_phase <= 0:
        return 2 * (scaled_phase + 64)
    return 2 * (64 - scaled_phase)


_GENERATORS = {
    Waveform.SAWTOOTH: sawtooth,
    Waveform.SINE: sine,
    Waveform.SQUARE: square,
    Waveform.TRIANGLE: triangle,
}


def waveform_generator(phase_acc, wave_select):
    """Return the sample for a 32-bit phase accumulator; unknown shapes give 0."""
    scaled_phase = ((phase_acc & _UINT32_MASK) >> 24) - 128
    try:
        generator = _GENERATORS[Waveform(wave_select)]
    except ValueError:
        return 0
    return generator(scaled_phase)


def vibrato(step_sizes, key, joy_y):
    """Bend the step size of ``key`` by up to a whole tone either way.

    ``joy_y`` is a 10-bit joystick reading centred on 512.
    """
    if not 0 <= key < 12:
        raise IndexError(f"key {key} is outside 0..11")
    this_note = step_sizes[key]
    offset = joy_y - 512

    if key in (0, 1):
        note_above = step_sizes[key + 2]
        note_below = step_sizes[key + 10] // 2
    elif key in (10, 11):
        note_above = (step_sizes[key - 10] * 2) & _UINT32_MASK
        note_below = step_sizes[key - 2]
    else:
        note_above = step_sizes[key + 2]
        note_below = step_sizes[key - 2]

    if offset > 0:
        span = (note_above - this_note) & _UINT32_MASK
    else:
        span = (this_note - note_below) & _UINT32_MASK
    return int(this_note + (offset / 512.0) * span) & _UINT32_MASK