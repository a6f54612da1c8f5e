import pytest

from stacksynth.constants import STEP_SIZES
from stacksynth.waveforms import (
    SINE_TABLE,
    Waveform,
    sawtooth,
    sine,
    square,
    triangle,
    vibrato,
    waveform_generator,
)

PHASES = range(-128, 128)


def test_waveform_numbers():
    assert [w.value for w in Waveform] == [0, 1, 2, 3]
    assert Waveform(2) is Waveform.SQUARE
    assert Waveform.TRIANGLE.label == "Triangle"


def test_sine_covers_whole_table():
    values = [sine(p) for p in PHASES]
    assert len(values) == 256
    assert sorted(values) == sorted(SINE_TABLE)


@pytest.mark.parametrize(
    "phase, expected",
    [(-128, 0), (-127, 3), (-123, 16), (-64, 127), (-70, 126), (0, 0), (64, -127)],
)
def test_sine_pinned_values(phase, expected):
    assert sine(phase) == expected


@pytest.mark.parametrize("phase", [-128, -5, 0, 42, 127])
def test_sawtooth_is_identity(phase):
    assert sawtooth(phase) == phase


def test_square_levels():
    assert square(-1) == -128
    assert square(-128) == -128
    assert square(0) == 127
    assert square(127) == 127


def test_sine_range():
    values = [sine(p) for p in PHASES]
    assert max(values) == 127
    assert min(values) == -127


@pytest.mark.parametrize("phase", range(1, 128))
def test_sine_is_odd(phase):
    assert sine(-phase) == -sine(phase)


@pytest.mark.parametrize("phase", range(1, 65))
def test_triangle_is_symmetric(phase):
    assert triangle(phase) == triangle(-phase)


def test_triangle_peak_is_at_zero_phase():
    values = {p: triangle(p) for p in PHASES}
    assert max(values, key=values.get) == 0


def test_generator_uses_top_byte_of_phase():
    assert waveform_generator(0, Waveform.SAWTOOTH) == -128
    for phase_acc in (0x00FFFFFF, 0x12345678, 0xFFFFFFFF):
        expected = sawtooth((phase_acc >> 24) - 128)
        assert waveform_generator(phase_acc, Waveform.SAWTOOTH) == expected


@pytest.mark.parametrize("wave", list(Waveform))
def test_generator_dispatches(wave):
    functions = {
        Waveform.SAWTOOTH: sawtooth,
        Waveform.SINE: sine,
        Waveform.SQUARE: square,
        Waveform.TRIANGLE: triangle,
    }
    for top in (0, 64, 128, 200, 255):
        assert waveform_generator(top << 24, int(wave)) == functions[wave](top - 128)


def test_generator_masks_to_32_bits():
    assert waveform_generator((1 << 32) + (5 << 24), 0) == waveform_generator(5 << 24, 0)


@pytest.mark.parametrize("select", [-1, 4, 99])
def test_generator_unknown_shape_is_silent(select):
    assert waveform_generator(0x80000000, select) == 0


@pytest.mark.parametrize("key", range(12))
def test_vibrato_centre_is_unbent(key):
    assert vibrato(STEP_SIZES, key, 512) == STEP_SIZES[key]


@pytest.mark.parametrize("key", range(2, 10))
def test_vibrato_full_range_middle_keys(key):
    assert vibrato(STEP_SIZES, key, 1024) == STEP_SIZES[key + 2]
    assert vibrato(STEP_SIZES, key, 0) == STEP_SIZES[key - 2]


@pytest.mark.parametrize("key", [0, 1])
def test_vibrato_low_keys_wrap_down_an_octave(key):
    assert vibrato(STEP_SIZES, key, 0) == STEP_SIZES[key + 10] // 2
    assert vibrato(STEP_SIZES, key, 1024) == STEP_SIZES[key + 2]


@pytest.mark.parametrize("key", [10, 11])
def test_vibrato_high_keys_wrap_up_an_octave(key):
    assert vibrato(STEP_SIZES, key, 1024) == STEP_SIZES[key - 10] * 2
    assert vibrato(STEP_SIZES, key, 0) == STEP_SIZES[key - 2]


@pytest.mark.parametrize("key", range(12))
def test_vibrato_is_monotonic(key):
    bends = [vibrato(STEP_SIZES, key, y) for y in range(0, 1025, 64)]
    assert bends == sorted(bends)


@pytest.mark.parametrize("key", [-1, 12])
def test_vibrato_rejects_unknown_key(key):
    with pytest.raises(IndexError):
        vibrato(STEP_SIZES, key, 512)