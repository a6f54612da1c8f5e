import pytest

from stacksynth.constants import (
    FREQ_A,
    INDEX_A,
    NOTE_MASK,
    NOTE_NAMES,
    SAMPLE_RATE,
    STEP_SIZES,
    construct_step_size,
)


def test_step_size_of_concert_a():
    assert construct_step_size(INDEX_A) == 85899000


def test_table_matches_constructor():
    assert list(STEP_SIZES) == [construct_step_size(i) for i in range(12)]


def test_one_step_per_note_name():
    assert len(STEP_SIZES) == len(NOTE_NAMES) == NOTE_MASK.bit_length()


def test_step_sizes_strictly_increase():
    steps = [construct_step_size(i) for i in range(12)]
    assert all(low < high for low, high in zip(steps, steps[1:]))


def test_step_sizes_fit_in_32_bits():
    assert all(0 < construct_step_size(i) < 2**32 for i in range(12))


@pytest.mark.parametrize("index", range(11))
def test_semitone_ratio(index):
    ratio = construct_step_size(index + 1) / construct_step_size(index)
    assert ratio == pytest.approx(2 ** (1 / 12), rel=5e-3)


def test_step_size_is_multiple_of_sample_scalar():
    scalar = 2**32 // SAMPLE_RATE
    assert all(construct_step_size(i) % scalar == 0 for i in range(12))
    assert construct_step_size(INDEX_A) // scalar == FREQ_A