import math

import pytest

from stacksynth.cxmath import exp, ipow, log, power


@pytest.mark.parametrize("x,n", [(2.0, 10), (3.0, 7), (1.5, 0), (0.5, 13), (7.0, 1)])
def test_ipow_matches_math_pow(x, n):
    assert ipow(x, n) == pytest.approx(math.pow(x, n), rel=1e-15)


@pytest.mark.parametrize("x,n", [(2.0, 5), (3.0, 4), (1.25, 9)])
def test_ipow_negative_exponent_is_reciprocal(x, n):
    assert ipow(x, -n) == pytest.approx(1.0 / ipow(x, n), rel=1e-15)


def test_ipow_zero_exponent_is_one():
    assert ipow(123.0, 0) == 1.0


def test_exp_of_zero_is_exactly_one():
    assert exp(0.0) == 1.0


@pytest.mark.parametrize("x", [-5.0, -1.0, 0.5, 1.0, 3.0, 10.0, 20.0])
def test_exp_matches_math(x):
    assert exp(x) == pytest.approx(math.exp(x), rel=1e-12)


def test_exp_accepts_integers():
    assert exp(2) == pytest.approx(math.exp(2), rel=1e-12)


def test_exp_overflow_raises():
    with pytest.raises(OverflowError):
        exp(1000.0)


def test_log_of_one_is_zero():
    assert log(1.0) == 0.0


@pytest.mark.parametrize("x", [1e-6, 0.1, 0.25, 0.5, 2.0, 100.0, 1023.0, 1024.0, 1e10])
def test_log_matches_math(x):
    assert log(x) == pytest.approx(math.log(x), rel=1e-10, abs=1e-12)


@pytest.mark.parametrize("x", [0.3, 4.0, 50.0, 5000.0])
def test_exp_log_round_trip(x):
    assert exp(log(x)) == pytest.approx(x, rel=1e-10)


@pytest.mark.parametrize("x", [-1.0, 0.0, float("nan")])
def test_log_domain_error(x):
    with pytest.raises(ValueError):
        log(x)


def test_power_with_integer_exponent_is_exact():
    assert power(2, 32) == float(2**32)


@pytest.mark.parametrize("y", [-0.75, -0.25, 0.5, 1.0 / 12.0])
def test_power_with_fractional_exponent(y):
    assert power(2, y) == pytest.approx(math.pow(2.0, y), rel=1e-12)


def test_power_with_zero_float_exponent():
    assert power(2, 0.0) == 1.0


def test_power_fractional_of_negative_base_raises():
    with pytest.raises(ValueError):
        power(-2.0, 0.5)