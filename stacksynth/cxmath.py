"""Pure-Python exp, log and pow using series and iterative refinement.

The algorithms mirror compile-time evaluable implementations: exp by Taylor
series, log by Halley-style iteration with range reduction, and pow as either
repeated squaring (integer exponent) or exp(log(x) * y).
"""

import math
import sys

_EPSILON = sys.float_info.epsilon
_E = 2.71828182845904523536
_LOG_MAX_ITERATIONS = 200


def _feq(x, y):
    """True when two values differ by no more than machine epsilon."""
    return abs(x - y) <= _EPSILON


def ipow(x, n):
    """Raise ``x`` to the integer power ``n`` by repeated squaring."""
    x = float(x)
    if n == 0:
        return 1.0
    if n == 1:
        return x
    if n > 1:
        if n & 1:
            return x * ipow(x, n - 1)
        half = ipow(x, n // 2)
        return half * half
    return 1.0 / ipow(x, -n)


def exp(x):
    """Return e**x summed as a Taylor series until terms stop mattering."""
    x = float(x)
    total, divisor, i, term = 1.0, 1.0, 2, x
    while True:
        following = total + term / divisor
        if not math.isfinite(following):
            raise OverflowError(f"exp({x}) is out of range")
        if _feq(total, following):
            return total
        total, divisor, i, term = following, divisor * i, i + 1, term * x


def _log_step(x, y):
    ey = exp(y)
    return y + 2.0 * (x - ey) / (x + ey)


def _log_near(x):
    y = 0.0
    for _ in range(_LOG_MAX_ITERATIONS):
        following = _log_step(x, y)
        if _feq(y, following):
            return y
        y = following
    return y


def log(x):
    """Return the natural logarithm of ``x``; ``x`` must be positive."""
    x = float(x)
    if math.isnan(x) or x <= 0.0:
        raise ValueError(f"log domain error: {x}")
    if math.isinf(x):
        return x
    levels = 0
    if x >= 1024.0:
        divisor = _E * _E * _E * _E * _E
        while x >= 1024.0:
            x = x / divisor
            levels += 1
        result = _log_near(x)
        for _ in range(levels):
            result += 5.0
        return result
    while x <= 0.25:
        x = x * _E * _E * _E * _E * _E
        levels += 1
    result = _log_near(x)
    for _ in range(levels):
        result -= 5.0
    return result


def power(x, y):
    """Return ``x`` raised to ``y``.

    An integer exponent uses repeated squaring; any other exponent uses
    exp(log(x) * y), so ``x`` must then be positive.
    """
    if isinstance(y, int):
        return ipow(float(x), y)
    return exp(log(float(x)) * float(y))