"""IEEE-754 flavoured wrappers around the math module.

Python's math functions raise on results that IEEE arithmetic represents as
NaN or infinity. The evaluator treats those as ordinary values, so these
helpers return them instead.
"""
import math
from typing import Callable


def _is_odd_integer(x: float) -> bool:
    return math.isfinite(x) and x.is_integer() and int(x) % 2 == 1


def ieee_pow(base: float, exponent: float) -> float:
    """Real-valued power returning NaN/inf where `math.pow` raises."""
    try:
        return math.pow(base, exponent)
    except OverflowError:
        if base < 0 and _is_odd_integer(exponent):
            return -math.inf
        return math.inf
    except ValueError:
        # Zero raised to a negative power, or a negative base with a fractional exponent
        if base == 0.0:
            if math.copysign(1.0, base) < 0 and _is_odd_integer(exponent):
                return -math.inf
            return math.inf
        return math.nan


def ieee_fmod(dividend: float, divisor: float) -> float:
    """Remainder with the sign of the dividend, NaN for a zero divisor."""
    if divisor == 0.0 or math.isinf(dividend):
        return math.nan
    return math.fmod(dividend, divisor)


def ieee_sqrt(x: float) -> float:
    if x < 0:
        return math.nan
    return math.sqrt(x)


def periodic(func: Callable[[float], float]) -> Callable[[float], float]:
    """Wrap a trigonometric function so infinite arguments give NaN."""
    def wrapper(x: float) -> float:
        if math.isinf(x):
            return math.nan
        return func(x)
    wrapper.__name__ = func.__name__
    wrapper.__doc__ = func.__doc__
    return wrapper
