"""Power-law bias applied to uniform draws.

The exponent p reshapes a draw x in [0, 1):
- p == 1: unchanged
- p < 1:  x ** p, skews toward 1
- p > 1:  1 - (1 - x) ** (1 / p), skews toward 0
Both branches are monotonic and invertible and keep the result in [0, 1).
"""

import math
from enum import Enum
from typing import Union

from lucky_pool.errors import ConfigurationError

# Largest double below 1.0; x ** p for x just under 1 can round up to 1.0.
ONE_BELOW = math.nextafter(1.0, 0.0)

# A numeric bias of -1 would give p == 0 and collapse every draw to 1.0.
MIN_EXPONENT = 0.05


class BiasType(str, Enum):
    none = "none"
    slight_up = "slight_up"
    moderate_up = "moderate_up"
    slight_down = "slight_down"
    moderate_down = "moderate_down"


BIAS_EXPONENTS = {
    BiasType.none: 1.0,
    BiasType.slight_up: 0.7,
    BiasType.moderate_up: 0.5,
    BiasType.slight_down: 1.3,
    BiasType.moderate_down: 1.5,
}

BiasSpec = Union[BiasType, str, float, int]


def bias_exponent(bias: BiasSpec) -> float:
    """Map a bias name or a numeric offset in [-1, 1] to the power exponent."""
    if isinstance(bias, bool):
        raise ConfigurationError(f"Unknown bias: {bias}")
    if isinstance(bias, (int, float)):
        if math.isnan(bias):
            raise ConfigurationError("Bias must be a number in [-1, 1]")
        return max(MIN_EXPONENT, 1.0 + max(-1.0, min(1.0, float(bias))))
    try:
        return BIAS_EXPONENTS[BiasType(bias)]
    except ValueError:
        raise ConfigurationError(f"Unknown bias: {bias}") from None


def apply_bias(x: float, bias: BiasSpec = BiasType.none) -> float:
    power = bias_exponent(bias)
    if power == 1.0:
        return x
    if power < 1.0:
        return min(x**power, ONE_BELOW)
    return min(1.0 - (1.0 - x) ** (1.0 / power), ONE_BELOW)


def invert_bias(y: float, bias: BiasSpec = BiasType.none) -> float:
    """Inverse of ``apply_bias`` for the same bias."""
    power = bias_exponent(bias)
    if power == 1.0:
        return y
    if power < 1.0:
        return y ** (1.0 / power)
    return 1.0 - (1.0 - y) ** power


class BiasedGenerator:
    """Wraps a generator and applies the bias to every draw."""

    def __init__(self, generator, bias: BiasSpec = BiasType.none):
        self.generator = generator
        self.bias = bias
        self.power = bias_exponent(bias)

    def random(self) -> float:
        x = self.generator.random()
        if self.power == 1.0:
            return x
        return apply_bias(x, self.bias)
