"""Typed draws on top of a seeded, optionally biased generator.

``Sampler`` keeps one stream per seed, so successive calls on the same sampler
advance the stream. The module-level helpers build a fresh sampler per call and
return the first draw, so the same seed always yields the same value.
"""

import math
from dataclasses import dataclass
from typing import Sequence, TypeVar

from lucky_pool.domain.bias import BiasedGenerator, BiasSpec, BiasType
from lucky_pool.domain.generators import RandomAlgorithm, Seed, SeededGenerator
from lucky_pool.errors import EmptyInput, InvalidRange

T = TypeVar("T")

# Appended to the seed for the second Box-Muller input.
SIBLING_SEED_SUFFIX = "second"


@dataclass(frozen=True)
class RandomOptions:
    algorithm: RandomAlgorithm | str = RandomAlgorithm.xoshiro256pp
    bias: BiasSpec = BiasType.none


DEFAULT_OPTIONS = RandomOptions()


def create_generator(seed: Seed, options: RandomOptions = DEFAULT_OPTIONS) -> BiasedGenerator:
    """Build the biased generator for a seed. Raises ConfigurationError on unknown names."""
    return BiasedGenerator(SeededGenerator(seed, options.algorithm), options.bias)


def sibling_seed(seed: Seed) -> Seed:
    if isinstance(seed, bytes):
        return seed + SIBLING_SEED_SUFFIX.encode("utf-8")
    return f"{seed}{SIBLING_SEED_SUFFIX}"


class Sampler:
    def __init__(self, seed: Seed, options: RandomOptions | None = None):
        self.seed = seed
        self.options = options or DEFAULT_OPTIONS
        self._generator = create_generator(seed, self.options)
        self._sibling: BiasedGenerator | None = None

    def random(self) -> float:
        """Next draw in [0, 1)."""
        return self._generator.random()

    def randint(self, low: int, high: int) -> int:
        """Integer in [low, high], both ends inclusive."""
        if high < low:
            raise InvalidRange(f"max ({high}) is smaller than min ({low})")
        return math.floor(self.random() * (high - low + 1)) + low

    def uniform(self, low: float, high: float) -> float:
        """Float in [low, high)."""
        if high < low:
            raise InvalidRange(f"max ({high}) is smaller than min ({low})")
        return self.random() * (high - low) + low

    def chance(self, probability: float = 0.5) -> bool:
        return self.random() < probability

    def choice(self, sequence: Sequence[T]) -> T:
        if len(sequence) == 0:
            raise EmptyInput("Cannot choose from an empty sequence")
        return sequence[math.floor(self.random() * len(sequence))]

    def normal(self, mean: float, std_dev: float) -> float:
        """Box-Muller transform.

        The first uniform input comes from this sampler's stream, the second from
        a sibling stream seeded with the same seed plus a fixed suffix.
        """
        if self._sibling is None:
            self._sibling = create_generator(sibling_seed(self.seed), self.options)
        # 1 - u maps [0, 1) onto (0, 1] so the logarithm is always defined.
        u1 = 1.0 - self.random()
        u2 = self._sibling.random()
        z0 = math.sqrt(-2.0 * math.log(u1)) * math.cos(2.0 * math.pi * u2)
        return z0 * std_dev + mean


def random_value(seed: Seed, options: RandomOptions | None = None) -> float:
    return Sampler(seed, options).random()


def random_int(low: int, high: int, seed: Seed, options: RandomOptions | None = None) -> int:
    return Sampler(seed, options).randint(low, high)


def random_float(low: float, high: float, seed: Seed, options: RandomOptions | None = None) -> float:
    return Sampler(seed, options).uniform(low, high)


def random_bool(seed: Seed, probability: float = 0.5, options: RandomOptions | None = None) -> bool:
    return Sampler(seed, options).chance(probability)


def random_choice(sequence: Sequence[T], seed: Seed, options: RandomOptions | None = None) -> T:
    return Sampler(seed, options).choice(sequence)


def normal_random(seed: Seed, mean: float, std_dev: float, options: RandomOptions | None = None) -> float:
    return Sampler(seed, options).normal(mean, std_dev)
