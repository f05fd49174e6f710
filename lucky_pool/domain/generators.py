"""Seeded pseudo-random generators.

Two algorithms share one contract: ``next_*(state) -> (value, new_state)`` is a
pure function of the state, with ``value`` in [0, 1). ``SeededGenerator`` is the
handle callers own and thread through their draws; it is never shared between
claims and never persisted, so reproducibility comes from the seed alone.

Rule of thumb:
- OK: derive a seed from stable ids (pool, claimant, time passed in).
- Not OK: draw without a seed. Callers that want non-reproducible output build a
  time-derived seed explicitly with ``time_seed``.
"""

import hashlib
import time
from enum import Enum
from typing import Callable, NamedTuple, Tuple, Union

from lucky_pool.errors import ConfigurationError

MASK_64 = (1 << 64) - 1
MASK_128 = (1 << 128) - 1

# 2549297995355413924 * 2^64 + 4865540595714422341
PCG_DEFAULT_MULTIPLIER_128 = 0x2360ED051FC65DA44385DF649FCCF645

# 53 bits fill a double mantissa exactly; dividing the full 64-bit word by 2^64
# rounds the top words up to 1.0.
_DOUBLE_SCALE = 1.0 / (1 << 53)

Seed = Union[str, bytes]


class RandomAlgorithm(str, Enum):
    xoshiro256pp = "xoshiro256pp"  # 256-bit xorshift-rotate
    pcg64 = "pcg64"  # 128-bit permuted congruential


class Xoshiro256State(NamedTuple):
    s0: int
    s1: int
    s2: int
    s3: int


class Pcg64State(NamedTuple):
    state: int
    inc: int


def _seed_digest(seed: Seed) -> bytes:
    if isinstance(seed, str):
        seed = seed.encode("utf-8")
    return hashlib.sha256(seed).digest()


def _digest_words(digest: bytes) -> Tuple[int, int, int, int]:
    return tuple(int.from_bytes(digest[i : i + 8], "big") for i in range(0, 32, 8))


def _rotl(x: int, k: int) -> int:
    return ((x << k) | (x >> (64 - k))) & MASK_64


def _rotr(x: int, k: int) -> int:
    return ((x >> k) | (x << (-k & 63))) & MASK_64


def _to_unit_float(word: int) -> float:
    return (word >> 11) * _DOUBLE_SCALE


# ==============================================================================
# ==== xoshiro256++ ============================================================
# ==============================================================================


def seed_xoshiro256(seed: Seed) -> Xoshiro256State:
    """Hash the seed into four 64-bit words. The state is never all zero."""
    s0, s1, s2, s3 = _digest_words(_seed_digest(seed))
    if s0 == 0 and s1 == 0 and s2 == 0 and s3 == 0:
        s0 = 1
    return Xoshiro256State(s0, s1, s2, s3)


def next_xoshiro256(state: Xoshiro256State) -> Tuple[float, Xoshiro256State]:
    s0, s1, s2, s3 = state
    result = (_rotl((s0 + s3) & MASK_64, 23) + s0) & MASK_64
    t = (s1 << 17) & MASK_64

    s2 ^= s0
    s3 ^= s1
    s1 ^= s2
    s0 ^= s3
    s2 ^= t
    s3 = _rotl(s3, 45)

    return _to_unit_float(result), Xoshiro256State(s0, s1, s2, s3)


# ==============================================================================
# ==== PCG64 (XSL-RR 128/64) ===================================================
# ==============================================================================


def seed_pcg64(seed: Seed) -> Pcg64State:
    """Hash the seed into a 128-bit state and a 128-bit odd increment."""
    w0, w1, w2, w3 = _digest_words(_seed_digest(seed))
    state = (w0 << 64) | w1
    inc = ((((w2 << 64) | w3) << 1) | 1) & MASK_128
    if state == 0:
        state = 1
    return Pcg64State(state, inc)


def next_pcg64(state: Pcg64State) -> Tuple[float, Pcg64State]:
    old_state, inc = state
    new_state = (old_state * PCG_DEFAULT_MULTIPLIER_128 + inc) & MASK_128
    word = ((old_state >> 64) ^ old_state) & MASK_64
    rot = old_state >> 122
    return _to_unit_float(_rotr(word, rot)), Pcg64State(new_state, inc)


_ALGORITHMS = {
    RandomAlgorithm.xoshiro256pp: (seed_xoshiro256, next_xoshiro256),
    RandomAlgorithm.pcg64: (seed_pcg64, next_pcg64),
}


def resolve_algorithm(algorithm: Union[RandomAlgorithm, str]) -> RandomAlgorithm:
    """Return the algorithm enum for a name, or raise ConfigurationError."""
    try:
        return RandomAlgorithm(algorithm)
    except ValueError:
        raise ConfigurationError(f"Unknown algorithm: {algorithm}") from None


class SeededGenerator:
    """Deterministic stream of floats in [0, 1) owned by a single caller."""

    def __init__(self, seed: Seed, algorithm: Union[RandomAlgorithm, str] = RandomAlgorithm.xoshiro256pp):
        self.seed = seed
        self.algorithm = resolve_algorithm(algorithm)
        seed_state, step = _ALGORITHMS[self.algorithm]
        self._step: Callable = step
        self._state = seed_state(seed)

    @property
    def state(self):
        return self._state

    def random(self) -> float:
        value, self._state = self._step(self._state)
        return value

    def __iter__(self):
        while True:
            yield self.random()


# ==============================================================================
# ==== Seed helpers ============================================================
# ==============================================================================


def derive_seed(*parts) -> str:
    """Join stable ids into a seed string, e.g. ``derive_seed(pool_id, user_id)``."""
    return "_".join(str(part) for part in parts)


def claim_seed(pool_id, claimant_id, claimed_at_ms: int) -> str:
    """Seed for one claim: pool id, claimant id and attempt time in milliseconds."""
    return derive_seed(pool_id, claimant_id, claimed_at_ms)


def time_seed(disambiguator: str = "") -> str:
    """Non-reproducible seed built from the current time.

    Only for callers that explicitly opt out of reproducibility.
    """
    return f"{time.time_ns()}{disambiguator}"
