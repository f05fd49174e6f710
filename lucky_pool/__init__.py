"""Seeded random core and fair pooled-reward distribution."""

from lucky_pool.domain.allocation import PoolSnapshot, PoolStatus, allocate_share, apply_claim, calculate_share
from lucky_pool.domain.bias import BiasType, apply_bias, invert_bias
from lucky_pool.domain.generators import RandomAlgorithm, SeededGenerator, claim_seed, derive_seed, time_seed
from lucky_pool.domain.reward_rules import DEFAULT_ROLL_TIERS, RewardTier, draw_reward
from lucky_pool.domain.sampler import (
    RandomOptions,
    Sampler,
    normal_random,
    random_bool,
    random_choice,
    random_float,
    random_int,
    random_value,
)
from lucky_pool.errors import ConfigurationError, EmptyInput, InvalidRange, LuckyPoolError, PoolUnavailable

__all__ = [
    "BiasType",
    "ConfigurationError",
    "DEFAULT_ROLL_TIERS",
    "EmptyInput",
    "InvalidRange",
    "LuckyPoolError",
    "PoolSnapshot",
    "PoolStatus",
    "PoolUnavailable",
    "RandomAlgorithm",
    "RandomOptions",
    "RewardTier",
    "Sampler",
    "SeededGenerator",
    "allocate_share",
    "apply_bias",
    "apply_claim",
    "calculate_share",
    "claim_seed",
    "derive_seed",
    "draw_reward",
    "invert_bias",
    "normal_random",
    "random_bool",
    "random_choice",
    "random_float",
    "random_int",
    "random_value",
    "time_seed",
]
