"""Weighted reward tiers for lottery-style draws.

Tiers are plain descriptors; the message shown for a tier is looked up by
``message_id`` in the presentation layer.
"""

from dataclasses import dataclass
from typing import Sequence, Tuple

from lucky_pool.domain.generators import Seed
from lucky_pool.domain.sampler import RandomOptions, Sampler
from lucky_pool.errors import ConfigurationError, EmptyInput


@dataclass(frozen=True)
class RewardTier:
    min_amount: int
    max_amount: int
    weight: float
    message_id: str


# Weights sum to 100; expected payout 275 for a cost of 300.
DEFAULT_ROLL_TIERS: Tuple[RewardTier, ...] = (
    RewardTier(100, 100, 10, "roll.try_again"),
    RewardTier(150, 150, 15, "roll.almost_even"),
    RewardTier(200, 200, 25, "roll.keep_going"),
    RewardTier(250, 250, 15, "roll.near_even"),
    RewardTier(300, 300, 15, "roll.break_even"),
    RewardTier(400, 400, 10, "roll.small_win"),
    RewardTier(600, 600, 5, "roll.big_win"),
    RewardTier(800, 800, 5, "roll.jackpot"),
)


def validate_tiers(tiers: Sequence[RewardTier]) -> float:
    """Return the total weight, or raise if the table cannot be drawn from."""
    if len(tiers) == 0:
        raise EmptyInput("Reward table is empty")
    for tier in tiers:
        if tier.weight < 0:
            raise ConfigurationError(f"Tier {tier.message_id} has a negative weight")
        if tier.max_amount < tier.min_amount:
            raise ConfigurationError(f"Tier {tier.message_id} has max_amount < min_amount")
    total_weight = sum(tier.weight for tier in tiers)
    if total_weight <= 0:
        raise ConfigurationError("Reward table has no positive weight")
    return total_weight


def select_tier(tiers: Sequence[RewardTier], sampler: Sampler) -> RewardTier:
    """Walk the tiers in order until the draw falls inside one.

    If float drift leaves the draw past the last boundary, the first tier wins.
    """
    total_weight = validate_tiers(tiers)
    r = sampler.uniform(0, total_weight)
    for tier in tiers:
        if r < tier.weight:
            return tier
        r -= tier.weight
    return tiers[0]


def draw_reward(
    tiers: Sequence[RewardTier],
    seed: Seed,
    options: RandomOptions | None = None,
) -> Tuple[RewardTier, int]:
    """Pick a tier by weight, then a payout uniformly from its [min, max]."""
    sampler = Sampler(seed, options)
    tier = select_tier(tiers, sampler)
    return tier, sampler.randint(tier.min_amount, tier.max_amount)
