"""Rules for opening pools that are independent from the DB.

Rule of thumb:
- OK: validation, parameter draws from an explicit seed.
- Not OK: touching DB sessions, the scheduler, datetime.now().
"""

from typing import Tuple

from lucky_pool.domain.generators import Seed
from lucky_pool.domain.sampler import RandomOptions, Sampler

AUTO_POOL_MIN_AMOUNT = 30
AUTO_POOL_MAX_AMOUNT = 50
AUTO_POOL_MIN_COUNT = 3
AUTO_POOL_MAX_COUNT = 5


def validate_pool_request(amount: int, count: int, max_count: int) -> None:
    """Raise ValueError unless every share can receive at least one unit."""
    if amount <= 0:
        raise ValueError("amount must be greater than 0")
    if count < 1 or count > max_count:
        raise ValueError(f"count must be between 1 and {max_count}")
    if amount < count:
        raise ValueError("amount must be at least count so every share gets 1")


def random_pool_parameters(
    seed: Seed,
    min_amount: int = AUTO_POOL_MIN_AMOUNT,
    max_amount: int = AUTO_POOL_MAX_AMOUNT,
    min_count: int = AUTO_POOL_MIN_COUNT,
    max_count: int = AUTO_POOL_MAX_COUNT,
    options: RandomOptions | None = None,
) -> Tuple[int, int]:
    """Draw ``(amount, count)`` for an automatically opened pool.

    The amount is raised to the count when the ranges overlap badly so the pool
    stays valid.
    """
    sampler = Sampler(seed, options)
    amount = sampler.randint(min_amount, max_amount)
    count = sampler.randint(min_count, max_count)
    return max(amount, count), count
