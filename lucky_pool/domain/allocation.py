"""Share allocation for pooled rewards.

A pool moves ``active -> (claim)* -> completed | expired``. Each non-final share
is drawn from a normal distribution around the fair average and clamped so that
every later claimant can still receive at least one unit; the last claimant
takes the exact remainder. The shares of a pool therefore always sum to its
total amount.
"""

import dataclasses
import math
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Tuple

from lucky_pool.domain.generators import Seed
from lucky_pool.domain.sampler import RandomOptions, normal_random
from lucky_pool.errors import ConfigurationError, PoolUnavailable

MIN_SHARE = 1
SIGMA_RATIO = 0.3
MAX_SHARE_RATIO = 2


class PoolStatus(str, Enum):
    active = "active"
    completed = "completed"
    expired = "expired"


@dataclass(frozen=True)
class PoolSnapshot:
    pool_id: Any
    total_amount: int
    total_count: int
    remaining_amount: int
    remaining_count: int
    status: PoolStatus | str = PoolStatus.active
    expires_at: datetime | None = None


def check_claimable(pool: PoolSnapshot, now: datetime) -> None:
    """Raise PoolUnavailable unless the pool can accept a claim at ``now``.

    An active pool holding less than one unit per remaining share raises
    ConfigurationError.
    """
    if pool.status == PoolStatus.completed:
        raise PoolUnavailable(f"Pool {pool.pool_id} is completed", "drained")
    if pool.status == PoolStatus.expired:
        raise PoolUnavailable(f"Pool {pool.pool_id} is expired", "expired")
    if pool.status != PoolStatus.active:
        raise PoolUnavailable(f"Pool {pool.pool_id} is not active", "not_active")
    if pool.expires_at is not None and now > pool.expires_at:
        raise PoolUnavailable(f"Pool {pool.pool_id} expired at {pool.expires_at}", "expired")
    if pool.remaining_count <= 0 or pool.remaining_amount <= 0:
        raise PoolUnavailable(f"Pool {pool.pool_id} has no shares left", "drained")
    if pool.remaining_amount < pool.remaining_count:
        raise ConfigurationError(
            f"Pool {pool.pool_id} holds {pool.remaining_amount} for {pool.remaining_count} shares"
        )


def share_bounds(remaining_amount: int, remaining_count: int) -> Tuple[int, int]:
    """Inclusive bounds for a non-final share."""
    avg = remaining_amount / remaining_count
    upper = min(math.floor(MAX_SHARE_RATIO * avg), remaining_amount - (remaining_count - 1))
    return MIN_SHARE, max(MIN_SHARE, upper)


def calculate_share(pool: PoolSnapshot, seed: Seed, options: RandomOptions | None = None) -> int:
    """Share for the next claimant. Does not check status or expiry."""
    if pool.remaining_count == 1:
        return pool.remaining_amount

    avg = pool.remaining_amount / pool.remaining_count
    sigma = avg * SIGMA_RATIO
    low, high = share_bounds(pool.remaining_amount, pool.remaining_count)

    # Round half up.
    amount = math.floor(normal_random(seed, avg, sigma, options) + 0.5)
    return max(low, min(amount, high))


def apply_claim(pool: PoolSnapshot, share: int) -> PoolSnapshot:
    remaining_count = pool.remaining_count - 1
    return dataclasses.replace(
        pool,
        remaining_amount=pool.remaining_amount - share,
        remaining_count=remaining_count,
        status=PoolStatus.completed if remaining_count == 0 else pool.status,
    )


def allocate_share(
    pool: PoolSnapshot,
    seed: Seed,
    now: datetime,
    options: RandomOptions | None = None,
) -> Tuple[int, PoolSnapshot]:
    """Check the pool, draw one share and return it with the decremented pool.

    Raises:
        PoolUnavailable: The pool is not active, past its deadline, or drained.
            Moving the stored status to ``expired`` is the caller's job.
    """
    check_claimable(pool, now)
    share = calculate_share(pool, seed, options)
    return share, apply_claim(pool, share)
