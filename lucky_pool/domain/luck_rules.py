"""Daily luck value: one reproducible draw per user and date."""

from enum import Enum

from lucky_pool.domain.sampler import RandomOptions, random_int

LUCK_MIN = 1
LUCK_MAX = 100


class LuckLevel(str, Enum):
    excellent = "excellent"
    good = "good"
    steady = "steady"
    low = "low"
    poor = "poor"


# Checked top-down; the first threshold at or below the value wins.
LUCK_LEVELS = (
    (90, LuckLevel.excellent),
    (70, LuckLevel.good),
    (50, LuckLevel.steady),
    (30, LuckLevel.low),
    (0, LuckLevel.poor),
)


def daily_luck(user_id: str, date: str, bonus: int = 0, options: RandomOptions | None = None) -> int:
    """Luck in [1, 100] for ``user_id`` on ``date``; same inputs, same value."""
    base = random_int(LUCK_MIN, LUCK_MAX, f"{date}{user_id}", options)
    return max(LUCK_MIN, min(LUCK_MAX, base + bonus))


def luck_level(luck: int) -> LuckLevel:
    for threshold, level in LUCK_LEVELS:
        if luck >= threshold:
            return level
    return LuckLevel.poor
