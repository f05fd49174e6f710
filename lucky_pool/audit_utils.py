import numpy as np
from typing import Sequence

from lucky_pool.domain.reward_rules import RewardTier, validate_tiers
from lucky_pool.domain.sampler import RandomOptions, Sampler
from lucky_pool.models.dc_models import DrawSummaryModel


class AuditUtils:
    def sample_stream(self, seed: str, count: int, options: RandomOptions | None = None) -> np.ndarray:
        """Collect the first draws of one seeded stream

        Args:
            seed (str): Seed of the stream
            count (int): How many draws to collect

        Returns:
            np.ndarray: float64 array of draws in [0, 1)
        """
        sampler = Sampler(seed, options)
        return np.fromiter((sampler.random() for _ in range(count)), dtype=np.float64, count=count)

    def summarize(self, values: Sequence[float]) -> DrawSummaryModel:
        """Summarize draws for a fairness audit

        Args:
            values (Sequence[float]): Draws, shares or payouts

        Returns:
            DrawSummaryModel: count, mean, population standard deviation, min and max
        """
        array = np.asarray(values, dtype=np.float64)
        if array.size == 0:
            raise ValueError("Cannot summarize an empty sample")
        return DrawSummaryModel(
            count=int(array.size),
            mean=float(array.mean()),
            std=float(array.std()),
            min=float(array.min()),
            max=float(array.max()),
        )

    def correlation(self, xs: Sequence[float], ys: Sequence[float]) -> float:
        """Pearson correlation of two equally long samples"""
        if len(xs) != len(ys) or len(xs) < 2:
            raise ValueError("Correlation needs two samples of the same length >= 2")
        return float(np.corrcoef(np.asarray(xs, dtype=np.float64), np.asarray(ys, dtype=np.float64))[0, 1])

    def expected_payout(self, tiers: Sequence[RewardTier]) -> float:
        """Weighted mean payout of a reward table, each tier paying the middle of its range"""
        total_weight = validate_tiers(tiers)
        weights = np.array([tier.weight for tier in tiers], dtype=np.float64)
        midpoints = np.array([(tier.min_amount + tier.max_amount) / 2 for tier in tiers], dtype=np.float64)
        return float(np.dot(weights, midpoints) / total_weight)
