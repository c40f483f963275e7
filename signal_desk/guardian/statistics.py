"""Weighted statistics helpers for the Edge Guardian"""

import math
from dataclasses import dataclass
from typing import Optional, Sequence


@dataclass(frozen=True)
class WeightedMoments:
    """Weighted mean and population variance plus Kish effective sample size"""
    mean: Optional[float]
    variance: Optional[float]
    std_dev: Optional[float]
    sum_w: float
    n_eff: float


_EMPTY_MOMENTS = WeightedMoments(mean=None, variance=None, std_dev=None, sum_w=0.0, n_eff=0.0)


def clamp(value: float, lower: float, upper: float) -> float:
    return min(upper, max(lower, value))


def mean(values: Sequence[float]) -> Optional[float]:
    """Arithmetic mean, None for an empty sequence."""
    if not values:
        return None
    return sum(values) / len(values)


def kernel_weight(distance: float, bandwidth: float = 18.0) -> float:
    """Gaussian kernel weight for a score distance."""
    if distance is None or not math.isfinite(distance):
        return 0.0
    return math.exp(-0.5 * (distance / bandwidth) ** 2)


def weighted_moments(values: Sequence[float], weights: Sequence[float]) -> WeightedMoments:
    """
    Weighted mean, variance and effective sample size.

    Pairs with a non-positive or non-finite weight are skipped. The variance
    is the population form (divided by the weight sum).

    Args:
        values: Observations
        weights: Weights aligned with ``values``

    Returns:
        WeightedMoments; mean and variance are None when no weight remains
    """
    if not values or len(values) != len(weights):
        return _EMPTY_MOMENTS

    pairs = [
        (x, w) for x, w in zip(values, weights)
        if math.isfinite(x) and math.isfinite(w) and w > 0
    ]
    sum_w = sum(w for _, w in pairs)
    if sum_w <= 0:
        return _EMPTY_MOMENTS

    sum_w2 = sum(w * w for _, w in pairs)
    weighted_mean = sum(w * x for x, w in pairs) / sum_w
    variance = sum(w * (x - weighted_mean) ** 2 for x, w in pairs) / sum_w

    return WeightedMoments(
        mean=weighted_mean,
        variance=variance,
        std_dev=math.sqrt(variance),
        sum_w=sum_w,
        n_eff=(sum_w * sum_w) / sum_w2 if sum_w2 > 0 else 0.0,
    )


def normal_cdf(z: float) -> float:
    """Standard normal cumulative distribution function."""
    return 0.5 * (1.0 + math.erf(z / math.sqrt(2.0)))
