"""
Kernel-weighted edge estimation.

Historical trades are weighted by how close their signal score is to the
current one, so that similar setups dominate the estimate.
"""

import math
from typing import Optional, Sequence

from ..config.defaults import GuardianParams
from ..state.models import Trade
from .models import EdgeEstimate
from .statistics import clamp, kernel_weight, normal_cdf, weighted_moments


def estimate_win_probability(
    trades: Sequence[Trade],
    target_score: float,
    bandwidth: float = 18.0
) -> Optional[float]:
    """Laplace-smoothed kernel-weighted win rate, None without weighted trades."""
    weighted_wins = 0.0
    weighted_total = 0.0
    for trade in trades:
        weight = kernel_weight(abs(trade.signal_score - target_score), bandwidth)
        if weight <= 0:
            continue
        weighted_total += weight
        weighted_wins += weight * (1 if trade.is_win else 0)

    if weighted_total <= 0:
        return None
    return clamp((weighted_wins + 1) / (weighted_total + 2), 0.0, 1.0)


def compute_edge_estimate(
    trades: Sequence[Trade],
    target_score: float,
    params: Optional[GuardianParams] = None
) -> EdgeEstimate:
    """
    Estimate expected net R and its uncertainty for ``target_score``.

    The standard error is undefined unless the effective sample size
    exceeds one. With a standard error at or below ``params.degenerate_se``
    the probability of a positive edge collapses to 0 or 1.

    Args:
        trades: Settled trade sample in chronological order
        target_score: Signal score of the current setup
        params: Estimator parameters

    Returns:
        EdgeEstimate with undefined statistics set to None
    """
    params = params or GuardianParams()
    if not trades:
        return EdgeEstimate()

    values: list[float] = []
    win_values: list[float] = []
    weights: list[float] = []
    for trade in trades:
        if not math.isfinite(trade.net_r):
            continue
        weight = kernel_weight(abs(trade.signal_score - target_score), params.kernel_bandwidth)
        if weight <= 0:
            continue
        values.append(trade.net_r)
        win_values.append(1.0 if trade.is_win else 0.0)
        weights.append(weight)

    moments_r = weighted_moments(values, weights)
    moments_win = weighted_moments(win_values, weights)
    n_eff = moments_r.n_eff

    se = None
    if moments_r.std_dev is not None and n_eff > 1:
        se = moments_r.std_dev / math.sqrt(n_eff)

    ci_low = moments_r.mean - params.z_score * se if se is not None else None
    ci_high = moments_r.mean + params.z_score * se if se is not None else None

    probability_positive = None
    if moments_r.mean is not None and se is not None:
        if se <= params.degenerate_se:
            probability_positive = 1.0 if moments_r.mean > 0 else 0.0
        else:
            probability_positive = clamp(normal_cdf(moments_r.mean / se), 0.0, 1.0)

    probability_win = None
    if moments_win.mean is not None:
        probability_win = clamp(
            (moments_win.mean * moments_win.sum_w + 1) / (moments_win.sum_w + 2), 0.0, 1.0
        )

    return EdgeEstimate(
        expected_net_r=moments_r.mean,
        ci95_low_r=ci_low,
        ci95_high_r=ci_high,
        probability_positive=probability_positive,
        probability_win=probability_win,
        sample_size=len(values),
        effective_sample_size=n_eff,
        std_dev_r=moments_r.std_dev,
    )
