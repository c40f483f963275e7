"""Recent-versus-baseline expectancy drift detection"""

import math
from typing import Optional, Sequence

from ..config.defaults import GuardianParams
from ..state.models import Trade
from .models import DriftResult
from .statistics import mean


def drift_window_sizes(trade_count: int, params: Optional[GuardianParams] = None) -> tuple[int, int]:
    """(recent, baseline) window lengths for a sample of ``trade_count`` trades."""
    params = params or GuardianParams()
    recent = min(
        params.drift_recent_max,
        max(params.drift_recent_min, math.floor(trade_count * params.drift_recent_fraction))
    )
    baseline = min(params.drift_baseline_max, trade_count - recent)
    return recent, baseline


def detect_drift(trades: Sequence[Trade], params: Optional[GuardianParams] = None) -> DriftResult:
    """
    Compare the mean net R of the most recent trades against the preceding baseline.

    Args:
        trades: Settled trade sample in chronological order
        params: Drift thresholds

    Returns:
        DriftResult; statistics are undefined and both flags False below
        ``params.drift_min_trades`` trades
    """
    params = params or GuardianParams()
    if len(trades) < params.drift_min_trades:
        return DriftResult()

    recent_count, baseline_count = drift_window_sizes(len(trades), params)
    recent = [t.net_r for t in trades[-recent_count:]]
    baseline = [t.net_r for t in trades[-(recent_count + baseline_count):-recent_count]]

    recent_r = mean(recent)
    baseline_r = mean(baseline)
    delta_r = recent_r - baseline_r if recent_r is not None and baseline_r is not None else None

    degraded = delta_r is not None and (recent_r < 0 or delta_r < params.drift_degraded_delta)
    hard_block = (
        delta_r is not None
        and recent_r < params.drift_block_recent
        and delta_r < params.drift_block_delta
    )

    return DriftResult(
        baseline_expectancy_r=baseline_r,
        recent_expectancy_r=recent_r,
        delta_r=delta_r,
        degraded=degraded,
        hard_block=hard_block,
    )
