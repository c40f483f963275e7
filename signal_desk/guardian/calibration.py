"""Walk-forward calibration of the kernel win-probability estimate"""

from typing import Optional, Sequence

from ..config.defaults import GuardianParams
from ..state.models import Trade
from .estimator import estimate_win_probability
from .models import CalibrationResult


def walk_forward_brier(trades: Sequence[Trade], params: Optional[GuardianParams] = None) -> CalibrationResult:
    """
    Brier score of win probabilities estimated from prior trades only.

    Each trade from ``params.calibration_warmup_trades`` onward is scored
    against an estimate built from the trades before it. Undefined below
    ``params.calibration_min_trades`` trades.
    """
    params = params or GuardianParams()
    if len(trades) < params.calibration_min_trades:
        return CalibrationResult()

    total_error = 0.0
    samples = 0
    for i in range(params.calibration_warmup_trades, len(trades)):
        probability = estimate_win_probability(trades[:i], trades[i].signal_score, params.kernel_bandwidth)
        if probability is None:
            continue
        outcome = 1.0 if trades[i].is_win else 0.0
        total_error += (probability - outcome) ** 2
        samples += 1

    return CalibrationResult(
        brier=total_error / samples if samples > 0 else None,
        samples=samples,
    )
