"""Human-readable warnings and filter reasons"""

from typing import Iterable, Optional

from ..config.defaults import DecisionParams
from ..guardian.models import EdgeGuardianReport
from ..models.setup import Setup
from ..state.models import BacktestResult

CURRENCY_MISALIGNED_WARNING = "Risk sizing is disabled until account currency matches price quote currency."


def dedupe(messages: Iterable[str]) -> list[str]:
    """Drop repeated messages, keeping first occurrences in order."""
    return list(dict.fromkeys(messages))


def build_filter_reasons(setup: Setup, backtest: BacktestResult) -> list[str]:
    """One line per entry filter, then the expectancy line when it is defined."""
    reasons = [
        "Trend filter passed." if setup.regime_long else "Trend filter failed.",
        "20-day breakout detected." if setup.breakout else "No 20-day breakout.",
        "Volume expansion confirmed." if setup.volume_expansion else "Volume expansion not confirmed.",
        "ADX confirms trend strength." if setup.adx_pass else "ADX trend strength is weak.",
        "Volatility filter passed." if setup.volatility_pass else "Volatility filter failed.",
    ]
    if backtest.expectancy_r is not None:
        reasons.append(
            "Backtest expectancy is positive."
            if backtest.expectancy_r > 0
            else "Backtest expectancy is non-positive."
        )
    return reasons


def build_warnings(
    stale_hours: float,
    volume_coverage: float,
    backtest: BacktestResult,
    confidence_score: int,
    guardian: EdgeGuardianReport,
    currency_aligned: bool = True,
    params: Optional[DecisionParams] = None
) -> list[str]:
    """Warnings in display order, without duplicates."""
    params = params or DecisionParams()
    warnings = []

    if stale_hours > params.stale_warning_hours:
        warnings.append("Market data is stale; avoid acting on delayed candles.")
    if volume_coverage < params.volume_coverage_warning:
        warnings.append("Volume coverage is incomplete; breakout confirmation is weaker.")
    if backtest.trade_count < params.min_trades:
        warnings.append("Backtest sample is small; expectancy may be noisy.")
    if backtest.expectancy_r is not None and backtest.expectancy_r <= 0:
        warnings.append("Backtest expectancy is non-positive on this market history.")
    if confidence_score < params.min_confidence:
        warnings.append("Confidence score is below buy threshold.")
    if not guardian.gate_allow:
        warnings.append(guardian.gate_reason)
    if guardian.risk_multiplier < 1:
        warnings.append(guardian.throttle_reason)
    if guardian.drift.degraded:
        warnings.append("Recent edge drift is negative; risk throttle is active.")
    if not currency_aligned:
        warnings.append(CURRENCY_MISALIGNED_WARNING)

    return dedupe(warnings)
