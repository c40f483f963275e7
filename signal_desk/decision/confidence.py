"""Confidence rubric, independent of the Edge Guardian gate"""

from typing import Optional

from ..config.defaults import DecisionParams
from ..guardian.models import EdgeGuardianReport
from ..models.setup import Setup
from ..state.models import BacktestResult


def grade_for_score(score: int, params: Optional[DecisionParams] = None) -> str:
    """Letter grade A-D for a confidence score."""
    params = params or DecisionParams()
    if score >= params.grade_a:
        return "A"
    if score >= params.grade_b:
        return "B"
    if score >= params.grade_c:
        return "C"
    return "D"


def score_confidence(
    setup: Setup,
    backtest: BacktestResult,
    guardian: EdgeGuardianReport,
    stale_hours: float,
    params: Optional[DecisionParams] = None
) -> int:
    """
    Additive 0-100 confidence score.

    Points for each passing entry filter, positive expectancy, a sufficient
    profit factor and a likely positive edge; penalties for thin volume
    coverage, stale data and a small trade sample. Undefined statistics
    earn no points.
    """
    params = params or DecisionParams()
    score = 0

    if setup.regime_long:
        score += params.regime_points
    if setup.breakout:
        score += params.breakout_points
    if setup.volume_expansion:
        score += params.volume_points
    if setup.adx_pass:
        score += params.adx_points
    if setup.volatility_pass:
        score += params.volatility_points

    expectancy = backtest.expectancy_r
    if expectancy is not None and expectancy > 0:
        score += params.expectancy_points
    profit_factor = backtest.profit_factor
    if profit_factor is not None and profit_factor >= params.min_profit_factor:
        score += params.profit_factor_points
    probability_pct = guardian.probability_positive_pct
    if probability_pct is not None and probability_pct >= params.min_probability_positive_pct:
        score += params.probability_points

    if setup.volume_coverage < params.thin_volume_coverage:
        score -= params.thin_volume_penalty
    if stale_hours > params.stale_warning_hours:
        score -= params.stale_penalty
    if backtest.trade_count < params.min_trades:
        score -= params.few_trades_penalty

    return min(100, max(0, round(score)))
