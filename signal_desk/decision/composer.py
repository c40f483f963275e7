"""
Final action composition.

A declared holding is managed against the trailing stop. Otherwise an
active entry setup must clear an ordered sequence of gates; the first
failing gate turns the entry into ABSTAIN.
"""

from dataclasses import dataclass
from typing import Optional

from ..config.defaults import DecisionParams
from ..guardian.models import EdgeGuardianReport
from ..logging.config import get_gating_logger, log_gate_decision
from ..models.result import Action, RiskPlan
from ..models.setup import Setup

gating_logger = get_gating_logger(__name__)

EXIT_REASON = "Exit triggered: close fell below trailing stop."
HOLD_REASON = "Hold: trailing stop intact."
NO_SETUP_REASON = "Entry setup is not active."
CURRENCY_REASON = "Entry blocked: account currency does not match price quote currency."
STALE_REASON = "Entry blocked: data is too stale for execution."
SIZING_REASON = "Entry blocked: invalid position sizing after risk throttle."
CONFIDENCE_REASON = "Entry blocked: confidence score is below threshold."
BUY_REASON = "Entry criteria and Edge Guardian gate both passed."


@dataclass(frozen=True)
class ActionDecision:
    """Action with the reason line explaining it"""
    action: Action
    reason: str


def decide_holding_action(setup: Setup, trailing_stop: Optional[float]) -> ActionDecision:
    """SELL when the latest close is below the trailing stop, else HOLD."""
    if trailing_stop is not None and setup.close < trailing_stop:
        return ActionDecision(Action.SELL, EXIT_REASON)
    return ActionDecision(Action.HOLD, HOLD_REASON)


def decide_action(
    setup: Setup,
    holding: bool,
    trailing_stop: Optional[float],
    currency_aligned: bool,
    stale_hours: float,
    guardian: EdgeGuardianReport,
    risk_plan: RiskPlan,
    confidence_score: int,
    params: Optional[DecisionParams] = None,
    symbol: str = ""
) -> ActionDecision:
    """
    Decide BUY, SELL, HOLD or ABSTAIN for the latest bar.

    Entry gates, first failure wins: currency alignment, staleness, Edge
    Guardian gate, position sizing, confidence threshold.

    Args:
        setup: Latest-index setup
        holding: Whether the caller declares an open holding
        trailing_stop: Trailing stop at the latest index
        currency_aligned: Whether account and quote currencies match
        stale_hours: Age of the latest candle in hours
        guardian: Edge Guardian report for the latest signal score
        risk_plan: Risk plan after the Edge Guardian throttle
        confidence_score: Confidence rubric score
        params: Decision parameters
        symbol: Asset label for logging

    Returns:
        ActionDecision
    """
    params = params or DecisionParams()

    if holding:
        return decide_holding_action(setup, trailing_stop)

    if not setup.entry_signal:
        return ActionDecision(Action.HOLD, NO_SETUP_REASON)

    gates = [
        ("currency_alignment", currency_aligned, CURRENCY_REASON),
        ("data_freshness", stale_hours <= params.max_stale_hours, STALE_REASON),
        ("edge_guardian", guardian.gate_allow, guardian.gate_reason),
        ("position_sizing", risk_plan.has_valid_size, SIZING_REASON),
        ("confidence", confidence_score >= params.min_confidence, CONFIDENCE_REASON),
    ]

    for gate_name, passed, failure_reason in gates:
        if not passed:
            log_gate_decision(
                gating_logger,
                gate_name=gate_name,
                passed=False,
                symbol=symbol,
                reason=failure_reason,
                context={
                    "stale_hours": stale_hours,
                    "confidence_score": confidence_score,
                    "position_size": risk_plan.position_size,
                }
            )
            return ActionDecision(Action.ABSTAIN, failure_reason)

    log_gate_decision(
        gating_logger,
        gate_name="entry",
        passed=True,
        symbol=symbol,
        reason=BUY_REASON,
        context={"confidence_score": confidence_score, "position_size": risk_plan.position_size}
    )
    return ActionDecision(Action.BUY, BUY_REASON)
