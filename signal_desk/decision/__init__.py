"""Decision and risk-plan composition over the setup, backtest and Edge Guardian outputs."""

from .composer import ActionDecision, decide_action
from .confidence import grade_for_score, score_confidence
from .risk_plan import build_risk_plan, holding_pnl_r
from .warnings import build_filter_reasons, build_warnings, dedupe

__all__ = [
    "ActionDecision",
    "decide_action",
    "grade_for_score",
    "score_confidence",
    "build_risk_plan",
    "holding_pnl_r",
    "build_filter_reasons",
    "build_warnings",
    "dedupe",
]
