"""
Edge Guardian gate and risk throttle.

Turns the trade sample into a go/no-go decision for the current signal
and a multiplier on the requested risk. Missing or thin evidence
throttles risk rather than defaulting to full size.
"""

from typing import Optional, Sequence

from ..config.defaults import GuardianParams
from ..logging.config import get_gating_logger, log_gate_decision
from ..state.models import Trade
from .calibration import walk_forward_brier
from .drift import detect_drift
from .estimator import compute_edge_estimate
from .models import CalibrationResult, DriftResult, EdgeEstimate, EdgeGuardianReport
from .out_of_sample import summarize_out_of_sample
from .statistics import clamp

gating_logger = get_gating_logger(__name__)

GATE_ALLOW_REASON = "Edge Guardian allows trade."
INSUFFICIENT_EVIDENCE_REASON = "Edge Guardian blocked: insufficient comparable signal history."
WEAK_EDGE_REASON = "Edge Guardian blocked: post-cost edge is not positive with high confidence."
POOR_CALIBRATION_REASON = "Edge Guardian blocked: walk-forward calibration is unreliable."
SEVERE_DRIFT_REASON = "Edge Guardian blocked: severe negative drift detected."


def compute_risk_multiplier(
    edge: EdgeEstimate,
    calibration: CalibrationResult,
    drift: DriftResult,
    params: Optional[GuardianParams] = None
) -> tuple[float, tuple[str, ...]]:
    """
    Multiplicative risk throttle with the reason for each applied factor.

    Returns:
        (multiplier clamped to the configured bounds, throttle reasons in order)
    """
    params = params or GuardianParams()
    multiplier = 1.0
    reasons: list[str] = []

    if edge.effective_sample_size < params.min_effective_sample:
        multiplier *= params.thin_evidence_factor
        reasons.append("insufficient similar historical signals")
    if edge.ci95_low_r is not None and edge.ci95_low_r <= 0:
        multiplier *= params.ci_non_positive_factor
        reasons.append("expected value confidence interval includes non-positive outcomes")
    if edge.probability_positive is not None and edge.probability_positive < params.min_probability_positive:
        multiplier *= params.low_probability_factor
        reasons.append(f"probability of positive edge is below {params.min_probability_positive * 100:g}%")
    if calibration.brier is not None and calibration.brier > params.brier_throttle:
        multiplier *= params.weak_calibration_factor
        reasons.append("walk-forward calibration quality is weak")
    if drift.degraded:
        multiplier *= params.drift_factor
        reasons.append("recent live edge degraded versus baseline")

    return clamp(multiplier, params.min_risk_multiplier, params.max_risk_multiplier), tuple(reasons)


def _gate_checks(
    edge: EdgeEstimate,
    calibration: CalibrationResult,
    drift: DriftResult,
    params: GuardianParams
) -> list[tuple[str, bool, str]]:
    """Gate conditions as (name, passed, failure reason) in reporting order."""
    enough_evidence = edge.effective_sample_size >= params.min_effective_sample
    positive_edge = (
        edge.expected_net_r is not None
        and edge.expected_net_r > 0
        and edge.ci95_low_r is not None
        and edge.ci95_low_r > 0
        and edge.probability_positive is not None
        and edge.probability_positive >= params.min_probability_positive
    )
    calibration_ok = calibration.brier is None or calibration.brier <= params.brier_block

    return [
        ("guardian_evidence", enough_evidence, INSUFFICIENT_EVIDENCE_REASON),
        ("guardian_edge_confidence", positive_edge, WEAK_EDGE_REASON),
        ("guardian_calibration", calibration_ok, POOR_CALIBRATION_REASON),
        ("guardian_drift", not drift.hard_block, SEVERE_DRIFT_REASON),
    ]


def build_edge_guardian(
    trades: Sequence[Trade],
    current_signal_score: float,
    requested_risk_percent: float,
    params: Optional[GuardianParams] = None,
    symbol: str = ""
) -> EdgeGuardianReport:
    """
    Evaluate the Edge Guardian for the current signal.

    The gate allows a trade only when every condition holds. The reported
    reason is that of the first failing condition, checked in the order
    evidence, edge confidence, calibration, drift.

    Args:
        trades: Settled trade sample in chronological order
        current_signal_score: Signal score of the latest setup
        requested_risk_percent: Caller's requested risk per trade in percent
        params: Guardian parameters
        symbol: Asset label for logging

    Returns:
        EdgeGuardianReport
    """
    params = params or GuardianParams()

    edge = compute_edge_estimate(trades, current_signal_score, params)
    calibration = walk_forward_brier(trades, params)
    drift = detect_drift(trades, params)
    multiplier, throttle_reasons = compute_risk_multiplier(edge, calibration, drift, params)

    checks = _gate_checks(edge, calibration, drift, params)
    failed = next((check for check in checks if not check[1]), None)
    gate_allow = failed is None
    gate_reason = GATE_ALLOW_REASON if failed is None else failed[2]

    log_gate_decision(
        gating_logger,
        gate_name="edge_guardian" if failed is None else failed[0],
        passed=gate_allow,
        symbol=symbol,
        reason=gate_reason,
        context={
            "trades": len(trades),
            "effective_sample_size": edge.effective_sample_size,
            "expected_net_r": edge.expected_net_r,
            "ci95_low_r": edge.ci95_low_r,
            "probability_positive": edge.probability_positive,
            "brier": calibration.brier,
            "drift_hard_block": drift.hard_block,
            "risk_multiplier": multiplier,
        }
    )

    return EdgeGuardianReport(
        gate_allow=gate_allow,
        gate_reason=gate_reason,
        edge=edge,
        calibration=calibration,
        drift=drift,
        risk_multiplier=multiplier,
        requested_risk_percent=requested_risk_percent,
        throttle_reasons=throttle_reasons,
        out_of_sample=summarize_out_of_sample(trades, params),
    )
