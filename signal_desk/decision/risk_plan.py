"""Risk-sized position plan"""

from typing import Optional

from ..config.defaults import DecisionParams
from ..models.result import RiskPlan
from ..models.setup import Setup


def _position_size(risk_amount: float, setup: Setup, currency_aligned: bool) -> Optional[float]:
    if not currency_aligned or not setup.has_valid_risk:
        return None
    return risk_amount / setup.risk_per_unit


def build_risk_plan(
    setup: Setup,
    equity: float,
    requested_risk_percent: float,
    adjusted_risk_percent: float,
    trailing_stop: Optional[float],
    currency_aligned: bool,
    params: Optional[DecisionParams] = None
) -> RiskPlan:
    """
    Size a position at the latest close.

    Position sizes are undefined when the account currency differs from the
    price quote currency or the suggested stop leaves no positive risk.

    Args:
        setup: Latest-index setup
        equity: Account equity in the account currency
        requested_risk_percent: Caller's risk per trade in percent
        adjusted_risk_percent: Risk percent after the Edge Guardian throttle
        trailing_stop: Trailing stop at the latest index
        currency_aligned: Whether account and quote currencies match
        params: Decision parameters

    Returns:
        RiskPlan
    """
    params = params or DecisionParams()
    requested_amount = equity * (requested_risk_percent / 100.0)
    risk_amount = equity * (adjusted_risk_percent / 100.0)
    tp1 = (
        setup.close + params.tp1_r_multiple * setup.risk_per_unit
        if setup.risk_per_unit is not None else None
    )

    return RiskPlan(
        equity=equity,
        requested_risk_percent=requested_risk_percent,
        risk_percent=adjusted_risk_percent,
        requested_risk_amount=requested_amount,
        risk_amount=risk_amount,
        entry=setup.close,
        stop=setup.suggested_stop,
        trailing_stop=trailing_stop,
        tp1=tp1,
        position_size_requested=_position_size(requested_amount, setup, currency_aligned),
        position_size=_position_size(risk_amount, setup, currency_aligned),
    )


def holding_pnl_r(setup: Setup, entry_price: Optional[float]) -> Optional[float]:
    """P&L of a declared holding in R, using the suggested stop as the risk reference."""
    stop = setup.suggested_stop
    if entry_price is None or stop is None or entry_price <= stop:
        return None
    return (setup.close - entry_price) / (entry_price - stop)
