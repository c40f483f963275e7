"""Analysis result blocks and their presentation rendering"""

import math
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from ..data.models import Candle
from ..guardian.models import EdgeGuardianReport
from ..state.models import BacktestResult
from ..utils.time import format_market_time
from .setup import Setup


class Action(str, Enum):
    """Final recommendation for the latest bar"""
    BUY = "BUY"
    SELL = "SELL"
    HOLD = "HOLD"
    ABSTAIN = "ABSTAIN"


def _round(value: Optional[float], digits: int = 2) -> Optional[float]:
    """Presentation rounding; undefined and non-finite values render as None."""
    if value is None or not math.isfinite(value):
        return None
    return round(value, digits)


@dataclass(frozen=True)
class RiskPlan:
    """Risk-sized position plan for the latest close"""
    equity: float
    requested_risk_percent: float
    risk_percent: float                         # After the Edge Guardian throttle
    requested_risk_amount: float
    risk_amount: float
    entry: float
    stop: Optional[float]
    trailing_stop: Optional[float]
    tp1: Optional[float]
    position_size_requested: Optional[float]    # None when sizing is invalid
    position_size: Optional[float]

    @property
    def has_valid_size(self) -> bool:
        return self.position_size is not None and self.position_size > 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "equity": _round(self.equity),
            "risk_percent": _round(self.risk_percent),
            "requested_risk_percent": _round(self.requested_risk_percent),
            "risk_amount": _round(self.risk_amount),
            "requested_risk_amount": _round(self.requested_risk_amount),
            "entry": _round(self.entry),
            "stop": _round(self.stop),
            "trailing_stop": _round(self.trailing_stop),
            "tp1": _round(self.tp1),
            "position_size_requested": _round(self.position_size_requested, 6),
            "position_size": _round(self.position_size, 6),
        }


@dataclass(frozen=True)
class QualityAssessment:
    """Confidence score and data-quality indicators"""
    confidence_score: int
    grade: str
    stale_hours: float
    volume_coverage: float                      # 0-1

    def to_dict(self) -> dict[str, Any]:
        return {
            "confidence_score": self.confidence_score,
            "grade": self.grade,
            "stale_hours": _round(self.stale_hours),
            "volume_coverage_pct": _round(self.volume_coverage * 100.0),
        }


@dataclass(frozen=True)
class HoldingStatus:
    """Caller-declared holding and its P&L in R"""
    enabled: bool
    entry_price: Optional[float] = None
    pnl_r: Optional[float] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "enabled": self.enabled,
            "entry_price": _round(self.entry_price),
            "pnl_r": _round(self.pnl_r),
        }


@dataclass(frozen=True)
class AnalysisResult:
    """Complete analysis of one symbol at its latest candle"""
    symbol: str
    action: Action
    latest: Candle
    setup: Setup
    risk_plan: RiskPlan
    quality: QualityAssessment
    backtest: BacktestResult
    latest_transition_ts: Optional[datetime]
    edge_guardian: EdgeGuardianReport
    holding: HoldingStatus
    quote_currency: str
    warnings: tuple[str, ...]
    reasons: tuple[str, ...]

    @property
    def timestamp(self) -> str:
        return format_market_time(self.latest.ts)

    def to_dict(self) -> dict[str, Any]:
        """Render the result with presentation rounding and snake_case keys."""
        setup = self.setup
        backtest = self.backtest
        guardian = self.edge_guardian
        oos = guardian.out_of_sample
        transition = backtest.latest_transition_action

        return {
            "symbol": self.symbol,
            "action": self.action.value,
            "timestamp": self.timestamp,
            "market": {
                "close": _round(setup.close),
                "high": _round(self.latest.high),
                "low": _round(self.latest.low),
                "volume": _round(setup.volume),
            },
            "setup": {
                "breakout_level_20d": _round(setup.breakout_level),
                "regime_long": setup.regime_long,
                "breakout": setup.breakout,
                "volume_expansion": setup.volume_expansion,
                "adx_pass": setup.adx_pass,
                "volatility_pass": setup.volatility_pass,
                "entry_signal": setup.entry_signal,
                "signal_score": setup.signal_score,
                "sma50": _round(setup.sma_fast),
                "sma200": _round(setup.sma_slow),
                "ema10": _round(setup.ema),
                "atr14": _round(setup.atr),
                "adx14": _round(setup.adx),
                "atr_pct": _round(setup.atr_pct),
            },
            "risk_plan": self.risk_plan.to_dict(),
            "quality": self.quality.to_dict(),
            "backtest": {
                "window_days": backtest.window_days,
                "trades": backtest.trade_count,
                "wins": backtest.wins,
                "losses": backtest.losses,
                "win_rate": _round(backtest.win_rate),
                "expectancy_r": _round(backtest.expectancy_r),
                "profit_factor": _round(backtest.profit_factor),
                "max_drawdown_pct": _round(backtest.max_drawdown_pct),
                "return_pct": _round(backtest.return_pct),
                "open_trade": backtest.open_trade,
                "forced_close_at_end": backtest.forced_close_at_end,
            },
            "system": {
                "position_open": backtest.open_trade,
                "latest_transition_action": transition.value if transition else None,
                "latest_transition_timestamp": (
                    format_market_time(self.latest_transition_ts) if self.latest_transition_ts else None
                ),
            },
            "edge_guardian": {
                "gate_allow": guardian.gate_allow,
                "gate_reason": guardian.gate_reason,
                "expected_net_r": _round(guardian.edge.expected_net_r),
                "ci95_low_r": _round(guardian.edge.ci95_low_r),
                "ci95_high_r": _round(guardian.edge.ci95_high_r),
                "probability_win_pct": _round(guardian.probability_win_pct),
                "probability_positive_pct": _round(guardian.probability_positive_pct),
                "sample_size": guardian.edge.sample_size,
                "effective_sample_size": _round(guardian.edge.effective_sample_size),
                "walk_forward_brier": _round(guardian.calibration.brier),
                "walk_forward_samples": guardian.calibration.samples,
                "drift_baseline_expectancy_r": _round(guardian.drift.baseline_expectancy_r),
                "drift_recent_expectancy_r": _round(guardian.drift.recent_expectancy_r),
                "drift_delta_r": _round(guardian.drift.delta_r),
                "drift_degraded": guardian.drift.degraded,
                "risk_multiplier": _round(guardian.risk_multiplier),
                "recommended_risk_percent": _round(guardian.recommended_risk_percent),
                "throttle_reason": guardian.throttle_reason,
                "oos_train_trades": oos.train_trades,
                "oos_trades": oos.oos_trades,
                "oos_expectancy_r": _round(oos.expectancy_r),
                "oos_win_rate": _round(oos.win_rate),
                "oos_profit_factor": _round(oos.profit_factor),
            },
            "holding": self.holding.to_dict(),
            "quote_currency": self.quote_currency,
            "warnings": list(self.warnings),
            "reasons": list(self.reasons),
        }


@dataclass(frozen=True)
class ScanRow:
    """One symbol's line in a multi-asset scan"""
    symbol: str
    ok: bool
    error: Optional[str] = None
    action: Optional[str] = None
    display_action: Optional[str] = None
    transition_action: Optional[str] = None
    close: Optional[float] = None
    confidence: Optional[int] = None
    grade: Optional[str] = None
    expectancy_r: Optional[float] = None
    edge_expected_r: Optional[float] = None
    edge_probability_positive_pct: Optional[float] = None
    edge_risk_multiplier: Optional[float] = None
    edge_gate_allow: Optional[bool] = None
    win_rate: Optional[float] = None
    provider_used: Optional[str] = None
    currency_aligned: Optional[bool] = None
    warning_count: int = 0

    @classmethod
    def failed(cls, symbol: str, error: str) -> "ScanRow":
        return cls(symbol=symbol, ok=False, error=error)

    @classmethod
    def from_result(
        cls,
        result: AnalysisResult,
        provider_used: Optional[str] = None,
        currency_aligned: bool = True
    ) -> "ScanRow":
        """Summarize an analysis; a SELL transition on the latest bar overrides the displayed action."""
        transition = result.backtest.latest_transition_action
        transition_value = transition.value if transition else None
        return cls(
            symbol=result.symbol,
            ok=True,
            action=result.action.value,
            display_action=Action.SELL.value if transition_value == Action.SELL.value else result.action.value,
            transition_action=transition_value,
            close=_round(result.setup.close),
            confidence=result.quality.confidence_score,
            grade=result.quality.grade,
            expectancy_r=_round(result.backtest.expectancy_r),
            edge_expected_r=_round(result.edge_guardian.edge.expected_net_r),
            edge_probability_positive_pct=_round(result.edge_guardian.probability_positive_pct),
            edge_risk_multiplier=_round(result.edge_guardian.risk_multiplier),
            edge_gate_allow=result.edge_guardian.gate_allow,
            win_rate=_round(result.backtest.win_rate),
            provider_used=provider_used,
            currency_aligned=currency_aligned,
            warning_count=len(result.warnings),
        )
