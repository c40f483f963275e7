"""
Edge Guardian data models.

Undefined statistics are None. Probabilities are fractions (0-1) in these
models; the report exposes percent variants for presentation.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class EdgeEstimate:
    """Kernel-weighted estimate of net R for the current signal score."""
    expected_net_r: Optional[float] = None
    ci95_low_r: Optional[float] = None
    ci95_high_r: Optional[float] = None
    probability_positive: Optional[float] = None
    probability_win: Optional[float] = None
    sample_size: int = 0
    effective_sample_size: float = 0.0
    std_dev_r: Optional[float] = None


@dataclass(frozen=True)
class CalibrationResult:
    """Walk-forward Brier score of the kernel win-probability estimate."""
    brier: Optional[float] = None
    samples: int = 0


@dataclass(frozen=True)
class DriftResult:
    """Recent versus baseline expectancy comparison."""
    baseline_expectancy_r: Optional[float] = None
    recent_expectancy_r: Optional[float] = None
    delta_r: Optional[float] = None
    degraded: bool = False
    hard_block: bool = False


@dataclass(frozen=True)
class OutOfSampleSummary:
    """Chronological train/out-of-sample split of the trade sample."""
    train_trades: int = 0
    oos_trades: int = 0
    expectancy_r: Optional[float] = None
    win_rate: Optional[float] = None            # Percent
    profit_factor: Optional[float] = None


@dataclass(frozen=True)
class EdgeGuardianReport:
    """Gate decision, risk multiplier and every supporting statistic."""
    gate_allow: bool
    gate_reason: str
    edge: EdgeEstimate
    calibration: CalibrationResult
    drift: DriftResult
    risk_multiplier: float
    requested_risk_percent: float
    throttle_reasons: tuple[str, ...]
    out_of_sample: OutOfSampleSummary

    @property
    def recommended_risk_percent(self) -> float:
        return self.requested_risk_percent * self.risk_multiplier

    @property
    def throttle_reason(self) -> str:
        if self.throttle_reasons:
            return f"Risk throttled due to {'; '.join(self.throttle_reasons)}."
        return "No risk throttle applied."

    @property
    def probability_win_pct(self) -> Optional[float]:
        p = self.edge.probability_win
        return p * 100.0 if p is not None else None

    @property
    def probability_positive_pct(self) -> Optional[float]:
        p = self.edge.probability_positive
        return p * 100.0 if p is not None else None
