"""Setup value object computed at a single candle index"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Setup:
    """Trade-readiness conditions at one index of the candle series"""
    index: int
    close: float
    volume: Optional[float]

    # Breakout trigger
    breakout_level: Optional[float]         # Max high of the prior window
    breakout: bool

    # Liquidity confirmation
    volume_avg: Optional[float]
    volume_coverage: float                  # 0-1
    volume_expansion: bool

    # Trend filter
    sma_fast: Optional[float]
    sma_slow: Optional[float]
    ema: Optional[float]
    regime_long: bool

    # Trend strength and volatility band
    adx: Optional[float]
    adx_pass: bool
    atr: Optional[float]
    atr_pct: Optional[float]
    volatility_pass: bool

    # Stop placement
    swing_low: Optional[float]
    suggested_stop: Optional[float]
    risk_per_unit: Optional[float]

    entry_signal: bool
    signal_score: int                       # 0-100

    @property
    def has_valid_risk(self) -> bool:
        """True when the suggested stop leaves a positive per-unit risk."""
        return self.risk_per_unit is not None and self.risk_per_unit > 0
