"""Default configuration parameters for the daily breakout analysis."""

from dataclasses import dataclass


@dataclass(frozen=True)
class IndicatorParams:
    """Indicator lookbacks."""
    sma_fast_period: int = 50
    sma_slow_period: int = 200
    ema_period: int = 10
    atr_period: int = 14
    adx_period: int = 14
    min_candles: int = 220                          # Hard precondition for analysis


@dataclass(frozen=True)
class SetupParams:
    """Entry filter parameters evaluated at a single index."""
    breakout_lookback: int = 20                     # Prior highs window
    volume_lookback: int = 20                       # Prior volume window
    min_volume_coverage: float = 0.6                # Share of usable volume bars
    volume_expansion_mult: float = 1.2              # Current vs average volume
    adx_threshold: float = 18.0
    atr_pct_min: float = 0.35                       # ATR as % of close
    atr_pct_max: float = 12.0
    swing_lookback: int = 5                         # Prior lows window for stops
    atr_stop_mult: float = 1.5


@dataclass(frozen=True)
class ScoringParams:
    """Signal score weights (relative importance, not fitted)."""
    regime_weight: int = 26
    breakout_weight: int = 22
    volume_weight: int = 16
    adx_weight: int = 14
    volatility_weight: int = 10
    above_sma_fast_weight: int = 7
    atr_band_weight: int = 5
    atr_band_min_pct: float = 1.2
    atr_band_max_pct: float = 8.0


@dataclass(frozen=True)
class BacktestParams:
    """History replay parameters."""
    warmup_index: int = 210                         # First replayed index
    fee_bps: float = 10.0                           # Charged on each side
    slippage_bps: float = 5.0                       # Charged on each side
    max_risk_fraction: float = 0.25                 # Reject entries risking more of price

    @property
    def cost_per_side(self) -> float:
        """Fractional cost charged on each traded notional."""
        return (self.fee_bps + self.slippage_bps) / 10000.0


@dataclass(frozen=True)
class GuardianParams:
    """Edge Guardian estimator parameters."""
    kernel_bandwidth: float = 18.0
    z_score: float = 1.96                           # 95% interval
    min_effective_sample: float = 8.0
    min_probability_positive: float = 0.6
    degenerate_se: float = 1e-9

    # Walk-forward calibration
    calibration_min_trades: int = 12
    calibration_warmup_trades: int = 8
    brier_throttle: float = 0.25
    brier_block: float = 0.3

    # Drift detection
    drift_min_trades: int = 12
    drift_recent_fraction: float = 0.33
    drift_recent_min: int = 6
    drift_recent_max: int = 10
    drift_baseline_max: int = 30
    drift_degraded_delta: float = -0.2
    drift_block_recent: float = -0.25
    drift_block_delta: float = -0.35

    # Risk throttle factors
    thin_evidence_factor: float = 0.65
    ci_non_positive_factor: float = 0.6
    low_probability_factor: float = 0.7
    weak_calibration_factor: float = 0.75
    drift_factor: float = 0.5
    min_risk_multiplier: float = 0.1
    max_risk_multiplier: float = 1.0

    # Out-of-sample summary
    oos_min_trades: int = 10
    oos_train_fraction: float = 0.7


@dataclass(frozen=True)
class DecisionParams:
    """Action gates and confidence rubric."""
    max_stale_hours: float = 72.0                   # Abstain beyond this age
    stale_warning_hours: float = 36.0
    min_confidence: int = 65
    grade_a: int = 80
    grade_b: int = 65
    grade_c: int = 50
    tp1_r_multiple: float = 2.0

    # Confidence rubric
    regime_points: int = 25
    breakout_points: int = 20
    volume_points: int = 15
    adx_points: int = 15
    volatility_points: int = 10
    expectancy_points: int = 10
    profit_factor_points: int = 5
    probability_points: int = 5
    min_profit_factor: float = 1.15
    min_probability_positive_pct: float = 60.0
    thin_volume_coverage: float = 0.75
    thin_volume_penalty: int = 10
    stale_penalty: int = 20
    min_trades: int = 8
    few_trades_penalty: int = 5
    volume_coverage_warning: float = 0.8


@dataclass(frozen=True)
class RequestLimits:
    """Bounds on caller-supplied analysis parameters."""
    max_risk_percent: float = 5.0


@dataclass(frozen=True)
class StrategyConfig:
    """Complete strategy configuration."""
    indicators: IndicatorParams
    setup: SetupParams
    scoring: ScoringParams
    backtest: BacktestParams
    guardian: GuardianParams
    decision: DecisionParams
    limits: RequestLimits


def get_default_config() -> StrategyConfig:
    """Get the default configuration instance."""
    return StrategyConfig(
        indicators=IndicatorParams(),
        setup=SetupParams(),
        scoring=ScoringParams(),
        backtest=BacktestParams(),
        guardian=GuardianParams(),
        decision=DecisionParams(),
        limits=RequestLimits(),
    )
