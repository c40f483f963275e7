"""Fixtures for decision composer tests."""

import pytest

from signal_desk.guardian.models import (
    CalibrationResult,
    DriftResult,
    EdgeEstimate,
    EdgeGuardianReport,
    OutOfSampleSummary,
)
from signal_desk.models.setup import Setup
from signal_desk.state.models import BacktestResult, BacktestStats


@pytest.fixture
def active_setup() -> Setup:
    """Latest-index setup passing every entry filter."""
    return Setup(
        index=259,
        close=100.0,
        volume=50000.0,
        breakout_level=98.0,
        breakout=True,
        volume_avg=20000.0,
        volume_coverage=1.0,
        volume_expansion=True,
        sma_fast=95.0,
        sma_slow=90.0,
        ema=97.0,
        regime_long=True,
        adx=30.0,
        adx_pass=True,
        atr=2.0,
        atr_pct=2.0,
        volatility_pass=True,
        swing_low=96.0,
        suggested_stop=96.0,
        risk_per_unit=4.0,
        entry_signal=True,
        signal_score=100,
    )


@pytest.fixture
def make_backtest(make_trade):
    """Factory for backtest results over a list of net R values."""
    def factory(net_rs=(), open_trade=False) -> BacktestResult:
        trades = tuple(make_trade(r, index=i * 3) for i, r in enumerate(net_rs))
        stats = BacktestStats()
        for trade in trades:
            stats = stats.with_trade(trade.net_r, 1.0)
        return BacktestResult(
            trades=trades,
            stats=stats,
            open_trade=open_trade,
            latest_transition_action=None,
            latest_transition_index=None,
            window_days=260,
        )
    return factory


@pytest.fixture
def make_guardian():
    """Factory for Edge Guardian reports with chosen gate and statistics."""
    def factory(
        gate_allow=True,
        gate_reason="Edge Guardian allows trade.",
        risk_multiplier=1.0,
        probability_positive=0.9,
        degraded=False,
        throttle_reasons=(),
        requested_risk_percent=1.0,
    ) -> EdgeGuardianReport:
        return EdgeGuardianReport(
            gate_allow=gate_allow,
            gate_reason=gate_reason,
            edge=EdgeEstimate(
                expected_net_r=0.5,
                ci95_low_r=0.1,
                ci95_high_r=0.9,
                probability_positive=probability_positive,
                probability_win=0.55,
                sample_size=20,
                effective_sample_size=15.0,
                std_dev_r=1.0,
            ),
            calibration=CalibrationResult(brier=0.2, samples=12),
            drift=DriftResult(degraded=degraded),
            risk_multiplier=risk_multiplier,
            requested_risk_percent=requested_risk_percent,
            throttle_reasons=tuple(throttle_reasons),
            out_of_sample=OutOfSampleSummary(),
        )
    return factory
