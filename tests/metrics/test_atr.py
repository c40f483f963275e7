"""Tests for True Range and ATR calculations."""

import pytest
from datetime import UTC, datetime, timedelta

from signal_desk.data.models import Candle
from signal_desk.metrics.atr import (
    calculate_atr_pct,
    calculate_true_range,
    rolling_atr,
    true_range_series,
)


def _candle(day: int, high: float, low: float, close: float) -> Candle:
    ts = datetime(2024, 1, 1, tzinfo=UTC) + timedelta(days=day)
    return Candle(ts=ts, open=close, high=high, low=low, close=close, volume=1000.0)


class TestTrueRange:
    """Test True Range for single candles."""

    def test_without_previous_candle(self):
        """Test TR falls back to high - low without a predecessor."""
        assert calculate_true_range(_candle(0, 105.0, 99.0, 103.0)) == pytest.approx(6.0)

    def test_gap_up_uses_previous_close(self):
        """Test a gap above the previous close widens the range."""
        previous = _candle(0, 101.0, 99.0, 100.0)
        current = _candle(1, 110.0, 107.0, 108.0)
        assert calculate_true_range(current, previous) == pytest.approx(10.0)

    def test_gap_down_uses_previous_close(self):
        """Test a gap below the previous close widens the range."""
        previous = _candle(0, 101.0, 99.0, 100.0)
        current = _candle(1, 94.0, 90.0, 92.0)
        assert calculate_true_range(current, previous) == pytest.approx(10.0)

    def test_series_first_entry_undefined(self):
        """Test the first true range of a series is None."""
        candles = [_candle(i, 101.0, 99.0, 100.0) for i in range(3)]
        assert true_range_series(candles) == [None, 2.0, 2.0]


class TestRollingATR:
    """Test rolling ATR alignment and moving-sum maintenance."""

    def test_first_defined_at_period(self):
        """Test ATR is first defined at index ``period``."""
        candles = [_candle(i, 101.0, 99.0, 100.0) for i in range(20)]
        atr = rolling_atr(candles, period=14)
        assert atr[13] is None
        assert atr[14] == pytest.approx(2.0)

    def test_moving_window(self):
        """Test the window drops the oldest true range."""
        candles = [_candle(i, 101.0, 99.0, 100.0) for i in range(5)]
        candles.append(_candle(5, 104.0, 100.0, 102.0))
        atr = rolling_atr(candles, period=3)
        # Window at index 5 holds TR 2, 2, 4
        assert atr[5] == pytest.approx(8.0 / 3.0)

    def test_insufficient_candles(self):
        """Test all None when fewer than period + 1 candles exist."""
        candles = [_candle(i, 101.0, 99.0, 100.0) for i in range(14)]
        assert rolling_atr(candles, period=14) == [None] * 14


class TestATRPercent:
    """Test ATR as a percentage of close."""

    def test_percentage(self):
        """Test ATR% = 100 * ATR / close."""
        assert calculate_atr_pct(2.5, 50.0) == pytest.approx(5.0)

    def test_undefined_atr(self):
        """Test undefined ATR propagates as None."""
        assert calculate_atr_pct(None, 50.0) is None

    def test_non_positive_close(self):
        """Test non-positive close yields None."""
        assert calculate_atr_pct(1.0, 0.0) is None
