"""Tests for backtest state machine transition functions."""

import pytest
from datetime import UTC, datetime, timedelta

from signal_desk.config.defaults import BacktestParams
from signal_desk.data.models import Candle
from signal_desk.state.machine import (
    build_entry_position,
    check_exit,
    compute_trailing_stop,
    resolve_stop_exit_price,
    settle_trade,
    step_flat,
    step_in_position,
)
from signal_desk.state.models import ExitReason, Position, ReplayState


def _candle(day: int, open_: float, high: float, low: float, close: float) -> Candle:
    ts = datetime(2024, 1, 1, tzinfo=UTC) + timedelta(days=day)
    return Candle(ts=ts, open=open_, high=high, low=low, close=close, volume=1000.0)


class TestComputeTrailingStop:
    """Test trailing stop composition."""

    def test_highest_candidate_wins(self, make_indicators):
        """Test the stop is the maximum of floor, EMA, swing low and fallback."""
        closes = [100.0] * 8
        lows = [95.0, 96.0, 97.0, 98.0, 99.0, 96.5, 97.5, 99.0]
        ema = [None] * 7 + [97.8]
        indicators = make_indicators(closes, lows=lows, ema=ema)

        # Swing low over indices 2..6 is 96.5
        assert compute_trailing_stop(7, indicators, floor_stop=96.0) == pytest.approx(97.8)
        assert compute_trailing_stop(7, indicators, floor_stop=98.5) == pytest.approx(98.5)
        assert compute_trailing_stop(7, indicators, fallback_stop=99.1) == pytest.approx(99.1)

    def test_undefined_candidates_ignored(self, make_indicators):
        """Test undefined EMA and swing low do not participate."""
        indicators = make_indicators([100.0] * 3)
        assert compute_trailing_stop(2, indicators, floor_stop=95.0) == pytest.approx(95.0)

    def test_all_undefined(self, make_indicators):
        """Test None when every candidate is undefined."""
        indicators = make_indicators([100.0] * 3)
        assert compute_trailing_stop(2, indicators) is None


class TestResolveStopExitPrice:
    """Test gap protection on stop fills."""

    def test_fill_at_stop(self):
        """Test an intrabar breach fills at the stop."""
        price, reason = resolve_stop_exit_price(_candle(0, 99.0, 100.0, 95.0, 96.0), 97.0)
        assert price == pytest.approx(97.0)
        assert reason == ExitReason.STOP_HIT

    def test_gap_fills_at_open(self):
        """Test an open below the stop fills at the open."""
        price, reason = resolve_stop_exit_price(_candle(0, 94.0, 95.0, 92.0, 93.0), 97.0)
        assert price == pytest.approx(94.0)
        assert reason == ExitReason.GAP_STOP


class TestBuildEntryPosition:
    """Test next-bar entry construction."""

    def _setup(self, make_indicators, atr_value: float):
        candles = [_candle(i, 100.0, 101.0, 98.0 + i * 0.1, 100.0) for i in range(8)]
        indicators = make_indicators(
            [c.close for c in candles],
            highs=[c.high for c in candles],
            lows=[c.low for c in candles],
            atr=[atr_value] * 8,
        )
        return candles, indicators

    def test_fill_at_next_open(self, make_indicators):
        """Test entry at the next open with the lower stop candidate."""
        candles, indicators = self._setup(make_indicators, atr_value=2.0)
        position = build_entry_position(6, candles, indicators, signal_score=80)

        assert position.entry == pytest.approx(100.0)
        # Swing low over indices 1..5 is 98.1, ATR stop is 97.0
        assert position.stop == pytest.approx(97.0)
        assert position.entry_index == 7
        assert position.signal_score == 80

    def test_no_next_bar(self, make_indicators):
        """Test no position when the signal is on the last bar."""
        candles, indicators = self._setup(make_indicators, atr_value=2.0)
        assert build_entry_position(7, candles, indicators, signal_score=80) is None

    def test_excessive_risk_rejected(self, make_indicators):
        """Test risk above 25% of the entry price is rejected."""
        candles, indicators = self._setup(make_indicators, atr_value=20.0)
        assert build_entry_position(6, candles, indicators, signal_score=80) is None

    def test_risk_limit_is_configurable(self, make_indicators):
        """Test the maximum risk fraction comes from the backtest parameters."""
        candles, indicators = self._setup(make_indicators, atr_value=20.0)
        params = BacktestParams(max_risk_fraction=0.5)
        position = build_entry_position(6, candles, indicators, 80, backtest_params=params)
        assert position.stop == pytest.approx(70.0)


class TestExitAndSettlement:
    """Test exit detection and trade settlement."""

    def _indicators(self, make_indicators, candles):
        return make_indicators(
            [c.close for c in candles],
            highs=[c.high for c in candles],
            lows=[c.low for c in candles],
        )

    def test_no_exit_above_stop(self, make_indicators):
        """Test a bar holding above the trailing stop keeps the position."""
        candles = [_candle(i, 100.0, 101.0, 90.0, 100.0) for i in range(6)]
        candles.append(_candle(6, 100.0, 101.0, 98.0, 100.0))
        position = Position(entry=100.0, stop=97.0, signal_score=70, entry_index=5)

        assert check_exit(position, 6, candles, self._indicators(make_indicators, candles)) is None

    def test_stop_breach(self, make_indicators):
        """Test a low at or below the trailing stop exits at the stop."""
        candles = [_candle(i, 100.0, 101.0, 90.0, 100.0) for i in range(6)]
        candles.append(_candle(6, 99.0, 100.0, 96.0, 98.0))
        position = Position(entry=100.0, stop=97.0, signal_score=70, entry_index=5)

        price, reason = check_exit(position, 6, candles, self._indicators(make_indicators, candles))
        assert price == pytest.approx(97.0)
        assert reason == ExitReason.STOP_HIT

    def test_settle_trade_costs(self):
        """Test net R deducts costs on both notionals."""
        position = Position(entry=100.0, stop=97.0, signal_score=70, entry_index=5)
        trade = settle_trade(position, 106.0, 9, ExitReason.TREND_CLOSE)

        assert trade.gross_r == pytest.approx(2.0)
        assert trade.net_r == pytest.approx(2.0 - (100.0 * 0.0015 + 106.0 * 0.0015) / 3.0)
        assert trade.exit_index == 9
        assert trade.entry_index == 5
        assert trade.risk == pytest.approx(3.0)

    def test_step_in_position_settles(self, make_indicators):
        """Test an exit step returns to FLAT with the settled trade."""
        candles = [_candle(i, 100.0, 101.0, 90.0, 100.0) for i in range(6)]
        candles.append(_candle(6, 95.0, 96.0, 94.0, 95.0))
        position = Position(entry=100.0, stop=97.0, signal_score=70, entry_index=5)
        state = ReplayState.flat().with_entry(position)

        result = step_in_position(state, 6, candles, self._indicators(make_indicators, candles))

        assert result.exited is True
        assert result.state.is_flat
        assert result.trade.exit_price == pytest.approx(95.0)
        assert result.trade.exit_reason == ExitReason.GAP_STOP
        assert result.trade.net_r < 0

    def test_step_flat_never_enters_on_last_bar(self, make_indicators):
        """Test no entry is attempted on the final bar."""
        candles = [_candle(i, 100.0, 101.0, 99.0, 100.0) for i in range(6)]
        result = step_flat(ReplayState.flat(), 5, candles, self._indicators(make_indicators, candles))

        assert result.entered is False
        assert result.state.is_flat
