"""Pytest configuration and shared fixtures."""

from datetime import UTC, datetime, timedelta
from typing import Callable, Optional

import pytest

from signal_desk.data.models import Candle
from signal_desk.engine import SignalDeskEngine
from signal_desk.metrics.indicators import IndicatorSeries
from signal_desk.state.models import ExitReason, Trade

NOW = datetime(2025, 3, 1, 12, 0, 0, tzinfo=UTC)


def _build(generator: Callable[[int, int], dict], days: int = 260, now: datetime = NOW) -> list[Candle]:
    """Daily candles ending one day before ``now``."""
    candles = []
    for i in range(days):
        row = generator(i, days)
        candles.append(Candle(
            ts=now - timedelta(days=days - i),
            open=row["open"],
            high=row["high"],
            low=row["low"],
            close=row["close"],
            volume=row.get("volume"),
        ))
    return candles


@pytest.fixture
def now() -> datetime:
    """Pinned wall-clock time for staleness."""
    return NOW


@pytest.fixture
def build_candles():
    """Factory building a daily candle series from a per-index generator."""
    return _build


@pytest.fixture
def declining_candles() -> list[Candle]:
    """Steadily declining series without any breakout."""
    def generator(i, days):
        close = 300 - i * 0.4
        return {"open": close + 0.4, "high": close + 1, "low": close - 1, "close": close, "volume": 1000 + i}
    return _build(generator)


@pytest.fixture
def final_breakout_candles() -> list[Candle]:
    """Rising series with a sharp breakout and volume spike on the final day only."""
    def generator(i, days):
        close = 100 + i * 0.35
        if i == days - 1:
            close += 8
        return {
            "open": close - 0.6,
            "high": close + 0.9,
            "low": close - 1.5,
            "close": close,
            "volume": 200000 if i == days - 1 else 2000 + i * 4,
        }
    return _build(generator)


@pytest.fixture
def two_day_breakout_candles() -> list[Candle]:
    """Rising series whose breakout is confirmed over the last two days."""
    def generator(i, days):
        close = 100 + i * 0.35
        if i == days - 2:
            close += 10
        if i == days - 1:
            close += 11
        return {
            "open": close - 0.6,
            "high": close + 1.2,
            "low": close - 1.5,
            "close": close,
            "volume": 300000 if i >= days - 2 else 2000 + i * 4,
        }
    return _build(generator)


@pytest.fixture
def crash_candles() -> list[Candle]:
    """Rising series with a severe one-day drop on the final day."""
    def generator(i, days):
        close = 120 + i * 0.25
        if i == days - 1:
            close -= 18
        return {"open": close + 0.2, "high": close + 1, "low": close - 1.5, "close": close, "volume": 1800 + i * 3}
    return _build(generator)


@pytest.fixture
def engine() -> SignalDeskEngine:
    """Engine using the repository configuration directory."""
    return SignalDeskEngine()


@pytest.fixture
def make_trade():
    """Factory for settled trades with a given net R and signal score."""
    def factory(net_r: float, signal_score: int = 60, index: int = 0) -> Trade:
        return Trade(
            net_r=net_r,
            signal_score=signal_score,
            entry_index=index,
            exit_index=index + 1,
            entry_price=100.0,
            exit_price=100.0 + net_r,
            risk=1.0,
            gross_r=net_r,
            exit_reason=ExitReason.STOP_HIT,
        )
    return factory


@pytest.fixture
def make_indicators():
    """Factory for hand-built indicator series; unspecified indicators are undefined."""
    def factory(
        closes: list[float],
        highs: Optional[list[float]] = None,
        lows: Optional[list[float]] = None,
        volumes: Optional[list[Optional[float]]] = None,
        ema: Optional[list[Optional[float]]] = None,
        atr: Optional[list[Optional[float]]] = None,
    ) -> IndicatorSeries:
        n = len(closes)
        undefined = (None,) * n
        return IndicatorSeries(
            closes=tuple(closes),
            highs=tuple(highs if highs is not None else [c + 1 for c in closes]),
            lows=tuple(lows if lows is not None else [c - 1 for c in closes]),
            volumes=tuple(volumes if volumes is not None else [1000.0] * n),
            sma_fast=undefined,
            sma_slow=undefined,
            ema=tuple(ema) if ema is not None else undefined,
            atr=tuple(atr) if atr is not None else undefined,
            adx=undefined,
        )
    return factory


@pytest.fixture
def exit_on_last_bar_candles() -> list[Candle]:
    """Breakout three bars from the end followed by a crash on the final bar."""
    def generator(i, days):
        close = 100 + i * 0.35
        if days - 3 <= i < days - 1:
            close += 10
        if i == days - 1:
            close -= 18
        return {
            "open": close - 0.6,
            "high": close + 1.2,
            "low": close - 1.5,
            "close": close,
            "volume": 300000 if i == days - 3 else 2000 + i * 4,
        }
    return _build(generator)
