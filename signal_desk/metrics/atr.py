"""ATR (Average True Range) calculations over a candle series"""

from typing import Optional, Sequence

from ..data.models import Candle


def calculate_true_range(current: Candle, previous: Optional[Candle] = None) -> float:
    """
    Calculate True Range for a single candle

    TR = max(high - low, abs(high - prev_close), abs(low - prev_close))

    Args:
        current: Current candle
        previous: Previous candle (None for first candle)

    Returns:
        True Range value
    """
    if previous is None:
        return current.high - current.low

    range_hl = current.high - current.low
    range_hc = abs(current.high - previous.close)
    range_lc = abs(current.low - previous.close)

    return max(range_hl, range_hc, range_lc)


def true_range_series(candles: Sequence[Candle]) -> list[Optional[float]]:
    """
    True Range for every candle that has a predecessor.

    Index 0 is None because it has no previous close.
    """
    out: list[Optional[float]] = [None] * len(candles)
    for i in range(1, len(candles)):
        out[i] = calculate_true_range(candles[i], candles[i - 1])
    return out


def rolling_atr(candles: Sequence[Candle], period: int = 14) -> list[Optional[float]]:
    """
    Rolling ATR aligned with ``candles``.

    Seeded at index ``period`` with the mean of the first ``period`` true
    ranges, then maintained as a moving sum (add newest, drop oldest).

    Args:
        candles: Candles in chronological order
        period: ATR period (default 14)

    Returns:
        ATR series; None until ``period + 1`` candles are available
    """
    out: list[Optional[float]] = [None] * len(candles)
    if len(candles) < period + 1:
        return out

    tr = true_range_series(candles)

    window_sum = sum(tr[1:period + 1])
    out[period] = window_sum / period

    for i in range(period + 1, len(candles)):
        window_sum += tr[i] - tr[i - period]
        out[i] = window_sum / period
    return out


def calculate_atr_pct(atr: Optional[float], close: float) -> Optional[float]:
    """
    ATR as a percentage of the close

    ATR% = 100 * ATR / close

    Args:
        atr: ATR value (None when undefined)
        close: Close price

    Returns:
        ATR percentage, or None when ATR is undefined or close is not positive
    """
    if atr is None or close <= 0:
        return None

    return 100.0 * atr / close
