"""ADX (Average Directional Index) calculation"""

from typing import Optional, Sequence

from ..data.models import Candle
from .atr import true_range_series


def directional_movement(current: Candle, previous: Candle) -> tuple[float, float]:
    """
    +DM and -DM for one candle against its predecessor.

    Only the larger positive move counts; the other side is zero.
    """
    up_move = current.high - previous.high
    down_move = previous.low - current.low
    plus_dm = up_move if up_move > down_move and up_move > 0 else 0.0
    minus_dm = down_move if down_move > up_move and down_move > 0 else 0.0
    return plus_dm, minus_dm


def rolling_adx(candles: Sequence[Candle], period: int = 14) -> list[Optional[float]]:
    """
    Rolling ADX aligned with ``candles``.

    DX is computed from ``period``-bar sums of +DM, -DM and true range
    (DX = 100 * |+DI - -DI| / (+DI + -DI)); ADX is the mean of the last
    ``period`` DX values and requires all of them to be defined.

    Args:
        candles: Candles in chronological order
        period: ADX period (default 14)

    Returns:
        ADX series; None before index ``2 * period - 1`` or where a DX window is incomplete
    """
    n = len(candles)
    out: list[Optional[float]] = [None] * n
    if n < period * 2 + 1:
        return out

    plus_dm = [0.0] * n
    minus_dm = [0.0] * n
    for i in range(1, n):
        plus_dm[i], minus_dm[i] = directional_movement(candles[i], candles[i - 1])
    tr = true_range_series(candles)

    dx: list[Optional[float]] = [None] * n
    for i in range(period, n):
        window = range(i - period + 1, i + 1)
        sum_tr = sum(tr[j] for j in window)
        if sum_tr <= 0:
            continue

        plus_di = 100.0 * sum(plus_dm[j] for j in window) / sum_tr
        minus_di = 100.0 * sum(minus_dm[j] for j in window) / sum_tr
        denominator = plus_di + minus_di
        if denominator <= 0:
            continue
        dx[i] = 100.0 * abs(plus_di - minus_di) / denominator

    for i in range(period * 2 - 1, n):
        window_dx = [v for v in dx[i - period + 1:i + 1] if v is not None]
        if len(window_dx) == period:
            out[i] = sum(window_dx) / period
    return out
