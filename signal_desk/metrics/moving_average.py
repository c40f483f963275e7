"""Simple and exponential moving averages over aligned series"""

from typing import Optional, Sequence


def rolling_sma(values: Sequence[float], period: int) -> list[Optional[float]]:
    """
    Simple moving average aligned index-for-index with ``values``.

    Entries before the first full window are None.

    Args:
        values: Input series (e.g. closes)
        period: Window length

    Returns:
        SMA series of the same length as ``values``
    """
    out: list[Optional[float]] = [None] * len(values)
    if len(values) < period:
        return out

    window_sum = 0.0
    for i, value in enumerate(values):
        window_sum += value
        if i >= period:
            window_sum -= values[i - period]
        if i >= period - 1:
            out[i] = window_sum / period
    return out


def rolling_ema(values: Sequence[float], period: int) -> list[Optional[float]]:
    """
    Exponential moving average seeded with the SMA of the first ``period`` values.

    Smoothing weight is ``2 / (period + 1)``.

    Args:
        values: Input series (e.g. closes)
        period: EMA period

    Returns:
        EMA series of the same length as ``values``
    """
    out: list[Optional[float]] = [None] * len(values)
    if len(values) < period:
        return out

    k = 2.0 / (period + 1)
    out[period - 1] = sum(values[:period]) / period
    for i in range(period, len(values)):
        out[i] = values[i] * k + out[i - 1] * (1 - k)
    return out
