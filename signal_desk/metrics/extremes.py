"""Extremes over the window strictly preceding an index"""

from typing import Optional, Sequence


def max_prev(values: Sequence[float], index: int, lookback: int) -> Optional[float]:
    """Maximum of the ``lookback`` values before ``index`` (None if the window is incomplete)."""
    if index - lookback < 0:
        return None
    return max(values[index - lookback:index])


def min_prev(values: Sequence[float], index: int, lookback: int) -> Optional[float]:
    """Minimum of the ``lookback`` values before ``index`` (None if the window is incomplete)."""
    if index - lookback < 0:
        return None
    return min(values[index - lookback:index])
