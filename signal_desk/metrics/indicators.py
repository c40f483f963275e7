"""Indicator series builder coordinating all rolling indicator calculations"""

from dataclasses import dataclass
from typing import Optional, Sequence

from ..config.defaults import IndicatorParams
from ..data.models import Candle
from ..data.validators import ensure_sufficient_history
from ..errors import MetricsCalculationError
from .adx import rolling_adx
from .atr import rolling_atr
from .moving_average import rolling_ema, rolling_sma


@dataclass(frozen=True)
class IndicatorSeries:
    """
    Parallel indicator arrays aligned index-for-index with the candles.

    Entries before an indicator's lookback window are None. Derived per
    analysis and never shared between analyses.
    """
    closes: tuple[float, ...]
    highs: tuple[float, ...]
    lows: tuple[float, ...]
    volumes: tuple[Optional[float], ...]
    sma_fast: tuple[Optional[float], ...]
    sma_slow: tuple[Optional[float], ...]
    ema: tuple[Optional[float], ...]
    atr: tuple[Optional[float], ...]
    adx: tuple[Optional[float], ...]

    def __len__(self) -> int:
        return len(self.closes)


def build_indicators(candles: Sequence[Candle], params: Optional[IndicatorParams] = None) -> IndicatorSeries:
    """
    Compute every indicator for a candle series.

    Args:
        candles: Candles in chronological order
        params: Indicator lookbacks

    Returns:
        IndicatorSeries aligned with ``candles``

    Raises:
        InsufficientDataError: If fewer than ``params.min_candles`` candles are supplied
        MetricsCalculationError: If a computed series is misaligned with the candles
    """
    params = params or IndicatorParams()
    ensure_sufficient_history(candles, params.min_candles)

    closes = tuple(c.close for c in candles)
    series = IndicatorSeries(
        closes=closes,
        highs=tuple(c.high for c in candles),
        lows=tuple(c.low for c in candles),
        volumes=tuple(c.volume for c in candles),
        sma_fast=tuple(rolling_sma(closes, params.sma_fast_period)),
        sma_slow=tuple(rolling_sma(closes, params.sma_slow_period)),
        ema=tuple(rolling_ema(closes, params.ema_period)),
        atr=tuple(rolling_atr(candles, params.atr_period)),
        adx=tuple(rolling_adx(candles, params.adx_period)),
    )

    for name in ("sma_fast", "sma_slow", "ema", "atr", "adx"):
        length = len(getattr(series, name))
        if length != len(candles):
            raise MetricsCalculationError(
                f"Indicator '{name}' has {length} values for {len(candles)} candles",
                metric_name=name,
                calculation_input={"candle_count": len(candles)}
            )

    return series
