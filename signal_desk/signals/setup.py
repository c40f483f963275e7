"""
Setup evaluator.

Combines a trend filter, a breakout trigger, a liquidity confirmation, a
trend-strength filter and a volatility band into one entry signal. The
score weights encode relative importance; they are not fitted.
"""

from typing import Optional

from ..config.defaults import ScoringParams, SetupParams
from ..metrics.atr import calculate_atr_pct
from ..metrics.extremes import max_prev, min_prev
from ..metrics.indicators import IndicatorSeries
from ..metrics.volume import volume_window_stats
from ..models.setup import Setup


def compute_initial_stop(
    reference_price: float,
    atr: Optional[float],
    swing_low: Optional[float],
    atr_stop_mult: float
) -> Optional[float]:
    """
    Lowest of the swing low and the ATR stop, among candidates below the price.

    Args:
        reference_price: Close (live setup) or next-bar fill (backtest entry)
        atr: ATR at the signal index
        swing_low: Minimum low of the prior swing window
        atr_stop_mult: ATR multiple below the reference price

    Returns:
        Stop price, or None if no candidate lies below ``reference_price``
    """
    atr_stop = reference_price - atr_stop_mult * atr if atr is not None else None
    candidates = [v for v in (swing_low, atr_stop) if v is not None and v < reference_price]
    return min(candidates) if candidates else None


def score_setup(
    regime_long: bool,
    breakout: bool,
    volume_expansion: bool,
    adx_pass: bool,
    volatility_pass: bool,
    close: float,
    sma_fast: Optional[float],
    atr_pct: Optional[float],
    scoring: Optional[ScoringParams] = None
) -> int:
    """Weighted 0-100 signal score of the entry filters."""
    scoring = scoring or ScoringParams()

    score = 0
    if regime_long:
        score += scoring.regime_weight
    if breakout:
        score += scoring.breakout_weight
    if volume_expansion:
        score += scoring.volume_weight
    if adx_pass:
        score += scoring.adx_weight
    if volatility_pass:
        score += scoring.volatility_weight
    if sma_fast is not None and close > sma_fast:
        score += scoring.above_sma_fast_weight
    if atr_pct is not None and scoring.atr_band_min_pct <= atr_pct <= scoring.atr_band_max_pct:
        score += scoring.atr_band_weight

    return min(100, max(0, round(score)))


def evaluate_setup(
    index: int,
    indicators: IndicatorSeries,
    params: Optional[SetupParams] = None,
    scoring: Optional[ScoringParams] = None
) -> Setup:
    """
    Evaluate every entry condition at ``index``.

    Undefined indicator values fail their condition.

    Args:
        index: Candle index to evaluate
        indicators: Indicator series for the full candle history
        params: Entry filter parameters
        scoring: Signal score weights

    Returns:
        Setup value object
    """
    params = params or SetupParams()

    close = indicators.closes[index]
    volume = indicators.volumes[index]
    sma_fast = indicators.sma_fast[index]
    sma_fast_prev = indicators.sma_fast[index - 1] if index > 0 else None
    sma_slow = indicators.sma_slow[index]
    atr = indicators.atr[index]
    adx = indicators.adx[index]

    breakout_level = max_prev(indicators.highs, index, params.breakout_lookback)
    breakout = breakout_level is not None and close > breakout_level

    window = volume_window_stats(indicators.volumes, index, params.volume_lookback)
    volume_expansion = (
        window.coverage >= params.min_volume_coverage
        and window.average is not None
        and volume is not None
        and volume > window.average * params.volume_expansion_mult
    )

    regime_long = (
        sma_fast is not None
        and sma_fast_prev is not None
        and sma_slow is not None
        and close > sma_slow
        and sma_fast > sma_fast_prev
    )

    adx_pass = adx is not None and adx >= params.adx_threshold
    atr_pct = calculate_atr_pct(atr, close)
    volatility_pass = atr_pct is not None and params.atr_pct_min <= atr_pct <= params.atr_pct_max

    swing_low = min_prev(indicators.lows, index, params.swing_lookback)
    suggested_stop = compute_initial_stop(close, atr, swing_low, params.atr_stop_mult)
    risk_per_unit = close - suggested_stop if suggested_stop is not None else None

    entry_signal = regime_long and breakout and volume_expansion and adx_pass and volatility_pass
    signal_score = score_setup(
        regime_long=regime_long,
        breakout=breakout,
        volume_expansion=volume_expansion,
        adx_pass=adx_pass,
        volatility_pass=volatility_pass,
        close=close,
        sma_fast=sma_fast,
        atr_pct=atr_pct,
        scoring=scoring,
    )

    return Setup(
        index=index,
        close=close,
        volume=volume,
        breakout_level=breakout_level,
        breakout=breakout,
        volume_avg=window.average,
        volume_coverage=window.coverage,
        volume_expansion=volume_expansion,
        sma_fast=sma_fast,
        sma_slow=sma_slow,
        ema=indicators.ema[index],
        regime_long=regime_long,
        adx=adx,
        adx_pass=adx_pass,
        atr=atr,
        atr_pct=atr_pct,
        volatility_pass=volatility_pass,
        swing_low=swing_low,
        suggested_stop=suggested_stop,
        risk_per_unit=risk_per_unit,
        entry_signal=entry_signal,
        signal_score=signal_score,
    )
