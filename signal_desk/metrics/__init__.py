"""Indicator engine for daily technical analysis series"""

from .adx import rolling_adx
from .atr import calculate_atr_pct, calculate_true_range, rolling_atr, true_range_series
from .extremes import max_prev, min_prev
from .indicators import IndicatorSeries, build_indicators
from .moving_average import rolling_ema, rolling_sma
from .volume import VolumeWindow, volume_window_stats

__all__ = [
    "IndicatorSeries",
    "build_indicators",
    "rolling_sma",
    "rolling_ema",
    "rolling_atr",
    "rolling_adx",
    "calculate_true_range",
    "calculate_atr_pct",
    "true_range_series",
    "max_prev",
    "min_prev",
    "VolumeWindow",
    "volume_window_stats",
]
