"""Volume window statistics for expansion checks"""

from dataclasses import dataclass
from typing import Optional, Sequence


@dataclass(frozen=True)
class VolumeWindow:
    """Average and coverage of usable volume over a prior window"""
    average: Optional[float]    # Mean of usable volumes, None if none are usable
    coverage: float             # Share of the window with usable volume (0-1)


def volume_window_stats(volumes: Sequence[Optional[float]], index: int, lookback: int) -> VolumeWindow:
    """
    Average and coverage of the ``lookback`` volumes before ``index``.

    Only positive, defined volumes count toward the average and coverage.

    Args:
        volumes: Volume series aligned with candles (None where unknown)
        index: Current index (excluded from the window)
        lookback: Window length

    Returns:
        VolumeWindow; coverage is 0 when the window is incomplete
    """
    if index - lookback < 0 or lookback <= 0:
        return VolumeWindow(average=None, coverage=0.0)

    usable = [v for v in volumes[index - lookback:index] if v is not None and v > 0]
    return VolumeWindow(
        average=sum(usable) / len(usable) if usable else None,
        coverage=len(usable) / lookback
    )
