"""
Canonical data models for normalized market data.

This module defines immutable data structures that represent clean, validated
daily candles and the envelope a market-data collaborator hands to the engine.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional


@dataclass(frozen=True)
class Candle:
    """Normalized daily candle with a UTC timestamp."""
    ts: datetime                # UTC market timestamp
    open: float                 # Opening price
    high: float                 # High price
    low: float                  # Low price
    close: float                # Closing price
    volume: Optional[float]     # Base volume, None when the source has none

    @property
    def has_volume(self) -> bool:
        """True when the candle carries a usable (positive) volume."""
        return self.volume is not None and self.volume > 0


@dataclass(frozen=True)
class MarketData:
    """Candle series plus provenance, as produced by a market-data source."""
    symbol: str
    candles: tuple[Candle, ...]
    quote_currency: str
    provider_used: Optional[str] = None
    diagnostics: dict[str, Any] = field(default_factory=dict)
