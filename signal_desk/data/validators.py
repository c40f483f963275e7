"""
Candle series validation.

Checks the invariants the indicator engine relies on: positive and
consistent prices, and strictly ascending timestamps.
"""

from typing import Sequence

from ..errors import InsufficientDataError, MalformedDataError, MissingDataError, TemporalDataError
from .models import Candle


class CandleSeriesValidator:
    """Validates an ordered candle series before analysis."""

    def validate(self, candles: Sequence[Candle]) -> None:
        """
        Validate a full candle series.

        Raises:
            MissingDataError: If the series is empty
            MalformedDataError: If a candle has invalid prices
            TemporalDataError: If a timestamp is naive or timestamps are not strictly ascending
        """
        if not candles:
            raise MissingDataError("Candle series is empty", data_type="candles")

        previous = None
        for index, candle in enumerate(candles):
            self.validate_candle(candle, index)

            if candle.ts.tzinfo is None or candle.ts.utcoffset() is None:
                raise TemporalDataError(
                    f"Candle {index} timestamp {candle.ts.isoformat()} is not timezone-aware",
                    timestamp=candle.ts
                )

            if previous is not None and candle.ts <= previous.ts:
                raise TemporalDataError(
                    f"Candle {index} timestamp {candle.ts.isoformat()} is not after "
                    f"{previous.ts.isoformat()}",
                    timestamp=candle.ts,
                    expected_timestamp=previous.ts
                )
            previous = candle

    def validate_candle(self, candle: Candle, index: int = 0) -> None:
        """Validate price consistency of a single candle."""
        prices = (candle.open, candle.high, candle.low, candle.close)
        if not all(price > 0 for price in prices):
            raise MalformedDataError(
                f"Candle {index} prices must be positive",
                raw_data=str(prices)
            )

        if candle.high < max(candle.open, candle.close):
            raise MalformedDataError(
                f"Candle {index} high {candle.high} below max(open {candle.open}, close {candle.close})",
                raw_data=str(prices)
            )

        if candle.low > min(candle.open, candle.close):
            raise MalformedDataError(
                f"Candle {index} low {candle.low} above min(open {candle.open}, close {candle.close})",
                raw_data=str(prices)
            )


def ensure_sufficient_history(candles: Sequence[Candle], minimum: int) -> None:
    """
    Enforce the minimum history required by the indicator warm-up.

    Raises:
        InsufficientDataError: If fewer than ``minimum`` candles are supplied
    """
    available = len(candles) if candles is not None else 0
    if available < minimum:
        raise InsufficientDataError(
            f"Need at least {minimum} daily candles for analysis, got {available}",
            required_count=minimum,
            available_count=available
        )
