"""
Raw candle row normalization.

Converts provider rows (mappings with epoch-millisecond timestamps) into
immutable Candle objects. Missing or unusable volume becomes None rather
than zero so that volume coverage can tell "absent" from "quiet".
"""

import math
from datetime import datetime
from typing import Any, Iterable, Mapping, Optional

import structlog

from ..errors import MalformedDataError, MissingDataError
from ..utils.time import from_epoch_millis
from .models import Candle

logger = structlog.get_logger(__name__)

PRICE_FIELDS = ("open", "high", "low", "close")


class CandleNormalizer:
    """Normalizes raw OHLCV rows into Candle objects."""

    def __init__(self):
        self.logger = logger

    def normalize_rows(self, rows: Iterable[Mapping[str, Any]]) -> list[Candle]:
        """
        Normalize a sequence of raw rows.

        Args:
            rows: Mappings with time/open/high/low/close/volume keys

        Returns:
            Candles in input order

        Raises:
            MissingDataError: If no rows or a required field is missing
            MalformedDataError: If a field cannot be parsed
        """
        candles = [self.normalize_row(row, position) for position, row in enumerate(rows)]

        if not candles:
            raise MissingDataError("No candle rows provided", data_type="candles")

        dropped_volume = sum(1 for c in candles if c.volume is None)
        if dropped_volume:
            self.logger.debug(
                "Normalized candles with missing volume",
                candle_count=len(candles),
                missing_volume=dropped_volume
            )

        return candles

    def normalize_row(self, row: Mapping[str, Any], position: int = 0) -> Candle:
        """Normalize a single raw row."""
        if not isinstance(row, Mapping):
            raise MalformedDataError(
                f"Candle row {position} must be a mapping, got {type(row).__name__}",
                raw_data=str(row)[:100],
                expected_format="mapping"
            )

        if row.get("time") is None:
            raise MissingDataError(f"Candle row {position} missing 'time'", data_type="candle")

        ts = self._parse_time(row["time"], position)
        prices = {name: self._parse_price(row, name, position) for name in PRICE_FIELDS}
        volume = self._parse_volume(row.get("volume"))

        return Candle(ts=ts, volume=volume, **prices)

    def _parse_time(self, value: Any, position: int) -> datetime:
        if isinstance(value, datetime):
            if value.tzinfo is None:
                raise MalformedDataError(
                    f"Candle row {position} timestamp must be timezone-aware",
                    raw_data=str(value),
                    expected_format="aware datetime"
                )
            return value

        try:
            millis = float(value)
        except (TypeError, ValueError):
            raise MalformedDataError(
                f"Candle row {position} has unparsable time",
                raw_data=str(value)[:100],
                expected_format="epoch milliseconds"
            )

        if not math.isfinite(millis):
            raise MalformedDataError(
                f"Candle row {position} has non-finite time",
                raw_data=str(value),
                expected_format="epoch milliseconds"
            )

        return from_epoch_millis(millis)

    def _parse_price(self, row: Mapping[str, Any], name: str, position: int) -> float:
        if row.get(name) is None:
            raise MissingDataError(f"Candle row {position} missing '{name}'", data_type="candle")

        try:
            value = float(row[name])
        except (TypeError, ValueError):
            raise MalformedDataError(
                f"Candle row {position} has unparsable {name}",
                raw_data=str(row[name])[:100],
                expected_format="number"
            )

        if not math.isfinite(value):
            raise MalformedDataError(
                f"Candle row {position} has non-finite {name}",
                raw_data=str(row[name]),
                expected_format="finite number"
            )

        return value

    def _parse_volume(self, value: Any) -> Optional[float]:
        if value is None:
            return None
        try:
            volume = float(value)
        except (TypeError, ValueError):
            return None
        if not math.isfinite(volume) or volume < 0:
            return None
        return volume
