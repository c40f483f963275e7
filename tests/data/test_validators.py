"""Tests for candle series validation."""

import dataclasses

import pytest

from signal_desk.data.validators import CandleSeriesValidator, ensure_sufficient_history
from signal_desk.errors import (
    InsufficientDataError,
    MalformedDataError,
    MissingDataError,
    TemporalDataError,
)


@pytest.fixture
def validator():
    return CandleSeriesValidator()


class TestCandleSeriesValidator:
    """Test price and ordering checks."""

    def test_valid_series(self, validator, declining_candles):
        """Test a well-formed series passes."""
        validator.validate(declining_candles)

    def test_empty_series(self, validator):
        """Test an empty series is missing data."""
        with pytest.raises(MissingDataError):
            validator.validate([])

    def test_non_positive_price(self, validator, declining_candles):
        """Test a zero low is malformed."""
        candles = list(declining_candles)
        candles[5] = dataclasses.replace(candles[5], low=0.0)
        with pytest.raises(MalformedDataError, match="Candle 5"):
            validator.validate(candles)

    def test_high_below_close(self, validator, declining_candles):
        """Test a high under the close is malformed."""
        candles = list(declining_candles)
        candles[3] = dataclasses.replace(candles[3], high=candles[3].close - 0.5)
        with pytest.raises(MalformedDataError):
            validator.validate(candles)

    def test_low_above_open(self, validator, declining_candles):
        """Test a low over the open is malformed."""
        candles = list(declining_candles)
        candles[3] = dataclasses.replace(candles[3], low=candles[3].open + 0.1)
        with pytest.raises(MalformedDataError):
            validator.validate(candles)

    def test_duplicate_timestamp(self, validator, declining_candles):
        """Test equal timestamps are not strictly ascending."""
        candles = list(declining_candles)
        candles[10] = dataclasses.replace(candles[10], ts=candles[9].ts)
        with pytest.raises(TemporalDataError) as exc_info:
            validator.validate(candles)
        assert exc_info.value.expected_timestamp == candles[9].ts

    def test_out_of_order(self, validator, declining_candles):
        """Test reversed candles are rejected."""
        with pytest.raises(TemporalDataError):
            validator.validate(list(reversed(declining_candles)))


class TestEnsureSufficientHistory:
    """Test the warm-up length precondition."""

    def test_enough(self, declining_candles):
        """Test exactly the minimum passes."""
        ensure_sufficient_history(declining_candles[:220], 220)

    def test_too_few(self, declining_candles):
        """Test one candle short raises with counts."""
        with pytest.raises(InsufficientDataError) as exc_info:
            ensure_sufficient_history(declining_candles[:219], 220)
        assert exc_info.value.required_count == 220
        assert exc_info.value.available_count == 219
        assert exc_info.value.recoverable


class TestTimezoneAwareness:
    """Test naive timestamps are rejected."""

    def test_naive_timestamp(self, validator, declining_candles):
        """Test a naive timestamp raises TemporalDataError instead of failing later."""
        candles = list(declining_candles)
        candles[7] = dataclasses.replace(candles[7], ts=candles[7].ts.replace(tzinfo=None))
        with pytest.raises(TemporalDataError, match="Candle 7 .* not timezone-aware"):
            validator.validate(candles)

    def test_fully_naive_series(self, validator, declining_candles):
        """Test a series without any timezone fails on its first candle."""
        candles = [dataclasses.replace(c, ts=c.ts.replace(tzinfo=None)) for c in declining_candles]
        with pytest.raises(TemporalDataError) as exc_info:
            validator.validate(candles)
        assert exc_info.value.recoverable
