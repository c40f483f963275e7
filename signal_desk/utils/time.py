"""
Time semantics utilities for market vs wall-clock time handling.

Candle timestamps drive every evaluation; wall-clock time only measures
how old the latest candle is.
"""

from datetime import UTC, datetime
from typing import Optional


def get_wall_clock(now: Optional[datetime] = None) -> datetime:
    """
    Get the wall-clock reference time for staleness checks.

    Args:
        now: Optional pinned wall-clock time

    Returns:
        The pinned time, or the current UTC time when not provided
    """
    if now is not None:
        return now

    return datetime.now(UTC)


def hours_between(earlier: datetime, later: datetime) -> float:
    """
    Elapsed hours between two timestamps (positive when later is after earlier).

    Args:
        earlier: Start timestamp
        later: End timestamp

    Returns:
        Elapsed time in hours
    """
    return (later - earlier).total_seconds() / 3600.0


def staleness_hours(market_ts: datetime, now: Optional[datetime] = None) -> float:
    """
    Age of a market timestamp in hours relative to wall-clock time.

    Args:
        market_ts: Timestamp of the latest candle
        now: Optional pinned wall-clock time

    Returns:
        Age in hours
    """
    return hours_between(market_ts, get_wall_clock(now))


def format_market_time(market_ts: datetime) -> str:
    """
    Format market timestamp for results and logging.

    Args:
        market_ts: Market timestamp to format

    Returns:
        ISO8601 formatted string
    """
    return market_ts.isoformat()


def from_epoch_millis(value: float) -> datetime:
    """Convert an epoch-milliseconds value into an aware UTC datetime."""
    return datetime.fromtimestamp(value / 1000.0, tz=UTC)
