#!/usr/bin/env python3
"""
Basic Usage Example - Signal Desk

Builds a synthetic daily history, normalizes it from provider-style rows
and runs a single-symbol analysis followed by a small multi-asset scan.

Run: python examples/basic_usage.py
"""

import json
import math
from datetime import UTC, datetime, timedelta
from typing import Any

from signal_desk.data.models import MarketData
from signal_desk.data.normalizer import CandleNormalizer
from signal_desk.engine import SignalDeskEngine
from signal_desk.logging import configure_logging

NOW = datetime(2025, 3, 1, 12, tzinfo=UTC)


def create_daily_rows(days: int = 300, base: float = 100.0, drift: float = 0.004) -> list[dict[str, Any]]:
    """Create provider-style rows: epoch milliseconds and string prices."""
    rows = []
    for i in range(days):
        close = base * math.exp(drift * i + 0.03 * math.sin(i / 6))
        ts = NOW - timedelta(days=days - i)
        rows.append({
            "time": int(ts.timestamp() * 1000),
            "open": f"{close * 0.995:.4f}",
            "high": f"{close * 1.015:.4f}",
            "low": f"{close * 0.985:.4f}",
            "close": f"{close:.4f}",
            "volume": str(1000 + (i % 17) * 150),
        })
    return rows


def main():
    """Main demonstration function."""
    configure_logging(level="WARNING")
    print("🚀 Signal Desk - Basic Usage Demo")
    print("=" * 60)

    normalizer = CandleNormalizer()
    engine = SignalDeskEngine()

    print("1. Analyzing BTC...")
    btc = normalizer.normalize_rows(create_daily_rows())
    result = engine.analyze("BTC", btc, equity=10000, risk_percent=1.0, now=NOW)
    print(json.dumps(result.to_dict(), indent=2))
    print()

    print("2. Scanning several markets...")
    markets = [
        MarketData("BTC", tuple(btc), "USD", provider_used="synthetic"),
        MarketData("ETH", tuple(normalizer.normalize_rows(create_daily_rows(base=30.0, drift=-0.002))), "usd"),
        MarketData("SOL", tuple(normalizer.normalize_rows(create_daily_rows(days=120))), "USD"),
    ]
    for row in engine.scan(markets, equity=10000, risk_percent=1.0, now=NOW):
        if row.ok:
            print(f"   {row.symbol}: {row.display_action} (confidence {row.confidence}, grade {row.grade})")
        else:
            print(f"   {row.symbol}: failed - {row.error}")

    print()
    print("✅ Demo completed successfully!")


if __name__ == "__main__":
    main()
