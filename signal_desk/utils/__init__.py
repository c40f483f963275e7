"""
Utility functions module.

Time Semantics:
- Candle timestamps are ALWAYS authoritative
- Wall-clock time is only used to measure staleness of the latest candle
- Callers may pin wall-clock time to make an analysis reproducible
"""
