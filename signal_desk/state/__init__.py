"""
Backtest state machine module.

Replays a candle history through a two-state (FLAT / IN_POSITION)
trailing-stop state machine and returns the settled trade sample.
"""
