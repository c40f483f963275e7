"""
Signal Desk - Daily Breakout Analysis Engine

Analyzes daily price history for a single asset and produces a
BUY/SELL/HOLD/ABSTAIN recommendation with a risk-sized position plan,
a historical backtest and an Edge Guardian confidence assessment.
"""

__version__ = "0.1.0"
__author__ = "Signal Desk Team"
