"""
Setup evaluation and signal scoring module.

Derives entry filters, the composite signal score and the suggested stop
at a single index of an indicator series.
"""

from .setup import compute_initial_stop, evaluate_setup, score_setup

__all__ = ["evaluate_setup", "score_setup", "compute_initial_stop"]
