"""Edge Guardian: kernel-weighted edge estimation and risk gating over the trade sample."""

from .gate import build_edge_guardian
from .models import (
    CalibrationResult,
    DriftResult,
    EdgeEstimate,
    EdgeGuardianReport,
    OutOfSampleSummary,
)

__all__ = [
    "build_edge_guardian",
    "CalibrationResult",
    "DriftResult",
    "EdgeEstimate",
    "EdgeGuardianReport",
    "OutOfSampleSummary",
]
