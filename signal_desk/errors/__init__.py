"""
Error classification for the analysis pipeline.

This module provides the exception hierarchy for input data quality issues
and for failures inside the analysis engine itself.
"""

from .data_quality import (
    DataQualityError,
    TemporalDataError,
    MissingDataError,
    MalformedDataError,
    InsufficientDataError,
    InvalidParameterError,
)
from .system_failures import (
    SystemFailureError,
    MetricsCalculationError,
    StateTransitionError,
    ConfigurationError,
)

__all__ = [
    # Data Quality Errors
    "DataQualityError",
    "TemporalDataError",
    "MissingDataError",
    "MalformedDataError",
    "InsufficientDataError",
    "InvalidParameterError",
    # System Failures
    "SystemFailureError",
    "MetricsCalculationError",
    "StateTransitionError",
    "ConfigurationError",
]
