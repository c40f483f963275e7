"""
System failure error classifications.

These exceptions indicate a broken invariant inside the engine rather than
bad input, and are never retried.
"""

from typing import Any, Optional


class SystemFailureError(Exception):
    """Base class for unrecoverable engine failures."""

    def __init__(self, message: str, context: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = False


class MetricsCalculationError(SystemFailureError):
    """Indicator computation produced an unusable series."""

    def __init__(self, message: str, metric_name: Optional[str] = None,
                 calculation_input: Optional[dict[str, Any]] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.metric_name = metric_name
        self.calculation_input = calculation_input


class StateTransitionError(SystemFailureError):
    """Invalid backtest state transition (e.g. opening a second position)."""

    def __init__(self, message: str, current_state: Optional[str] = None,
                 attempted_transition: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.current_state = current_state
        self.attempted_transition = attempted_transition


class ConfigurationError(SystemFailureError):
    """Strategy configuration contains unknown or invalid entries."""

    def __init__(self, message: str, section: Optional[str] = None,
                 field: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.section = section
        self.field = field
