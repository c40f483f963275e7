"""Configuration and request parameter validation utilities."""

import math
from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class ValidationError:
    """Represents a configuration validation error."""
    field: str
    message: str
    value: Any


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def _is_positive_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


class ConfigValidator:
    """Validates configuration parameters and analysis requests."""

    @staticmethod
    def _check_positive_ints(params: dict[str, Any], names: list[str]) -> list[ValidationError]:
        errors = []
        for name in names:
            if name in params and not _is_positive_int(params[name]):
                errors.append(ValidationError(
                    field=name,
                    message="Must be a positive integer",
                    value=params[name]
                ))
        return errors

    @staticmethod
    def _check_fractions(params: dict[str, Any], names: list[str]) -> list[ValidationError]:
        errors = []
        for name in names:
            if name in params:
                value = params[name]
                if not _is_number(value) or value < 0 or value > 1:
                    errors.append(ValidationError(
                        field=name,
                        message="Must be a number between 0 and 1",
                        value=value
                    ))
        return errors

    @staticmethod
    def _check_numbers(
        params: dict[str, Any],
        names: list[str],
        minimum: Optional[float] = None,
        strict: bool = False
    ) -> list[ValidationError]:
        """Finite numbers, optionally bounded below (strictly when ``strict``)."""
        errors = []
        for name in names:
            if name not in params:
                continue
            value = params[name]
            if minimum is None:
                valid = _is_number(value)
                message = "Must be a number"
            elif strict:
                valid = _is_number(value) and value > minimum
                message = "Must be a positive number" if minimum == 0 else f"Must be above {minimum:g}"
            else:
                valid = _is_number(value) and value >= minimum
                message = "Must be a non-negative number" if minimum == 0 else f"Must be at least {minimum:g}"
            if not valid:
                errors.append(ValidationError(field=name, message=message, value=value))
        return errors

    @staticmethod
    def _check_percent(params: dict[str, Any], names: list[str]) -> list[ValidationError]:
        errors = []
        for name in names:
            if name in params:
                value = params[name]
                if not _is_number(value) or value < 0 or value > 100:
                    errors.append(ValidationError(
                        field=name,
                        message="Must be a number between 0 and 100",
                        value=value
                    ))
        return errors

    @staticmethod
    def validate_indicator_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate indicator lookbacks."""
        errors = ConfigValidator._check_positive_ints(params, [
            "sma_fast_period", "sma_slow_period", "ema_period",
            "atr_period", "adx_period", "min_candles",
        ])

        fast = params.get("sma_fast_period")
        slow = params.get("sma_slow_period")
        if _is_positive_int(fast) and _is_positive_int(slow) and fast >= slow:
            errors.append(ValidationError(
                field="sma_fast_period",
                message="Must be shorter than sma_slow_period",
                value=fast
            ))

        min_candles = params.get("min_candles")
        if _is_positive_int(min_candles) and _is_positive_int(slow) and min_candles <= slow:
            errors.append(ValidationError(
                field="min_candles",
                message="Must exceed sma_slow_period",
                value=min_candles
            ))

        return errors

    @staticmethod
    def validate_setup_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate entry filter parameters."""
        errors = ConfigValidator._check_positive_ints(params, [
            "breakout_lookback", "volume_lookback", "swing_lookback",
        ])
        errors.extend(ConfigValidator._check_fractions(params, ["min_volume_coverage"]))

        for name in ("volume_expansion_mult", "atr_stop_mult"):
            if name in params and (not _is_number(params[name]) or params[name] <= 0):
                errors.append(ValidationError(
                    field=name,
                    message="Must be a positive number",
                    value=params[name]
                ))

        if "adx_threshold" in params:
            value = params["adx_threshold"]
            if not _is_number(value) or value < 0 or value > 100:
                errors.append(ValidationError(
                    field="adx_threshold",
                    message="Must be a number between 0 and 100",
                    value=value
                ))

        errors.extend(ConfigValidator._check_numbers(params, ["atr_pct_min", "atr_pct_max"], minimum=0))

        low = params.get("atr_pct_min")
        high = params.get("atr_pct_max")
        if _is_number(low) and _is_number(high) and low >= high:
            errors.append(ValidationError(
                field="atr_pct_min",
                message="Must be below atr_pct_max",
                value=low
            ))

        return errors

    @staticmethod
    def validate_backtest_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate replay parameters."""
        errors = ConfigValidator._check_positive_ints(params, ["warmup_index"])
        errors.extend(ConfigValidator._check_fractions(params, ["max_risk_fraction"]))

        for name in ("fee_bps", "slippage_bps"):
            if name in params and (not _is_number(params[name]) or params[name] < 0):
                errors.append(ValidationError(
                    field=name,
                    message="Must be a non-negative number",
                    value=params[name]
                ))

        return errors

    @staticmethod
    def validate_guardian_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate Edge Guardian parameters."""
        errors = []

        if "kernel_bandwidth" in params:
            value = params["kernel_bandwidth"]
            if not _is_number(value) or value <= 0:
                errors.append(ValidationError(
                    field="kernel_bandwidth",
                    message="Must be a positive number",
                    value=value
                ))

        errors.extend(ConfigValidator._check_fractions(params, [
            "min_probability_positive", "drift_recent_fraction", "oos_train_fraction",
            "thin_evidence_factor", "ci_non_positive_factor", "low_probability_factor",
            "weak_calibration_factor", "drift_factor", "brier_throttle", "brier_block",
            "min_risk_multiplier", "max_risk_multiplier",
        ]))
        errors.extend(ConfigValidator._check_numbers(params, ["z_score"], minimum=0, strict=True))
        errors.extend(ConfigValidator._check_numbers(params, ["min_effective_sample", "degenerate_se"], minimum=0))
        errors.extend(ConfigValidator._check_numbers(params, [
            "drift_degraded_delta", "drift_block_recent", "drift_block_delta",
        ]))
        errors.extend(ConfigValidator._check_positive_ints(params, [
            "calibration_min_trades", "calibration_warmup_trades", "drift_min_trades",
            "drift_recent_min", "drift_recent_max", "drift_baseline_max", "oos_min_trades",
        ]))

        low = params.get("min_risk_multiplier")
        high = params.get("max_risk_multiplier")
        if _is_number(low) and _is_number(high) and not 0 < low <= high <= 1:
            errors.append(ValidationError(
                field="min_risk_multiplier",
                message="Must satisfy 0 < min_risk_multiplier <= max_risk_multiplier <= 1",
                value=low
            ))

        return errors

    @staticmethod
    def validate_scoring_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate signal score weights."""
        errors = ConfigValidator._check_numbers(params, [
            "regime_weight", "breakout_weight", "volume_weight", "adx_weight",
            "volatility_weight", "above_sma_fast_weight", "atr_band_weight",
            "atr_band_min_pct", "atr_band_max_pct",
        ], minimum=0)

        low = params.get("atr_band_min_pct")
        high = params.get("atr_band_max_pct")
        if _is_number(low) and _is_number(high) and low >= high:
            errors.append(ValidationError(
                field="atr_band_min_pct",
                message="Must be below atr_band_max_pct",
                value=low
            ))

        return errors

    @staticmethod
    def validate_decision_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate action gates and the confidence rubric."""
        errors = ConfigValidator._check_numbers(params, [
            "max_stale_hours", "stale_warning_hours", "tp1_r_multiple",
        ], minimum=0, strict=True)
        errors.extend(ConfigValidator._check_percent(params, [
            "min_confidence", "grade_a", "grade_b", "grade_c", "min_probability_positive_pct",
        ]))
        errors.extend(ConfigValidator._check_numbers(params, [
            "regime_points", "breakout_points", "volume_points", "adx_points",
            "volatility_points", "expectancy_points", "profit_factor_points",
            "probability_points", "thin_volume_penalty", "stale_penalty",
            "few_trades_penalty", "min_profit_factor", "min_trades",
        ], minimum=0))
        errors.extend(ConfigValidator._check_fractions(params, [
            "thin_volume_coverage", "volume_coverage_warning",
        ]))

        grades = [params.get(name) for name in ("grade_a", "grade_b", "grade_c")]
        if all(_is_number(g) for g in grades) and not grades[0] > grades[1] > grades[2]:
            errors.append(ValidationError(
                field="grade_a",
                message="Grade cut-offs must satisfy grade_a > grade_b > grade_c",
                value=grades[0]
            ))

        return errors

    @staticmethod
    def validate_limits_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate bounds on request parameters."""
        errors = []

        if "max_risk_percent" in params:
            value = params["max_risk_percent"]
            if not _is_number(value) or value <= 0 or value > 100:
                errors.append(ValidationError(
                    field="max_risk_percent",
                    message="Must be a number above 0 and at most 100",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_config(config: dict[str, Any]) -> list[ValidationError]:
        """
        Validate complete configuration.

        Sections that are not mappings are left to ``build_strategy_config``,
        which rejects them.
        """
        section_validators = {
            "indicators": ConfigValidator.validate_indicator_params,
            "setup": ConfigValidator.validate_setup_params,
            "scoring": ConfigValidator.validate_scoring_params,
            "backtest": ConfigValidator.validate_backtest_params,
            "guardian": ConfigValidator.validate_guardian_params,
            "decision": ConfigValidator.validate_decision_params,
            "limits": ConfigValidator.validate_limits_params,
        }

        errors = []
        for section, validator in section_validators.items():
            params = config.get(section)
            if isinstance(params, dict):
                errors.extend(validator(params))

        return errors

    @staticmethod
    def validate_analysis_request(
        equity: Any,
        risk_percent: Any,
        holding: bool,
        entry_price: Optional[Any],
        quote_currency: Any,
        max_risk_percent: float = 5.0
    ) -> list[ValidationError]:
        """Validate caller-supplied analysis parameters."""
        errors = []

        if not _is_number(equity) or equity <= 0:
            errors.append(ValidationError(
                field="equity",
                message="Equity must be a positive number",
                value=equity
            ))

        if not _is_number(risk_percent) or risk_percent <= 0 or risk_percent > max_risk_percent:
            errors.append(ValidationError(
                field="risk_percent",
                message=f"Risk percent must be between 0 and {max_risk_percent:g}",
                value=risk_percent
            ))

        if holding and (not _is_number(entry_price) or entry_price <= 0):
            errors.append(ValidationError(
                field="entry_price",
                message="Entry price must be a positive number when holding",
                value=entry_price
            ))

        if not isinstance(quote_currency, str) or not quote_currency.strip():
            errors.append(ValidationError(
                field="quote_currency",
                message="Quote currency must be a non-empty string",
                value=quote_currency
            ))

        return errors
