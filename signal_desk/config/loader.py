"""Configuration loader with 3-tier parameter precedence."""

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Optional

import yaml

from ..errors import ConfigurationError
from .defaults import (
    BacktestParams,
    DecisionParams,
    GuardianParams,
    IndicatorParams,
    RequestLimits,
    ScoringParams,
    SetupParams,
    StrategyConfig,
    get_default_config,
)

SECTION_TYPES: dict[str, type] = {
    "indicators": IndicatorParams,
    "setup": SetupParams,
    "scoring": ScoringParams,
    "backtest": BacktestParams,
    "guardian": GuardianParams,
    "decision": DecisionParams,
    "limits": RequestLimits,
}


@dataclass(frozen=True)
class ConfigLoader:
    """Manages configuration loading with 3-tier precedence."""

    config_dir: Path
    defaults: StrategyConfig

    @classmethod
    def create(cls, config_dir: Optional[Path] = None) -> "ConfigLoader":
        """Create a ConfigLoader instance."""
        if config_dir is None:
            config_dir = Path(__file__).parent.parent.parent / "config"

        return cls(
            config_dir=Path(config_dir),
            defaults=get_default_config(),
        )

    def load_instrument_config(self, symbol: str) -> dict[str, Any]:
        """Load symbol-specific configuration overrides."""
        instruments_file = self.config_dir / "instruments.yaml"

        if not instruments_file.exists():
            return {}

        with open(instruments_file) as f:
            instruments_config = yaml.safe_load(f) or {}

        return instruments_config.get("instruments", {}).get(symbol, {}) or {}

    def merge_config(
        self,
        symbol: str,
        request_overrides: Optional[dict[str, Any]] = None
    ) -> dict[str, Any]:
        """
        Merge configuration with 3-tier precedence.

        Priority order:
        1. Per-request overrides (highest priority)
        2. Symbol-specific overrides
        3. Global defaults (lowest priority)
        """
        config = self._dataclass_to_dict(self.defaults)

        instrument_config = self.load_instrument_config(symbol)
        config = self._deep_merge(config, instrument_config)

        if request_overrides:
            config = self._deep_merge(config, request_overrides)

        return config

    def load_strategy_config(
        self,
        symbol: str,
        request_overrides: Optional[dict[str, Any]] = None
    ) -> StrategyConfig:
        """Merge all tiers and rebuild frozen parameter dataclasses."""
        return build_strategy_config(self.merge_config(symbol, request_overrides))

    def _dataclass_to_dict(self, obj: Any) -> dict[str, Any]:
        """Convert nested dataclasses to dictionary."""
        if hasattr(obj, '__dataclass_fields__'):
            result = {}
            for field_name in obj.__dataclass_fields__:
                value = getattr(obj, field_name)
                if hasattr(value, '__dataclass_fields__'):
                    result[field_name] = self._dataclass_to_dict(value)
                else:
                    result[field_name] = value
            return result
        return obj

    def _deep_merge(self, base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """Deep merge two dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result


def build_strategy_config(config: dict[str, Any]) -> StrategyConfig:
    """
    Build a StrategyConfig from a merged configuration mapping.

    Raises:
        ConfigurationError: On unknown sections or unknown fields
    """
    unknown_sections = set(config) - set(SECTION_TYPES)
    if unknown_sections:
        raise ConfigurationError(
            f"Unknown configuration sections: {sorted(unknown_sections)}",
            section=sorted(unknown_sections)[0]
        )

    sections = {}
    for name, section_type in SECTION_TYPES.items():
        values = config.get(name, {}) or {}
        if not isinstance(values, dict):
            raise ConfigurationError(f"Section '{name}' must be a mapping", section=name)

        known = {f.name for f in fields(section_type)}
        unknown = set(values) - known
        if unknown:
            raise ConfigurationError(
                f"Unknown fields in section '{name}': {sorted(unknown)}",
                section=name,
                field=sorted(unknown)[0]
            )
        sections[name] = section_type(**values)

    return StrategyConfig(**sections)
