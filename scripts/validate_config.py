#!/usr/bin/env python3
"""Configuration validation script."""

import sys
from pathlib import Path

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import yaml

from signal_desk.config.loader import ConfigLoader, build_strategy_config
from signal_desk.config.validation import ConfigValidator, ValidationError
from signal_desk.errors import ConfigurationError


def configured_symbols(loader: ConfigLoader) -> list[str]:
    """Symbols with overrides in instruments.yaml."""
    instruments_file = loader.config_dir / "instruments.yaml"
    if not instruments_file.exists():
        return []
    with open(instruments_file) as f:
        return sorted((yaml.safe_load(f) or {}).get("instruments", {}))


def validate_symbol_config(loader: ConfigLoader, symbol: str) -> list[ValidationError]:
    """Validate the merged configuration for one symbol."""
    config = loader.merge_config(symbol)
    errors = ConfigValidator.validate_config(config)
    if not errors:
        build_strategy_config(config)
    return errors


def main():
    """Validate every configured symbol plus the bare defaults."""
    print("🔍 Validating signal desk configuration...")

    loader = ConfigLoader.create()
    symbols = configured_symbols(loader) + ["UNKNOWN-SYMBOL"]
    all_valid = True

    for symbol in symbols:
        print(f"\n📊 Validating {symbol}...")

        try:
            errors = validate_symbol_config(loader, symbol)
        except ConfigurationError as e:
            print(f"❌ {symbol}: {e}")
            all_valid = False
            continue

        if errors:
            print(f"❌ Found {len(errors)} validation errors:")
            for error in errors:
                print(f"  • {error.field}: {error.message} (value: {error.value})")
            all_valid = False
        else:
            print(f"✅ {symbol} configuration is valid")

    if all_valid:
        print("\n🎉 All configuration validation passed!")
        sys.exit(0)
    else:
        print("\n❌ Configuration validation failed!")
        sys.exit(1)


if __name__ == "__main__":
    main()
