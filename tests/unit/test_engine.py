"""Unit tests for the analysis engine entry points."""

import pytest

from signal_desk.engine import SignalDeskEngine, analyze_symbol
from signal_desk.errors import ConfigurationError, InsufficientDataError, InvalidParameterError
from signal_desk.models.result import Action


class TestEngineInitialization:
    """Test engine construction."""

    def test_engine_creation(self, engine):
        """Test the engine loads the repository configuration directory."""
        assert engine.config_loader.config_dir.name == "config"


class TestRequestValidation:
    """Test request and configuration errors surface before analysis."""

    def test_invalid_equity(self, engine, declining_candles, now):
        """Test non-positive equity raises InvalidParameterError."""
        with pytest.raises(InvalidParameterError) as exc_info:
            engine.analyze("BTC", declining_candles, equity=0, risk_percent=1.0, now=now)
        assert any(msg.startswith("equity") for msg in exc_info.value.errors)

    def test_multiple_errors_collected(self, engine, declining_candles, now):
        """Test every invalid parameter is reported together."""
        with pytest.raises(InvalidParameterError) as exc_info:
            engine.analyze(
                "BTC", declining_candles, equity=-1, risk_percent=9.0, holding=True, now=now
            )
        assert len(exc_info.value.errors) == 3

    def test_invalid_override_value(self, engine, declining_candles, now):
        """Test an invalid override value raises ConfigurationError."""
        with pytest.raises(ConfigurationError) as exc_info:
            engine.analyze(
                "BTC", declining_candles, 10000, 1.0, now=now,
                overrides={"setup": {"breakout_lookback": 0}},
            )
        assert exc_info.value.field == "breakout_lookback"

    def test_string_staleness_override(self, engine, declining_candles, now):
        """Test a decision threshold given as a string raises ConfigurationError."""
        with pytest.raises(ConfigurationError) as exc_info:
            engine.analyze(
                "BTC", declining_candles, 10000, 1.0, now=now,
                overrides={"decision": {"max_stale_hours": "72"}},
            )
        assert exc_info.value.field == "max_stale_hours"

    def test_negative_risk_limit_override(self, engine, declining_candles, now):
        """Test a non-positive risk limit is a configuration error, not a request error."""
        with pytest.raises(ConfigurationError) as exc_info:
            engine.analyze(
                "BTC", declining_candles, 10000, 1.0, now=now,
                overrides={"limits": {"max_risk_percent": -1}},
            )
        assert exc_info.value.field == "max_risk_percent"

    def test_grade_order_override(self, engine, declining_candles, now):
        """Test grade cut-offs out of order raise ConfigurationError."""
        with pytest.raises(ConfigurationError) as exc_info:
            engine.analyze(
                "BTC", declining_candles, 10000, 1.0, now=now,
                overrides={"decision": {"grade_b": 90}},
            )
        assert exc_info.value.field == "grade_a"

    def test_unknown_override_field(self, engine, declining_candles, now):
        """Test an unknown override field raises ConfigurationError."""
        with pytest.raises(ConfigurationError):
            engine.analyze(
                "BTC", declining_candles, 10000, 1.0, now=now,
                overrides={"setup": {"lookback_days": 30}},
            )

    def test_short_history(self, engine, declining_candles, now):
        """Test fewer than 220 candles raises InsufficientDataError."""
        with pytest.raises(InsufficientDataError) as exc_info:
            engine.analyze("BTC", declining_candles[:100], 10000, 1.0, now=now)
        assert exc_info.value.available_count == 100


class TestAnalyzeResult:
    """Test the rendered analysis result."""

    def test_result_blocks(self, engine, declining_candles, now):
        """Test every presentation block is rendered."""
        rendered = engine.analyze("BTC", declining_candles, 10000, 1.0, now=now).to_dict()

        assert set(rendered) == {
            "symbol", "action", "timestamp", "market", "setup", "risk_plan", "quality",
            "backtest", "system", "edge_guardian", "holding", "quote_currency", "warnings", "reasons",
        }
        assert rendered["symbol"] == "BTC"
        assert rendered["timestamp"] == "2025-02-28T12:00:00+00:00"
        assert rendered["quality"]["stale_hours"] == 24.0
        assert rendered["backtest"]["window_days"] == 260

    def test_presentation_rounding(self, engine, declining_candles, now):
        """Test prices are rounded to two decimals."""
        rendered = engine.analyze("BTC", declining_candles, 10000, 1.0, now=now).to_dict()

        assert rendered["market"]["close"] == pytest.approx(196.4)
        assert rendered["risk_plan"]["equity"] == 10000.0
        assert rendered["risk_plan"]["requested_risk_amount"] == 100.0

    def test_inactive_setup_holds(self, engine, declining_candles, now):
        """Test an inactive setup yields HOLD with the no-setup reason last."""
        result = engine.analyze("BTC", declining_candles, 10000, 1.0, now=now)

        assert result.action == Action.HOLD
        assert result.reasons[-1] == "Entry setup is not active."
        assert result.reasons[0] == "Trend filter failed."

    def test_holding_block(self, engine, declining_candles, now):
        """Test the holding block echoes the declared entry."""
        result = engine.analyze(
            "BTC", declining_candles, 10000, 1.0, holding=True, entry_price=250.0, now=now
        )
        assert result.holding.enabled
        assert result.holding.entry_price == 250.0

    def test_analyze_symbol_helper(self, declining_candles, now):
        """Test the module-level helper matches the engine."""
        rendered = analyze_symbol("BTC", declining_candles, 10000, 1.0, now=now).to_dict()
        expected = SignalDeskEngine().analyze("BTC", declining_candles, 10000, 1.0, now=now).to_dict()
        assert rendered == expected
