"""Cross-cutting properties of the analysis output."""

import pytest

from signal_desk.decision.confidence import grade_for_score

pytestmark = pytest.mark.integration

FIXTURES = [
    "declining_candles",
    "final_breakout_candles",
    "two_day_breakout_candles",
    "crash_candles",
    "exit_on_last_bar_candles",
]


@pytest.fixture(params=FIXTURES)
def candles(request):
    return request.getfixturevalue(request.param)


class TestOutputProperties:
    """Properties that hold for every history."""

    def test_confidence_bounds_and_grade(self, engine, candles, now):
        """Test confidence stays within 0-100 and the grade follows the score."""
        quality = engine.analyze("BTC", candles, 10000, 1.0, now=now).quality

        assert 0 <= quality.confidence_score <= 100
        assert quality.grade == grade_for_score(quality.confidence_score)

    def test_idempotent(self, engine, candles, now):
        """Test identical inputs render identical results."""
        first = engine.analyze("BTC", candles, 10000, 1.0, now=now).to_dict()
        second = engine.analyze("BTC", candles, 10000, 1.0, now=now).to_dict()
        assert first == second

    def test_guardian_bounds(self, engine, candles, now):
        """Test the risk multiplier and probabilities stay in range."""
        guardian = engine.analyze("BTC", candles, 10000, 1.0, now=now).edge_guardian

        assert 0.1 <= guardian.risk_multiplier <= 1.0
        for probability in (guardian.edge.probability_positive, guardian.edge.probability_win):
            assert probability is None or 0.0 <= probability <= 1.0

    def test_reasons_are_unique(self, engine, candles, now):
        """Test reasons and warnings contain no duplicates."""
        result = engine.analyze("BTC", candles, 10000, 1.0, now=now)
        assert len(set(result.reasons)) == len(result.reasons)
        assert len(set(result.warnings)) == len(result.warnings)


class TestRiskMonotonicity:
    """Requested risk scales the plan."""

    def test_larger_risk_larger_plan(self, engine, final_breakout_candles, now):
        """Test a larger requested risk never shrinks the requested amount or size."""
        low = engine.analyze("BTC", final_breakout_candles, 10000, 0.5, now=now).risk_plan
        high = engine.analyze("BTC", final_breakout_candles, 10000, 2.0, now=now).risk_plan

        assert high.requested_risk_amount > low.requested_risk_amount
        assert high.position_size_requested > low.position_size_requested
        assert high.position_size >= low.position_size

    def test_misaligned_currency_disables_sizing(self, engine, final_breakout_candles, now):
        """Test sizes are undefined when currencies differ."""
        result = engine.analyze(
            "BTC", final_breakout_candles, 10000, 1.0,
            quote_currency="USDT", risk_currency_aligned=False, now=now,
        )

        assert result.risk_plan.position_size is None
        assert result.risk_plan.position_size_requested is None
        assert "Risk sizing is disabled until account currency matches price quote currency." in result.warnings
