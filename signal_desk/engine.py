"""
Main analysis engine coordinator.

Orchestrates the daily breakout analysis pipeline for one symbol:
Candles → Indicators → {Setup, Backtest} → Edge Guardian → Decision.
Every call owns its indicator arrays, replay state and trade sample, so
concurrent analyses share nothing.
"""

from datetime import datetime
from pathlib import Path
from typing import Any, Iterable, Optional, Sequence

import structlog

from .config.defaults import StrategyConfig
from .config.loader import ConfigLoader, build_strategy_config
from .config.validation import ConfigValidator
from .data.models import Candle, MarketData
from .data.validators import CandleSeriesValidator
from .decision.composer import decide_action
from .decision.confidence import grade_for_score, score_confidence
from .decision.risk_plan import build_risk_plan, holding_pnl_r
from .decision.warnings import build_filter_reasons, build_warnings, dedupe
from .errors import ConfigurationError, DataQualityError, InvalidParameterError, SystemFailureError
from .guardian.gate import build_edge_guardian
from .logging.config import get_state_logger, log_state_transition
from .metrics.indicators import build_indicators
from .models.result import AnalysisResult, HoldingStatus, QualityAssessment, ScanRow
from .signals.setup import evaluate_setup
from .state.machine import compute_trailing_stop
from .state.runtime import run_backtest
from .utils.time import staleness_hours

logger = structlog.get_logger(__name__)
state_logger = get_state_logger(__name__)


class SignalDeskEngine:
    """
    Coordinator for single-symbol analysis and multi-asset scans.

    Holds only configuration; analyses are pure functions of their inputs
    and the pinned ``now``.
    """

    def __init__(self, config_dir: Optional[str] = None) -> None:
        """Initialize the analysis engine."""
        self.logger = logger
        self.config_loader = ConfigLoader.create(Path(config_dir) if config_dir else None)
        self.validator = CandleSeriesValidator()

        self.logger.info("Signal desk engine initialized", config_dir=str(self.config_loader.config_dir))

    def analyze(
        self,
        symbol: str,
        candles: Sequence[Candle],
        equity: float,
        risk_percent: float,
        holding: bool = False,
        entry_price: Optional[float] = None,
        quote_currency: str = "USD",
        risk_currency_aligned: bool = True,
        now: Optional[datetime] = None,
        overrides: Optional[dict[str, Any]] = None
    ) -> AnalysisResult:
        """
        Analyze the latest candle of ``symbol`` and compose a recommendation.

        Args:
            symbol: Asset label
            candles: Daily candles in chronological order
            equity: Account equity
            risk_percent: Requested risk per trade in percent
            holding: Whether the caller holds a position
            entry_price: Entry price of the holding (required when holding)
            quote_currency: Quote currency of the candle prices
            risk_currency_aligned: Whether the account currency matches ``quote_currency``
            now: Pinned wall-clock time for staleness (defaults to current UTC time)
            overrides: Per-request configuration overrides

        Returns:
            AnalysisResult

        Raises:
            InvalidParameterError: If request parameters are invalid
            ConfigurationError: If the merged configuration is invalid
            InsufficientDataError: If fewer candles than the warm-up minimum are supplied
            MalformedDataError: If a candle has invalid prices
            TemporalDataError: If timestamps are naive or not strictly ascending
        """
        config = self._load_config(symbol, overrides)

        request_errors = ConfigValidator.validate_analysis_request(
            equity=equity,
            risk_percent=risk_percent,
            holding=holding,
            entry_price=entry_price,
            quote_currency=quote_currency,
            max_risk_percent=config.limits.max_risk_percent,
        )
        if request_errors:
            error_msgs = [f"{err.field}: {err.message} (got: {err.value})" for err in request_errors]
            self.logger.error("Analysis request validation failed", symbol=symbol, errors=error_msgs)
            raise InvalidParameterError(
                f"Invalid analysis request for {symbol}: {'; '.join(error_msgs)}",
                errors=error_msgs,
                context={"symbol": symbol}
            )

        candles = tuple(candles)
        self.validator.validate(candles)
        indicators = build_indicators(candles, config.indicators)

        self.logger.debug("Starting analysis", symbol=symbol, candles=len(candles), holding=holding)

        latest_index = len(candles) - 1
        latest = candles[latest_index]
        setup = evaluate_setup(latest_index, indicators, config.setup, config.scoring)
        backtest = run_backtest(candles, indicators, risk_percent, config, symbol)
        guardian = build_edge_guardian(
            backtest.trades,
            setup.signal_score,
            risk_percent,
            config.guardian,
            symbol,
        )

        stale_hours = staleness_hours(latest.ts, now)
        trailing_stop = compute_trailing_stop(
            latest_index,
            indicators,
            fallback_stop=setup.suggested_stop,
            swing_lookback=config.setup.swing_lookback,
        )
        risk_plan = build_risk_plan(
            setup,
            equity,
            risk_percent,
            guardian.recommended_risk_percent,
            trailing_stop,
            risk_currency_aligned,
            config.decision,
        )

        confidence = score_confidence(setup, backtest, guardian, stale_hours, config.decision)
        decision = decide_action(
            setup,
            holding=holding,
            trailing_stop=trailing_stop,
            currency_aligned=risk_currency_aligned,
            stale_hours=stale_hours,
            guardian=guardian,
            risk_plan=risk_plan,
            confidence_score=confidence,
            params=config.decision,
            symbol=symbol,
        )

        reasons = dedupe(build_filter_reasons(setup, backtest) + [decision.reason])
        warnings = build_warnings(
            stale_hours,
            setup.volume_coverage,
            backtest,
            confidence,
            guardian,
            currency_aligned=risk_currency_aligned,
            params=config.decision,
        )

        transition_index = backtest.latest_transition_index
        result = AnalysisResult(
            symbol=symbol,
            action=decision.action,
            latest=latest,
            setup=setup,
            risk_plan=risk_plan,
            quality=QualityAssessment(
                confidence_score=confidence,
                grade=grade_for_score(confidence, config.decision),
                stale_hours=stale_hours,
                volume_coverage=setup.volume_coverage,
            ),
            backtest=backtest,
            latest_transition_ts=candles[transition_index].ts if transition_index is not None else None,
            edge_guardian=guardian,
            holding=HoldingStatus(
                enabled=holding,
                entry_price=entry_price if holding else None,
                pnl_r=holding_pnl_r(setup, entry_price) if holding else None,
            ),
            quote_currency=quote_currency,
            warnings=tuple(warnings),
            reasons=tuple(reasons),
        )

        log_state_transition(
            state_logger,
            symbol=symbol,
            from_state="holding" if holding else "flat",
            to_state=decision.action.value,
            trigger=decision.reason,
            context={
                "close": setup.close,
                "confidence_score": confidence,
                "gate_allow": guardian.gate_allow,
                "risk_multiplier": guardian.risk_multiplier,
                "stale_hours": stale_hours,
            }
        )

        return result

    def scan(
        self,
        markets: Iterable[MarketData],
        equity: float,
        risk_percent: float,
        account_currency: str = "USD",
        now: Optional[datetime] = None
    ) -> list[ScanRow]:
        """
        Analyze several symbols independently; one failure never aborts the scan.

        Args:
            markets: Candle series with provenance, one per symbol
            equity: Account equity
            risk_percent: Requested risk per trade in percent
            account_currency: Account currency compared against each quote currency
            now: Pinned wall-clock time shared by every analysis

        Returns:
            One ScanRow per market, in input order
        """
        rows = []
        for market in markets:
            try:
                aligned = account_currency.upper() == market.quote_currency.upper()
                result = self.analyze(
                    market.symbol,
                    market.candles,
                    equity=equity,
                    risk_percent=risk_percent,
                    holding=False,
                    quote_currency=market.quote_currency,
                    risk_currency_aligned=aligned,
                    now=now,
                )
                rows.append(ScanRow.from_result(result, market.provider_used, aligned))

            except DataQualityError as e:
                self.logger.warning(
                    "Data quality issue during scan",
                    symbol=market.symbol,
                    error=str(e),
                    error_type=type(e).__name__,
                    context=getattr(e, 'context', {})
                )
                rows.append(ScanRow.failed(market.symbol, str(e)))

            except SystemFailureError as e:
                self.logger.error(
                    "System failure during scan",
                    symbol=market.symbol,
                    error=str(e),
                    error_type=type(e).__name__,
                    context=getattr(e, 'context', {})
                )
                rows.append(ScanRow.failed(market.symbol, str(e)))

            except Exception as e:
                self.logger.error(
                    "Unexpected error during scan",
                    symbol=market.symbol,
                    error=str(e),
                    error_type=type(e).__name__
                )
                rows.append(ScanRow.failed(market.symbol, f"{type(e).__name__}: {e}"))

        self.logger.info(
            "Scan complete",
            symbols=len(rows),
            failed=sum(1 for row in rows if not row.ok)
        )
        return rows

    def _load_config(self, symbol: str, overrides: Optional[dict[str, Any]] = None) -> StrategyConfig:
        """Merge and validate the configuration for one analysis."""
        merged = self.config_loader.merge_config(symbol, overrides)
        validation_errors = ConfigValidator.validate_config(merged)
        if validation_errors:
            error_msgs = [f"{err.field}: {err.message} (got: {err.value})" for err in validation_errors]
            self.logger.error("Configuration validation failed", symbol=symbol, errors=error_msgs)
            raise ConfigurationError(
                f"Invalid configuration for {symbol}: {'; '.join(error_msgs)}",
                field=validation_errors[0].field,
                context={"symbol": symbol, "errors": error_msgs}
            )
        return build_strategy_config(merged)


def analyze_symbol(
    symbol: str,
    candles: Sequence[Candle],
    equity: float,
    risk_percent: float,
    holding: bool = False,
    entry_price: Optional[float] = None,
    quote_currency: str = "USD",
    risk_currency_aligned: bool = True,
    now: Optional[datetime] = None,
    config_dir: Optional[str] = None
) -> AnalysisResult:
    """Analyze one symbol with a default engine."""
    engine = SignalDeskEngine(config_dir)
    return engine.analyze(
        symbol,
        candles,
        equity=equity,
        risk_percent=risk_percent,
        holding=holding,
        entry_price=entry_price,
        quote_currency=quote_currency,
        risk_currency_aligned=risk_currency_aligned,
        now=now,
    )
