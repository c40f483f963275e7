"""
Backtest replay runtime.

Drives the state machine over the full history once and folds each
settled trade into running statistics. The trade sample is returned
explicitly as part of the result.
"""

from typing import Optional, Sequence

import structlog

from ..config.defaults import StrategyConfig, get_default_config
from ..data.models import Candle
from ..metrics.indicators import IndicatorSeries
from .machine import step_flat, step_in_position
from .models import BacktestResult, BacktestStats, ReplayState, Trade, TransitionAction

logger = structlog.get_logger(__name__)


def run_backtest(
    candles: Sequence[Candle],
    indicators: IndicatorSeries,
    risk_percent: float,
    config: Optional[StrategyConfig] = None,
    symbol: str = ""
) -> BacktestResult:
    """
    Replay the history once from the warm-up index to the final bar.

    A position still open at the final bar is left open. The latest
    transition reports whether the final bar itself filled an entry (BUY)
    or an exit (SELL).

    Args:
        candles: Full candle history
        indicators: Indicator series for ``candles``
        risk_percent: Risk per trade in percent, used for the equity curve
        config: Strategy configuration
        symbol: Asset label for logging

    Returns:
        BacktestResult with summary statistics and the ordered trade sample
    """
    config = config or get_default_config()
    latest_index = len(candles) - 1

    state = ReplayState.flat()
    stats = BacktestStats()
    trades: list[Trade] = []
    latest_action: Optional[TransitionAction] = None
    latest_action_index: Optional[int] = None

    for i in range(config.backtest.warmup_index, latest_index + 1):
        if not state.is_flat:
            result = step_in_position(
                state, i, candles, indicators, symbol,
                setup_params=config.setup,
                backtest_params=config.backtest,
            )
            state = result.state
            if result.trade is not None:
                trades.append(result.trade)
                stats = stats.with_trade(result.trade.net_r, risk_percent)
                if i == latest_index:
                    latest_action, latest_action_index = TransitionAction.SELL, i

        if state.is_flat:
            result = step_flat(
                state, i, candles, indicators, symbol,
                setup_params=config.setup,
                scoring=config.scoring,
                backtest_params=config.backtest,
            )
            state = result.state
            if result.entered and state.position.entry_index == latest_index:
                latest_action, latest_action_index = TransitionAction.BUY, latest_index

    backtest = BacktestResult(
        trades=tuple(trades),
        stats=stats,
        open_trade=not state.is_flat,
        latest_transition_action=latest_action,
        latest_transition_index=latest_action_index,
        window_days=len(candles),
    )

    logger.debug(
        "Backtest replay complete",
        symbol=symbol,
        trades=backtest.trade_count,
        expectancy_r=backtest.expectancy_r,
        open_trade=backtest.open_trade,
        latest_transition=latest_action.value if latest_action else None
    )

    return backtest
