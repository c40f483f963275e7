"""
Backtest state machine transition functions.

Each function is pure: given the replay state and the bar index it
returns the next state and any settled trade. Entries fill at the next
bar's open so that no decision uses information from its own fill bar.
"""

from typing import Optional, Sequence

from ..config.defaults import BacktestParams, ScoringParams, SetupParams
from ..data.models import Candle
from ..logging.config import get_state_logger, log_state_transition
from ..metrics.extremes import min_prev
from ..metrics.indicators import IndicatorSeries
from ..signals.setup import compute_initial_stop, evaluate_setup
from .models import BacktestState, ExitReason, Position, ReplayState, StepResult, Trade

state_logger = get_state_logger(__name__)


def compute_trailing_stop(
    index: int,
    indicators: IndicatorSeries,
    floor_stop: Optional[float] = None,
    fallback_stop: Optional[float] = None,
    swing_lookback: int = 5
) -> Optional[float]:
    """
    Trailing stop at ``index``: the highest of the floor stop, EMA, prior swing low and fallback.

    Undefined candidates are ignored; None when every candidate is undefined.
    """
    candidates = [
        floor_stop,
        indicators.ema[index],
        min_prev(indicators.lows, index, swing_lookback),
        fallback_stop,
    ]
    defined = [v for v in candidates if v is not None]
    return max(defined) if defined else None


def resolve_stop_exit_price(candle: Candle, stop_price: float) -> tuple[float, ExitReason]:
    """Fill at the open when it gapped through the stop, otherwise at the stop."""
    if candle.open <= stop_price:
        return candle.open, ExitReason.GAP_STOP
    return stop_price, ExitReason.STOP_HIT


def build_entry_position(
    signal_index: int,
    candles: Sequence[Candle],
    indicators: IndicatorSeries,
    signal_score: int,
    setup_params: Optional[SetupParams] = None,
    backtest_params: Optional[BacktestParams] = None
) -> Optional[Position]:
    """
    Position filled at the open of the bar after ``signal_index``.

    The stop uses the signal-bar ATR and swing low, evaluated against the
    fill price. Returns None when there is no next bar, no stop below the
    fill, or the implied risk exceeds the maximum risk fraction.
    """
    setup_params = setup_params or SetupParams()
    backtest_params = backtest_params or BacktestParams()

    if signal_index + 1 >= len(candles):
        return None
    next_open = candles[signal_index + 1].open
    if next_open <= 0:
        return None

    swing_low = min_prev(indicators.lows, signal_index, setup_params.swing_lookback)
    stop = compute_initial_stop(next_open, indicators.atr[signal_index], swing_low, setup_params.atr_stop_mult)
    if stop is None:
        return None

    risk = next_open - stop
    if risk <= 0 or risk / next_open > backtest_params.max_risk_fraction:
        return None

    return Position(
        entry=next_open,
        stop=stop,
        signal_score=signal_score,
        entry_index=signal_index + 1,
    )


def check_exit(
    position: Position,
    index: int,
    candles: Sequence[Candle],
    indicators: IndicatorSeries,
    setup_params: Optional[SetupParams] = None
) -> Optional[tuple[float, ExitReason]]:
    """
    Exit fill and reason for the bar at ``index``, or None to stay in position.

    An intrabar breach of the trailing stop takes precedence over a close below it.
    """
    setup_params = setup_params or SetupParams()
    trail_stop = compute_trailing_stop(
        index,
        indicators,
        floor_stop=position.stop,
        swing_lookback=setup_params.swing_lookback,
    )
    if trail_stop is None:
        return None

    candle = candles[index]
    if candle.low <= trail_stop:
        return resolve_stop_exit_price(candle, trail_stop)
    if candle.close < trail_stop:
        return candle.close, ExitReason.TREND_CLOSE
    return None


def settle_trade(
    position: Position,
    exit_price: float,
    exit_index: int,
    exit_reason: ExitReason,
    backtest_params: Optional[BacktestParams] = None
) -> Trade:
    """
    Close a position into a Trade with net R after round-trip costs.

    Costs are charged on both the entry and exit notionals and expressed in R.
    """
    backtest_params = backtest_params or BacktestParams()
    cost_per_side = backtest_params.cost_per_side

    gross_r = (exit_price - position.entry) / position.risk
    cost_r = (position.entry * cost_per_side + abs(exit_price) * cost_per_side) / position.risk

    return Trade(
        net_r=gross_r - cost_r,
        signal_score=position.signal_score,
        entry_index=position.entry_index,
        exit_index=exit_index,
        entry_price=position.entry,
        exit_price=exit_price,
        risk=position.risk,
        gross_r=gross_r,
        exit_reason=exit_reason,
    )


def step_in_position(
    state: ReplayState,
    index: int,
    candles: Sequence[Candle],
    indicators: IndicatorSeries,
    symbol: str = "",
    setup_params: Optional[SetupParams] = None,
    backtest_params: Optional[BacktestParams] = None
) -> StepResult:
    """IN_POSITION transition: settle the position if the bar triggers an exit."""
    exit_fill = check_exit(state.position, index, candles, indicators, setup_params)
    if exit_fill is None:
        return StepResult(state=state)

    exit_price, reason = exit_fill
    trade = settle_trade(state.position, exit_price, index, reason, backtest_params)

    log_state_transition(
        state_logger,
        symbol=symbol,
        from_state=BacktestState.IN_POSITION.value,
        to_state=BacktestState.FLAT.value,
        trigger=reason.value,
        context={
            "index": index,
            "entry": trade.entry_price,
            "exit": trade.exit_price,
            "net_r": trade.net_r,
        },
        level="debug"
    )

    return StepResult(state=state.with_exit(), trade=trade, exited=True)


def step_flat(
    state: ReplayState,
    index: int,
    candles: Sequence[Candle],
    indicators: IndicatorSeries,
    symbol: str = "",
    setup_params: Optional[SetupParams] = None,
    scoring: Optional[ScoringParams] = None,
    backtest_params: Optional[BacktestParams] = None
) -> StepResult:
    """FLAT transition: open a position when the entry signal fires and a fill exists."""
    if index >= len(candles) - 1:
        return StepResult(state=state)

    setup = evaluate_setup(index, indicators, setup_params, scoring)
    if not setup.entry_signal or not setup.has_valid_risk:
        return StepResult(state=state)

    position = build_entry_position(
        index,
        candles,
        indicators,
        setup.signal_score,
        setup_params,
        backtest_params,
    )
    if position is None:
        return StepResult(state=state)

    log_state_transition(
        state_logger,
        symbol=symbol,
        from_state=BacktestState.FLAT.value,
        to_state=BacktestState.IN_POSITION.value,
        trigger="entry_signal",
        context={
            "signal_index": index,
            "entry_index": position.entry_index,
            "entry": position.entry,
            "stop": position.stop,
            "signal_score": position.signal_score,
        },
        level="debug"
    )

    return StepResult(state=state.with_entry(position), entered=True)
