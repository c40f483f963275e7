"""
State machine data models for the backtest replay.

This module defines immutable data structures for the replay state, the
single open position, settled trades and running statistics.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..errors import StateTransitionError


class BacktestState(str, Enum):
    """Replay states; at most one position is open at a time."""
    FLAT = "flat"
    IN_POSITION = "in_position"


class TransitionAction(str, Enum):
    """Transition caused by a bar, reported as a live signal for the latest bar."""
    BUY = "BUY"
    SELL = "SELL"


class ExitReason(str, Enum):
    """Why a position was closed."""
    STOP_HIT = "stop_hit"           # Low breached the trailing stop, filled at the stop
    GAP_STOP = "gap_stop"           # Open gapped below the stop, filled at the open
    TREND_CLOSE = "trend_close"     # Close below the stop without an intrabar breach


@dataclass(frozen=True)
class Position:
    """Open simulated long position."""
    entry: float
    stop: float
    signal_score: int
    entry_index: int

    def __post_init__(self):
        if not self.entry - self.stop > 0:
            raise StateTransitionError(
                f"Position risk must be positive (entry {self.entry}, stop {self.stop})",
                current_state=BacktestState.FLAT.value,
                attempted_transition=BacktestState.IN_POSITION.value
            )

    @property
    def risk(self) -> float:
        """Per-unit risk between entry and initial stop."""
        return self.entry - self.stop


@dataclass(frozen=True)
class Trade:
    """Settled outcome of one closed position."""
    net_r: float
    signal_score: int
    entry_index: int
    exit_index: int
    entry_price: float
    exit_price: float
    risk: float
    gross_r: float
    exit_reason: ExitReason

    @property
    def is_win(self) -> bool:
        """Win indicator used by the Edge Guardian (strictly positive net R)."""
        return self.net_r > 0


@dataclass(frozen=True)
class ReplayState:
    """Current replay state: FLAT, or IN_POSITION with its position."""
    state: BacktestState
    position: Optional[Position] = None

    @classmethod
    def flat(cls) -> "ReplayState":
        """Initial and post-exit state."""
        return cls(state=BacktestState.FLAT)

    @property
    def is_flat(self) -> bool:
        return self.state == BacktestState.FLAT

    def with_entry(self, position: Position) -> "ReplayState":
        """Transition FLAT -> IN_POSITION."""
        if not self.is_flat:
            raise StateTransitionError(
                "Cannot open a position while another is open",
                current_state=self.state.value,
                attempted_transition=BacktestState.IN_POSITION.value
            )
        return ReplayState(state=BacktestState.IN_POSITION, position=position)

    def with_exit(self) -> "ReplayState":
        """Transition IN_POSITION -> FLAT."""
        if self.is_flat:
            raise StateTransitionError(
                "Cannot close a position while flat",
                current_state=self.state.value,
                attempted_transition=BacktestState.FLAT.value
            )
        return ReplayState.flat()


@dataclass(frozen=True)
class StepResult:
    """Outcome of replaying one bar."""
    state: ReplayState
    trade: Optional[Trade] = None
    exited: bool = False
    entered: bool = False


@dataclass(frozen=True)
class BacktestStats:
    """Running statistics over settled trades."""
    wins: int = 0
    losses: int = 0
    gross_profit_r: float = 0.0
    gross_loss_r: float = 0.0
    sum_net_r: float = 0.0
    equity: float = 1.0
    peak: float = 1.0
    max_drawdown: float = 0.0

    def with_trade(self, net_r: float, risk_percent: float) -> "BacktestStats":
        """Fold one settled trade into the statistics and the compounding equity curve."""
        won = net_r >= 0
        equity = self.equity * max(0.01, 1 + net_r * (risk_percent / 100.0))
        peak = max(self.peak, equity)
        return BacktestStats(
            wins=self.wins + (1 if won else 0),
            losses=self.losses + (0 if won else 1),
            gross_profit_r=self.gross_profit_r + (net_r if won else 0.0),
            gross_loss_r=self.gross_loss_r + (0.0 if won else abs(net_r)),
            sum_net_r=self.sum_net_r + net_r,
            equity=equity,
            peak=peak,
            max_drawdown=max(self.max_drawdown, (peak - equity) / peak),
        )

    @property
    def trade_count(self) -> int:
        return self.wins + self.losses


@dataclass(frozen=True)
class BacktestResult:
    """Summary of one history replay plus the ordered trade sample."""
    trades: tuple[Trade, ...]
    stats: BacktestStats
    open_trade: bool
    latest_transition_action: Optional[TransitionAction]
    latest_transition_index: Optional[int]
    window_days: int
    forced_close_at_end: bool = False

    @property
    def trade_count(self) -> int:
        return len(self.trades)

    @property
    def wins(self) -> int:
        return self.stats.wins

    @property
    def losses(self) -> int:
        return self.stats.losses

    @property
    def win_rate(self) -> Optional[float]:
        """Win rate in percent, None without trades."""
        if not self.trades:
            return None
        return self.stats.wins / len(self.trades) * 100.0

    @property
    def expectancy_r(self) -> Optional[float]:
        """Mean net R per trade, None without trades."""
        if not self.trades:
            return None
        return self.stats.sum_net_r / len(self.trades)

    @property
    def profit_factor(self) -> Optional[float]:
        """Gross profit over gross loss in R, None without losses."""
        if self.stats.gross_loss_r <= 0:
            return None
        return self.stats.gross_profit_r / self.stats.gross_loss_r

    @property
    def max_drawdown_pct(self) -> float:
        return self.stats.max_drawdown * 100.0

    @property
    def return_pct(self) -> float:
        return (self.stats.equity - 1.0) * 100.0
