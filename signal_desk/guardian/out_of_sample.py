"""Chronological out-of-sample summary of the trade sample"""

import math
from typing import Optional, Sequence

from ..config.defaults import GuardianParams
from ..state.models import BacktestStats, Trade
from .models import OutOfSampleSummary


def summarize_out_of_sample(trades: Sequence[Trade], params: Optional[GuardianParams] = None) -> OutOfSampleSummary:
    """
    Statistics of the trades after the chronological training split.

    The out-of-sample part uses the same win and profit-factor conventions
    as the backtest summary. Informational only.
    """
    params = params or GuardianParams()
    if len(trades) < params.oos_min_trades:
        return OutOfSampleSummary()

    train_count = math.floor(len(trades) * params.oos_train_fraction)
    oos = trades[train_count:]

    stats = BacktestStats()
    for trade in oos:
        stats = stats.with_trade(trade.net_r, risk_percent=0.0)

    return OutOfSampleSummary(
        train_trades=train_count,
        oos_trades=len(oos),
        expectancy_r=stats.sum_net_r / len(oos) if oos else None,
        win_rate=stats.wins / len(oos) * 100.0 if oos else None,
        profit_factor=stats.gross_profit_r / stats.gross_loss_r if stats.gross_loss_r > 0 else None,
    )
