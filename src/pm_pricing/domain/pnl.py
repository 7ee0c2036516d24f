"""PnL aggregation — pure, no state reads."""

from collections.abc import Iterable

from src.pm_common.enums import TradeType
from src.pm_common.errors import ComputationError
from src.pm_pricing.domain.models import RealizedPnL, Trade


def pnl_percent(pnl: int, basis: int) -> float:
    """pnl / basis * 100, or 0 when there is no basis."""
    if basis <= 0:
        return 0.0
    try:
        return pnl * 100 / basis
    except OverflowError as exc:
        raise ComputationError("PnL ratio exceeds float range") from exc


def calculate_realized_pnl(trades: Iterable[Trade]) -> RealizedPnL:
    """Sum buy and sell notionals; realized = sold - bought."""
    total_bought = 0
    total_sold = 0
    for trade in trades:
        if trade.type == TradeType.BUY:
            total_bought += trade.amount
        else:
            total_sold += trade.amount

    realized = total_sold - total_bought
    return RealizedPnL(
        total_bought=total_bought,
        total_sold=total_sold,
        realized_pnl=realized,
        realized_pnl_percent=pnl_percent(realized, total_bought),
    )
