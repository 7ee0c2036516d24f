"""QuoteApplicationService — quote / PnL façade over the LMSR engine.

Every method that needs market state performs a fresh read through the
injected state source; the engine itself is pure. Inputs are validated
before any read. Nothing here mutates persisted state.
"""

import logging
from collections.abc import Iterable
from decimal import ROUND_FLOOR, Decimal

from config.settings import settings
from src.pm_common.concurrency import gather_bounded
from src.pm_common.errors import (
    ComputationError,
    InvalidRangeError,
    InvalidSlippageError,
    NegativeQuantityError,
)
from src.pm_common.micro_units import from_micro_units
from src.pm_pricing.application.schemas import (
    BuyQuote,
    PositionPnL,
    SellQuote,
    TotalPnL,
)
from src.pm_pricing.domain.lmsr import calculate_payout_for_shares, calculate_probability
from src.pm_pricing.domain.models import MarketState, OpenPosition, RealizedPnL, Trade
from src.pm_pricing.domain.pnl import calculate_realized_pnl, pnl_percent
from src.pm_pricing.domain.repository import MarketStateSourceProtocol
from src.pm_pricing.domain.solver import SolverConfig, calculate_shares_for_amount
from src.pm_pricing.infrastructure.state_reader import get_market_state

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Validation / slippage helpers
# ---------------------------------------------------------------------------

def _check_range(range_min: int, range_max: int) -> None:
    if range_min >= range_max:
        raise InvalidRangeError(range_min, range_max)


def _check_non_negative(name: str, value: int) -> None:
    if value < 0:
        raise NegativeQuantityError(name, value)


def _check_slippage(slippage: float) -> Decimal:
    if not 0 <= slippage <= 1:
        raise InvalidSlippageError(slippage)
    return Decimal(str(slippage))


def min_shares_out(shares: int, slippage: float) -> int:
    """shares - shares * floor(slippage * 100) // 100 (whole-percent slippage)."""
    whole_percent = int((_check_slippage(slippage) * 100).to_integral_value(rounding=ROUND_FLOOR))
    return shares - shares * whole_percent // 100


def min_usdc_out(payout: int, slippage: float) -> int:
    """floor(payout * (1 - slippage))."""
    bound = Decimal(payout) * (1 - _check_slippage(slippage))
    return int(bound.to_integral_value(rounding=ROUND_FLOOR))


def _price_per_share(micro_amount: int, shares: int) -> float:
    # Both sides are micro-units, so the ratio is already a dollar price.
    if shares <= 0:
        return 0.0
    try:
        return micro_amount / shares
    except OverflowError as exc:
        raise ComputationError("price per share exceeds float range") from exc


class QuoteApplicationService:
    def __init__(
        self,
        solver_config: SolverConfig | None = None,
        default_slippage: float | None = None,
        pnl_concurrency: int | None = None,
    ) -> None:
        self._solver_config = solver_config or SolverConfig.from_settings()
        self._default_slippage = (
            settings.DEFAULT_SLIPPAGE if default_slippage is None else default_slippage
        )
        self._pnl_concurrency = pnl_concurrency or settings.PNL_CONCURRENCY

    async def get_market_state(
        self, source: MarketStateSourceProtocol, market_id: str
    ) -> MarketState:
        return await get_market_state(source, market_id)

    async def get_probability(
        self,
        source: MarketStateSourceProtocol,
        market_id: str,
        range_min: int,
        range_max: int,
    ) -> float:
        _check_range(range_min, range_max)
        state = await get_market_state(source, market_id)
        return calculate_probability(state, range_min, range_max)

    async def get_buy_quote(
        self,
        source: MarketStateSourceProtocol,
        market_id: str,
        range_min: int,
        range_max: int,
        amount: int,
        slippage: float | None = None,
    ) -> BuyQuote:
        slippage = self._default_slippage if slippage is None else slippage
        _check_range(range_min, range_max)
        _check_non_negative("amount", amount)
        _check_slippage(slippage)

        state = await get_market_state(source, market_id)
        solution = calculate_shares_for_amount(
            state, range_min, range_max, amount, self._solver_config
        )
        probability = calculate_probability(state, range_min, range_max)

        logger.info(
            "buy quote market=%s range=%d-%d amount=%d -> shares=%d cost=%d",
            market_id, range_min, range_max, amount, solution.shares, solution.cost,
        )
        return BuyQuote(
            shares=solution.shares,
            cost=solution.cost,
            cost_usdc=from_micro_units(solution.cost),
            probability=probability,
            price_per_share=_price_per_share(solution.cost, solution.shares),
            min_shares_out=min_shares_out(solution.shares, slippage),
        )

    async def get_sell_quote(
        self,
        source: MarketStateSourceProtocol,
        market_id: str,
        range_min: int,
        range_max: int,
        shares: int,
        slippage: float | None = None,
    ) -> SellQuote:
        slippage = self._default_slippage if slippage is None else slippage
        _check_range(range_min, range_max)
        _check_non_negative("shares", shares)
        _check_slippage(slippage)

        state = await get_market_state(source, market_id)
        payout = calculate_payout_for_shares(state, range_min, range_max, shares)
        probability = calculate_probability(state, range_min, range_max)

        logger.info(
            "sell quote market=%s range=%d-%d shares=%d -> payout=%d",
            market_id, range_min, range_max, shares, payout,
        )
        return SellQuote(
            payout=payout,
            payout_usdc=from_micro_units(payout),
            price_per_share=_price_per_share(payout, shares),
            probability=probability,
            min_usdc_out=min_usdc_out(payout, slippage),
        )

    async def calculate_position_pnl(
        self,
        source: MarketStateSourceProtocol,
        market_id: str,
        range_start: int,
        range_end: int,
        shares: int,
        cost_basis: int,
    ) -> PositionPnL:
        """Mark an open position to the current sell value (zero slippage)."""
        _check_non_negative("cost_basis", cost_basis)
        quote = await self.get_sell_quote(
            source, market_id, range_start, range_end, shares, slippage=0
        )
        unrealized = quote.payout - cost_basis
        return PositionPnL(
            range_start=range_start,
            range_end=range_end,
            shares=shares,
            cost_basis=cost_basis,
            current_value=quote.payout,
            unrealized_pnl=unrealized,
            unrealized_pnl_percent=pnl_percent(unrealized, cost_basis),
            probability=quote.probability,
        )

    @staticmethod
    def calculate_realized_pnl(trades: Iterable[Trade]) -> RealizedPnL:
        return calculate_realized_pnl(trades)

    async def calculate_total_pnl(
        self,
        source: MarketStateSourceProtocol,
        positions: list[OpenPosition],
        trades: Iterable[Trade],
    ) -> TotalPnL:
        """Realized PnL from history plus unrealized PnL across open positions.

        Positions are marked concurrently (bounded by PNL_CONCURRENCY), each
        with its own state read. Any failure propagates; no partial total.
        """
        for p in positions:
            _check_range(p.range_start, p.range_end)
            _check_non_negative("shares", p.shares)
            _check_non_negative("cost_basis", p.cost_basis)

        realized = calculate_realized_pnl(trades)
        marked = await gather_bounded(
            (
                self.calculate_position_pnl(
                    source, p.market_id, p.range_start, p.range_end, p.shares, p.cost_basis
                )
                for p in positions
            ),
            self._pnl_concurrency,
        )

        unrealized = sum(p.unrealized_pnl for p in marked)
        total = realized.realized_pnl + unrealized
        invested = realized.total_bought + sum(p.cost_basis for p in marked)
        return TotalPnL(
            unrealized_pnl=unrealized,
            realized_pnl=realized.realized_pnl,
            total_pnl=total,
            total_pnl_percent=pnl_percent(total, invested),
            positions=marked,
        )
