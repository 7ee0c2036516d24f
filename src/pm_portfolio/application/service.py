"""PortfolioApplicationService — batch position valuation for portfolio pages.

Unlike QuoteApplicationService.calculate_total_pnl, a failed valuation here
does not fail the batch: the position is reported at cost basis with zero
PnL and priced=False, and the failure is logged.
"""

import logging

from config.settings import settings
from src.pm_common.concurrency import gather_bounded
from src.pm_common.errors import AppError
from src.pm_common.micro_units import from_micro_units
from src.pm_portfolio.application.schemas import PositionValuation
from src.pm_pricing.application.service import QuoteApplicationService
from src.pm_pricing.domain.models import OpenPosition
from src.pm_pricing.domain.repository import MarketStateSourceProtocol

logger = logging.getLogger(__name__)


class PortfolioApplicationService:
    def __init__(
        self,
        quotes: QuoteApplicationService | None = None,
        concurrency: int | None = None,
    ) -> None:
        self._quotes = quotes or QuoteApplicationService()
        self._concurrency = concurrency or settings.PNL_CONCURRENCY

    async def value_position(
        self, source: MarketStateSourceProtocol, position: OpenPosition
    ) -> PositionValuation:
        try:
            pnl = await self._quotes.calculate_position_pnl(
                source,
                position.market_id,
                position.range_start,
                position.range_end,
                position.shares,
                position.cost_basis,
            )
        except AppError as exc:
            logger.warning(
                "valuation failed for market %s (%d-%d): %s",
                position.market_id, position.range_start, position.range_end, exc.message,
            )
            return PositionValuation(
                market_id=position.market_id,
                range_start=position.range_start,
                range_end=position.range_end,
                shares=position.shares,
                cost_basis=position.cost_basis,
                current_value=position.cost_basis,
                current_value_usdc=from_micro_units(position.cost_basis),
                current_price=0.0,
                probability=0.0,
                unrealized_pnl=0,
                unrealized_pnl_usdc=0.0,
                unrealized_pnl_percent=0.0,
                priced=False,
            )

        return PositionValuation(
            market_id=position.market_id,
            range_start=position.range_start,
            range_end=position.range_end,
            shares=position.shares,
            cost_basis=position.cost_basis,
            current_value=pnl.current_value,
            current_value_usdc=from_micro_units(pnl.current_value),
            current_price=pnl.current_value / position.shares if position.shares > 0 else 0.0,
            probability=pnl.probability,
            unrealized_pnl=pnl.unrealized_pnl,
            unrealized_pnl_usdc=from_micro_units(pnl.unrealized_pnl),
            unrealized_pnl_percent=pnl.unrealized_pnl_percent,
            priced=True,
        )

    async def value_positions(
        self, source: MarketStateSourceProtocol, positions: list[OpenPosition]
    ) -> list[PositionValuation]:
        """Value every position concurrently; order matches the input."""
        return await gather_bounded(
            (self.value_position(source, p) for p in positions), self._concurrency
        )
