# src/pm_portfolio/api/router.py
"""Portfolio REST API — PnL and batch valuation over caller-supplied positions.

Position and trade records come from the indexer / document store (outside
this service); the caller posts them and gets priced results back.
"""
from typing import Annotated

from fastapi import APIRouter, Depends, Request

from src.pm_common.response import ApiResponse, success_response
from src.pm_portfolio.application.schemas import (
    PositionsRequest,
    PositionValuationListResponse,
    TotalPnLRequest,
    TradesRequest,
)
from src.pm_portfolio.application.service import PortfolioApplicationService
from src.pm_pricing.application.schemas import RealizedPnLOut
from src.pm_pricing.application.service import QuoteApplicationService
from src.pm_pricing.domain.repository import MarketStateSourceProtocol
from src.pm_pricing.infrastructure.sui_client import get_sui_client

router = APIRouter(prefix="/portfolio", tags=["portfolio"])

_quotes = QuoteApplicationService()
_service = PortfolioApplicationService(quotes=_quotes)

StateSource = Annotated[MarketStateSourceProtocol, Depends(get_sui_client)]


@router.post("/pnl")
async def total_pnl(body: TotalPnLRequest, request: Request, source: StateSource) -> ApiResponse:
    result = await _quotes.calculate_total_pnl(
        source,
        [p.to_domain() for p in body.positions],
        [t.to_domain() for t in body.trades],
    )
    return success_response(result.model_dump(), request)


@router.post("/realized-pnl")
async def realized_pnl(body: TradesRequest, request: Request) -> ApiResponse:
    pnl = _quotes.calculate_realized_pnl(t.to_domain() for t in body.trades)
    return success_response(RealizedPnLOut.from_domain(pnl).model_dump(), request)


@router.post("/positions/value")
async def value_positions(
    body: PositionsRequest, request: Request, source: StateSource
) -> ApiResponse:
    items = await _service.value_positions(source, [p.to_domain() for p in body.positions])
    data = PositionValuationListResponse(items=items, total=len(items))
    return success_response(data.model_dump(), request)
