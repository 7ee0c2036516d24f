"""pm_pricing REST endpoints.

GET /markets/{market_id}/state        — state summary (fresh read)
GET /markets/{market_id}/probability  — implied probability of a range
GET /markets/{market_id}/quotes/buy   — shares purchasable for an amount
GET /markets/{market_id}/quotes/sell  — payout for selling shares

Quantity parameters are validated by the service (InvalidInputError -> 400)
rather than by Query constraints, so every failure uses the ApiResponse
envelope.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from src.pm_common.response import ApiResponse, success_response
from src.pm_pricing.application.schemas import MarketStateSummary, ProbabilityResponse
from src.pm_pricing.application.service import QuoteApplicationService
from src.pm_pricing.domain.repository import MarketStateSourceProtocol
from src.pm_pricing.infrastructure.sui_client import get_sui_client

router = APIRouter(prefix="/markets", tags=["pricing"])

_service = QuoteApplicationService()

StateSource = Annotated[MarketStateSourceProtocol, Depends(get_sui_client)]


@router.get("/{market_id}/state")
async def get_market_state(
    market_id: str,
    request: Request,
    source: StateSource,
) -> ApiResponse:
    state = await _service.get_market_state(source, market_id)
    result = MarketStateSummary.from_domain(market_id, state)
    return success_response(result.model_dump(), request)


@router.get("/{market_id}/probability")
async def get_probability(
    market_id: str,
    request: Request,
    source: StateSource,
    range_min: int = Query(...),
    range_max: int = Query(...),
) -> ApiResponse:
    probability = await _service.get_probability(source, market_id, range_min, range_max)
    result = ProbabilityResponse(
        market_id=market_id, range_min=range_min, range_max=range_max, probability=probability
    )
    return success_response(result.model_dump(), request)


@router.get("/{market_id}/quotes/buy")
async def get_buy_quote(
    market_id: str,
    request: Request,
    source: StateSource,
    range_min: int = Query(...),
    range_max: int = Query(...),
    amount: int = Query(..., description="Spend amount in micro-USDC"),
    slippage: float | None = Query(None, description="Fraction, e.g. 0.05 = 5%"),
) -> ApiResponse:
    quote = await _service.get_buy_quote(
        source, market_id, range_min, range_max, amount, slippage
    )
    return success_response(quote.model_dump(), request)


@router.get("/{market_id}/quotes/sell")
async def get_sell_quote(
    market_id: str,
    request: Request,
    source: StateSource,
    range_min: int = Query(...),
    range_max: int = Query(...),
    shares: int = Query(..., description="Shares to sell in micro-units"),
    slippage: float | None = Query(None, description="Fraction, e.g. 0.05 = 5%"),
) -> ApiResponse:
    quote = await _service.get_sell_quote(
        source, market_id, range_min, range_max, shares, slippage
    )
    return success_response(quote.model_dump(), request)
