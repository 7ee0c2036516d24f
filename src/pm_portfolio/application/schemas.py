# src/pm_portfolio/application/schemas.py
"""Pydantic schemas for portfolio API."""
from pydantic import BaseModel

from src.pm_pricing.application.schemas import OpenPositionIn, TradeIn


class PositionValuation(BaseModel):
    market_id: str
    range_start: int
    range_end: int
    shares: int
    cost_basis: int
    current_value: int
    current_value_usdc: float
    current_price: float
    probability: float
    unrealized_pnl: int
    unrealized_pnl_usdc: float
    unrealized_pnl_percent: float
    priced: bool


class PositionValuationListResponse(BaseModel):
    items: list[PositionValuation]
    total: int


class PositionsRequest(BaseModel):
    positions: list[OpenPositionIn]


class TradesRequest(BaseModel):
    trades: list[TradeIn]


class TotalPnLRequest(BaseModel):
    positions: list[OpenPositionIn] = []
    trades: list[TradeIn] = []
