"""Pydantic schemas for pm_pricing — quote / PnL value objects.

Integer fields are micro-units (6 implied decimals); *_usdc fields are the
same values divided by 1_000_000 for display. Probabilities are 0-100.
"""

from pydantic import BaseModel, Field

from src.pm_common.enums import TradeType
from src.pm_pricing.domain.models import MarketState, OpenPosition, RealizedPnL, Trade

# ---------------------------------------------------------------------------
# Market state
# ---------------------------------------------------------------------------


class MarketStateSummary(BaseModel):
    market_id: str
    alpha: int
    balance: int
    min_value: int
    max_value: int
    bucket_width: int
    bucket_count: int
    max_shares_per_bucket: int
    active_buckets: int
    distribution: dict[int, int]

    @classmethod
    def from_domain(cls, market_id: str, state: MarketState) -> "MarketStateSummary":
        return cls(
            market_id=market_id,
            alpha=state.alpha,
            balance=state.balance,
            min_value=state.min_value,
            max_value=state.max_value,
            bucket_width=state.bucket_width,
            bucket_count=state.bucket_count,
            max_shares_per_bucket=state.max_shares_per_bucket,
            active_buckets=len(state.active_buckets),
            distribution=dict(state.distribution),
        )


class ProbabilityResponse(BaseModel):
    market_id: str
    range_min: int
    range_max: int
    probability: float


# ---------------------------------------------------------------------------
# Quotes
# ---------------------------------------------------------------------------


class BuyQuote(BaseModel):
    shares: int
    cost: int
    cost_usdc: float
    probability: float
    price_per_share: float
    min_shares_out: int


class SellQuote(BaseModel):
    payout: int
    payout_usdc: float
    price_per_share: float
    probability: float
    min_usdc_out: int


# ---------------------------------------------------------------------------
# PnL
# ---------------------------------------------------------------------------


class PositionPnL(BaseModel):
    range_start: int
    range_end: int
    shares: int
    cost_basis: int
    current_value: int
    unrealized_pnl: int
    unrealized_pnl_percent: float
    probability: float


class RealizedPnLOut(BaseModel):
    total_bought: int
    total_sold: int
    realized_pnl: int
    realized_pnl_percent: float

    @classmethod
    def from_domain(cls, pnl: RealizedPnL) -> "RealizedPnLOut":
        return cls(
            total_bought=pnl.total_bought,
            total_sold=pnl.total_sold,
            realized_pnl=pnl.realized_pnl,
            realized_pnl_percent=pnl.realized_pnl_percent,
        )


class TotalPnL(BaseModel):
    unrealized_pnl: int
    realized_pnl: int
    total_pnl: int
    total_pnl_percent: float
    positions: list[PositionPnL]


# ---------------------------------------------------------------------------
# Request bodies
# ---------------------------------------------------------------------------


class TradeIn(BaseModel):
    type: TradeType
    range_start: int
    range_end: int
    shares: int = Field(ge=0)
    amount: int = Field(ge=0)
    timestamp: int = 0

    def to_domain(self) -> Trade:
        return Trade(
            type=self.type,
            range_start=self.range_start,
            range_end=self.range_end,
            shares=self.shares,
            amount=self.amount,
            timestamp=self.timestamp,
        )


class OpenPositionIn(BaseModel):
    market_id: str
    range_start: int
    range_end: int
    shares: int = Field(ge=0)
    cost_basis: int = Field(ge=0)

    def to_domain(self) -> OpenPosition:
        return OpenPosition(
            market_id=self.market_id,
            range_start=self.range_start,
            range_end=self.range_end,
            shares=self.shares,
            cost_basis=self.cost_basis,
        )
