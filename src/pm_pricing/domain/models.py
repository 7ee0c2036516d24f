"""Domain models for pm_pricing — pure dataclasses, no I/O.

All share / cost / payout / amount fields are int micro-units.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from src.pm_common.enums import TradeType
from src.pm_common.errors import InvalidInputError


@dataclass(frozen=True)
class MarketState:
    """Immutable snapshot of one market's LMSR state.

    distribution holds every active bucket (absolute bucket index -> shares).
    A bucket listed as active on-chain but absent from the bucket table is
    stored with 0 shares, so the active set is exactly the key set.
    """

    distribution: Mapping[int, int]
    alpha: int
    balance: int
    min_value: int
    max_value: int
    bucket_width: int
    max_shares_per_bucket: int
    active_buckets: tuple[int, ...] = field(init=False)

    def __post_init__(self) -> None:
        if self.alpha <= 0:
            raise InvalidInputError(f"alpha must be positive, got {self.alpha}")
        if self.bucket_width <= 0:
            raise InvalidInputError(f"bucket_width must be positive, got {self.bucket_width}")
        for idx, shares in self.distribution.items():
            if shares < 0:
                raise InvalidInputError(f"bucket {idx} holds negative shares: {shares}")
        ordered = dict(sorted(self.distribution.items()))
        object.__setattr__(self, "distribution", MappingProxyType(ordered))
        object.__setattr__(self, "active_buckets", tuple(ordered))

    @property
    def bucket_count(self) -> int:
        return (self.max_value - self.min_value) // self.bucket_width + 1

    def shares_in(self, bucket_idx: int) -> int:
        return self.distribution.get(bucket_idx, 0)


@dataclass(frozen=True)
class BucketSpan:
    """Inclusive span of absolute bucket indices."""

    start: int
    end: int

    def __contains__(self, bucket_idx: object) -> bool:
        return isinstance(bucket_idx, int) and self.start <= bucket_idx <= self.end


@dataclass(frozen=True)
class ShareSolution:
    shares: int
    cost: int


@dataclass(frozen=True)
class Trade:
    type: TradeType
    range_start: int
    range_end: int
    shares: int
    amount: int
    timestamp: int = 0


@dataclass(frozen=True)
class OpenPosition:
    market_id: str
    range_start: int
    range_end: int
    shares: int
    cost_basis: int


@dataclass(frozen=True)
class RealizedPnL:
    total_bought: int
    total_sold: int
    realized_pnl: int
    realized_pnl_percent: float
