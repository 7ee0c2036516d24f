"""Budget -> shares solver: bounded binary search with linear refinement.

The cost function has no usable closed-form inverse once buckets can enter
the active set mid-trade, so the solver searches for the largest share count
whose cost fits the budget:

  1. Seed an upper bound from the range's implied price:
       upper = min(floor(amount / max(p, min_price)) * seed_multiplier,
                   max_shares_per_bucket)
  2. Binary search [1, upper] for at most max_iterations steps. Any
     affordable midpoint becomes the best candidate; stop once
     cost / amount >= target_utilization.
  3. If utilization ends in [refine_floor, target_utilization), walk
     linearly upward from the best candidate in refine_step increments,
     up to refine_window shares, while the cost stays within budget.

A ComputationError at any candidate counts as "too expensive".
"""

import logging
import math
from dataclasses import dataclass

from config.settings import settings
from src.pm_common.errors import ComputationError, NegativeQuantityError
from src.pm_pricing.domain.buckets import map_range_to_buckets
from src.pm_pricing.domain.lmsr import calculate_cost_for_shares, calculate_probability
from src.pm_pricing.domain.models import MarketState, ShareSolution

logger = logging.getLogger(__name__)

NO_SHARES = ShareSolution(shares=0, cost=0)


@dataclass(frozen=True)
class SolverConfig:
    max_iterations: int = 50
    target_utilization: float = 0.99
    refine_floor: float = 0.95
    refine_window: int = 10_000
    refine_step: int = 100
    min_price: float = 0.01
    seed_multiplier: int = 3

    def __post_init__(self) -> None:
        for name in ("max_iterations", "refine_window", "refine_step", "seed_multiplier"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)}")
        if not 0 < self.target_utilization <= 1:
            raise ValueError(f"target_utilization must be in (0, 1], got {self.target_utilization}")
        if not 0 <= self.refine_floor <= 1:
            raise ValueError(f"refine_floor must be in [0, 1], got {self.refine_floor}")
        if self.min_price <= 0:
            raise ValueError(f"min_price must be positive, got {self.min_price}")

    @classmethod
    def from_settings(cls) -> "SolverConfig":
        return cls(
            max_iterations=settings.SOLVER_MAX_ITERATIONS,
            target_utilization=settings.SOLVER_TARGET_UTILIZATION,
            refine_floor=settings.SOLVER_REFINE_FLOOR,
            refine_window=settings.SOLVER_REFINE_WINDOW,
            refine_step=settings.SOLVER_REFINE_STEP,
            min_price=settings.SOLVER_MIN_PRICE,
            seed_multiplier=settings.SOLVER_SEED_MULTIPLIER,
        )


def _try_cost(state: MarketState, range_min: int, range_max: int, shares: int) -> int | None:
    try:
        return calculate_cost_for_shares(state, range_min, range_max, shares)
    except ComputationError as exc:
        logger.debug("cost evaluation failed at shares=%d: %s", shares, exc.message)
        return None


def _upper_bound(
    state: MarketState, range_min: int, range_max: int, amount: int, config: SolverConfig
) -> int:
    try:
        probability = calculate_probability(state, range_min, range_max)
    except ComputationError:
        probability = 0.0
    estimated_price = max(probability / 100, config.min_price)
    try:
        seed = math.floor(amount / estimated_price)
    except OverflowError:
        # Budget beyond float range: only the per-bucket cap bounds the search.
        return state.max_shares_per_bucket
    return min(seed * config.seed_multiplier, state.max_shares_per_bucket)


def calculate_shares_for_amount(
    state: MarketState,
    range_min: int,
    range_max: int,
    amount: int,
    config: SolverConfig | None = None,
) -> ShareSolution:
    """Largest share count whose cost is <= amount, or (0, 0) if none is affordable."""
    config = config or SolverConfig()
    if amount < 0:
        raise NegativeQuantityError("amount", amount)
    map_range_to_buckets(range_min, range_max, state.bucket_width)
    if amount == 0:
        return NO_SHARES

    low, high = 1, _upper_bound(state, range_min, range_max, amount, config)
    best = NO_SHARES

    iterations = 0
    for iterations in range(1, config.max_iterations + 1):
        if low > high:
            break
        mid = (low + high) // 2
        cost = _try_cost(state, range_min, range_max, mid)
        if cost is None or cost > amount:
            high = mid - 1
            continue
        best = ShareSolution(shares=mid, cost=cost)
        if cost / amount >= config.target_utilization:
            break
        low = mid + 1

    utilization = best.cost / amount
    if best.shares > 0 and config.refine_floor <= utilization < config.target_utilization:
        best = _refine(state, range_min, range_max, amount, best, config)

    logger.debug(
        "solved amount=%d -> shares=%d cost=%d (%d iterations, utilization=%.4f)",
        amount, best.shares, best.cost, iterations, best.cost / amount,
    )
    return best


def _refine(
    state: MarketState,
    range_min: int,
    range_max: int,
    amount: int,
    best: ShareSolution,
    config: SolverConfig,
) -> ShareSolution:
    base = best.shares
    for delta in range(1, config.refine_window + 1, config.refine_step):
        candidate = base + delta
        if candidate > state.max_shares_per_bucket:
            break
        cost = _try_cost(state, range_min, range_max, candidate)
        if cost is None or cost > amount:
            break
        best = ShareSolution(shares=candidate, cost=cost)
        if cost / amount >= config.target_utilization:
            break
    return best
