"""LMSR cost / probability engine for range markets — pure functions, no I/O.

Notation:
    q_i    shares held by bucket i (int micro-units)
    alpha  liquidity parameter
    S      sum of e^(q_i / alpha) over the active buckets

A range bet adds (or removes) the SAME share count to EVERY bucket in its
span; the share count is not divided across the span.

    probability(span) = sum_{i in span} e^(q_i/alpha) / S * 100
    cost(shares)      = alpha * (ln S_after - ln S_before)
    payout(shares)    = alpha * (ln S_before - ln S_after)

Only active buckets are iterated. Buckets inside a buy span that are not yet
active hold 0 shares, so their contribution is counted in bulk rather than
by walking the (possibly huge) outcome domain.

exp/ln are evaluated in float. Overflow, NaN, or a log of a non-positive
sum raise ComputationError; results are never silently truncated.
"""

import logging
import math

from src.pm_common.errors import ComputationError, NegativeQuantityError
from src.pm_pricing.domain.buckets import map_range_to_buckets
from src.pm_pricing.domain.models import MarketState

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Float helpers
# ---------------------------------------------------------------------------

def _exp_term(shares: int, alpha: int) -> float:
    """e^(shares / alpha)."""
    try:
        return math.exp(shares / alpha)
    except OverflowError as exc:
        raise ComputationError(f"exp overflow at q={shares}, alpha={alpha}") from exc


def _ln(total: float) -> float:
    if not math.isfinite(total) or total <= 0:
        raise ComputationError(f"cannot take log of exp-sum {total}")
    return math.log(total)


def _scale(alpha: int, log_delta: float) -> float:
    """alpha * log_delta; alpha beyond float range is a computation failure."""
    try:
        return alpha * log_delta
    except OverflowError as exc:
        raise ComputationError("alpha exceeds float range") from exc


def _round_micro(value: float) -> int:
    """Nearest int, halves rounded up."""
    if not math.isfinite(value):
        raise ComputationError(f"non-finite result {value}")
    return math.floor(value + 0.5)


def _active_exp_sum(state: MarketState) -> float:
    return math.fsum(_exp_term(state.shares_in(i), state.alpha) for i in state.active_buckets)


# ---------------------------------------------------------------------------
# Probability
# ---------------------------------------------------------------------------

def calculate_probability(state: MarketState, range_min: int, range_max: int) -> float:
    """Implied probability (0-100) that the outcome lands in [range_min, range_max).

    Returns 0 for a market with no active buckets.
    """
    span = map_range_to_buckets(range_min, range_max, state.bucket_width)

    range_sum = 0.0
    total_sum = 0.0
    for bucket_idx in state.active_buckets:
        term = _exp_term(state.shares_in(bucket_idx), state.alpha)
        total_sum += term
        if bucket_idx in span:
            range_sum += term

    if not math.isfinite(total_sum):
        raise ComputationError(f"exp-sum overflow ({total_sum})")
    return range_sum / total_sum * 100 if total_sum > 0 else 0.0


# ---------------------------------------------------------------------------
# Cost / payout
# ---------------------------------------------------------------------------

def calculate_cost_for_shares(
    state: MarketState, range_min: int, range_max: int, shares: int
) -> int:
    """Micro-units needed to add `shares` to every bucket in the range."""
    if shares < 0:
        raise NegativeQuantityError("shares", shares)
    span = map_range_to_buckets(range_min, range_max, state.bucket_width)
    if shares == 0:
        return 0

    initial_sum = _active_exp_sum(state)

    final_terms: list[float] = []
    active_in_span = 0
    for bucket_idx in state.active_buckets:
        q = state.shares_in(bucket_idx)
        if bucket_idx in span:
            active_in_span += 1
            q += shares
        final_terms.append(_exp_term(q, state.alpha))

    # Buckets entering the active set start from q=0.
    new_buckets = (span.end - span.start + 1) - active_in_span
    if new_buckets:
        final_terms.append(new_buckets * _exp_term(shares, state.alpha))
    final_sum = math.fsum(final_terms)

    cost = _scale(state.alpha, _ln(final_sum) - _ln(initial_sum))
    return _round_micro(cost)


def calculate_payout_for_shares(
    state: MarketState, range_min: int, range_max: int, shares: int
) -> int:
    """Micro-units returned for removing `shares` from every bucket in the range.

    In-range buckets are floored at zero, and any bucket left at zero drops
    out of the post-trade sum (the contract removes it from the active set).
    """
    if shares < 0:
        raise NegativeQuantityError("shares", shares)
    span = map_range_to_buckets(range_min, range_max, state.bucket_width)
    if shares == 0:
        return 0

    initial_sum = _active_exp_sum(state)

    final_terms: list[float] = []
    for bucket_idx in state.active_buckets:
        q = state.shares_in(bucket_idx)
        if bucket_idx in span:
            q = max(0, q - shares)
        if q > 0:
            final_terms.append(_exp_term(q, state.alpha))
    final_sum = math.fsum(final_terms)

    payout = _scale(state.alpha, _ln(initial_sum) - _ln(final_sum))
    return _round_micro(payout)
