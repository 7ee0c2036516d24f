"""Market state reader — assembles a MarketState from the state source.

On-chain layout of a range market object (fields shown as returned by
sui_getObject with showContent):

    balance                      collateral held by the market
    lmsr_state.fields            (optional nesting; else the object itself)
        liquidity_parameter | alpha | calculated_alpha
        max_shares_per_bucket    0 means "use alpha"
        sparse_distribution.fields
            active_buckets       [u64, ...]
            buckets.fields.id.id Table<u64, u64> holding per-bucket shares
            virtual_min / virtual_max / bucket_width
                                 (fall back to the lmsr struct)

Every call reads fresh state; nothing is cached here.
"""

import logging
from typing import Any

from config.settings import settings
from src.pm_common.concurrency import gather_bounded
from src.pm_common.enums import SuiNameType
from src.pm_common.errors import MalformedMarketStateError, MarketNotFoundError
from src.pm_pricing.domain.models import MarketState
from src.pm_pricing.domain.repository import MarketStateSourceProtocol

logger = logging.getLogger(__name__)


def _fields(value: Any) -> dict[str, Any] | None:
    """Unwrap a nested Move struct: {"type": ..., "fields": {...}} -> {...}."""
    if isinstance(value, dict) and isinstance(value.get("fields"), dict):
        return value["fields"]
    return None


def _first(*values: Any) -> Any:
    return next((v for v in values if v not in (None, "")), 0)


def _to_int(market_id: str, name: str, raw: Any) -> int:
    if isinstance(raw, dict):
        # Balance<T> and similar wrappers expose the number under "value"
        raw = (_fields(raw) or raw).get("value", 0)
    try:
        return int(raw)
    except (TypeError, ValueError) as exc:
        raise MalformedMarketStateError(market_id, f"{name} is not an integer: {raw!r}") from exc


async def _read_bucket(
    source: MarketStateSourceProtocol, market_id: str, table_id: str, bucket_idx: int
) -> tuple[int, int]:
    row = await source.get_dynamic_field(table_id, SuiNameType.U64.value, str(bucket_idx))
    if row is None:
        # Listed as active but no table entry: treated as an empty bucket.
        logger.debug("bucket %d missing from table %s", bucket_idx, table_id)
        return bucket_idx, 0
    shares = _to_int(market_id, f"bucket {bucket_idx}", row.get("value", 0))
    if shares < 0:
        raise MalformedMarketStateError(market_id, f"bucket {bucket_idx} holds negative shares")
    return bucket_idx, shares


async def get_market_state(
    source: MarketStateSourceProtocol,
    market_id: str,
    concurrency: int | None = None,
) -> MarketState:
    """Read a market and its active buckets into an immutable MarketState.

    Raises MarketNotFoundError when the object does not exist and
    MalformedMarketStateError when the distribution or liquidity fields are
    missing or invalid. State-source errors propagate unchanged.
    """
    fields = await source.get_object(market_id)
    if fields is None:
        raise MarketNotFoundError(market_id)

    lmsr = _fields(fields.get("lmsr_state")) or fields
    sparse = _fields(lmsr.get("sparse_distribution"))
    if sparse is None:
        raise MalformedMarketStateError(market_id, "sparse distribution not found")

    table = _fields(sparse.get("buckets")) or {}
    table_id = (table.get("id") or {}).get("id")
    if not table_id:
        raise MalformedMarketStateError(market_id, "bucket table id not found")

    alpha = _to_int(
        market_id,
        "alpha",
        _first(lmsr.get("liquidity_parameter"), lmsr.get("alpha"), lmsr.get("calculated_alpha")),
    )
    if alpha <= 0:
        raise MalformedMarketStateError(market_id, "liquidity parameter missing")
    bucket_width = _to_int(
        market_id, "bucket_width", _first(sparse.get("bucket_width"), lmsr.get("bucket_width"))
    )
    if bucket_width <= 0:
        raise MalformedMarketStateError(market_id, "bucket width missing")
    min_value = _to_int(
        market_id, "virtual_min", _first(sparse.get("virtual_min"), lmsr.get("virtual_min"))
    )
    max_value = _to_int(
        market_id, "virtual_max", _first(sparse.get("virtual_max"), lmsr.get("virtual_max"))
    )
    max_shares = _to_int(market_id, "max_shares_per_bucket", _first(lmsr.get("max_shares_per_bucket")))

    active = [
        _to_int(market_id, "active bucket", b) for b in (sparse.get("active_buckets") or [])
    ]
    rows = await gather_bounded(
        (_read_bucket(source, market_id, table_id, idx) for idx in active),
        concurrency or settings.STATE_READ_CONCURRENCY,
    )

    state = MarketState(
        distribution=dict(rows),
        alpha=alpha,
        balance=_to_int(market_id, "balance", _first(fields.get("balance"))),
        min_value=min_value,
        max_value=max_value,
        bucket_width=bucket_width,
        max_shares_per_bucket=max_shares if max_shares > 0 else alpha,
    )
    logger.info(
        "market %s state read: %d active buckets, alpha=%d, width=%d",
        market_id, len(state.active_buckets), alpha, bucket_width,
    )
    return state
