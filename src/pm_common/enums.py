"""Global enums — values match the on-chain event / indexer vocabulary."""

from enum import Enum


class TradeType(str, Enum):
    """Direction of a historical range-bet trade."""
    BUY = "buy"
    SELL = "sell"


class SuiNameType(str, Enum):
    """Move type tags used as dynamic-field keys."""
    U64 = "u64"
