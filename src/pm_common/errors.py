"""Unified error codes and custom exceptions.

Error code ranges:
  3xxx: Market / market state
  4xxx: Quote input
  9xxx: System
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 3xxx: Market ---

class MarketNotFoundError(AppError):
    def __init__(self, market_id: str) -> None:
        super().__init__(3001, f"Market not found: {market_id}", 404)


class MalformedMarketStateError(AppError):
    """Market object exists but lacks the distribution / liquidity fields."""

    def __init__(self, market_id: str, detail: str) -> None:
        super().__init__(3002, f"Invalid market state for {market_id}: {detail}", 404)


# --- 4xxx: Quote input ---

class InvalidInputError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(4001, f"Invalid input: {detail}", 400)


class InvalidRangeError(InvalidInputError):
    def __init__(self, range_min: int, range_max: int) -> None:
        super().__init__(f"range_min ({range_min}) must be below range_max ({range_max})")
        self.code = 4002


class NegativeQuantityError(InvalidInputError):
    def __init__(self, name: str, value: int) -> None:
        super().__init__(f"{name} must be non-negative, got {value}")
        self.code = 4003


class InvalidSlippageError(InvalidInputError):
    def __init__(self, slippage: float) -> None:
        super().__init__(f"slippage must be within [0, 1], got {slippage}")
        self.code = 4004


# --- 9xxx: System ---

class ComputationError(AppError):
    """exp/ln overflow, NaN, or a log of a non-positive sum inside the engine."""

    def __init__(self, detail: str) -> None:
        super().__init__(9003, f"Pricing computation failed: {detail}", 500)


class StateSourceError(AppError):
    """State source (Sui RPC) unreachable or returned a JSON-RPC error."""

    def __init__(self, detail: str) -> None:
        super().__init__(9004, f"State source error: {detail}", 502)
