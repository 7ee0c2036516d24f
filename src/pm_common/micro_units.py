"""Fixed-point helpers for micro-unit quantities.

Every amount, cost, payout and share count crossing the pricing API is an
int in micro-units (6 implied decimals, same as USDC): 1_000_000 == $1.00.
Decimal is only used at the display boundary.
"""

from decimal import ROUND_FLOOR, Decimal

from src.pm_common.errors import ComputationError

MICRO_DECIMALS = 6
MICRO_PER_UNIT = 10**MICRO_DECIMALS


def to_micro_units(amount: Decimal | float | int | str) -> int:
    """Convert a display amount to micro-units, truncating sub-micro dust.

    1.5 -> 1_500_000, "0.0000019" -> 1, -2.25 -> -2_250_000.
    """
    value = Decimal(str(amount)) * MICRO_PER_UNIT
    return int(value.to_integral_value(rounding=ROUND_FLOOR))


def from_micro_units(micro: int) -> float:
    """Convert micro-units to a display float: 2_500_000 -> 2.5."""
    try:
        return micro / MICRO_PER_UNIT
    except OverflowError as exc:
        raise ComputationError("micro-unit amount exceeds float range") from exc


def format_currency(micro: int) -> str:
    """Micro-units to display string: 1_234_560_000 -> '$1,234.56', -1_500_000 -> '-$1.50'."""
    amount = Decimal(abs(micro)) / MICRO_PER_UNIT
    text = f"${amount:,.2f}"
    return f"-{text}" if micro < 0 else text


def format_percent(percent: float) -> str:
    """Signed percentage: 12.346 -> '+12.35%', -3 -> '-3.00%'."""
    sign = "+" if percent >= 0 else ""
    return f"{sign}{percent:.2f}%"
