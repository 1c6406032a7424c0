"""
Amount conversion utilities.

Ledger amounts are integers in stroops; people type lumens. Conversion
goes through Decimal so no amount is ever rounded through a float.
"""

from decimal import Decimal, InvalidOperation, ROUND_DOWN
from typing import Union


# Amount constants
class AmountConstants:
    """Fixed-point scale of ledger amounts."""

    STROOPS_PER_XLM = 10_000_000
    DECIMALS = 7
    MAX_STROOPS = (1 << 63) - 1


_QUANTUM = Decimal(1).scaleb(-AmountConstants.DECIMALS)
_MAX_XLM = Decimal(AmountConstants.MAX_STROOPS).scaleb(-AmountConstants.DECIMALS)


def to_stroops(amount: Union[str, int, Decimal]) -> int:
    """
    Convert a lumen amount to stroops.

    Args:
        amount: Amount in XLM, e.g. "12.5"

    Returns:
        Integer number of stroops

    Raises:
        ValueError: If the amount is not a number, is negative, has more than
            seven decimal places, or does not fit in 64 bits
    """
    if isinstance(amount, float):
        raise ValueError("Pass amounts as str or Decimal, not float")
    try:
        value = Decimal(str(amount))
    except InvalidOperation as e:
        raise ValueError(f"Invalid amount: {amount!r}") from e
    if not value.is_finite() or value < 0:
        raise ValueError(f"Invalid amount: {amount!r}")
    if value > _MAX_XLM:
        raise ValueError(f"Amount too large: {amount!r}")
    if value.quantize(_QUANTUM, rounding=ROUND_DOWN) != value:
        raise ValueError(f"Amount has more than {AmountConstants.DECIMALS} decimal places: {amount!r}")

    return int(value * AmountConstants.STROOPS_PER_XLM)


def from_stroops(stroops: int) -> str:
    """Convert stroops to a lumen string with trailing zeros removed."""
    value = (Decimal(stroops) / AmountConstants.STROOPS_PER_XLM).quantize(_QUANTUM)
    text = format(value, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text
