"""Decimal helpers for values crossing the ledger boundary.

Every numeric argument is sent to the contract as a plain decimal string:
Decimal("1E+1") -> "10", 2.5 -> "2.5". Never scientific notation.
"""

from decimal import Decimal, InvalidOperation


def to_decimal(value: object) -> Decimal:
    """Parse a ledger number (int, float, str) into a Decimal.

    Floats go through str() so 0.1 stays 0.1 instead of its binary expansion.
    """
    if isinstance(value, bool):
        raise ValueError(f"Not a number: {value!r}")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, float)):
        result = Decimal(str(value))
    elif isinstance(value, str):
        try:
            result = Decimal(value.strip())
        except InvalidOperation:
            raise ValueError(f"Not a number: {value!r}") from None
    else:
        raise ValueError(f"Not a number: {value!r}")
    if not result.is_finite():
        raise ValueError(f"Not a finite number: {value!r}")
    return result


def to_ledger_arg(value: object) -> str:
    """Serialize a numeric argument as a plain decimal string."""
    d = to_decimal(value)
    text = format(d, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text in ("", "-0"):
        return "0"
    return text
