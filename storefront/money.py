"""
Money Utilities - rupee amounts as whole integers.

Prices, discounts and shipping are whole rupees. Fractions only appear while
applying a discount rate, so rates go through Decimal and are rounded once.
"""
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Union

CURRENCY = "INR"
CURRENCY_SYMBOL = "₹"

# Razorpay takes amounts in the smallest unit (paise)
MINOR_UNITS_PER_RUPEE = 100

INTEGER_PRECISION = Decimal("1")

Number = Union[str, int, float, Decimal]


def to_decimal(value: Union[Number, None]) -> Decimal:
    """
    Convert any value to Decimal safely.

    Floats go through str() to avoid binary precision artifacts.
    None and unparseable input give Decimal("0").
    """
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    try:
        if isinstance(value, float):
            return Decimal(str(value))
        return Decimal(value)
    except (InvalidOperation, ValueError, TypeError):
        return Decimal("0")


def round_rupees(value: Number) -> int:
    """
    Round to whole rupees, halves away from zero.

    Example:
        round_rupees(Decimal("169.8")) -> 170
        round_rupees(Decimal("84.5")) -> 85
    """
    return int(to_decimal(value).quantize(INTEGER_PRECISION, rounding=ROUND_HALF_UP))


def apply_rate(amount: int, rate: Number) -> int:
    """Rounded share of an amount, e.g. apply_rate(1698, "0.10") -> 170."""
    return round_rupees(to_decimal(amount) * to_decimal(rate))


def to_paise(rupees: int) -> int:
    """Convert whole rupees to paise for the payment provider."""
    return int(rupees) * MINOR_UNITS_PER_RUPEE


def format_inr(value: int, symbol: bool = True) -> str:
    """
    Format rupees with Indian digit grouping (lakh/crore).

    Example:
        format_inr(1499) -> "₹1,499"
        format_inr(1234567) -> "₹12,34,567"
    """
    amount = int(value)
    sign = "-" if amount < 0 else ""
    digits = str(abs(amount))

    # Last three digits, then groups of two
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    grouped = ",".join(groups + [tail]) if groups else tail

    return f"{sign}{CURRENCY_SYMBOL if symbol else ''}{grouped}"
