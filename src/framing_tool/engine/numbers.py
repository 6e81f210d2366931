"""
Number helpers shared by the pricing engine and the order accumulator.

Every numeric field on a selection is raw user input. It is parsed here,
once, and anything that is not a finite number is treated as zero.
"""
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Optional

ZERO = Decimal("0")
CENTS = Decimal("0.01")

# Largest accepted input magnitude. Products and sums of inputs this size stay
# well inside the default decimal context, so pricing arithmetic cannot overflow.
MAX_INPUT = Decimal("1e9")


def try_parse_decimal(value: Any) -> Optional[Decimal]:
    """
    Parse a raw input value, returning None when it is not a finite number.

    Accepts strings (surrounding whitespace ignored), ints, floats and
    Decimals. None, empty strings, NaN, infinities and magnitudes above
    MAX_INPUT are not numbers.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, float)):
        result = Decimal(str(value))
    else:
        text = str(value).strip()
        if not text:
            return None
        try:
            result = Decimal(text)
        except InvalidOperation:
            return None
    if not result.is_finite() or abs(result) > MAX_INPUT:
        return None
    return result


def parse_decimal(value: Any) -> Decimal:
    """Parse-or-zero: the one place raw input becomes a number."""
    result = try_parse_decimal(value)
    return ZERO if result is None else result


def is_zero_input(value: Any) -> bool:
    """
    True for blank input, "false", and numeric input equal to zero.

    Non-numeric text such as an option title is not zero input.
    """
    if value is None:
        return True
    text = str(value).strip()
    if text in ("", "false"):
        return True
    number = try_parse_decimal(text)
    return number is not None and number.is_zero()


def to_cents(amount: Decimal) -> Decimal:
    """
    Round to two decimal places, half up.

    Computed Decimal amounts are rounded as they are; only raw input goes
    through parse_decimal() and its MAX_INPUT bound.
    """
    if not isinstance(amount, Decimal) or not amount.is_finite():
        amount = parse_decimal(amount)
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


def format_money(amount: Decimal) -> str:
    """Display format used across the UI: ``$1,234.50``."""
    value = to_cents(amount)
    if value < 0:
        return f"-${-value:,.2f}"
    return f"${value:,.2f}"


def format_amount(amount: Decimal) -> str:
    """Plain two-decimal string for the platform's MoneyInput ``amount``."""
    return f"{to_cents(amount):.2f}"
