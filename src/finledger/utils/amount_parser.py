"""Money amounts: parsing user input and rounding to cents."""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
import re

CENT = Decimal("0.01")


def quantize_amount(amount: Decimal | int | str) -> Decimal:
    """Round an amount to two decimal places (half up).

    Args:
        amount: Decimal, integer or decimal string

    Returns:
        Decimal with exactly two decimal places

    Raises:
        ValueError: If the value is not a finite number
    """
    if isinstance(amount, float):
        # Go through repr so 0.1 becomes Decimal("0.1"), not its binary expansion
        amount = repr(amount)
    try:
        value = Decimal(amount)
    except (InvalidOperation, TypeError) as e:
        raise ValueError(f"Could not parse amount '{amount}': {e}")
    if not value.is_finite():
        raise ValueError(f"Amount must be a finite number, got '{amount}'")
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal rounded to cents.

    Handles various formats:
    - "123.45"
    - "$123.45" or "R$123.45"
    - "-123.45"
    - "1,234.56"
    - "(123.45)" (accounting notation, read as -123.45)

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If nothing numeric is left after stripping symbols
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Amount is empty")

    amount_str = amount_str.strip()

    # Accounting negatives
    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    # Remove currency symbols and thousands separators
    amount_str = re.sub(r"R\$|[$€£¥]", "", amount_str)
    amount_str = amount_str.replace(",", "").strip()

    amount = quantize_amount(amount_str)
    return -amount if is_negative else amount
