"""Input validation shared by the domain services.

Everything here runs before a unit of work is opened, so a failure never has
anything to roll back.
"""

from decimal import Decimal
from typing import Optional

from finledger.domain.errors import ValidationError, invalid_choice
from finledger.utils.amount_parser import quantize_amount


def require_positive_amount(amount: Decimal | int | str, field: str = "amount") -> Decimal:
    """Quantize an amount to cents and require it to be strictly positive."""
    try:
        value = quantize_amount(amount)
    except ValueError as e:
        raise ValidationError(f"Invalid {field}: {e}")
    if value <= 0:
        raise ValidationError(f"{field.replace('_', ' ').capitalize()} must be positive, got {value}")
    return value


def require_non_negative_amount(amount: Decimal | int | str, field: str = "amount") -> Decimal:
    """Quantize an amount to cents and require it to be zero or more."""
    try:
        value = quantize_amount(amount)
    except ValueError as e:
        raise ValidationError(f"Invalid {field}: {e}")
    if value < 0:
        raise ValidationError(f"{field.replace('_', ' ').capitalize()} cannot be negative, got {value}")
    return value


def require_text(value: Optional[str], field: str) -> str:
    """Require a non-blank string and return it stripped."""
    if value is None or not value.strip():
        raise ValidationError(f"{field.replace('_', ' ').capitalize()} is required")
    return value.strip()


def require_choice(value: str, choices: tuple[str, ...], field: str) -> str:
    """Require value to be one of choices."""
    if value not in choices:
        raise ValidationError(invalid_choice(field.replace("_", " "), value, choices))
    return value
