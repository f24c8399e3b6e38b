# shared/common/validators.py
"""
Shared Validators

Each validator returns the cleaned value or raises Django's
``ValidationError`` naming ``field_name``.
"""

from decimal import Decimal, InvalidOperation
from typing import Any, List, Optional, Sequence

from django.core.exceptions import ValidationError

MAX_FLIGHT_HOURS = Decimal('100000')
HUNDREDTHS = Decimal('0.01')


def _to_decimal(value: Any, field_name: str) -> Decimal:
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a number")
    try:
        number = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field_name} must be a number")
    if not number.is_finite():
        raise ValidationError(f"{field_name} must be a finite number")
    return number


# =============================================================================
# NUMERIC VALIDATORS
# =============================================================================

def validate_positive_decimal(
    value: Any,
    max_value: Optional[Decimal] = None,
    field_name: str = "value"
) -> Decimal:
    """Non-negative decimal, optionally capped."""
    value = _to_decimal(value, field_name)
    if value < 0:
        raise ValidationError(f"{field_name} must not be negative")
    if max_value is not None and value > max_value:
        raise ValidationError(f"{field_name} cannot exceed {max_value}")
    return value


def validate_range(value: Any, min_value: int, max_value: int, field_name: str = "value") -> int:
    """Integer within ``[min_value, max_value]``."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{field_name} must be an integer")
    if not min_value <= value <= max_value:
        raise ValidationError(f"{field_name} must be between {min_value} and {max_value}")
    return value


def validate_flight_hours(
    value: Any,
    max_hours: Decimal = MAX_FLIGHT_HOURS,
    field_name: str = "flight hours"
) -> Decimal:
    """Logged hours, rounded to hundredths."""
    value = _to_decimal(value if value is not None else 0, field_name)
    if value < 0:
        raise ValidationError(f"{field_name} cannot be negative")
    if value > max_hours:
        raise ValidationError(f"{field_name} cannot exceed {max_hours} hours")
    return value.quantize(HUNDREDTHS)


# =============================================================================
# COLLECTIONS AND CODES
# =============================================================================

def validate_list_max_length(value: Sequence, max_length: int, field_name: str = "list") -> List:
    if not isinstance(value, (list, tuple)):
        raise ValidationError(f"{field_name} must be a list")
    if len(value) > max_length:
        raise ValidationError(f"{field_name} cannot have more than {max_length} items")
    return list(value)


def parse_csv_list(value: Optional[str]) -> List[str]:
    """``"a, b,,c"`` -> ``["a", "b", "c"]``."""
    if not value:
        return []
    return [item.strip() for item in str(value).split(',') if item.strip()]


def validate_currency_code(value: Optional[str], field_name: str = "currency") -> str:
    """Upper-cased three letter ISO 4217 code."""
    cleaned = (value or '').strip().upper()
    if len(cleaned) != 3 or not cleaned.isalpha():
        raise ValidationError(f"{field_name} must be a valid 3-letter currency code")
    return cleaned
