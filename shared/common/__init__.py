# Shared Common Library for the Aviation Professional Platform
# This package contains shared authentication, middleware, validators,
# and other common components used across the microservices.

__version__ = "1.0.0"

from .validators import (
    validate_positive_decimal,
    validate_range,
    validate_flight_hours,
    validate_list_max_length,
    validate_currency_code,
    parse_csv_list,
)

from .constants import (
    Currency,
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
)

__all__ = [
    # Version
    '__version__',

    # Validators
    'validate_positive_decimal',
    'validate_range',
    'validate_flight_hours',
    'validate_list_max_length',
    'validate_currency_code',
    'parse_csv_list',

    # Constants
    'Currency',
    'DEFAULT_PAGE_SIZE',
    'MAX_PAGE_SIZE',
]
