"""
Shared Constants Module.

Common constants used across the profile platform services.
"""
from enum import Enum

# =============================================================================
# SYSTEM CONSTANTS
# =============================================================================

# Pagination
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


# =============================================================================
# FINANCE
# =============================================================================

class Currency(str, Enum):
    """Supported currencies."""
    USD = "USD"
    EUR = "EUR"
    GBP = "GBP"
    NOK = "NOK"
    CAD = "CAD"
    AUD = "AUD"
