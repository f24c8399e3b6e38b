# services/profile-service/src/apps/core/filters.py
"""
Profile Filter Specifications

Tagged filter values built from validated query parameters and
translated into ORM lookups by ``services.query``.

Logical fields:
- ``role``, ``is_available``, ``total_flight_hours``, ``created_at``
- ``skills``, ``aircraft_types``, ``languages``, ``preferred_locations``
- ``certifications.name``, ``certifications.verification_status``
- ``work_history.start_date``
"""

from dataclasses import dataclass
from typing import Any, Tuple, Union


@dataclass(frozen=True)
class ExactMatch:
    """Field equals value."""

    field: str
    value: Any


@dataclass(frozen=True)
class SetMembership:
    """
    Field holds at least one of ``values``.

    ``constraints`` are extra exact matches that must hold for the same
    related row, e.g. a certification that is both named and verified.
    """

    field: str
    values: Tuple[Any, ...]
    constraints: Tuple[ExactMatch, ...] = ()


@dataclass(frozen=True)
class Range:
    """Inclusive bounds; a missing bound is open."""

    field: str
    gte: Any = None
    lte: Any = None


Filter = Union[ExactMatch, SetMembership, Range]
