# services/profile-service/src/apps/core/engines/types.py
"""
Engine Value Types

Immutable inputs and outputs of the aggregation, matching and payroll
engines. Models convert themselves into these so the engines never touch
the database.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, Dict, FrozenSet, Optional, Tuple

ZERO = Decimal('0.00')


@dataclass(frozen=True)
class WorkRecord:
    """Numeric view of one work history record."""

    total_hours: Decimal = ZERO
    aircraft_hours: Tuple[Tuple[str, Decimal], ...] = ()
    rating_scores: Tuple[int, ...] = ()
    achievement_count: int = 0
    start_date: Optional[date] = None
    end_date: Optional[date] = None


@dataclass(frozen=True)
class WorkHistoryStats:
    total_employers: int = 0
    total_flight_hours: Decimal = ZERO
    avg_rating: Decimal = ZERO
    total_achievements: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'total_employers': self.total_employers,
            'total_flight_hours': self.total_flight_hours,
            'avg_rating': self.avg_rating,
            'total_achievements': self.total_achievements,
        }


@dataclass(frozen=True)
class MatchProfile:
    """Traits compared by the matching engine."""

    id: Any
    role: str
    skills: FrozenSet[str] = frozenset()
    aircraft_types: FrozenSet[str] = frozenset()


@dataclass(frozen=True)
class SimilarityScore:
    skills: float = 0.0
    aircraft_types: float = 0.0
    role: float = 0.0
    total: float = 0.0


@dataclass(frozen=True)
class RankedCandidate:
    candidate: MatchProfile
    score: SimilarityScore


@dataclass(frozen=True)
class PayrollRequest:
    user_id: Any
    start_date: date
    end_date: date
    currency: str
    base_amount: Decimal = ZERO
    overtime_amount: Decimal = ZERO
    allowances: Decimal = ZERO
    bonuses: Decimal = ZERO
    other_deductions: Decimal = ZERO


@dataclass(frozen=True)
class Earnings:
    base: Decimal = ZERO
    overtime: Decimal = ZERO
    allowances: Decimal = ZERO
    bonuses: Decimal = ZERO

    @property
    def gross(self) -> Decimal:
        return self.base + self.overtime + self.allowances + self.bonuses


@dataclass(frozen=True)
class Deductions:
    tax: Decimal = ZERO
    insurance: Decimal = ZERO
    other: Decimal = ZERO

    @property
    def total(self) -> Decimal:
        return self.tax + self.insurance + self.other


@dataclass(frozen=True)
class PayrollPeriod:
    """Result of a payroll calculation; ``net_amount == gross_amount - total_deductions``."""

    user_id: Any
    start_date: date
    end_date: date
    currency: str
    earnings: Earnings = field(default_factory=Earnings)
    deductions: Deductions = field(default_factory=Deductions)
    flight_hours: Decimal = ZERO

    @property
    def gross_amount(self) -> Decimal:
        return self.earnings.gross

    @property
    def total_deductions(self) -> Decimal:
        return self.deductions.total

    @property
    def net_amount(self) -> Decimal:
        return self.gross_amount - self.total_deductions
