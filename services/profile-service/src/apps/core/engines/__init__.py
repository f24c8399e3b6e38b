# services/profile-service/src/apps/core/engines/__init__.py
"""
Profile Service Engines

Pure computations over plain data:
- Aggregation: work history statistics and aircraft hour rollups
- Matching: profile similarity scores
- Payroll: gross/net pay for a period
"""

from .types import (
    WorkRecord,
    WorkHistoryStats,
    MatchProfile,
    SimilarityScore,
    RankedCandidate,
    PayrollRequest,
    PayrollPeriod,
    Earnings,
    Deductions,
)
from .aggregation import summarize_work_history, aircraft_type_hours, total_flight_hours
from .matching import similarity, overlap_term, rank_candidates
from .payroll import validate_payroll_request, record_overlaps, calculate_payroll

__all__ = [
    # Types
    'WorkRecord',
    'WorkHistoryStats',
    'MatchProfile',
    'SimilarityScore',
    'RankedCandidate',
    'PayrollRequest',
    'PayrollPeriod',
    'Earnings',
    'Deductions',

    # Aggregation
    'summarize_work_history',
    'aircraft_type_hours',
    'total_flight_hours',

    # Matching
    'similarity',
    'overlap_term',
    'rank_candidates',

    # Payroll
    'validate_payroll_request',
    'record_overlaps',
    'calculate_payroll',
]
