# services/profile-service/src/apps/core/engines/aggregation.py
"""
Aggregation Engine

Work history statistics and per-aircraft hour rollups.
"""

import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

from .types import WorkRecord, WorkHistoryStats, ZERO

logger = logging.getLogger(__name__)

TWO_PLACES = Decimal('0.01')


def total_flight_hours(records: Iterable[WorkRecord]) -> Decimal:
    """Sum of the total hours of every record."""
    return sum((Decimal(record.total_hours or 0) for record in records), ZERO)


def aircraft_type_hours(records: Iterable[WorkRecord], aircraft: str) -> Decimal:
    """
    Hours flown on one aircraft type across all records.

    Every matching entry counts, including repeated entries for the same
    aircraft inside a single record. Unknown aircraft yield zero.
    """
    return sum(
        (
            Decimal(hours or 0)
            for record in records
            for entry_aircraft, hours in record.aircraft_hours
            if entry_aircraft == aircraft
        ),
        ZERO,
    )


def summarize_work_history(records: Iterable[WorkRecord]) -> WorkHistoryStats:
    """
    Summarize a profile's work history.

    ``avg_rating`` is the mean of all rating scores across all records,
    rounded to two decimals, or zero when nothing has been rated.
    """
    records = list(records)
    if not records:
        return WorkHistoryStats()

    scores = [score for record in records for score in record.rating_scores]
    if scores:
        avg_rating = (Decimal(sum(scores)) / len(scores)).quantize(
            TWO_PLACES, rounding=ROUND_HALF_UP
        )
    else:
        avg_rating = ZERO

    stats = WorkHistoryStats(
        total_employers=len(records),
        total_flight_hours=total_flight_hours(records),
        avg_rating=avg_rating,
        total_achievements=sum(record.achievement_count for record in records),
    )
    logger.debug(
        f"Summarized {stats.total_employers} work history records",
        extra={'total_flight_hours': str(stats.total_flight_hours)}
    )
    return stats
