# services/profile-service/src/apps/core/engines/payroll.py
"""
Payroll Calculator

Gross and net pay for a period. Tax is 20% and insurance 5% of
base plus overtime; amounts are rounded half-up to cents.
"""

import logging
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Collection, Iterable, Optional

from apps.core.exceptions import InvalidRangeError, UnsupportedCurrencyError
from .aggregation import total_flight_hours
from .types import Deductions, Earnings, PayrollPeriod, PayrollRequest, WorkRecord

logger = logging.getLogger(__name__)

TAX_RATE = Decimal('0.20')
INSURANCE_RATE = Decimal('0.05')
CENTS = Decimal('0.01')


def to_cents(amount) -> Decimal:
    return Decimal(str(amount or 0)).quantize(CENTS, rounding=ROUND_HALF_UP)


def validate_payroll_request(
    request: PayrollRequest,
    supported_currencies: Collection[str]
) -> None:
    """Reject inverted ranges first, then unsupported currencies."""
    if request.start_date >= request.end_date:
        raise InvalidRangeError(request.start_date, request.end_date)
    if request.currency not in supported_currencies:
        raise UnsupportedCurrencyError(request.currency, supported_currencies)


def record_overlaps(record: WorkRecord, start: date, end: date) -> bool:
    """A record without an end date is still ongoing."""
    if record.start_date is None or record.start_date > end:
        return False
    return record.end_date is None or record.end_date >= start


def calculate_payroll(
    request: PayrollRequest,
    records: Iterable[WorkRecord],
    supported_currencies: Optional[Collection[str]] = None
) -> PayrollPeriod:
    """
    Compute a payroll period.

    ``flight_hours`` sums the records overlapping the period and is
    informational only; it does not affect any amount.
    """
    if supported_currencies is not None:
        validate_payroll_request(request, supported_currencies)

    earnings = Earnings(
        base=to_cents(request.base_amount),
        overtime=to_cents(request.overtime_amount),
        allowances=to_cents(request.allowances),
        bonuses=to_cents(request.bonuses),
    )
    taxable = earnings.base + earnings.overtime
    deductions = Deductions(
        tax=to_cents(taxable * TAX_RATE),
        insurance=to_cents(taxable * INSURANCE_RATE),
        other=to_cents(request.other_deductions),
    )

    overlapping = [
        record for record in records
        if record_overlaps(record, request.start_date, request.end_date)
    ]

    period = PayrollPeriod(
        user_id=request.user_id,
        start_date=request.start_date,
        end_date=request.end_date,
        currency=request.currency,
        earnings=earnings,
        deductions=deductions,
        flight_hours=total_flight_hours(overlapping),
    )
    logger.debug(
        f"Calculated payroll for {request.user_id}: net {period.net_amount} {period.currency}",
        extra={'user_id': str(request.user_id)}
    )
    return period
