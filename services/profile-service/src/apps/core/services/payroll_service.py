# services/profile-service/src/apps/core/services/payroll_service.py
"""
Payroll Service

Payroll settings, payroll generation, payment processing and payment
history for a profile.
"""

import uuid
import logging
from datetime import date
from decimal import Decimal
from typing import Any, Dict, Optional

from django.conf import settings
from django.db import transaction
from django.db.models import Avg, Count, Q, Sum

from common.validators import validate_currency_code, validate_positive_decimal
from ..engines import PayrollRequest, calculate_payroll, validate_payroll_request
from ..exceptions import (
    PaymentFailedError,
    PayrollRecordNotFoundError,
    ProfileNotFoundError,
    UnsupportedCurrencyError,
)
from ..models import PayrollRecord, PayrollSettings, Profile, WorkHistory
from ..payments import PaymentGatewayError, TransferRequest, get_payment_gateway
from .base import PageResult, paginate, validated

logger = logging.getLogger(__name__)

ZERO = Decimal('0.00')


class PayrollService:
    """
    Service class for payroll operations.
    """

    EARNING_FIELDS = ('base_amount', 'overtime_amount', 'allowances', 'bonuses', 'other_deductions')

    # ==========================================================================
    # Settings
    # ==========================================================================

    @classmethod
    def supported_currencies(cls):
        return list(settings.SUPPORTED_CURRENCIES)

    @classmethod
    def validate_currency(cls, currency: str) -> str:
        """Normalize a currency code and check it is configured."""
        code = validated(validate_currency_code, currency or '', 'currency')
        if code not in cls.supported_currencies():
            raise UnsupportedCurrencyError(currency, cls.supported_currencies())
        return code

    @classmethod
    @transaction.atomic
    def setup_payroll(cls, user_id: uuid.UUID, data: Dict[str, Any]) -> PayrollSettings:
        """
        Store payment method, bank details, tax information and currency.

        Raises:
            UnsupportedCurrencyError: If the currency is not configured
            ProfileNotFoundError: If the profile does not exist
        """
        currency = cls.validate_currency(data.get('currency'))
        profile = cls._get_profile(user_id)

        payroll_settings, _ = PayrollSettings.objects.select_for_update().get_or_create(
            profile=profile
        )
        payroll_settings.payment_method = data.get('payment_method', '')
        payroll_settings.bank_details = data.get('bank_details') or {}
        payroll_settings.tax_information = data.get('tax_information') or {}
        payroll_settings.preferred_currency = currency
        if 'gateway_account_id' in data:
            payroll_settings.gateway_account_id = data['gateway_account_id']
        payroll_settings.save()

        logger.info(f"Payroll configured for profile {user_id}", extra={'currency': currency})
        return payroll_settings

    @classmethod
    @transaction.atomic
    def update_preferences(cls, user_id: uuid.UUID, data: Dict[str, Any]) -> PayrollSettings:
        """Update currency, schedule and notification preferences."""
        if data.get('preferred_currency'):
            data = {**data, 'preferred_currency': cls.validate_currency(data['preferred_currency'])}
        profile = cls._get_profile(user_id)

        payroll_settings, _ = PayrollSettings.objects.select_for_update().get_or_create(
            profile=profile
        )
        for field_name in ('preferred_currency', 'payment_schedule', 'notification_preferences'):
            if data.get(field_name) is not None:
                setattr(payroll_settings, field_name, data[field_name])
        payroll_settings.save()

        logger.info(f"Payroll preferences updated for profile {user_id}")
        return payroll_settings

    # ==========================================================================
    # Payroll Generation
    # ==========================================================================

    @classmethod
    def generate_payroll(cls, user_id: uuid.UUID, data: Dict[str, Any]) -> PayrollRecord:
        """
        Calculate payroll for a period and persist it as a pending record.

        The currency defaults to the profile's preferred currency, then to
        ``DEFAULT_CURRENCY``. Nothing is stored when validation fails.

        Raises:
            InvalidRangeError: If start_date is not before end_date
            UnsupportedCurrencyError: If the currency is not configured
            ProfileNotFoundError: If the profile does not exist
        """
        amounts = {
            field_name: validated(
                validate_positive_decimal, data.get(field_name) or ZERO, field_name
            )
            for field_name in cls.EARNING_FIELDS
        }
        currency = data.get('currency') or cls._preferred_currency(user_id)
        request = PayrollRequest(
            user_id=user_id,
            start_date=data['start_date'],
            end_date=data['end_date'],
            currency=str(currency).upper(),
            **amounts
        )
        validate_payroll_request(request, cls.supported_currencies())

        profile = cls._get_profile(user_id)
        records = WorkHistory.objects.filter(
            profile=profile,
            start_date__lte=request.end_date,
        ).filter(
            Q(end_date__isnull=True) | Q(end_date__gte=request.start_date)
        )
        period = calculate_payroll(request, [record.to_record() for record in records])

        payroll = PayrollRecord.objects.create(
            profile=profile,
            start_date=period.start_date,
            end_date=period.end_date,
            base_amount=period.earnings.base,
            overtime_amount=period.earnings.overtime,
            allowances=period.earnings.allowances,
            bonuses=period.earnings.bonuses,
            tax_amount=period.deductions.tax,
            insurance_amount=period.deductions.insurance,
            other_deductions=period.deductions.other,
            gross_amount=period.gross_amount,
            total_deductions=period.total_deductions,
            net_amount=period.net_amount,
            currency=period.currency,
            flight_hours=period.flight_hours,
        )

        logger.info(
            f"Payroll {payroll.id} generated for profile {user_id}",
            extra={'net_amount': str(payroll.net_amount), 'currency': payroll.currency}
        )
        return payroll

    # ==========================================================================
    # Payments
    # ==========================================================================

    @classmethod
    def get_payroll(cls, user_id: uuid.UUID, payroll_id: uuid.UUID) -> PayrollRecord:
        try:
            return PayrollRecord.objects.get(id=payroll_id, profile_id=user_id)
        except PayrollRecord.DoesNotExist:
            raise PayrollRecordNotFoundError(payroll_id=str(payroll_id))

    @classmethod
    def process_payment(
        cls,
        user_id: uuid.UUID,
        payroll_id: uuid.UUID,
        payment_method: str
    ) -> PayrollRecord:
        """
        Transfer the net amount of a pending or failed payroll record.

        A gateway failure is stored on the record before
        ``PaymentFailedError`` is raised.

        Raises:
            PayrollRecordNotFoundError: If the record does not exist
            PayrollStateError: If the record is already paid
            PaymentFailedError: If the gateway rejects the transfer
        """
        with transaction.atomic():
            payroll = cls._get_for_update(user_id, payroll_id)
            payroll.ensure_payable()
            destination = PayrollSettings.objects.filter(profile_id=user_id).values_list(
                'gateway_account_id', flat=True
            ).first() or ''

        request = TransferRequest(
            amount=payroll.net_amount,
            currency=payroll.currency,
            reference=str(payroll.id),
            payment_method=payment_method,
            attempt=payroll.payment_attempt,
            destination=destination,
            description=f"Payroll {payroll.start_date} to {payroll.end_date}",
            metadata={'user_id': str(user_id)},
        )

        try:
            result = get_payment_gateway().transfer(request)
        except PaymentGatewayError as e:
            with transaction.atomic():
                payroll = cls._get_for_update(user_id, payroll_id)
                payroll.mark_failed(str(e), payment_method)
            logger.warning(
                f"Payment for payroll {payroll_id} failed: {e}",
                extra={'user_id': str(user_id)}
            )
            raise PaymentFailedError(details={'payroll_id': str(payroll_id), 'reason': str(e)})

        with transaction.atomic():
            payroll = cls._get_for_update(user_id, payroll_id)
            payroll.mark_paid(result.transaction_id, payment_method)

        logger.info(
            f"Payroll {payroll_id} paid",
            extra={'transaction_id': result.transaction_id, 'amount': str(payroll.net_amount)}
        )
        return payroll

    @classmethod
    def payment_history(
        cls,
        user_id: uuid.UUID,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        page: int = 1,
        limit: int = 10
    ) -> PageResult:
        """Payroll records of a profile, newest first."""
        records = PayrollRecord.objects.filter(profile_id=user_id)
        if start_date:
            records = records.filter(created_at__date__gte=start_date)
        if end_date:
            records = records.filter(created_at__date__lte=end_date)
        return paginate(records.order_by('-created_at', 'id'), page, limit)

    @classmethod
    def payment_stats(
        cls,
        user_id: uuid.UUID,
        year: Optional[int] = None,
        month: Optional[int] = None
    ) -> Dict[str, Any]:
        """Totals over the profile's payroll records, optionally for one year/month."""
        records = PayrollRecord.objects.filter(profile_id=user_id)
        if year:
            records = records.filter(created_at__year=year)
        if month:
            records = records.filter(created_at__month=month)

        paid = Q(status=PayrollRecord.Status.PAID)
        totals = records.aggregate(
            total_payments=Sum('net_amount', filter=paid),
            average_payment=Avg('net_amount', filter=paid),
            payment_count=Count('id', filter=paid),
            total_bonuses=Sum('bonuses'),
            total_deductions=Sum('total_deductions'),
            salary=Sum('base_amount'),
            overtime=Sum('overtime_amount'),
            allowance=Sum('allowances'),
            pending=Sum('net_amount', filter=Q(status=PayrollRecord.Status.PENDING)),
            failed=Sum('net_amount', filter=Q(status=PayrollRecord.Status.FAILED)),
        )

        def amount(key):
            value = totals.get(key)
            return Decimal(value).quantize(Decimal('0.01')) if value is not None else ZERO

        return {
            'total_payments': amount('total_payments'),
            'average_payment': amount('average_payment'),
            'payment_count': totals['payment_count'],
            'total_bonuses': amount('total_bonuses'),
            'total_deductions': amount('total_deductions'),
            'payments_by_type': {
                'salary': amount('salary') + amount('overtime'),
                'bonus': amount('total_bonuses'),
                'allowance': amount('allowance'),
            },
            'payments_by_status': {
                'paid': amount('total_payments'),
                'pending': amount('pending'),
                'failed': amount('failed'),
            },
        }

    # ==========================================================================
    # Helper Methods
    # ==========================================================================

    @classmethod
    def _get_profile(cls, user_id: uuid.UUID) -> Profile:
        try:
            return Profile.objects.get(id=user_id)
        except Profile.DoesNotExist:
            raise ProfileNotFoundError(user_id=str(user_id))

    @classmethod
    def _preferred_currency(cls, user_id: uuid.UUID) -> str:
        preferred = PayrollSettings.objects.filter(profile_id=user_id).values_list(
            'preferred_currency', flat=True
        ).first()
        return preferred or settings.DEFAULT_CURRENCY

    @classmethod
    def _get_for_update(cls, user_id: uuid.UUID, payroll_id: uuid.UUID) -> PayrollRecord:
        try:
            return PayrollRecord.objects.select_for_update().get(id=payroll_id, profile_id=user_id)
        except PayrollRecord.DoesNotExist:
            raise PayrollRecordNotFoundError(payroll_id=str(payroll_id))
