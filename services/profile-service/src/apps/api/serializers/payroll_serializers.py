# services/profile-service/src/apps/api/serializers/payroll_serializers.py
"""
Payroll Serializers

REST API serializers for payroll settings, generation and payments.
"""

from decimal import Decimal

from rest_framework import serializers

from apps.core.models import PayrollRecord, PayrollSettings
from .search_serializers import PaginationQuerySerializer

AMOUNT = dict(max_digits=12, decimal_places=2, min_value=Decimal('0'))


class PayrollSetupSerializer(serializers.Serializer):
    payment_method = serializers.ChoiceField(choices=PayrollSettings.PaymentMethod.choices)
    bank_details = serializers.DictField(required=False)
    tax_information = serializers.DictField(required=False)
    currency = serializers.CharField(max_length=3)
    gateway_account_id = serializers.CharField(max_length=100, required=False, allow_blank=True)


class PayrollSettingsSerializer(serializers.ModelSerializer):
    """Serializer for payroll settings output."""

    class Meta:
        model = PayrollSettings
        fields = [
            'payment_method',
            'bank_details',
            'tax_information',
            'preferred_currency',
            'payment_schedule',
            'notification_preferences',
            'gateway_account_id',
            'updated_at',
        ]
        read_only_fields = fields


class PaymentPreferencesSerializer(serializers.Serializer):
    preferred_currency = serializers.CharField(max_length=3, required=False)
    payment_schedule = serializers.ChoiceField(
        choices=PayrollSettings.PaymentSchedule.choices, required=False
    )
    notification_preferences = serializers.DictField(required=False)


class PayrollGenerateSerializer(serializers.Serializer):
    """Request body of payroll generation."""

    start_date = serializers.DateField()
    end_date = serializers.DateField()
    base_amount = serializers.DecimalField(default=Decimal('0'), **AMOUNT)
    overtime_amount = serializers.DecimalField(default=Decimal('0'), **AMOUNT)
    allowances = serializers.DecimalField(default=Decimal('0'), **AMOUNT)
    bonuses = serializers.DecimalField(default=Decimal('0'), **AMOUNT)
    other_deductions = serializers.DecimalField(default=Decimal('0'), **AMOUNT)
    currency = serializers.CharField(max_length=3, required=False)


class PayrollRecordSerializer(serializers.ModelSerializer):
    """Payroll record grouped into period, earnings and deductions."""

    user_id = serializers.UUIDField(source='profile_id', read_only=True)
    period = serializers.SerializerMethodField()
    earnings = serializers.SerializerMethodField()
    deductions = serializers.SerializerMethodField()

    class Meta:
        model = PayrollRecord
        fields = [
            'id',
            'user_id',
            'period',
            'earnings',
            'deductions',
            'gross_amount',
            'total_deductions',
            'net_amount',
            'currency',
            'flight_hours',
            'status',
            'payment_method',
            'transaction_id',
            'processed_at',
            'failure_reason',
            'payment_attempt',
            'created_at',
        ]
        read_only_fields = fields

    def get_period(self, obj) -> dict:
        return {
            'start_date': obj.start_date.isoformat(),
            'end_date': obj.end_date.isoformat(),
        }

    def get_earnings(self, obj) -> dict:
        return {
            'base': obj.base_amount,
            'overtime': obj.overtime_amount,
            'allowances': obj.allowances,
            'bonuses': obj.bonuses,
        }

    def get_deductions(self, obj) -> dict:
        return {
            'tax': obj.tax_amount,
            'insurance': obj.insurance_amount,
            'other': obj.other_deductions,
        }


class ProcessPaymentSerializer(serializers.Serializer):
    payroll_id = serializers.UUIDField()
    payment_method = serializers.ChoiceField(choices=PayrollSettings.PaymentMethod.choices)


class PaymentHistoryQuerySerializer(PaginationQuerySerializer):
    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)

    def validate(self, attrs):
        start_date = attrs.get('start_date')
        end_date = attrs.get('end_date')
        if start_date and end_date and end_date < start_date:
            raise serializers.ValidationError({
                'end_date': 'end_date must be after start_date'
            })
        return attrs


class PaymentStatsQuerySerializer(serializers.Serializer):
    year = serializers.IntegerField(min_value=2000, max_value=2100, required=False)
    month = serializers.IntegerField(min_value=1, max_value=12, required=False)
