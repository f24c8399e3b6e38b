# services/profile-service/src/apps/core/models/payroll.py
"""
Payroll Record Model

Persisted snapshot of a generated payroll period and its payment state.
"""

from decimal import Decimal

from django.db import models
from django.utils import timezone

from common.mixins import UUIDPrimaryKeyMixin, TimestampMixin
from apps.core.exceptions import PayrollStateError


class PayrollRecord(UUIDPrimaryKeyMixin, TimestampMixin):
    """
    Generated payroll for one period.

    Status moves ``pending -> paid`` or ``pending -> failed -> paid``;
    ``paid`` is terminal.
    """

    class Status(models.TextChoices):
        PENDING = 'pending', 'Pending'
        PAID = 'paid', 'Paid'
        FAILED = 'failed', 'Failed'

    profile = models.ForeignKey(
        'core.Profile',
        on_delete=models.CASCADE,
        related_name='payroll_records'
    )

    start_date = models.DateField()
    end_date = models.DateField()

    # ==========================================================================
    # Earnings
    # ==========================================================================
    base_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    overtime_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    allowances = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    bonuses = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))

    # ==========================================================================
    # Deductions
    # ==========================================================================
    tax_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    insurance_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    other_deductions = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))

    # ==========================================================================
    # Totals
    # ==========================================================================
    gross_amount = models.DecimalField(max_digits=12, decimal_places=2)
    total_deductions = models.DecimalField(max_digits=12, decimal_places=2)
    net_amount = models.DecimalField(max_digits=12, decimal_places=2)
    currency = models.CharField(max_length=3)
    flight_hours = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))

    # ==========================================================================
    # Payment
    # ==========================================================================
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.PENDING,
        db_index=True
    )
    payment_method = models.CharField(max_length=20, blank=True, default='')
    transaction_id = models.CharField(max_length=100, blank=True, default='')
    processed_at = models.DateTimeField(blank=True, null=True)
    failure_reason = models.TextField(blank=True, default='')
    payment_attempt = models.PositiveIntegerField(default=1)

    class Meta:
        db_table = 'payroll_records'
        ordering = ['-created_at', 'id']
        indexes = [
            models.Index(fields=['profile', 'status']),
            models.Index(fields=['profile', 'created_at']),
        ]

    def __str__(self):
        return f"Payroll {self.start_date}..{self.end_date}: {self.net_amount} {self.currency}"

    @property
    def can_pay(self) -> bool:
        return self.status in [self.Status.PENDING, self.Status.FAILED]

    def ensure_payable(self):
        if not self.can_pay:
            raise PayrollStateError(self.status, self.Status.PAID)

    def mark_paid(self, transaction_id: str, payment_method: str):
        """Record a successful transfer."""
        self.ensure_payable()
        self.status = self.Status.PAID
        self.transaction_id = transaction_id
        self.payment_method = payment_method
        self.processed_at = timezone.now()
        self.failure_reason = ''
        self.save()

    def mark_failed(self, reason: str, payment_method: str):
        """Record a rejected transfer; the record stays payable under a new attempt."""
        self.ensure_payable()
        self.status = self.Status.FAILED
        self.payment_attempt += 1
        self.payment_method = payment_method
        self.processed_at = timezone.now()
        self.failure_reason = reason
        self.save()
