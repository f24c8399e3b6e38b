# services/profile-service/src/apps/core/models/profile.py
"""
Profile Models

Aviation professional profile, its set-valued traits, certifications
and payroll settings.
"""

from decimal import Decimal
from typing import List, Dict, Any

from django.db import models
from django.core.validators import MinValueValidator

from common.mixins import UUIDPrimaryKeyMixin, TimestampMixin
from apps.core.engines.types import MatchProfile


class Profile(UUIDPrimaryKeyMixin, TimestampMixin):
    """
    Aviation professional profile.

    The primary key is the user id issued by the identity service and
    forwarded by the API gateway. ``total_flight_hours`` is a running
    total of the owner's work history hours, maintained with atomic
    increments by the work history service.
    """

    class Role(models.TextChoices):
        PILOT = 'pilot', 'Pilot'
        CO_PILOT = 'co_pilot', 'Co-Pilot'
        FLIGHT_ENGINEER = 'flight_engineer', 'Flight Engineer'
        FLIGHT_ATTENDANT = 'flight_attendant', 'Flight Attendant'
        AIRCRAFT_MECHANIC = 'aircraft_mechanic', 'Aircraft Mechanic'
        AIR_TRAFFIC_CONTROLLER = 'air_traffic_controller', 'Air Traffic Controller'
        DISPATCHER = 'dispatcher', 'Dispatcher'
        GROUND_STAFF = 'ground_staff', 'Ground Staff'
        OTHER = 'other', 'Other'

    # ==========================================================================
    # Identity
    # ==========================================================================
    email = models.EmailField(db_index=True)
    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100, db_index=True)
    phone = models.CharField(max_length=30, blank=True, default='')
    bio = models.TextField(blank=True, default='')
    avatar = models.CharField(
        max_length=500,
        blank=True,
        default='',
        help_text="Storage path of the avatar image"
    )

    # ==========================================================================
    # Professional
    # ==========================================================================
    role = models.CharField(
        max_length=30,
        choices=Role.choices,
        default=Role.OTHER,
        db_index=True
    )
    is_available = models.BooleanField(default=True, db_index=True)
    total_flight_hours = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0'))],
        help_text="Running total of work history flight hours"
    )

    class Meta:
        db_table = 'profiles'
        ordering = ['created_at', 'id']
        indexes = [
            models.Index(fields=['role', 'total_flight_hours']),
        ]

    def __str__(self):
        return f"{self.first_name} {self.last_name} ({self.role})"

    # ==========================================================================
    # Properties
    # ==========================================================================

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def tag_values(self, category: str) -> List[str]:
        """Values of one trait category, served from the prefetch cache when present."""
        return [tag.value for tag in self.tags.all() if tag.category == category]

    @property
    def skills(self) -> List[str]:
        return self.tag_values(ProfileTag.Category.SKILL)

    @property
    def aircraft_types(self) -> List[str]:
        return self.tag_values(ProfileTag.Category.AIRCRAFT_TYPE)

    @property
    def preferred_locations(self) -> List[str]:
        return self.tag_values(ProfileTag.Category.LOCATION)

    @property
    def languages(self) -> List[Dict[str, Any]]:
        return [
            {'language': tag.value, 'proficiency': tag.level}
            for tag in self.tags.all()
            if tag.category == ProfileTag.Category.LANGUAGE
        ]

    def to_match_profile(self) -> MatchProfile:
        return MatchProfile(
            id=self.id,
            role=self.role,
            skills=frozenset(self.skills),
            aircraft_types=frozenset(self.aircraft_types),
        )


class ProfileTag(models.Model):
    """
    One member of a profile's set-valued trait.

    Skills, aircraft types, languages and preferred locations are stored
    as rows so that set-membership filters become indexed subqueries.
    """

    class Category(models.TextChoices):
        SKILL = 'skill', 'Skill'
        AIRCRAFT_TYPE = 'aircraft_type', 'Aircraft Type'
        LANGUAGE = 'language', 'Language'
        LOCATION = 'location', 'Preferred Location'

    profile = models.ForeignKey(
        Profile,
        on_delete=models.CASCADE,
        related_name='tags'
    )
    category = models.CharField(max_length=20, choices=Category.choices)
    value = models.CharField(max_length=100)
    level = models.CharField(
        max_length=30,
        blank=True,
        default='',
        help_text="Language proficiency"
    )

    class Meta:
        db_table = 'profile_tags'
        ordering = ['id']
        constraints = [
            models.UniqueConstraint(
                fields=['profile', 'category', 'value'],
                name='unique_profile_tag'
            ),
        ]
        indexes = [
            models.Index(fields=['category', 'value']),
        ]

    def __str__(self):
        return f"{self.category}:{self.value}"


class Certification(UUIDPrimaryKeyMixin, TimestampMixin):
    """Professional certification or license held by a profile."""

    class VerificationStatus(models.TextChoices):
        PENDING = 'pending', 'Pending'
        VERIFIED = 'verified', 'Verified'
        REJECTED = 'rejected', 'Rejected'

    profile = models.ForeignKey(
        Profile,
        on_delete=models.CASCADE,
        related_name='certifications'
    )
    name = models.CharField(max_length=200, db_index=True)
    issuing_authority = models.CharField(max_length=200, blank=True, default='')
    certificate_number = models.CharField(max_length=100, blank=True, default='')
    issue_date = models.DateField(db_index=True)
    expiry_date = models.DateField(blank=True, null=True)
    verification_status = models.CharField(
        max_length=20,
        choices=VerificationStatus.choices,
        default=VerificationStatus.PENDING,
        db_index=True
    )
    document = models.CharField(
        max_length=500,
        blank=True,
        default='',
        help_text="Storage path of the uploaded certificate"
    )

    class Meta:
        db_table = 'certifications'
        ordering = ['-issue_date', 'id']
        indexes = [
            models.Index(fields=['name', 'verification_status']),
        ]

    def __str__(self):
        return f"{self.name} ({self.verification_status})"

    @property
    def is_verified(self) -> bool:
        return self.verification_status == self.VerificationStatus.VERIFIED


class PayrollSettings(TimestampMixin):
    """Payment configuration of a profile."""

    class PaymentMethod(models.TextChoices):
        BANK_TRANSFER = 'bank_transfer', 'Bank Transfer'
        PAYPAL = 'paypal', 'PayPal'
        CHECK = 'check', 'Check'

    class PaymentSchedule(models.TextChoices):
        WEEKLY = 'weekly', 'Weekly'
        BIWEEKLY = 'biweekly', 'Bi-Weekly'
        MONTHLY = 'monthly', 'Monthly'

    profile = models.OneToOneField(
        Profile,
        on_delete=models.CASCADE,
        primary_key=True,
        related_name='payroll_settings'
    )
    payment_method = models.CharField(
        max_length=20,
        choices=PaymentMethod.choices,
        blank=True,
        default=''
    )
    bank_details = models.JSONField(default=dict, blank=True)
    tax_information = models.JSONField(default=dict, blank=True)
    preferred_currency = models.CharField(max_length=3, blank=True, default='')
    payment_schedule = models.CharField(
        max_length=20,
        choices=PaymentSchedule.choices,
        default=PaymentSchedule.MONTHLY
    )
    notification_preferences = models.JSONField(default=dict, blank=True)
    gateway_account_id = models.CharField(
        max_length=100,
        blank=True,
        default='',
        help_text="Connected account id at the payment gateway"
    )

    class Meta:
        db_table = 'payroll_settings'

    def __str__(self):
        return f"Payroll settings: {self.profile_id}"
