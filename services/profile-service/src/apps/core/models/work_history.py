# services/profile-service/src/apps/core/models/work_history.py
"""
Work History Model

Employment records of a profile with flight records, achievements,
performance ratings and uploaded documents.
"""

from decimal import Decimal

from django.db import models
from django.core.validators import MinValueValidator

from common.mixins import UUIDPrimaryKeyMixin, TimestampMixin
from apps.core.engines.types import WorkRecord


class WorkHistory(UUIDPrimaryKeyMixin, TimestampMixin):
    """
    A single employment at one employer.

    Nested collections are document-like lists:

    - ``flight_aircraft_types``: ``[{"aircraft": str, "hours": number}]``
    - ``flight_routes``: ``[str | object]``
    - ``achievements``: ``[{"title", "description", "date", "document_urls"}]``
    - ``performance_ratings``: ``[{"score": 1-5, "comment", "reviewer", "date"}]``
    - ``documents``: ``[{"type", "title", "url"}]``
    """

    class EmploymentType(models.TextChoices):
        FULL_TIME = 'full_time', 'Full Time'
        PART_TIME = 'part_time', 'Part Time'
        CONTRACT = 'contract', 'Contract'
        FREELANCE = 'freelance', 'Freelance'
        TEMPORARY = 'temporary', 'Temporary'

    profile = models.ForeignKey(
        'core.Profile',
        on_delete=models.CASCADE,
        related_name='work_history'
    )

    # ==========================================================================
    # Employer and Position
    # ==========================================================================
    employer_name = models.CharField(max_length=200)
    employer_location = models.CharField(max_length=200, blank=True, default='')
    position_title = models.CharField(max_length=200, db_index=True)
    department = models.CharField(max_length=200, blank=True, default='')
    employment_type = models.CharField(
        max_length=20,
        choices=EmploymentType.choices,
        default=EmploymentType.FULL_TIME
    )
    description = models.TextField(blank=True, default='')

    # ==========================================================================
    # Period
    # ==========================================================================
    start_date = models.DateField(db_index=True)
    end_date = models.DateField(
        blank=True,
        null=True,
        help_text="Empty for the current position"
    )

    # ==========================================================================
    # Flight Records
    # ==========================================================================
    flight_total_hours = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0'))]
    )
    flight_aircraft_types = models.JSONField(default=list, blank=True)
    flight_routes = models.JSONField(default=list, blank=True)

    # ==========================================================================
    # Achievements / Performance / Documents
    # ==========================================================================
    achievements = models.JSONField(default=list, blank=True)
    performance_ratings = models.JSONField(default=list, blank=True)
    documents = models.JSONField(default=list, blank=True)

    class Meta:
        db_table = 'work_history'
        ordering = ['-start_date', 'id']
        verbose_name_plural = 'work history'
        indexes = [
            models.Index(fields=['profile', 'start_date']),
        ]

    def __str__(self):
        return f"{self.position_title} at {self.employer_name}"

    @property
    def is_current(self) -> bool:
        return self.end_date is None

    @property
    def document_paths(self):
        """Storage paths of every file attached to this record."""
        paths = [doc.get('url') for doc in self.documents if doc.get('url')]
        for achievement in self.achievements:
            paths.extend(achievement.get('document_urls') or [])
        return paths

    def to_record(self) -> WorkRecord:
        """Plain snapshot consumed by the aggregation and payroll engines."""
        return WorkRecord(
            total_hours=Decimal(self.flight_total_hours or 0),
            aircraft_hours=tuple(
                (entry.get('aircraft'), Decimal(str(entry.get('hours') or 0)))
                for entry in self.flight_aircraft_types
            ),
            rating_scores=tuple(
                rating['score'] for rating in self.performance_ratings
                if rating.get('score') is not None
            ),
            achievement_count=len(self.achievements),
            start_date=self.start_date,
            end_date=self.end_date,
        )
