# services/profile-service/src/apps/core/services/work_history_service.py
"""
Work History Service

Business logic for employment records. Keeps ``Profile.total_flight_hours``
equal to the sum of the owner's record hours with atomic increments.
"""

import uuid
import logging
from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence

from django.db import transaction
from django.db.models import F
from django.utils import timezone

from common.validators import validate_flight_hours, validate_range
from ..engines import WorkHistoryStats, summarize_work_history
from ..exceptions import InvalidRangeError, ProfileNotFoundError, WorkHistoryNotFoundError
from ..models import Profile, WorkHistory
from .base import validated
from .storage_service import StorageService

logger = logging.getLogger(__name__)


class WorkHistoryService:
    """
    Service class for work history operations.

    Handles record CRUD, flight records, achievements, performance
    ratings and statistics.
    """

    MAX_DOCUMENTS = 5
    MAX_ACHIEVEMENT_DOCUMENTS = 3

    storage = StorageService()

    # ==========================================================================
    # Work History CRUD Operations
    # ==========================================================================

    @classmethod
    def create_work_history(
        cls,
        user_id: uuid.UUID,
        data: Dict[str, Any],
        documents: Sequence = None
    ) -> WorkHistory:
        """
        Create a work history record and add its hours to the profile.

        Args:
            user_id: Owner's user UUID
            data: Record fields
            documents: Optional uploaded files (at most five)

        Returns:
            Created WorkHistory instance

        Raises:
            ProfileNotFoundError: If the owner has no profile
            ValidationError: If hours or uploads are invalid
        """
        if not Profile.objects.filter(id=user_id).exists():
            raise ProfileNotFoundError(user_id=str(user_id))

        data = dict(data)
        data['flight_total_hours'] = validated(
            validate_flight_hours, data.get('flight_total_hours', 0), 'flight_total_hours'
        )
        cls._check_period(data.get('start_date'), data.get('end_date'))

        stored = cls.storage.save_uploads(
            documents, f"work-history/{user_id}", 'documents', max_count=cls.MAX_DOCUMENTS
        )
        with cls.storage.cleanup_on_error(stored):
            with transaction.atomic():
                record = WorkHistory.objects.create(
                    profile_id=user_id,
                    documents=stored,
                    **data
                )
                cls._apply_hours_delta(user_id, record.flight_total_hours)

        logger.info(
            f"Work history {record.id} created for profile {user_id}",
            extra={'flight_hours': str(record.flight_total_hours)}
        )
        return record

    @classmethod
    def list_work_history(cls, user_id: uuid.UUID) -> List[WorkHistory]:
        """All records of a profile, most recent start date first."""
        return list(
            WorkHistory.objects.filter(profile_id=user_id).order_by('-start_date', 'id')
        )

    @classmethod
    def get_work_history(cls, user_id: uuid.UUID, work_history_id: uuid.UUID) -> WorkHistory:
        try:
            return WorkHistory.objects.get(id=work_history_id, profile_id=user_id)
        except WorkHistory.DoesNotExist:
            raise WorkHistoryNotFoundError(work_history_id=str(work_history_id))

    @classmethod
    def update_work_history(
        cls,
        user_id: uuid.UUID,
        work_history_id: uuid.UUID,
        data: Dict[str, Any],
        documents: Sequence = None
    ) -> WorkHistory:
        """
        Update a record. New documents replace the stored ones and the
        change in hours is applied to the profile total.
        """
        data = dict(data)
        if 'flight_total_hours' in data:
            data['flight_total_hours'] = validated(
                validate_flight_hours, data['flight_total_hours'], 'flight_total_hours'
            )

        stored = cls.storage.save_uploads(
            documents, f"work-history/{user_id}", 'documents', max_count=cls.MAX_DOCUMENTS
        )
        replaced = []
        with cls.storage.cleanup_on_error(stored):
            with transaction.atomic():
                record = cls._get_for_update(user_id, work_history_id)
                previous_hours = record.flight_total_hours

                for field_name, value in data.items():
                    setattr(record, field_name, value)
                cls._check_period(record.start_date, record.end_date)
                if stored:
                    replaced = list(record.documents)
                    record.documents = stored
                record.save()

                cls._apply_hours_delta(user_id, record.flight_total_hours - previous_hours)

        if replaced:
            cls.storage.delete_files(replaced)

        logger.info(f"Work history {work_history_id} updated")
        return record

    @classmethod
    def delete_work_history(cls, user_id: uuid.UUID, work_history_id: uuid.UUID) -> None:
        """Delete a record, subtract its hours and remove its files."""
        with transaction.atomic():
            record = cls._get_for_update(user_id, work_history_id)
            paths = record.document_paths
            cls._apply_hours_delta(user_id, -record.flight_total_hours)
            record.delete()

        cls.storage.delete_files(paths)
        logger.info(f"Work history {work_history_id} deleted")

    # ==========================================================================
    # Nested Collections
    # ==========================================================================

    @classmethod
    def add_flight_record(
        cls,
        user_id: uuid.UUID,
        work_history_id: uuid.UUID,
        aircraft_type: str,
        hours: Decimal,
        routes: Any = None
    ) -> WorkHistory:
        """Append hours flown on an aircraft type and the routes flown."""
        hours = validated(validate_flight_hours, hours, 'hours')

        with transaction.atomic():
            record = cls._get_for_update(user_id, work_history_id)
            record.flight_aircraft_types.append({
                'aircraft': aircraft_type,
                'hours': float(hours),
            })
            if isinstance(routes, (list, tuple)):
                record.flight_routes.extend(routes)
            elif routes:
                record.flight_routes.append(routes)
            record.flight_total_hours = record.flight_total_hours + hours
            record.save(update_fields=[
                'flight_aircraft_types', 'flight_routes', 'flight_total_hours', 'updated_at'
            ])
            cls._apply_hours_delta(user_id, hours)

        logger.info(
            f"Flight record added to work history {work_history_id}",
            extra={'aircraft_type': aircraft_type, 'hours': str(hours)}
        )
        return record

    @classmethod
    def add_achievement(
        cls,
        user_id: uuid.UUID,
        work_history_id: uuid.UUID,
        data: Dict[str, Any],
        documents: Sequence = None
    ) -> WorkHistory:
        """Append an achievement with up to three supporting documents."""
        cls.get_work_history(user_id, work_history_id)
        stored = cls.storage.save_uploads(
            documents,
            f"work-history/{user_id}/achievements",
            'achievement-documents',
            max_count=cls.MAX_ACHIEVEMENT_DOCUMENTS
        )

        with cls.storage.cleanup_on_error(stored):
            with transaction.atomic():
                record = cls._get_for_update(user_id, work_history_id)
                achieved_on = data.get('date')
                record.achievements.append({
                    'title': data.get('title', ''),
                    'description': data.get('description', ''),
                    'date': achieved_on.isoformat() if achieved_on else None,
                    'document_urls': [item['url'] for item in stored],
                })
                record.save(update_fields=['achievements', 'updated_at'])

        logger.info(f"Achievement added to work history {work_history_id}")
        return record

    @classmethod
    def add_performance_rating(
        cls,
        user_id: uuid.UUID,
        work_history_id: uuid.UUID,
        score: int,
        comment: str = '',
        reviewer: str = ''
    ) -> WorkHistory:
        """Append a 1-5 rating dated now."""
        score = validated(validate_range, score, 'score', min_value=1, max_value=5)

        with transaction.atomic():
            record = cls._get_for_update(user_id, work_history_id)
            record.performance_ratings.append({
                'score': score,
                'comment': comment or '',
                'reviewer': reviewer or '',
                'date': timezone.now().isoformat(),
            })
            record.save(update_fields=['performance_ratings', 'updated_at'])

        logger.info(f"Performance rating added to work history {work_history_id}")
        return record

    # ==========================================================================
    # Statistics
    # ==========================================================================

    @classmethod
    def get_work_history_stats(cls, user_id: uuid.UUID) -> WorkHistoryStats:
        records = WorkHistory.objects.filter(profile_id=user_id)
        return summarize_work_history(record.to_record() for record in records)

    # ==========================================================================
    # Helper Methods
    # ==========================================================================

    @classmethod
    def _get_for_update(
        cls,
        user_id: uuid.UUID,
        work_history_id: uuid.UUID
    ) -> WorkHistory:
        try:
            return WorkHistory.objects.select_for_update().get(
                id=work_history_id, profile_id=user_id
            )
        except WorkHistory.DoesNotExist:
            raise WorkHistoryNotFoundError(work_history_id=str(work_history_id))

    @staticmethod
    def _check_period(start_date, end_date) -> None:
        if start_date and end_date and end_date < start_date:
            raise InvalidRangeError(
                start_date, end_date, message="End date must not be before the start date"
            )

    @classmethod
    def _apply_hours_delta(cls, user_id: uuid.UUID, delta: Optional[Decimal]) -> None:
        """Single UPDATE ... SET total = total + delta on the owner's profile."""
        if not delta:
            return
        Profile.objects.filter(id=user_id).update(
            total_flight_hours=F('total_flight_hours') + delta
        )
