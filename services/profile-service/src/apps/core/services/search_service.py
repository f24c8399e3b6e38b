# services/profile-service/src/apps/core/services/search_service.py
"""
Search Service

Professional search, rollups and similar-profile suggestions.
"""

import uuid
import logging
from collections import defaultdict
from typing import Any, Dict, List, Optional, Sequence

from dateutil.relativedelta import relativedelta
from django.db.models import Avg, Count, Max, Q
from django.utils import timezone

from ..engines import aircraft_type_hours, rank_candidates
from ..exceptions import ProfileNotFoundError
from ..filters import ExactMatch, Range, SetMembership
from ..models import Certification, Profile, ProfileTag, WorkHistory
from .base import PageResult, paginate
from .query import build_profile_query

logger = logging.getLogger(__name__)

DAYS_PER_YEAR = 365.25


class SearchService:
    """
    Service class for searching aviation professionals.
    """

    SORT_FIELDS = ('total_flight_hours', 'created_at', 'last_name')
    DEFAULT_SIMILAR_LIMIT = 5

    # ==========================================================================
    # Professional Search
    # ==========================================================================

    @classmethod
    def build_filters(
        cls,
        role: Optional[str] = None,
        experience: Optional[int] = None,
        skills: Sequence[str] = (),
        aircraft_types: Sequence[str] = (),
        languages: Sequence[str] = (),
        certifications: Sequence[str] = (),
        location: Optional[str] = None,
        availability: Optional[bool] = None,
        min_flight_hours=None,
        **kwargs
    ) -> List:
        """Filter specifications for the given search parameters."""
        filters = []
        if role:
            filters.append(ExactMatch('role', role))
        if availability is not None:
            filters.append(ExactMatch('is_available', availability))
        if location:
            filters.append(SetMembership('preferred_locations', (location,)))
        if min_flight_hours is not None:
            filters.append(Range('total_flight_hours', gte=min_flight_hours))
        if skills:
            filters.append(SetMembership('skills', tuple(skills)))
        if aircraft_types:
            filters.append(SetMembership('aircraft_types', tuple(aircraft_types)))
        if languages:
            filters.append(SetMembership('languages', tuple(languages)))
        if certifications:
            filters.append(SetMembership(
                'certifications.name',
                tuple(certifications),
                constraints=(ExactMatch(
                    'certifications.verification_status',
                    Certification.VerificationStatus.VERIFIED
                ),)
            ))
        if experience:
            started_before = timezone.now().date() - relativedelta(years=experience)
            filters.append(Range('work_history.start_date', lte=started_before))
        return filters

    @classmethod
    def search_professionals(
        cls,
        page: int = 1,
        limit: int = 10,
        sort_by: str = 'total_flight_hours',
        sort_order: str = 'desc',
        **criteria
    ) -> PageResult:
        """
        Search profiles by the given criteria.

        Each result carries ``recent_employer`` and ``current_position``
        from the profile's most recently started work history record.
        """
        if sort_by not in cls.SORT_FIELDS:
            sort_by = 'total_flight_hours'
        ordering = f"-{sort_by}" if sort_order == 'desc' else sort_by

        query = build_profile_query(cls.build_filters(**criteria))
        profiles = (
            Profile.objects.filter(query)
            .prefetch_related('tags', 'certifications')
            .order_by(ordering, 'id')
        )
        result = paginate(profiles, page, limit)

        latest = cls._latest_work_history([profile.id for profile in result.items])
        for profile in result.items:
            record = latest.get(profile.id)
            profile.recent_employer = record.employer_name if record else None
            profile.current_position = record.position_title if record else None

        logger.debug(
            f"Professional search matched {result.count} profiles",
            extra={'criteria': sorted(key for key, value in criteria.items() if value)}
        )
        return result

    @classmethod
    def search_by_aircraft_type(
        cls,
        aircraft_type: str,
        page: int = 1,
        limit: int = 10
    ) -> PageResult:
        """Profiles qualified on an aircraft type, most flight hours first."""
        query = build_profile_query([SetMembership('aircraft_types', (aircraft_type,))])
        profiles = (
            Profile.objects.filter(query)
            .prefetch_related('tags', 'certifications', 'work_history')
            .order_by('-total_flight_hours', 'id')
        )
        result = paginate(profiles, page, limit)

        for profile in result.items:
            profile.aircraft_type_hours = aircraft_type_hours(
                (record.to_record() for record in profile.work_history.all()),
                aircraft_type
            )
        return result

    @classmethod
    def search_by_certification(
        cls,
        certification: str,
        status: Optional[str] = None,
        page: int = 1,
        limit: int = 10
    ) -> PageResult:
        """Profiles holding a certification, most recently issued first."""
        constraints = ()
        cert_filter = Q(certifications__name=certification)
        if status:
            constraints = (ExactMatch('certifications.verification_status', status),)
            cert_filter &= Q(certifications__verification_status=status)

        query = build_profile_query([
            SetMembership('certifications.name', (certification,), constraints=constraints)
        ])
        profiles = (
            Profile.objects.filter(query)
            .annotate(certification_issued=Max('certifications__issue_date', filter=cert_filter))
            .prefetch_related('tags', 'certifications')
            .order_by('-certification_issued', 'id')
        )
        result = paginate(profiles, page, limit)

        for profile in result.items:
            profile.certification_details = next(
                (
                    cert for cert in profile.certifications.all()
                    if cert.name == certification
                    and (not status or cert.verification_status == status)
                ),
                None
            )
        return result

    # ==========================================================================
    # Rollups
    # ==========================================================================

    @classmethod
    def available_positions(cls) -> List[str]:
        """Distinct position titles across all work history."""
        return list(
            WorkHistory.objects.order_by('position_title')
            .values_list('position_title', flat=True)
            .distinct()
        )

    @classmethod
    def search_statistics(cls) -> Dict[str, Any]:
        """
        Per-role counts, average flight hours and average years on the
        platform; per-certification counts and verified counts.
        """
        now = timezone.now()
        years_by_role = defaultdict(list)
        for role, created_at in Profile.objects.values_list('role', 'created_at'):
            years_by_role[role].append((now - created_at).days / DAYS_PER_YEAR)

        role_stats = [
            {
                'role': row['role'],
                'count': row['count'],
                'avg_flight_hours': round(float(row['avg_flight_hours'] or 0), 2),
                'avg_experience_years': round(
                    sum(years_by_role[row['role']]) / len(years_by_role[row['role']]), 2
                ) if years_by_role[row['role']] else 0,
            }
            for row in Profile.objects.order_by('role').values('role').annotate(
                count=Count('id'),
                avg_flight_hours=Avg('total_flight_hours'),
            )
        ]

        certification_stats = list(
            Certification.objects.order_by('name').values('name').annotate(
                count=Count('id'),
                verified=Count(
                    'id',
                    filter=Q(verification_status=Certification.VerificationStatus.VERIFIED)
                ),
            )
        )

        return {
            'role_stats': role_stats,
            'certification_stats': certification_stats,
        }

    # ==========================================================================
    # Similar Professionals
    # ==========================================================================

    @classmethod
    def candidate_pool(cls, reference: Profile):
        """
        Profiles sharing a skill, an aircraft type or the role with the
        reference, never the reference itself, in creation order.
        """
        shared_tags = ProfileTag.objects.filter(
            Q(category=ProfileTag.Category.SKILL, value__in=reference.skills) |
            Q(category=ProfileTag.Category.AIRCRAFT_TYPE, value__in=reference.aircraft_types)
        ).values('profile_id')

        return (
            Profile.objects.filter(Q(role=reference.role) | Q(id__in=shared_tags))
            .exclude(id=reference.id)
            .prefetch_related('tags', 'certifications')
            .order_by('created_at', 'id')
        )

    @classmethod
    def similar_professionals(
        cls,
        user_id: uuid.UUID,
        limit: int = DEFAULT_SIMILAR_LIMIT
    ) -> List[Profile]:
        """
        Rank the candidate pool by similarity to the reference profile.

        Each returned profile carries ``similarity`` (a SimilarityScore).

        Raises:
            ProfileNotFoundError: If the reference profile does not exist
        """
        try:
            reference = Profile.objects.prefetch_related('tags').get(id=user_id)
        except Profile.DoesNotExist:
            raise ProfileNotFoundError(user_id=str(user_id))

        candidates = {profile.id: profile for profile in cls.candidate_pool(reference)}
        ranked = rank_candidates(
            reference.to_match_profile(),
            [profile.to_match_profile() for profile in candidates.values()],
            limit=limit,
        )

        results = []
        for item in ranked:
            profile = candidates[item.candidate.id]
            profile.similarity = item.score
            results.append(profile)

        logger.debug(
            f"Ranked {len(candidates)} candidates for {user_id}",
            extra={'returned': len(results)}
        )
        return results

    # ==========================================================================
    # Helper Methods
    # ==========================================================================

    @classmethod
    def _latest_work_history(cls, profile_ids: List[uuid.UUID]) -> Dict[uuid.UUID, WorkHistory]:
        latest = {}
        records = WorkHistory.objects.filter(profile_id__in=profile_ids).order_by(
            'profile_id', '-start_date', 'id'
        )
        for record in records:
            latest.setdefault(record.profile_id, record)
        return latest
