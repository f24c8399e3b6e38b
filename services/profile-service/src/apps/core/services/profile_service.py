# services/profile-service/src/apps/core/services/profile_service.py
"""
Profile Service

Business logic for professional profiles and certifications.
"""

import uuid
import logging
from typing import Any, Dict, Iterable, List, Optional

from django.db import transaction
from django.db.models import Q

from ..exceptions import (
    CertificationNotFoundError,
    ProfileNotFoundError,
    ValidationError,
)
from ..models import Certification, Profile, ProfileTag
from .base import PageResult, paginate
from .storage_service import StorageService

logger = logging.getLogger(__name__)


class ProfileService:
    """
    Service class for profile management operations.

    Handles profile CRUD, avatar uploads, certifications and user search.
    """

    TAG_FIELDS = {
        'skills': ProfileTag.Category.SKILL,
        'aircraft_types': ProfileTag.Category.AIRCRAFT_TYPE,
        'preferred_locations': ProfileTag.Category.LOCATION,
        'languages': ProfileTag.Category.LANGUAGE,
    }

    READ_ONLY_FIELDS = {'id', 'total_flight_hours', 'avatar', 'created_at', 'updated_at'}

    storage = StorageService()

    # ==========================================================================
    # Profile CRUD Operations
    # ==========================================================================

    @classmethod
    def get_profile(cls, user_id: uuid.UUID) -> Profile:
        """
        Get a profile with its traits and certifications.

        Raises:
            ProfileNotFoundError: If the profile does not exist
        """
        try:
            return Profile.objects.prefetch_related(
                'tags', 'certifications'
            ).get(id=user_id)
        except Profile.DoesNotExist:
            raise ProfileNotFoundError(user_id=str(user_id))

    @classmethod
    def exists(cls, user_id: uuid.UUID) -> bool:
        return Profile.objects.filter(id=user_id).exists()

    @classmethod
    @transaction.atomic
    def create_profile(cls, user_id: uuid.UUID, data: Dict[str, Any]) -> Profile:
        """
        Create the caller's profile.

        Raises:
            ValidationError: If a profile already exists for the user
        """
        if cls.exists(user_id):
            raise ValidationError(
                "Profile already exists",
                code="PROFILE_EXISTS",
                details={"user_id": str(user_id)}
            )

        fields, tags = cls._split_tags(data)
        profile = Profile.objects.create(id=user_id, **fields)
        for field_name, values in tags.items():
            cls._replace_tags(profile, field_name, values)

        logger.info(f"Profile {profile.id} created")
        return cls.get_profile(profile.id)

    @classmethod
    @transaction.atomic
    def update_profile(cls, user_id: uuid.UUID, data: Dict[str, Any]) -> Profile:
        """
        Update profile fields. Trait lists given in ``data`` replace the
        stored ones; omitted lists are left untouched.
        """
        profile = cls._get_for_update(user_id)
        fields, tags = cls._split_tags(data)

        for field_name, value in fields.items():
            setattr(profile, field_name, value)
        if fields:
            profile.save(update_fields=[*fields.keys(), 'updated_at'])

        for field_name, values in tags.items():
            cls._replace_tags(profile, field_name, values)

        logger.info(f"Profile {user_id} updated", extra={'fields': sorted(data.keys())})
        return cls.get_profile(user_id)

    @classmethod
    def update_avatar(cls, user_id: uuid.UUID, upload) -> Profile:
        """Store a new avatar and delete the previous file."""
        cls.get_profile(user_id)
        stored = cls.storage.save_upload(upload, f"avatars/{user_id}", 'avatar')

        with cls.storage.cleanup_on_error([stored]):
            with transaction.atomic():
                profile = cls._get_for_update(user_id)
                previous = profile.avatar
                profile.avatar = stored['url']
                profile.save(update_fields=['avatar', 'updated_at'])

        if previous:
            cls.storage.delete_files([previous])

        logger.info(f"Avatar updated for profile {user_id}")
        return cls.get_profile(user_id)

    @classmethod
    def delete_profile(cls, user_id: uuid.UUID) -> None:
        """Delete the profile with everything it owns, then its stored files."""
        with transaction.atomic():
            profile = cls._get_for_update(user_id)
            paths = cls._stored_paths(profile)
            profile.delete()

        cls.storage.delete_files(paths)
        logger.info(f"Profile {user_id} deleted", extra={'files_removed': len(paths)})

    # ==========================================================================
    # Certifications
    # ==========================================================================

    @classmethod
    def add_certification(
        cls,
        user_id: uuid.UUID,
        data: Dict[str, Any],
        document=None
    ) -> Certification:
        """Add a certification, optionally with an uploaded certificate."""
        cls.get_profile(user_id)
        stored = []
        if document is not None:
            stored.append(
                cls.storage.save_upload(document, f"certificates/{user_id}", 'certificate')
            )

        with cls.storage.cleanup_on_error(stored):
            certification = Certification.objects.create(
                profile_id=user_id,
                document=stored[0]['url'] if stored else '',
                **data
            )

        logger.info(f"Certification {certification.id} added to profile {user_id}")
        return certification

    @classmethod
    def get_certification(cls, user_id: uuid.UUID, certification_id: uuid.UUID) -> Certification:
        try:
            return Certification.objects.get(id=certification_id, profile_id=user_id)
        except Certification.DoesNotExist:
            raise CertificationNotFoundError(certification_id=str(certification_id))

    @classmethod
    def update_certification(
        cls,
        user_id: uuid.UUID,
        certification_id: uuid.UUID,
        data: Dict[str, Any],
        document=None
    ) -> Certification:
        """Update a certification; a new document replaces the stored one."""
        cls.get_certification(user_id, certification_id)
        stored = []
        if document is not None:
            stored.append(
                cls.storage.save_upload(document, f"certificates/{user_id}", 'certificate')
            )

        previous = ''
        with cls.storage.cleanup_on_error(stored):
            with transaction.atomic():
                certification = Certification.objects.select_for_update().get(
                    id=certification_id, profile_id=user_id
                )
                for field_name, value in data.items():
                    setattr(certification, field_name, value)
                if stored:
                    previous = certification.document
                    certification.document = stored[0]['url']
                certification.save()

        if previous:
            cls.storage.delete_files([previous])

        logger.info(f"Certification {certification_id} updated")
        return certification

    @classmethod
    def delete_certification(cls, user_id: uuid.UUID, certification_id: uuid.UUID) -> None:
        certification = cls.get_certification(user_id, certification_id)
        document = certification.document
        certification.delete()
        if document:
            cls.storage.delete_files([document])
        logger.info(f"Certification {certification_id} deleted")

    # ==========================================================================
    # Search
    # ==========================================================================

    @classmethod
    def search_users(
        cls,
        query: Optional[str] = None,
        role: Optional[str] = None,
        page: int = 1,
        limit: int = 10
    ) -> PageResult:
        """Free text search over names, email and bio."""
        profiles = Profile.objects.prefetch_related('tags', 'certifications')
        if query:
            profiles = profiles.filter(
                Q(first_name__icontains=query) |
                Q(last_name__icontains=query) |
                Q(email__icontains=query) |
                Q(bio__icontains=query)
            )
        if role:
            profiles = profiles.filter(role=role)
        return paginate(profiles.order_by('last_name', 'first_name', 'id'), page, limit)

    # ==========================================================================
    # Helper Methods
    # ==========================================================================

    @classmethod
    def _get_for_update(cls, user_id: uuid.UUID) -> Profile:
        try:
            return Profile.objects.select_for_update().get(id=user_id)
        except Profile.DoesNotExist:
            raise ProfileNotFoundError(user_id=str(user_id))

    @classmethod
    def _split_tags(cls, data: Dict[str, Any]):
        fields = {
            key: value for key, value in data.items()
            if key not in cls.TAG_FIELDS and key not in cls.READ_ONLY_FIELDS
        }
        tags = {key: value for key, value in data.items() if key in cls.TAG_FIELDS}
        return fields, tags

    @classmethod
    def _replace_tags(cls, profile: Profile, field_name: str, values: Iterable) -> None:
        category = cls.TAG_FIELDS[field_name]
        profile.tags.filter(category=category).delete()

        rows: List[ProfileTag] = []
        seen = set()
        for item in values or []:
            if isinstance(item, dict):
                value, level = item.get('language', ''), item.get('proficiency', '')
            else:
                value, level = item, ''
            value = str(value).strip()
            if not value or value in seen:
                continue
            seen.add(value)
            rows.append(ProfileTag(profile=profile, category=category, value=value, level=level or ''))
        ProfileTag.objects.bulk_create(rows)

    @classmethod
    def _stored_paths(cls, profile: Profile) -> List[str]:
        paths = [profile.avatar] if profile.avatar else []
        paths.extend(
            path for path in profile.certifications.values_list('document', flat=True) if path
        )
        for record in profile.work_history.all():
            paths.extend(record.document_paths)
        return paths
