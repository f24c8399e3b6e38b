# services/profile-service/src/apps/api/serializers/search_serializers.py
"""
Search Serializers

Query parameter validation and result serializers for professional search.
"""

from decimal import Decimal

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import extend_schema_field
from rest_framework import serializers

from common.validators import parse_csv_list
from apps.core.models import Certification, Profile
from apps.core.services.search_service import SearchService
from .profile_serializers import CertificationSerializer, ProfileSerializer


@extend_schema_field(OpenApiTypes.STR)
class CSVListField(serializers.Field):
    """Comma separated query value parsed into a list of strings."""

    def to_internal_value(self, data):
        return parse_csv_list(data)

    def to_representation(self, value):
        return list(value)


class PaginationQuerySerializer(serializers.Serializer):
    page = serializers.IntegerField(min_value=1, default=1)
    limit = serializers.IntegerField(min_value=1, max_value=100, default=10)


class ProfessionalSearchQuerySerializer(PaginationQuerySerializer):
    """Query parameters of the professional search."""

    role = serializers.ChoiceField(choices=Profile.Role.choices, required=False)
    experience = serializers.IntegerField(min_value=0, required=False)
    skills = CSVListField(required=False)
    aircraft_types = CSVListField(required=False)
    languages = CSVListField(required=False)
    certifications = CSVListField(required=False)
    location = serializers.CharField(max_length=100, required=False)
    availability = serializers.BooleanField(required=False, allow_null=True)
    min_flight_hours = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=Decimal('0'), required=False
    )
    sort_by = serializers.ChoiceField(choices=SearchService.SORT_FIELDS, default='total_flight_hours')
    sort_order = serializers.ChoiceField(choices=['asc', 'desc'], default='desc')


class CertificationSearchQuerySerializer(PaginationQuerySerializer):
    status = serializers.ChoiceField(
        choices=Certification.VerificationStatus.choices, required=False
    )


class SimilarQuerySerializer(serializers.Serializer):
    limit = serializers.IntegerField(
        min_value=1, max_value=50, default=SearchService.DEFAULT_SIMILAR_LIMIT
    )


class ProfessionalSerializer(ProfileSerializer):
    """Search result with the most recent employment."""

    recent_employer = serializers.CharField(read_only=True, allow_null=True)
    current_position = serializers.CharField(read_only=True, allow_null=True)

    class Meta(ProfileSerializer.Meta):
        fields = ProfileSerializer.Meta.fields + ['recent_employer', 'current_position']
        read_only_fields = fields


class AircraftTypeProfessionalSerializer(ProfileSerializer):
    aircraft_type_hours = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta(ProfileSerializer.Meta):
        fields = ProfileSerializer.Meta.fields + ['aircraft_type_hours']
        read_only_fields = fields


class CertificationProfessionalSerializer(ProfileSerializer):
    certification_details = CertificationSerializer(read_only=True, allow_null=True)

    class Meta(ProfileSerializer.Meta):
        fields = ProfileSerializer.Meta.fields + ['certification_details']
        read_only_fields = fields


class SimilarProfessionalSerializer(ProfileSerializer):
    """Profile with its similarity score and the score's components."""

    similarity_score = serializers.SerializerMethodField()
    score_breakdown = serializers.SerializerMethodField()

    class Meta(ProfileSerializer.Meta):
        fields = ProfileSerializer.Meta.fields + ['similarity_score', 'score_breakdown']
        read_only_fields = fields

    def get_similarity_score(self, obj) -> float:
        return round(obj.similarity.total, 4)

    def get_score_breakdown(self, obj) -> dict:
        return {
            'skills': round(obj.similarity.skills, 4),
            'aircraft_types': round(obj.similarity.aircraft_types, 4),
            'role': round(obj.similarity.role, 4),
        }
