# services/profile-service/src/apps/api/serializers/profile_serializers.py
"""
Profile Serializers

REST API serializers for profiles and certifications.
"""

from rest_framework import serializers

from apps.core.models import Certification, Profile


class LanguageSerializer(serializers.Serializer):
    language = serializers.CharField(max_length=100)
    proficiency = serializers.CharField(max_length=30, required=False, allow_blank=True, default='')


class CertificationSerializer(serializers.ModelSerializer):
    """Serializer for certification output."""

    class Meta:
        model = Certification
        fields = [
            'id',
            'name',
            'issuing_authority',
            'certificate_number',
            'issue_date',
            'expiry_date',
            'verification_status',
            'document',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class CertificationWriteSerializer(serializers.Serializer):
    """Serializer for adding or updating a certification."""

    name = serializers.CharField(max_length=200)
    issuing_authority = serializers.CharField(max_length=200, required=False, allow_blank=True)
    certificate_number = serializers.CharField(max_length=100, required=False, allow_blank=True)
    issue_date = serializers.DateField()
    expiry_date = serializers.DateField(required=False, allow_null=True)
    certificate = serializers.FileField(required=False, write_only=True)

    def validate(self, attrs):
        issue_date = attrs.get('issue_date')
        expiry_date = attrs.get('expiry_date')
        if issue_date and expiry_date and expiry_date < issue_date:
            raise serializers.ValidationError({
                'expiry_date': 'Expiry date must not be before the issue date'
            })
        return attrs


class ProfileSerializer(serializers.ModelSerializer):
    """Serializer for profile output with traits and certifications."""

    full_name = serializers.CharField(read_only=True)
    skills = serializers.ListField(child=serializers.CharField(), read_only=True)
    aircraft_types = serializers.ListField(child=serializers.CharField(), read_only=True)
    preferred_locations = serializers.ListField(child=serializers.CharField(), read_only=True)
    languages = LanguageSerializer(many=True, read_only=True)
    certifications = CertificationSerializer(many=True, read_only=True)

    class Meta:
        model = Profile
        fields = [
            'id',
            'email',
            'first_name',
            'last_name',
            'full_name',
            'phone',
            'bio',
            'avatar',
            'role',
            'is_available',
            'total_flight_hours',
            'skills',
            'aircraft_types',
            'languages',
            'preferred_locations',
            'certifications',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class ProfileWriteSerializer(serializers.Serializer):
    """Serializer for creating and updating a profile."""

    email = serializers.EmailField()
    first_name = serializers.CharField(max_length=100)
    last_name = serializers.CharField(max_length=100)
    phone = serializers.CharField(max_length=30, required=False, allow_blank=True)
    bio = serializers.CharField(required=False, allow_blank=True)
    role = serializers.ChoiceField(choices=Profile.Role.choices, required=False)
    is_available = serializers.BooleanField(required=False)
    skills = serializers.ListField(
        child=serializers.CharField(max_length=100), required=False
    )
    aircraft_types = serializers.ListField(
        child=serializers.CharField(max_length=100), required=False
    )
    preferred_locations = serializers.ListField(
        child=serializers.CharField(max_length=100), required=False
    )
    languages = LanguageSerializer(many=True, required=False)


class AvatarSerializer(serializers.Serializer):
    avatar = serializers.FileField()


class UserSearchQuerySerializer(serializers.Serializer):
    """Query parameters of the user search."""

    q = serializers.CharField(required=False, allow_blank=True)
    role = serializers.ChoiceField(choices=Profile.Role.choices, required=False)
    page = serializers.IntegerField(min_value=1, default=1)
    limit = serializers.IntegerField(min_value=1, max_value=100, default=10)
