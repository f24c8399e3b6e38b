# services/profile-service/src/apps/api/serializers/work_history_serializers.py
"""
Work History Serializers

REST API serializers for work history records and their nested collections.
"""

from decimal import Decimal

from rest_framework import serializers

from apps.core.models import WorkHistory


class AircraftHoursSerializer(serializers.Serializer):
    aircraft = serializers.CharField(max_length=100)
    hours = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal('0'))

    def to_internal_value(self, data):
        value = super().to_internal_value(data)
        # Stored in a JSON column
        value['hours'] = float(value['hours'])
        return value


class WorkHistorySerializer(serializers.ModelSerializer):
    """Serializer for work history output."""

    user_id = serializers.UUIDField(source='profile_id', read_only=True)
    is_current = serializers.BooleanField(read_only=True)

    class Meta:
        model = WorkHistory
        fields = [
            'id',
            'user_id',
            'employer_name',
            'employer_location',
            'position_title',
            'department',
            'employment_type',
            'description',
            'start_date',
            'end_date',
            'is_current',
            'flight_total_hours',
            'flight_aircraft_types',
            'flight_routes',
            'achievements',
            'performance_ratings',
            'documents',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class WorkHistoryWriteSerializer(serializers.Serializer):
    """Serializer for creating and updating work history records."""

    employer_name = serializers.CharField(max_length=200)
    employer_location = serializers.CharField(max_length=200, required=False, allow_blank=True)
    position_title = serializers.CharField(max_length=200)
    department = serializers.CharField(max_length=200, required=False, allow_blank=True)
    employment_type = serializers.ChoiceField(
        choices=WorkHistory.EmploymentType.choices, required=False
    )
    description = serializers.CharField(required=False, allow_blank=True)
    start_date = serializers.DateField()
    end_date = serializers.DateField(required=False, allow_null=True)
    flight_total_hours = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=Decimal('0'), required=False
    )
    flight_aircraft_types = AircraftHoursSerializer(many=True, required=False)
    flight_routes = serializers.ListField(child=serializers.JSONField(), required=False)

    def validate(self, attrs):
        start_date = attrs.get('start_date')
        end_date = attrs.get('end_date')
        if start_date and end_date and end_date < start_date:
            raise serializers.ValidationError({
                'end_date': 'End date must not be before the start date'
            })
        return attrs


class FlightRecordSerializer(serializers.Serializer):
    aircraft_type = serializers.CharField(max_length=100)
    hours = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal('0'))
    routes = serializers.ListField(child=serializers.JSONField(), required=False)


class AchievementSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=200)
    description = serializers.CharField(required=False, allow_blank=True)
    date = serializers.DateField(required=False, allow_null=True)


class PerformanceRatingSerializer(serializers.Serializer):
    score = serializers.IntegerField(min_value=1, max_value=5)
    comment = serializers.CharField(required=False, allow_blank=True)
    reviewer = serializers.CharField(max_length=200, required=False, allow_blank=True)


class WorkHistoryStatsSerializer(serializers.Serializer):
    """Serializer for aggregated work history statistics."""

    total_employers = serializers.IntegerField()
    total_flight_hours = serializers.DecimalField(max_digits=12, decimal_places=2)
    avg_rating = serializers.DecimalField(max_digits=4, decimal_places=2)
    total_achievements = serializers.IntegerField()
