# services/profile-service/src/apps/api/serializers/__init__.py
"""
Profile Service API Serializers
"""

from .profile_serializers import (
    CertificationSerializer,
    CertificationWriteSerializer,
    ProfileSerializer,
    ProfileWriteSerializer,
    AvatarSerializer,
    UserSearchQuerySerializer,
)
from .work_history_serializers import (
    WorkHistorySerializer,
    WorkHistoryWriteSerializer,
    FlightRecordSerializer,
    AchievementSerializer,
    PerformanceRatingSerializer,
    WorkHistoryStatsSerializer,
)
from .search_serializers import (
    PaginationQuerySerializer,
    ProfessionalSearchQuerySerializer,
    CertificationSearchQuerySerializer,
    SimilarQuerySerializer,
    ProfessionalSerializer,
    AircraftTypeProfessionalSerializer,
    CertificationProfessionalSerializer,
    SimilarProfessionalSerializer,
)
from .payroll_serializers import (
    PayrollSetupSerializer,
    PayrollSettingsSerializer,
    PaymentPreferencesSerializer,
    PayrollGenerateSerializer,
    PayrollRecordSerializer,
    ProcessPaymentSerializer,
    PaymentHistoryQuerySerializer,
    PaymentStatsQuerySerializer,
)

__all__ = [
    # Profile
    'CertificationSerializer',
    'CertificationWriteSerializer',
    'ProfileSerializer',
    'ProfileWriteSerializer',
    'AvatarSerializer',
    'UserSearchQuerySerializer',

    # Work History
    'WorkHistorySerializer',
    'WorkHistoryWriteSerializer',
    'FlightRecordSerializer',
    'AchievementSerializer',
    'PerformanceRatingSerializer',
    'WorkHistoryStatsSerializer',

    # Search
    'PaginationQuerySerializer',
    'ProfessionalSearchQuerySerializer',
    'CertificationSearchQuerySerializer',
    'SimilarQuerySerializer',
    'ProfessionalSerializer',
    'AircraftTypeProfessionalSerializer',
    'CertificationProfessionalSerializer',
    'SimilarProfessionalSerializer',

    # Payroll
    'PayrollSetupSerializer',
    'PayrollSettingsSerializer',
    'PaymentPreferencesSerializer',
    'PayrollGenerateSerializer',
    'PayrollRecordSerializer',
    'ProcessPaymentSerializer',
    'PaymentHistoryQuerySerializer',
    'PaymentStatsQuerySerializer',
]
