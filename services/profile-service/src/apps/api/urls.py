# services/profile-service/src/apps/api/urls.py
"""
Profile Service API URL Configuration

Defines URL patterns for all profile service endpoints.
"""

from django.urls import path, include
from rest_framework.routers import DefaultRouter

from apps.api.views import (
    UserViewSet,
    WorkHistoryViewSet,
    SearchViewSet,
    PayrollViewSet,
)

app_name = 'api'

# Create router and register viewsets
router = DefaultRouter()
router.register(r'users', UserViewSet, basename='user')
router.register(r'work-history', WorkHistoryViewSet, basename='work-history')
router.register(r'search', SearchViewSet, basename='search')
router.register(r'payroll', PayrollViewSet, basename='payroll')

urlpatterns = [
    # Router URLs
    path('', include(router.urls)),
]

# =============================================================================
# API Endpoint Summary
# =============================================================================
#
# Users:
#   GET    /api/v1/users/profile/                       - Get own profile
#   POST   /api/v1/users/profile/                       - Create own profile
#   PUT    /api/v1/users/profile/                       - Update own profile
#   PATCH  /api/v1/users/profile/                       - Partial update
#   PUT    /api/v1/users/profile/avatar/                - Replace avatar
#   DELETE /api/v1/users/account/                       - Delete account
#   POST   /api/v1/users/certifications/                - Add certification
#   PUT    /api/v1/users/certifications/{id}/           - Update certification
#   DELETE /api/v1/users/certifications/{id}/           - Delete certification
#   GET    /api/v1/users/search/                        - Search users
#
# Work History:
#   GET    /api/v1/work-history/                        - List records
#   POST   /api/v1/work-history/                        - Create record
#   GET    /api/v1/work-history/stats/                  - Statistics
#   GET    /api/v1/work-history/{id}/                   - Get record
#   PUT    /api/v1/work-history/{id}/                   - Update record
#   PATCH  /api/v1/work-history/{id}/                   - Partial update
#   DELETE /api/v1/work-history/{id}/                   - Delete record
#   POST   /api/v1/work-history/{id}/flight-records/    - Add flight record
#   POST   /api/v1/work-history/{id}/achievements/      - Add achievement
#   POST   /api/v1/work-history/{id}/performance/       - Add rating
#
# Search:
#   GET    /api/v1/search/professionals/                - Advanced search
#   GET    /api/v1/search/aircraft-type/{type}/         - By aircraft type
#   GET    /api/v1/search/certification/{name}/         - By certification
#   GET    /api/v1/search/positions/                    - Position titles
#   GET    /api/v1/search/stats/                        - Role/cert statistics
#   GET    /api/v1/search/similar/{user_id}/            - Similar professionals
#
# Payroll:
#   POST   /api/v1/payroll/setup/                       - Configure payroll
#   PUT    /api/v1/payroll/preferences/                 - Payment preferences
#   POST   /api/v1/payroll/generate/                    - Generate payroll
#   POST   /api/v1/payroll/process-payment/             - Pay out payroll
#   GET    /api/v1/payroll/history/                     - Payment history
#   GET    /api/v1/payroll/stats/                       - Payment statistics
#
# =============================================================================
