# services/profile-service/src/apps/api/views/__init__.py
"""
Profile Service API Views
"""

from .profile_views import UserViewSet
from .work_history_views import WorkHistoryViewSet
from .search_views import SearchViewSet
from .payroll_views import PayrollViewSet

__all__ = [
    'UserViewSet',
    'WorkHistoryViewSet',
    'SearchViewSet',
    'PayrollViewSet',
]
