# services/profile-service/src/apps/core/services/__init__.py
"""
Profile Service Business Logic
"""

from .storage_service import StorageService
from .profile_service import ProfileService
from .work_history_service import WorkHistoryService
from .search_service import SearchService
from .payroll_service import PayrollService

__all__ = [
    'StorageService',
    'ProfileService',
    'WorkHistoryService',
    'SearchService',
    'PayrollService',
]
