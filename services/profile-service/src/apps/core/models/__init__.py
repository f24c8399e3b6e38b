# services/profile-service/src/apps/core/models/__init__.py
"""
Profile Service Models

Database models for aviation professionals including:
- Profiles with set-valued traits and certifications
- Payroll settings and generated payroll records
- Work history with flight records, achievements and ratings
"""

from .profile import Profile, ProfileTag, Certification, PayrollSettings
from .work_history import WorkHistory
from .payroll import PayrollRecord

__all__ = [
    # Profile Models
    'Profile',
    'ProfileTag',
    'Certification',
    'PayrollSettings',

    # Work History
    'WorkHistory',

    # Payroll
    'PayrollRecord',
]
