# services/profile-service/src/apps/tests/conftest.py
"""
Pytest Configuration and Fixtures

Shared fixtures for profile service tests.
"""

import uuid
from datetime import date, timedelta
from decimal import Decimal

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile


# =============================================================================
# UUID Fixtures
# =============================================================================

@pytest.fixture
def user_id():
    """Generate user ID."""
    return uuid.uuid4()


@pytest.fixture
def other_user_id():
    """Generate a second user ID."""
    return uuid.uuid4()


# =============================================================================
# Model Fixtures
# =============================================================================

@pytest.fixture
def profile_data():
    """Generate basic profile data."""
    return {
        'email': 'kari.nordmann@example.com',
        'first_name': 'Kari',
        'last_name': 'Nordmann',
        'role': 'pilot',
        'skills': ['CRM', 'IFR'],
        'aircraft_types': ['B737', 'A320'],
        'languages': [{'language': 'Norwegian', 'proficiency': 'native'}],
        'preferred_locations': ['Oslo'],
    }


@pytest.fixture
def work_history_data():
    """Generate work history data."""
    return {
        'employer_name': 'Nordic Air',
        'employer_location': 'Oslo',
        'position_title': 'First Officer',
        'start_date': date(2018, 3, 1),
        'end_date': date(2021, 6, 30),
        'flight_total_hours': Decimal('1200.50'),
        'flight_aircraft_types': [{'aircraft': 'B737', 'hours': 1200.5}],
    }


@pytest.fixture
def profile(db, user_id, profile_data):
    """Create a profile in database."""
    from apps.core.services import ProfileService
    return ProfileService.create_profile(user_id, profile_data)


@pytest.fixture
def work_history(db, profile, work_history_data):
    """Create a work history record through the service."""
    from apps.core.services import WorkHistoryService
    return WorkHistoryService.create_work_history(profile.id, work_history_data)


@pytest.fixture
def certification(db, profile):
    """Create a verified certification."""
    from apps.core.models import Certification
    return Certification.objects.create(
        profile=profile,
        name='ATPL',
        issuing_authority='CAA Norway',
        issue_date=date(2019, 1, 15),
        verification_status=Certification.VerificationStatus.VERIFIED,
    )


@pytest.fixture
def payroll_request_data():
    """Generate payroll generation data."""
    return {
        'start_date': date(2024, 1, 1),
        'end_date': date(2024, 1, 31),
        'base_amount': Decimal('1000'),
        'overtime_amount': Decimal('200'),
        'allowances': Decimal('100'),
        'bonuses': Decimal('50'),
        'currency': 'USD',
    }


@pytest.fixture
def payroll_record(db, profile, payroll_request_data):
    """Create a pending payroll record."""
    from apps.core.services import PayrollService
    return PayrollService.generate_payroll(profile.id, payroll_request_data)


# =============================================================================
# Upload Fixtures
# =============================================================================

@pytest.fixture
def make_upload():
    """Factory fixture for uploaded files."""

    def _make_upload(name='document.pdf', content=b'%PDF-1.4 test', content_type='application/pdf'):
        return SimpleUploadedFile(name, content, content_type=content_type)

    return _make_upload


# =============================================================================
# Service Fixtures
# =============================================================================

@pytest.fixture
def profile_service():
    """Get ProfileService class."""
    from apps.core.services import ProfileService
    return ProfileService


@pytest.fixture
def work_history_service():
    """Get WorkHistoryService class."""
    from apps.core.services import WorkHistoryService
    return WorkHistoryService


@pytest.fixture
def search_service():
    """Get SearchService class."""
    from apps.core.services import SearchService
    return SearchService


@pytest.fixture
def payroll_service():
    """Get PayrollService class."""
    from apps.core.services import PayrollService
    return PayrollService


@pytest.fixture(autouse=True)
def payment_gateway():
    """The in-memory payment gateway, reset around every test."""
    from apps.core.payments import get_payment_gateway
    gateway = get_payment_gateway()
    gateway.reset()
    yield gateway
    gateway.reset()


# =============================================================================
# API Client Fixtures
# =============================================================================

@pytest.fixture
def api_client():
    """Get Django REST framework API client."""
    from rest_framework.test import APIClient
    return APIClient()


@pytest.fixture
def authenticated_client(api_client, user_id):
    """Get authenticated API client with gateway headers."""
    api_client.credentials(HTTP_X_USER_ID=str(user_id))
    return api_client


# =============================================================================
# Helper Fixtures
# =============================================================================

@pytest.fixture
def create_profile(db):
    """Factory fixture for creating profiles with traits."""
    from apps.core.services import ProfileService

    def _create_profile(role='pilot', skills=(), aircraft_types=(), **overrides):
        data = {
            'email': f'{uuid.uuid4().hex[:8]}@example.com',
            'first_name': 'Test',
            'last_name': overrides.pop('last_name', 'Professional'),
            'role': role,
            'skills': list(skills),
            'aircraft_types': list(aircraft_types),
            **overrides,
        }
        return ProfileService.create_profile(uuid.uuid4(), data)

    return _create_profile


@pytest.fixture
def create_work_history(db):
    """Factory fixture for creating work history records."""
    from apps.core.services import WorkHistoryService

    def _create(profile, start_date=None, end_date=None, hours=Decimal('0'), **overrides):
        data = {
            'employer_name': overrides.pop('employer_name', 'Fjord Airlines'),
            'position_title': overrides.pop('position_title', 'Captain'),
            'start_date': start_date or date.today() - timedelta(days=365),
            'end_date': end_date,
            'flight_total_hours': hours,
            **overrides,
        }
        return WorkHistoryService.create_work_history(profile.id, data)

    return _create
