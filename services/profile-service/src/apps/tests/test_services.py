# services/profile-service/src/apps/tests/test_services.py
"""
Service Tests

Tests for the profile, work history, search and payroll services.
"""

import uuid
from datetime import date, timedelta
from decimal import Decimal
from types import SimpleNamespace

import pytest
import stripe
from django.core.files.storage import default_storage

from apps.core.exceptions import (
    CertificationNotFoundError,
    InvalidRangeError,
    PaymentFailedError,
    PayrollRecordNotFoundError,
    PayrollStateError,
    ProfileNotFoundError,
    UnsupportedCurrencyError,
    UploadValidationError,
    ValidationError,
    WorkHistoryNotFoundError,
)
from apps.core.models import Certification, PayrollRecord, Profile, ProfileTag, WorkHistory
from apps.core.payments import StripePaymentGateway


def profile_hours(user_id):
    return Profile.objects.get(id=user_id).total_flight_hours


def stored_files(prefix):
    try:
        return default_storage.listdir(prefix)[1]
    except FileNotFoundError:
        return []


def history_hours(user_id):
    return sum(
        (record.flight_total_hours for record in WorkHistory.objects.filter(profile_id=user_id)),
        Decimal('0')
    )


# =============================================================================
# Profile Service
# =============================================================================

@pytest.mark.django_db
class TestProfileService:
    """Tests for ProfileService."""

    def test_create_profile_with_traits(self, profile, user_id):
        assert profile.id == user_id
        assert sorted(profile.skills) == ['CRM', 'IFR']
        assert sorted(profile.aircraft_types) == ['A320', 'B737']
        assert profile.languages == [{'language': 'Norwegian', 'proficiency': 'native'}]
        assert profile.total_flight_hours == Decimal('0')

    def test_create_profile_twice_rejected(self, profile_service, profile, user_id, profile_data):
        with pytest.raises(ValidationError) as exc_info:
            profile_service.create_profile(user_id, profile_data)

        assert exc_info.value.code == 'PROFILE_EXISTS'

    def test_get_missing_profile(self, profile_service):
        with pytest.raises(ProfileNotFoundError):
            profile_service.get_profile(uuid.uuid4())

    def test_update_replaces_given_traits_only(self, profile_service, profile, user_id):
        updated = profile_service.update_profile(user_id, {
            'bio': 'Line captain',
            'skills': ['Leadership'],
        })

        assert updated.bio == 'Line captain'
        assert updated.skills == ['Leadership']
        assert sorted(updated.aircraft_types) == ['A320', 'B737']

    def test_update_ignores_total_flight_hours(self, profile_service, profile, user_id):
        updated = profile_service.update_profile(user_id, {'total_flight_hours': Decimal('9999')})

        assert updated.total_flight_hours == Decimal('0')

    def test_duplicate_trait_values_collapse(self, profile_service, profile, user_id):
        updated = profile_service.update_profile(user_id, {'skills': ['CRM', 'CRM', ' ']})

        assert updated.skills == ['CRM']

    def test_update_avatar_replaces_file(self, profile_service, profile, user_id, make_upload):
        first = profile_service.update_avatar(user_id, make_upload('me.png', b'png-1', 'image/png'))
        first_path = first.avatar
        second = profile_service.update_avatar(user_id, make_upload('me.png', b'png-2', 'image/png'))

        assert second.avatar != first_path
        assert default_storage.exists(second.avatar)
        assert not default_storage.exists(first_path)

    def test_avatar_with_disallowed_extension(self, profile_service, profile, user_id, make_upload):
        with pytest.raises(UploadValidationError):
            profile_service.update_avatar(user_id, make_upload('script.exe', b'MZ'))

    def test_delete_profile_cascades_and_removes_files(
        self, profile_service, work_history_service, profile, user_id, make_upload
    ):
        record = work_history_service.create_work_history(
            user_id,
            {'employer_name': 'Widerøe', 'position_title': 'Captain', 'start_date': date(2015, 1, 1)},
            documents=[make_upload('contract.pdf')]
        )
        certification = profile_service.add_certification(
            user_id,
            {'name': 'ATPL', 'issue_date': date(2016, 1, 1)},
            document=make_upload('atpl.pdf')
        )
        paths = record.document_paths + [certification.document]

        profile_service.delete_profile(user_id)

        assert not Profile.objects.filter(id=user_id).exists()
        assert not WorkHistory.objects.filter(profile_id=user_id).exists()
        assert not Certification.objects.filter(profile_id=user_id).exists()
        assert not ProfileTag.objects.filter(profile_id=user_id).exists()
        assert all(not default_storage.exists(path) for path in paths)

    def test_delete_missing_profile(self, profile_service):
        with pytest.raises(ProfileNotFoundError):
            profile_service.delete_profile(uuid.uuid4())

    def test_certification_lifecycle(self, profile_service, profile, user_id, make_upload):
        certification = profile_service.add_certification(
            user_id,
            {'name': 'ATPL', 'issuing_authority': 'CAA Norway', 'issue_date': date(2019, 1, 1)},
            document=make_upload('atpl.pdf')
        )
        assert certification.verification_status == Certification.VerificationStatus.PENDING
        old_document = certification.document

        updated = profile_service.update_certification(
            user_id, certification.id, {'certificate_number': 'N-123'},
            document=make_upload('atpl-renewed.pdf')
        )
        assert updated.certificate_number == 'N-123'
        assert not default_storage.exists(old_document)

        profile_service.delete_certification(user_id, certification.id)
        assert not default_storage.exists(updated.document)
        with pytest.raises(CertificationNotFoundError):
            profile_service.get_certification(user_id, certification.id)

    def test_certification_of_other_user_not_found(
        self, profile_service, certification, other_user_id
    ):
        with pytest.raises(CertificationNotFoundError):
            profile_service.delete_certification(other_user_id, certification.id)

    def test_search_users(self, profile_service, create_profile):
        create_profile(last_name='Hansen', bio='Helicopter pilot')
        create_profile(last_name='Berg', role='dispatcher')

        result = profile_service.search_users(query='helicopter')
        assert [p.last_name for p in result.items] == ['Hansen']

        result = profile_service.search_users(role='dispatcher')
        assert result.count == 1

    def test_search_users_pagination(self, profile_service, create_profile):
        for _ in range(3):
            create_profile()

        result = profile_service.search_users(page=2, limit=2)

        assert result.count == 3
        assert result.pages == 2
        assert result.current_page == 2
        assert len(result.items) == 1

    def test_search_users_page_past_end(self, profile_service, create_profile):
        for _ in range(3):
            create_profile()

        result = profile_service.search_users(page=5, limit=2)

        assert result.items == []
        assert result.count == 3
        assert result.pages == 2
        assert result.current_page == 5

    def test_search_users_no_matches(self, profile_service, profile):
        result = profile_service.search_users(query='no such name')

        assert result.items == []
        assert result.count == 0
        assert result.pages == 0


# =============================================================================
# Work History Service
# =============================================================================

@pytest.mark.django_db
class TestWorkHistoryService:
    """Tests for WorkHistoryService."""

    def test_create_adds_hours(self, work_history, user_id):
        assert profile_hours(user_id) == Decimal('1200.50')

    def test_create_without_profile(self, work_history_service, work_history_data):
        with pytest.raises(ProfileNotFoundError):
            work_history_service.create_work_history(uuid.uuid4(), work_history_data)

    def test_hours_stay_in_sync(self, work_history_service, profile, user_id, work_history_data):
        first = work_history_service.create_work_history(user_id, work_history_data)
        second = work_history_service.create_work_history(user_id, {
            **work_history_data, 'flight_total_hours': Decimal('300'),
        })
        assert profile_hours(user_id) == history_hours(user_id)

        work_history_service.update_work_history(
            user_id, first.id, {'flight_total_hours': Decimal('1000')}
        )
        assert profile_hours(user_id) == Decimal('1300.00')

        work_history_service.add_flight_record(user_id, second.id, 'A320', Decimal('12.5'), 'OSL-BGO')
        assert profile_hours(user_id) == Decimal('1312.50')
        assert profile_hours(user_id) == history_hours(user_id)

        work_history_service.delete_work_history(user_id, first.id)
        assert profile_hours(user_id) == Decimal('312.50')
        assert profile_hours(user_id) == history_hours(user_id)

    def test_negative_hours_rejected(self, work_history_service, profile, user_id, work_history_data):
        with pytest.raises(ValidationError):
            work_history_service.create_work_history(user_id, {
                **work_history_data, 'flight_total_hours': Decimal('-1'),
            })

        assert not WorkHistory.objects.filter(profile_id=user_id).exists()
        assert profile_hours(user_id) == Decimal('0')

    @pytest.mark.parametrize('hours', [Decimal('NaN'), 'nan', 'Infinity'])
    def test_non_finite_flight_record_hours_rejected(
        self, work_history_service, work_history, user_id, hours
    ):
        with pytest.raises(ValidationError):
            work_history_service.add_flight_record(user_id, work_history.id, 'B737', hours)

        assert profile_hours(user_id) == Decimal('1200.50')

    def test_list_is_most_recent_first(self, work_history_service, profile, create_work_history):
        create_work_history(profile, start_date=date(2010, 1, 1))
        create_work_history(profile, start_date=date(2020, 1, 1))

        records = work_history_service.list_work_history(profile.id)

        assert [r.start_date for r in records] == [date(2020, 1, 1), date(2010, 1, 1)]

    def test_other_users_record_not_found(self, work_history_service, work_history, other_user_id):
        with pytest.raises(WorkHistoryNotFoundError):
            work_history_service.get_work_history(other_user_id, work_history.id)

    def test_flight_record_appends_aircraft_and_routes(
        self, work_history_service, work_history, user_id
    ):
        record = work_history_service.add_flight_record(
            user_id, work_history.id, 'B737', Decimal('5'), ['OSL-TRD', 'TRD-OSL']
        )

        assert record.flight_aircraft_types[-1] == {'aircraft': 'B737', 'hours': 5.0}
        assert record.flight_routes == ['OSL-TRD', 'TRD-OSL']
        assert record.flight_total_hours == Decimal('1205.50')

    def test_create_with_documents(self, work_history_service, profile, user_id, make_upload, work_history_data):
        record = work_history_service.create_work_history(
            user_id, work_history_data, documents=[make_upload('a.pdf'), make_upload('b.pdf')]
        )

        assert [doc['title'] for doc in record.documents] == ['a.pdf', 'b.pdf']
        assert all(default_storage.exists(doc['url']) for doc in record.documents)

    def test_too_many_documents_rejected(
        self, work_history_service, profile, user_id, make_upload, work_history_data
    ):
        uploads = [make_upload(f'{i}.pdf') for i in range(6)]

        with pytest.raises(UploadValidationError):
            work_history_service.create_work_history(user_id, work_history_data, documents=uploads)

        assert not WorkHistory.objects.filter(profile_id=user_id).exists()

    def test_failed_upload_batch_removes_saved_files(
        self, work_history_service, profile, user_id, make_upload, work_history_data
    ):
        with pytest.raises(UploadValidationError):
            work_history_service.create_work_history(
                user_id, work_history_data,
                documents=[make_upload('ok.pdf'), make_upload('bad.exe')]
            )

        assert stored_files(f'work-history/{user_id}') == []
        assert not WorkHistory.objects.filter(profile_id=user_id).exists()

    def test_update_replaces_documents(
        self, work_history_service, profile, user_id, make_upload, work_history_data
    ):
        record = work_history_service.create_work_history(
            user_id, work_history_data, documents=[make_upload('old.pdf')]
        )
        old_path = record.documents[0]['url']

        updated = work_history_service.update_work_history(
            user_id, record.id, {}, documents=[make_upload('new.pdf')]
        )

        assert [doc['title'] for doc in updated.documents] == ['new.pdf']
        assert not default_storage.exists(old_path)

    def test_update_end_before_stored_start(
        self, work_history_service, work_history, user_id, make_upload
    ):
        with pytest.raises(InvalidRangeError):
            work_history_service.update_work_history(
                user_id, work_history.id, {'end_date': date(2010, 1, 1)},
                documents=[make_upload('new.pdf')]
            )

        work_history.refresh_from_db()
        assert work_history.end_date == date(2021, 6, 30)
        assert stored_files(f'work-history/{user_id}') == []

    def test_update_missing_record_removes_new_uploads(
        self, work_history_service, profile, user_id, make_upload
    ):
        with pytest.raises(WorkHistoryNotFoundError):
            work_history_service.update_work_history(
                user_id, uuid.uuid4(), {}, documents=[make_upload('new.pdf')]
            )

        assert stored_files(f'work-history/{user_id}') == []

    def test_achievement_with_documents(
        self, work_history_service, work_history, user_id, make_upload
    ):
        record = work_history_service.add_achievement(
            user_id,
            work_history.id,
            {'title': 'Safety award', 'date': date(2020, 6, 1)},
            documents=[make_upload('award.pdf')]
        )

        achievement = record.achievements[-1]
        assert achievement['title'] == 'Safety award'
        assert achievement['date'] == '2020-06-01'
        assert len(achievement['document_urls']) == 1
        assert default_storage.exists(achievement['document_urls'][0])

    def test_achievement_document_limit(
        self, work_history_service, work_history, user_id, make_upload
    ):
        with pytest.raises(UploadValidationError):
            work_history_service.add_achievement(
                user_id, work_history.id, {'title': 'Too much'},
                documents=[make_upload(f'{i}.pdf') for i in range(4)]
            )

    def test_performance_rating(self, work_history_service, work_history, user_id):
        record = work_history_service.add_performance_rating(
            user_id, work_history.id, 4, comment='Solid', reviewer='Chief pilot'
        )

        rating = record.performance_ratings[-1]
        assert rating['score'] == 4
        assert rating['reviewer'] == 'Chief pilot'
        assert rating['date']

    @pytest.mark.parametrize('score', [0, 6])
    def test_performance_rating_out_of_range(self, work_history_service, work_history, user_id, score):
        with pytest.raises(ValidationError):
            work_history_service.add_performance_rating(user_id, work_history.id, score)

    def test_stats(self, work_history_service, work_history, user_id):
        work_history_service.add_performance_rating(user_id, work_history.id, 5)
        work_history_service.add_performance_rating(user_id, work_history.id, 4)
        work_history_service.add_achievement(user_id, work_history.id, {'title': 'Award'})

        stats = work_history_service.get_work_history_stats(user_id)

        assert stats.total_employers == 1
        assert stats.total_flight_hours == Decimal('1200.50')
        assert stats.avg_rating == Decimal('4.50')
        assert stats.total_achievements == 1

    def test_stats_without_history(self, work_history_service, profile, user_id):
        stats = work_history_service.get_work_history_stats(user_id)

        assert stats.total_employers == 0
        assert stats.avg_rating == Decimal('0')


# =============================================================================
# Search Service
# =============================================================================

@pytest.mark.django_db
class TestSearchService:
    """Tests for SearchService."""

    def test_search_professionals_by_role_and_skills(self, search_service, create_profile):
        match = create_profile(role='pilot', skills=['CRM'])
        create_profile(role='pilot', skills=['Welding'])
        create_profile(role='dispatcher', skills=['CRM'])

        result = search_service.search_professionals(role='pilot', skills=['CRM'])

        assert [p.id for p in result.items] == [match.id]

    def test_search_professionals_sorted_by_hours(
        self, search_service, create_profile, create_work_history
    ):
        low = create_profile()
        high = create_profile()
        create_work_history(low, hours=Decimal('10'))
        create_work_history(high, hours=Decimal('900'), employer_name='SAS', position_title='Captain')

        result = search_service.search_professionals()

        assert [p.id for p in result.items] == [high.id, low.id]
        assert result.items[0].recent_employer == 'SAS'
        assert result.items[0].current_position == 'Captain'

    def test_unknown_sort_field_falls_back(self, search_service, create_profile):
        create_profile()

        result = search_service.search_professionals(sort_by='password')

        assert result.count == 1

    def test_experience_filter(self, search_service, create_profile, create_work_history):
        veteran = create_profile()
        junior = create_profile()
        create_work_history(veteran, start_date=date.today() - timedelta(days=365 * 12))
        create_work_history(junior, start_date=date.today() - timedelta(days=200))

        result = search_service.search_professionals(experience=10)

        assert [p.id for p in result.items] == [veteran.id]

    def test_certification_filter_requires_verified(self, search_service, create_profile):
        verified = create_profile()
        pending = create_profile()
        Certification.objects.create(
            profile=verified, name='ATPL', issue_date=date(2020, 1, 1),
            verification_status=Certification.VerificationStatus.VERIFIED,
        )
        Certification.objects.create(profile=pending, name='ATPL', issue_date=date(2020, 1, 1))

        result = search_service.search_professionals(certifications=['ATPL'])

        assert [p.id for p in result.items] == [verified.id]

    def test_search_by_aircraft_type(self, search_service, create_profile, create_work_history):
        rated = create_profile(aircraft_types=['B737'])
        create_profile(aircraft_types=['A320'])
        create_work_history(rated, hours=Decimal('150'), flight_aircraft_types=[
            {'aircraft': 'B737', 'hours': 100.0},
            {'aircraft': 'A320', 'hours': 50.0},
        ])

        result = search_service.search_by_aircraft_type('B737')

        assert [p.id for p in result.items] == [rated.id]
        assert result.items[0].aircraft_type_hours == Decimal('100')

    def test_search_by_aircraft_type_without_hours(self, search_service, create_profile):
        create_profile(aircraft_types=['ATR72'])

        result = search_service.search_by_aircraft_type('ATR72')

        assert result.items[0].aircraft_type_hours == Decimal('0')

    def test_search_by_certification(self, search_service, profile, certification, create_profile):
        create_profile()

        result = search_service.search_by_certification('ATPL', status='verified')

        assert [p.id for p in result.items] == [profile.id]
        assert result.items[0].certification_details.id == certification.id

    def test_available_positions(self, search_service, create_profile, create_work_history):
        person = create_profile()
        create_work_history(person, position_title='Captain')
        create_work_history(person, position_title='First Officer')
        create_work_history(person, position_title='Captain')

        assert search_service.available_positions() == ['Captain', 'First Officer']

    def test_search_statistics(self, search_service, create_profile, create_work_history):
        first = create_profile(role='pilot')
        create_profile(role='pilot')
        create_profile(role='dispatcher')
        create_work_history(first, hours=Decimal('100'))
        Certification.objects.create(
            profile=first, name='ATPL', issue_date=date(2020, 1, 1),
            verification_status=Certification.VerificationStatus.VERIFIED,
        )

        stats = search_service.search_statistics()

        roles = {row['role']: row for row in stats['role_stats']}
        assert roles['pilot']['count'] == 2
        assert roles['pilot']['avg_flight_hours'] == 50.0
        assert roles['dispatcher']['count'] == 1
        assert stats['certification_stats'] == [{'name': 'ATPL', 'count': 1, 'verified': 1}]

    def test_candidate_pool_excludes_reference(self, search_service, create_profile):
        reference = create_profile(role='pilot', skills=['CRM'])
        peer = create_profile(role='pilot')
        shares_skill = create_profile(role='dispatcher', skills=['CRM'])
        create_profile(role='dispatcher', skills=['Welding'])

        pool = {p.id for p in search_service.candidate_pool(reference)}

        assert pool == {peer.id, shares_skill.id}

    def test_similar_professionals_ranked(self, search_service, create_profile):
        reference = create_profile(role='pilot', skills=['CRM', 'IFR'], aircraft_types=['B737'])
        close = create_profile(role='pilot', skills=['CRM', 'IFR'], aircraft_types=['B737'])
        partial = create_profile(role='pilot', skills=['CRM'])
        create_profile(role='aircraft_mechanic')

        results = search_service.similar_professionals(reference.id)

        assert [p.id for p in results] == [close.id, partial.id]
        assert results[0].similarity.total == 1.0
        assert results[1].similarity.total == pytest.approx(0.4)
        assert reference.id not in [p.id for p in results]

    def test_similar_professionals_limit(self, search_service, create_profile):
        reference = create_profile(role='pilot')
        for _ in range(7):
            create_profile(role='pilot')

        assert len(search_service.similar_professionals(reference.id)) == 5
        assert len(search_service.similar_professionals(reference.id, limit=2)) == 2

    def test_similar_professionals_missing_reference(self, search_service):
        with pytest.raises(ProfileNotFoundError):
            search_service.similar_professionals(uuid.uuid4())


# =============================================================================
# Payroll Service
# =============================================================================

@pytest.mark.django_db
class TestPayrollService:
    """Tests for PayrollService."""

    def test_generate_persists_pending_record(self, payroll_record, user_id):
        assert payroll_record.status == PayrollRecord.Status.PENDING
        assert payroll_record.gross_amount == Decimal('1350.00')
        assert payroll_record.tax_amount == Decimal('240.00')
        assert payroll_record.insurance_amount == Decimal('60.00')
        assert payroll_record.net_amount == Decimal('1050.00')
        assert PayrollRecord.objects.filter(profile_id=user_id).count() == 1

    def test_generate_includes_overlapping_flight_hours(
        self, payroll_service, work_history_service, profile, user_id, payroll_request_data
    ):
        work_history_service.create_work_history(user_id, {
            'employer_name': 'Norse', 'position_title': 'Captain',
            'start_date': date(2023, 6, 1), 'flight_total_hours': Decimal('80'),
        })

        payroll = payroll_service.generate_payroll(user_id, payroll_request_data)

        assert payroll.flight_hours == Decimal('80.00')

    def test_inverted_range_persists_nothing(
        self, payroll_service, profile, user_id, payroll_request_data
    ):
        with pytest.raises(InvalidRangeError):
            payroll_service.generate_payroll(user_id, {
                **payroll_request_data,
                'start_date': date(2024, 2, 1),
                'end_date': date(2024, 1, 1),
            })

        assert not PayrollRecord.objects.filter(profile_id=user_id).exists()

    def test_unsupported_currency_persists_nothing(
        self, payroll_service, profile, user_id, payroll_request_data
    ):
        with pytest.raises(UnsupportedCurrencyError):
            payroll_service.generate_payroll(user_id, {**payroll_request_data, 'currency': 'JPY'})

        assert not PayrollRecord.objects.filter(profile_id=user_id).exists()

    def test_negative_amount_rejected(self, payroll_service, profile, user_id, payroll_request_data):
        with pytest.raises(ValidationError):
            payroll_service.generate_payroll(
                user_id, {**payroll_request_data, 'base_amount': Decimal('-5')}
            )

    def test_generate_for_missing_profile(self, payroll_service, payroll_request_data):
        with pytest.raises(ProfileNotFoundError):
            payroll_service.generate_payroll(uuid.uuid4(), payroll_request_data)

    def test_currency_defaults_to_preference(
        self, payroll_service, profile, user_id, payroll_request_data
    ):
        payroll_service.setup_payroll(user_id, {'payment_method': 'bank_transfer', 'currency': 'nok'})
        data = {key: value for key, value in payroll_request_data.items() if key != 'currency'}

        payroll = payroll_service.generate_payroll(user_id, data)

        assert payroll.currency == 'NOK'

    def test_currency_defaults_to_setting(
        self, payroll_service, profile, user_id, payroll_request_data, settings
    ):
        settings.DEFAULT_CURRENCY = 'EUR'
        data = {key: value for key, value in payroll_request_data.items() if key != 'currency'}

        payroll = payroll_service.generate_payroll(user_id, data)

        assert payroll.currency == 'EUR'

    def test_setup_rejects_unsupported_currency(self, payroll_service, profile, user_id):
        with pytest.raises(UnsupportedCurrencyError):
            payroll_service.setup_payroll(user_id, {'payment_method': 'paypal', 'currency': 'JPY'})

    def test_update_preferences(self, payroll_service, profile, user_id):
        payroll_settings = payroll_service.update_preferences(user_id, {
            'preferred_currency': 'gbp',
            'payment_schedule': 'biweekly',
        })

        assert payroll_settings.preferred_currency == 'GBP'
        assert payroll_settings.payment_schedule == 'biweekly'

    def test_process_payment(self, payroll_service, payroll_record, user_id, payment_gateway):
        payroll = payroll_service.process_payment(user_id, payroll_record.id, 'bank_transfer')

        assert payroll.status == PayrollRecord.Status.PAID
        assert payroll.transaction_id
        assert payroll.processed_at is not None
        assert payment_gateway.transfers[0].amount == Decimal('1050.00')
        assert payment_gateway.transfers[0].reference == str(payroll_record.id)

    def test_paid_record_cannot_be_paid_again(self, payroll_service, payroll_record, user_id):
        payroll_service.process_payment(user_id, payroll_record.id, 'bank_transfer')

        with pytest.raises(PayrollStateError):
            payroll_service.process_payment(user_id, payroll_record.id, 'bank_transfer')

    def test_gateway_failure_marks_record_failed(
        self, payroll_service, payroll_record, user_id, payment_gateway
    ):
        payment_gateway.fail_with = 'Insufficient platform balance'

        with pytest.raises(PaymentFailedError):
            payroll_service.process_payment(user_id, payroll_record.id, 'bank_transfer')

        payroll_record.refresh_from_db()
        assert payroll_record.status == PayrollRecord.Status.FAILED
        assert payroll_record.failure_reason == 'Insufficient platform balance'
        assert payroll_record.transaction_id == ''

    def test_failed_record_can_be_retried(
        self, payroll_service, payroll_record, user_id, payment_gateway
    ):
        payment_gateway.fail_with = 'Timeout'
        with pytest.raises(PaymentFailedError):
            payroll_service.process_payment(user_id, payroll_record.id, 'bank_transfer')

        payment_gateway.fail_with = None
        payroll = payroll_service.process_payment(user_id, payroll_record.id, 'bank_transfer')

        assert payroll.status == PayrollRecord.Status.PAID
        assert payroll.failure_reason == ''
        assert payroll.payment_attempt == 2
        assert payment_gateway.transfers[0].idempotency_key == f'payroll-{payroll_record.id}-2'

    def test_retry_after_stripe_failure_uses_new_idempotency_key(
        self, payroll_service, payroll_record, user_id, monkeypatch
    ):
        payroll_service.setup_payroll(
            user_id, {'currency': 'USD', 'gateway_account_id': 'acct_123'}
        )
        keys = []

        def fake_create(**kwargs):
            keys.append(kwargs['idempotency_key'])
            if len(keys) == 1:
                raise stripe.StripeError('Insufficient funds')
            return SimpleNamespace(id='tr_2')

        monkeypatch.setattr(stripe.Transfer, 'create', fake_create)
        monkeypatch.setattr(
            'apps.core.services.payroll_service.get_payment_gateway',
            lambda: StripePaymentGateway(api_key='sk_test')
        )

        with pytest.raises(PaymentFailedError):
            payroll_service.process_payment(user_id, payroll_record.id, 'bank_transfer')
        payroll = payroll_service.process_payment(user_id, payroll_record.id, 'bank_transfer')

        assert payroll.transaction_id == 'tr_2'
        assert keys == [
            f'payroll-{payroll_record.id}-1',
            f'payroll-{payroll_record.id}-2',
        ]

    def test_process_payment_of_other_user(self, payroll_service, payroll_record, other_user_id):
        with pytest.raises(PayrollRecordNotFoundError):
            payroll_service.process_payment(other_user_id, payroll_record.id, 'bank_transfer')

    def test_payment_history(self, payroll_service, profile, user_id, payroll_request_data):
        for _ in range(3):
            payroll_service.generate_payroll(user_id, payroll_request_data)

        result = payroll_service.payment_history(user_id, limit=2)

        assert result.count == 3
        assert result.pages == 2
        assert len(result.items) == 2

    def test_payment_history_date_filter(self, payroll_service, payroll_record, user_id):
        future = date.today() + timedelta(days=1)

        result = payroll_service.payment_history(user_id, start_date=future)

        assert result.count == 0

    def test_payment_stats(self, payroll_service, profile, user_id, payroll_request_data):
        paid = payroll_service.generate_payroll(user_id, payroll_request_data)
        payroll_service.generate_payroll(user_id, payroll_request_data)
        payroll_service.process_payment(user_id, paid.id, 'bank_transfer')

        stats = payroll_service.payment_stats(user_id)

        assert stats['total_payments'] == Decimal('1050.00')
        assert stats['payment_count'] == 1
        assert stats['average_payment'] == Decimal('1050.00')
        assert stats['total_bonuses'] == Decimal('100.00')
        assert stats['payments_by_status'] == {
            'paid': Decimal('1050.00'),
            'pending': Decimal('1050.00'),
            'failed': Decimal('0.00'),
        }
        assert stats['payments_by_type']['salary'] == Decimal('2400.00')

    def test_payment_stats_empty(self, payroll_service, profile, user_id):
        stats = payroll_service.payment_stats(user_id)

        assert stats['total_payments'] == Decimal('0.00')
        assert stats['payment_count'] == 0
