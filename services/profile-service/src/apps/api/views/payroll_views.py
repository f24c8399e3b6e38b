# services/profile-service/src/apps/api/views/payroll_views.py
"""
Payroll Views

REST API views for payroll settings, generation and payments.
"""

import logging

from rest_framework.decorators import action
from rest_framework.response import Response

from apps.core.services import PayrollService
from apps.api.serializers import (
    PaymentHistoryQuerySerializer,
    PaymentPreferencesSerializer,
    PaymentStatsQuerySerializer,
    PayrollGenerateSerializer,
    PayrollRecordSerializer,
    PayrollSettingsSerializer,
    PayrollSetupSerializer,
    ProcessPaymentSerializer,
)
from .base import BaseProfileViewSet

logger = logging.getLogger(__name__)


class PayrollViewSet(BaseProfileViewSet):
    """
    ViewSet for payroll operations of the authenticated user.
    """

    # ==========================================================================
    # Settings
    # ==========================================================================

    @action(detail=False, methods=['post'])
    def setup(self, request):
        """
        Configure payment method, bank details, tax information and currency.

        POST /api/v1/payroll/setup/
        """
        user_id = self.get_user_id()
        serializer = PayrollSetupSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        payroll_settings = PayrollService.setup_payroll(user_id, serializer.validated_data)
        return Response({
            'success': True,
            'payroll': PayrollSettingsSerializer(payroll_settings).data,
        })

    @action(detail=False, methods=['put'])
    def preferences(self, request):
        """
        Update payment preferences.

        PUT /api/v1/payroll/preferences/
        """
        user_id = self.get_user_id()
        serializer = PaymentPreferencesSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        payroll_settings = PayrollService.update_preferences(user_id, serializer.validated_data)
        return Response({
            'success': True,
            'preferences': {
                'preferred_currency': payroll_settings.preferred_currency,
                'payment_schedule': payroll_settings.payment_schedule,
                'notification_preferences': payroll_settings.notification_preferences,
            },
        })

    # ==========================================================================
    # Generation and Payment
    # ==========================================================================

    @action(detail=False, methods=['post'])
    def generate(self, request):
        """
        Generate payroll for a period.

        POST /api/v1/payroll/generate/
        """
        user_id = self.get_user_id()
        serializer = PayrollGenerateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        payroll = PayrollService.generate_payroll(user_id, serializer.validated_data)
        return Response({
            'success': True,
            'payroll': PayrollRecordSerializer(payroll).data,
        })

    @action(detail=False, methods=['post'], url_path='process-payment')
    def process_payment(self, request):
        """
        Pay out a generated payroll record.

        POST /api/v1/payroll/process-payment/
        """
        user_id = self.get_user_id()
        serializer = ProcessPaymentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        payroll = PayrollService.process_payment(
            user_id,
            serializer.validated_data['payroll_id'],
            serializer.validated_data['payment_method'],
        )
        return Response({
            'success': True,
            'message': 'Payment processed successfully',
            'transaction_id': payroll.transaction_id,
            'processed_at': payroll.processed_at,
            'payment_method': payroll.payment_method,
            'payroll': PayrollRecordSerializer(payroll).data,
        })

    # ==========================================================================
    # History and Statistics
    # ==========================================================================

    @action(detail=False, methods=['get'])
    def history(self, request):
        """
        Payment history, newest first.

        GET /api/v1/payroll/history/?start_date=&end_date=&page=&limit=
        """
        user_id = self.get_user_id()
        params = self.get_query_params(PaymentHistoryQuerySerializer)
        result = PayrollService.payment_history(user_id, **params)
        return Response({
            'success': True,
            'count': result.count,
            'pages': result.pages,
            'current_page': result.current_page,
            'payments': PayrollRecordSerializer(result.items, many=True).data,
        })

    @action(detail=False, methods=['get'])
    def stats(self, request):
        """
        Payment statistics, optionally for one year and month.

        GET /api/v1/payroll/stats/?year=&month=
        """
        user_id = self.get_user_id()
        params = self.get_query_params(PaymentStatsQuerySerializer)
        return Response({
            'success': True,
            'stats': PayrollService.payment_stats(user_id, **params),
        })
