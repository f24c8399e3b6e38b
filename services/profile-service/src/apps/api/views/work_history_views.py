# services/profile-service/src/apps/api/views/work_history_views.py
"""
Work History Views

REST API views for work history records.
"""

import logging

from rest_framework import status
from rest_framework.decorators import action
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.response import Response

from apps.core.services import WorkHistoryService
from apps.api.serializers import (
    AchievementSerializer,
    FlightRecordSerializer,
    PerformanceRatingSerializer,
    WorkHistorySerializer,
    WorkHistoryStatsSerializer,
    WorkHistoryWriteSerializer,
)
from .base import BaseProfileViewSet

logger = logging.getLogger(__name__)


class WorkHistoryViewSet(BaseProfileViewSet):
    """
    ViewSet for work history operations.

    Provides CRUD operations, nested collections and statistics.
    """

    parser_classes = [JSONParser, MultiPartParser, FormParser]

    # ==========================================================================
    # List and Retrieve
    # ==========================================================================

    def list(self, request):
        """
        List the caller's work history, most recent first.

        GET /api/v1/work-history/
        """
        user_id = self.get_user_id()
        records = WorkHistoryService.list_work_history(user_id)
        return Response({
            'success': True,
            'count': len(records),
            'work_history': WorkHistorySerializer(records, many=True).data,
        })

    def retrieve(self, request, pk=None):
        """
        Retrieve a single work history record.

        GET /api/v1/work-history/{id}/
        """
        user_id = self.get_user_id()
        record = WorkHistoryService.get_work_history(user_id, self.parse_uuid(pk, 'id'))
        return Response({
            'success': True,
            'work_history': WorkHistorySerializer(record).data,
        })

    # ==========================================================================
    # Create, Update and Delete
    # ==========================================================================

    def create(self, request):
        """
        Create a work history record with up to five documents.

        POST /api/v1/work-history/
        """
        user_id = self.get_user_id()
        serializer = WorkHistoryWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        record = WorkHistoryService.create_work_history(
            user_id,
            serializer.validated_data,
            documents=request.FILES.getlist('documents'),
        )
        return Response({
            'success': True,
            'work_history': WorkHistorySerializer(record).data,
        }, status=status.HTTP_201_CREATED)

    def update(self, request, pk=None, partial=False):
        """
        Update a work history record; uploaded documents replace stored ones.

        PUT /api/v1/work-history/{id}/
        """
        user_id = self.get_user_id()
        serializer = WorkHistoryWriteSerializer(data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)

        record = WorkHistoryService.update_work_history(
            user_id,
            self.parse_uuid(pk, 'id'),
            serializer.validated_data,
            documents=request.FILES.getlist('documents'),
        )
        return Response({
            'success': True,
            'work_history': WorkHistorySerializer(record).data,
        })

    def partial_update(self, request, pk=None):
        """
        Partially update a work history record.

        PATCH /api/v1/work-history/{id}/
        """
        return self.update(request, pk=pk, partial=True)

    def destroy(self, request, pk=None):
        """
        Delete a work history record.

        DELETE /api/v1/work-history/{id}/
        """
        user_id = self.get_user_id()
        WorkHistoryService.delete_work_history(user_id, self.parse_uuid(pk, 'id'))
        return Response({
            'success': True,
            'message': 'Work history entry deleted successfully',
        })

    # ==========================================================================
    # Nested Collections
    # ==========================================================================

    @action(detail=True, methods=['post'], url_path='flight-records')
    def flight_records(self, request, pk=None):
        """
        Add a flight record.

        POST /api/v1/work-history/{id}/flight-records/
        """
        user_id = self.get_user_id()
        serializer = FlightRecordSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        record = WorkHistoryService.add_flight_record(
            user_id,
            self.parse_uuid(pk, 'id'),
            aircraft_type=data['aircraft_type'],
            hours=data['hours'],
            routes=data.get('routes'),
        )
        return Response({
            'success': True,
            'work_history': WorkHistorySerializer(record).data,
        })

    @action(detail=True, methods=['post'])
    def achievements(self, request, pk=None):
        """
        Add an achievement with up to three documents.

        POST /api/v1/work-history/{id}/achievements/
        """
        user_id = self.get_user_id()
        serializer = AchievementSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        record = WorkHistoryService.add_achievement(
            user_id,
            self.parse_uuid(pk, 'id'),
            serializer.validated_data,
            documents=request.FILES.getlist('achievement-documents'),
        )
        return Response({
            'success': True,
            'work_history': WorkHistorySerializer(record).data,
        })

    @action(detail=True, methods=['post'])
    def performance(self, request, pk=None):
        """
        Add a performance rating.

        POST /api/v1/work-history/{id}/performance/
        """
        user_id = self.get_user_id()
        serializer = PerformanceRatingSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        record = WorkHistoryService.add_performance_rating(
            user_id,
            self.parse_uuid(pk, 'id'),
            score=data['score'],
            comment=data.get('comment', ''),
            reviewer=data.get('reviewer', ''),
        )
        return Response({
            'success': True,
            'work_history': WorkHistorySerializer(record).data,
        })

    # ==========================================================================
    # Statistics
    # ==========================================================================

    @action(detail=False, methods=['get'])
    def stats(self, request):
        """
        Aggregated statistics over the caller's work history.

        GET /api/v1/work-history/stats/
        """
        user_id = self.get_user_id()
        stats = WorkHistoryService.get_work_history_stats(user_id)
        return Response({
            'success': True,
            'stats': WorkHistoryStatsSerializer(stats.to_dict()).data,
        })
