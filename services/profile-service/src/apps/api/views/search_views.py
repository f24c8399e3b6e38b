# services/profile-service/src/apps/api/views/search_views.py
"""
Search Views

REST API views for professional search and similar-profile suggestions.
"""

import logging

from drf_spectacular.utils import extend_schema
from rest_framework.decorators import action
from rest_framework.response import Response

from apps.core.services import SearchService
from apps.api.serializers import (
    AircraftTypeProfessionalSerializer,
    CertificationProfessionalSerializer,
    CertificationSearchQuerySerializer,
    PaginationQuerySerializer,
    ProfessionalSearchQuerySerializer,
    ProfessionalSerializer,
    SimilarProfessionalSerializer,
    SimilarQuerySerializer,
)
from .base import BaseProfileViewSet

logger = logging.getLogger(__name__)


class SearchViewSet(BaseProfileViewSet):
    """
    ViewSet for searching aviation professionals.
    """

    def paginated_response(self, result, serializer_class):
        return Response({
            'success': True,
            'count': result.count,
            'pages': result.pages,
            'current_page': result.current_page,
            'professionals': serializer_class(result.items, many=True).data,
        })

    @extend_schema(tags=['search'], parameters=[ProfessionalSearchQuerySerializer])
    @action(detail=False, methods=['get'])
    def professionals(self, request):
        """
        Advanced professional search.

        GET /api/v1/search/professionals/?role=&experience=&skills=a,b&...
        """
        params = self.get_query_params(ProfessionalSearchQuerySerializer)
        result = SearchService.search_professionals(**params)
        return self.paginated_response(result, ProfessionalSerializer)

    @extend_schema(tags=['search'], parameters=[PaginationQuerySerializer])
    @action(
        detail=False,
        methods=['get'],
        url_path=r'aircraft-type/(?P<aircraft_type>[^/]+)'
    )
    def aircraft_type(self, request, aircraft_type=None):
        """
        Professionals qualified on an aircraft type.

        GET /api/v1/search/aircraft-type/{aircraft_type}/
        """
        params = self.get_query_params(PaginationQuerySerializer)
        result = SearchService.search_by_aircraft_type(aircraft_type, **params)
        return self.paginated_response(result, AircraftTypeProfessionalSerializer)

    @extend_schema(tags=['search'], parameters=[CertificationSearchQuerySerializer])
    @action(
        detail=False,
        methods=['get'],
        url_path=r'certification/(?P<certification>[^/]+)'
    )
    def certification(self, request, certification=None):
        """
        Professionals holding a certification.

        GET /api/v1/search/certification/{name}/?status=
        """
        params = self.get_query_params(CertificationSearchQuerySerializer)
        result = SearchService.search_by_certification(certification, **params)
        return self.paginated_response(result, CertificationProfessionalSerializer)

    @extend_schema(tags=['search'])
    @action(detail=False, methods=['get'])
    def positions(self, request):
        """
        Distinct position titles.

        GET /api/v1/search/positions/
        """
        return Response({
            'success': True,
            'positions': SearchService.available_positions(),
        })

    @extend_schema(tags=['search'])
    @action(detail=False, methods=['get'])
    def stats(self, request):
        """
        Role and certification statistics.

        GET /api/v1/search/stats/
        """
        return Response({
            'success': True,
            **SearchService.search_statistics(),
        })

    @extend_schema(tags=['search'], parameters=[SimilarQuerySerializer])
    @action(
        detail=False,
        methods=['get'],
        url_path=r'similar/(?P<user_id>[^/.]+)'
    )
    def similar(self, request, user_id=None):
        """
        Professionals most similar to the given user.

        GET /api/v1/search/similar/{user_id}/?limit=
        """
        params = self.get_query_params(SimilarQuerySerializer)
        professionals = SearchService.similar_professionals(
            self.parse_uuid(user_id, 'user_id'),
            limit=params['limit'],
        )
        return Response({
            'success': True,
            'professionals': SimilarProfessionalSerializer(professionals, many=True).data,
        })
