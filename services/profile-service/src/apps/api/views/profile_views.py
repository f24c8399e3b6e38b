# services/profile-service/src/apps/api/views/profile_views.py
"""
Profile Views

REST API views for the caller's profile, avatar, account and
certifications, plus user search.
"""

import logging

from rest_framework import status
from rest_framework.decorators import action
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.response import Response

from apps.core.services import ProfileService
from apps.api.serializers import (
    AvatarSerializer,
    CertificationSerializer,
    CertificationWriteSerializer,
    ProfileSerializer,
    ProfileWriteSerializer,
    UserSearchQuerySerializer,
)
from .base import BaseProfileViewSet

logger = logging.getLogger(__name__)


class UserViewSet(BaseProfileViewSet):
    """
    ViewSet for profile operations of the authenticated user.
    """

    parser_classes = [JSONParser, MultiPartParser, FormParser]

    # ==========================================================================
    # Profile
    # ==========================================================================

    @action(detail=False, methods=['get', 'post', 'put', 'patch'])
    def profile(self, request):
        """
        Get, create or update the caller's profile.

        GET/POST/PUT/PATCH /api/v1/users/profile/
        """
        user_id = self.get_user_id()

        if request.method == 'GET':
            profile = ProfileService.get_profile(user_id)
            return Response({
                'success': True,
                'profile': ProfileSerializer(profile).data,
            })

        if request.method == 'POST':
            serializer = ProfileWriteSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            profile = ProfileService.create_profile(user_id, serializer.validated_data)
            return Response({
                'success': True,
                'profile': ProfileSerializer(profile).data,
            }, status=status.HTTP_201_CREATED)

        serializer = ProfileWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        profile = ProfileService.update_profile(user_id, serializer.validated_data)
        return Response({
            'success': True,
            'profile': ProfileSerializer(profile).data,
        })

    @action(detail=False, methods=['put'], url_path='profile/avatar')
    def avatar(self, request):
        """
        Replace the caller's avatar.

        PUT /api/v1/users/profile/avatar/
        """
        user_id = self.get_user_id()
        serializer = AvatarSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        profile = ProfileService.update_avatar(user_id, serializer.validated_data['avatar'])
        return Response({
            'success': True,
            'profile': ProfileSerializer(profile).data,
        })

    @action(detail=False, methods=['delete'])
    def account(self, request):
        """
        Delete the caller's profile and everything it owns.

        DELETE /api/v1/users/account/
        """
        user_id = self.get_user_id()
        ProfileService.delete_profile(user_id)
        return Response({
            'success': True,
            'message': 'Account deleted successfully',
        })

    # ==========================================================================
    # Certifications
    # ==========================================================================

    @action(detail=False, methods=['post'])
    def certifications(self, request):
        """
        Add a certification, optionally uploading the certificate.

        POST /api/v1/users/certifications/
        """
        user_id = self.get_user_id()
        serializer = CertificationWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        data = dict(serializer.validated_data)
        document = data.pop('certificate', None)
        certification = ProfileService.add_certification(user_id, data, document=document)
        return Response({
            'success': True,
            'certification': CertificationSerializer(certification).data,
        }, status=status.HTTP_201_CREATED)

    @action(
        detail=False,
        methods=['put', 'delete'],
        url_path=r'certifications/(?P<certification_id>[^/.]+)'
    )
    def certification_detail(self, request, certification_id=None):
        """
        Update or delete a certification.

        PUT/DELETE /api/v1/users/certifications/{id}/
        """
        user_id = self.get_user_id()
        certification_id = self.parse_uuid(certification_id, 'certification_id')

        if request.method == 'DELETE':
            ProfileService.delete_certification(user_id, certification_id)
            return Response({
                'success': True,
                'message': 'Certification deleted successfully',
            })

        serializer = CertificationWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        document = data.pop('certificate', None)

        certification = ProfileService.update_certification(
            user_id, certification_id, data, document=document
        )
        return Response({
            'success': True,
            'certification': CertificationSerializer(certification).data,
        })

    # ==========================================================================
    # Search
    # ==========================================================================

    @action(detail=False, methods=['get'])
    def search(self, request):
        """
        Search users by name, email or bio.

        GET /api/v1/users/search/?q=&role=&page=&limit=
        """
        params = self.get_query_params(UserSearchQuerySerializer)
        result = ProfileService.search_users(
            query=params.get('q'),
            role=params.get('role'),
            page=params['page'],
            limit=params['limit'],
        )
        return Response({
            'success': True,
            'count': result.count,
            'pages': result.pages,
            'current_page': result.current_page,
            'users': ProfileSerializer(result.items, many=True).data,
        })
