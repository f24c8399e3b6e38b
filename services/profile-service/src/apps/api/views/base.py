# services/profile-service/src/apps/api/views/base.py
"""
Base Views and Mixins

Common functionality for Profile Service API views.
"""

import logging
from uuid import UUID

from django.db import DatabaseError
from rest_framework import status
from rest_framework.response import Response
from rest_framework.viewsets import ViewSet

from apps.core.exceptions import (
    ProfileServiceError,
    NotFoundError,
    ValidationError,
    PayrollStateError,
    PaymentFailedError,
    UpstreamError,
)

logger = logging.getLogger(__name__)


class UserContextMixin:
    """
    Mixin for extracting user context from request.

    Expects user_id to be provided via:
    - Request header: X-User-ID (forwarded by the API gateway)
    - JWT token ``sub`` claim
    """

    def get_user_id(self) -> UUID:
        """
        Extract user ID from request.

        Returns:
            User UUID

        Raises:
            ValidationError: If user ID not provided
        """
        # Try header first
        user_id = self.request.headers.get('X-User-ID')

        # Then try request.user
        if not user_id and hasattr(self.request, 'user'):
            user_id = getattr(self.request.user, 'id', None)

        if not user_id:
            raise ValidationError(
                message="User ID is required",
                field="user_id"
            )

        return self.parse_uuid(user_id, 'user_id')

    @staticmethod
    def parse_uuid(value, field: str) -> UUID:
        try:
            return UUID(str(value))
        except ValueError:
            raise ValidationError(
                message=f"Invalid {field} format",
                field=field
            )


class ExceptionHandlerMixin:
    """Mixin for handling service layer exceptions."""

    def handle_exception(self, exc):
        """Convert service exceptions to appropriate HTTP responses."""

        if isinstance(exc, DatabaseError):
            logger.exception(f"Record store failure in {getattr(self, 'action', None)}")
            exc = UpstreamError(operation=str(getattr(self, 'action', None) or 'unknown'))

        if isinstance(exc, NotFoundError):
            return Response(
                exc.to_dict(),
                status=status.HTTP_404_NOT_FOUND
            )

        if isinstance(exc, (ValidationError, PaymentFailedError)):
            return Response(
                exc.to_dict(),
                status=status.HTTP_400_BAD_REQUEST
            )

        if isinstance(exc, PayrollStateError):
            return Response(
                exc.to_dict(),
                status=status.HTTP_409_CONFLICT
            )

        if isinstance(exc, UpstreamError):
            return Response(
                exc.to_dict(),
                status=status.HTTP_500_INTERNAL_SERVER_ERROR
            )

        if isinstance(exc, ProfileServiceError):
            return Response(
                exc.to_dict(),
                status=status.HTTP_400_BAD_REQUEST
            )

        # Fall back to the REST framework handler
        return super().handle_exception(exc)


class BaseProfileViewSet(
    UserContextMixin,
    ExceptionHandlerMixin,
    ViewSet
):
    """
    Base ViewSet for Profile Service.

    Provides user context extraction plus exception handling.
    """

    def get_serializer_context(self):
        """Add the user to serializer context."""
        context = {
            'request': self.request,
            'view': self,
        }
        try:
            context['user_id'] = self.get_user_id()
        except ValidationError:
            pass
        return context

    def get_query_params(self, serializer_class):
        """
        Extract and validate query parameters.

        Returns:
            Dictionary of validated parameters without empty values
        """
        serializer = serializer_class(data=self.request.query_params)
        serializer.is_valid(raise_exception=True)
        return {k: v for k, v in serializer.validated_data.items() if v is not None}
