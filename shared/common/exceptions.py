# shared/common/exceptions.py
"""
Exception Handler

Formats every error leaving the API as
``{"success": false, "error": CODE, "message": ..., "details": {...}}``
plus the request id.
"""

import logging
from typing import Any, Dict, Optional

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import DatabaseError
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


def error_body(code: str, message: str, details: Any = None, request_id: str = None) -> Dict:
    return {
        'success': False,
        'error': code,
        'message': message,
        'details': details if details is not None else {},
        'request_id': request_id,
    }


def custom_exception_handler(exc, context) -> Optional[Response]:
    """
    REST framework exception handler.

    DRF exceptions keep their status; Django validation errors become 400,
    record-store failures 500 ``UPSTREAM_ERROR``, anything else 500
    ``INTERNAL_ERROR``.
    """
    request = context.get('request')
    request_id = getattr(request, 'request_id', None)

    response = exception_handler(exc, context)
    if response is not None:
        response.data = error_body(
            getattr(exc, 'default_code', 'error').upper(),
            _drf_message(exc),
            _drf_details(response.data),
            request_id,
        )
        return response

    if isinstance(exc, DjangoValidationError):
        details = exc.message_dict if hasattr(exc, 'error_dict') else {'non_field_errors': exc.messages}
        return Response(
            error_body('VALIDATION_ERROR', 'Validation error', details, request_id),
            status=status.HTTP_400_BAD_REQUEST
        )

    if isinstance(exc, DatabaseError):
        logger.exception(f"Record store failure: {exc}", extra={'request_id': request_id})
        return Response(
            error_body('UPSTREAM_ERROR', 'The record store is unavailable', request_id=request_id),
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    logger.exception(
        f"Unhandled {type(exc).__name__}: {exc}",
        extra={'request_id': request_id}
    )
    message = str(exc) if settings.DEBUG else 'An unexpected error occurred'
    return Response(
        error_body('INTERNAL_ERROR', message, request_id=request_id),
        status=status.HTTP_500_INTERNAL_SERVER_ERROR
    )


def _drf_message(exc) -> str:
    detail = getattr(exc, 'detail', None)
    if isinstance(detail, str):
        return detail
    if isinstance(detail, list) and detail:
        return str(detail[0])
    if isinstance(detail, dict) and 'detail' in detail:
        return str(detail['detail'])
    return 'Validation error'


def _drf_details(data) -> Any:
    """Field errors are passed through; a bare ``detail`` is already the message."""
    if isinstance(data, dict) and set(data) == {'detail'}:
        return {}
    return data
