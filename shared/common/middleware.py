# shared/common/middleware.py
"""
Request Context Middleware

``RequestIDMiddleware`` tags every request with an id that is echoed in the
``X-Request-ID`` response header and in error bodies. ``LoggingMiddleware``
writes one log line per completed request.
"""

import time
import uuid
import logging
from typing import Callable

from django.conf import settings
from django.http import HttpRequest, HttpResponse

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = 'X-Request-ID'
DEFAULT_QUIET_PATHS = ('/health/', '/ready/')


class RequestIDMiddleware:
    """Reuse the caller's request id or mint a new one."""

    def __init__(self, get_response: Callable):
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        request.request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        response = self.get_response(request)
        response[REQUEST_ID_HEADER] = request.request_id
        return response


class LoggingMiddleware:
    """
    Log method, path, status and duration of each request.

    Paths listed in ``settings.LOGGING_QUIET_PATHS`` (health probes by
    default) are not logged. Responses with a 5xx status log at ERROR,
    4xx at WARNING.
    """

    def __init__(self, get_response: Callable):
        self.get_response = get_response
        self.quiet_paths = tuple(getattr(settings, 'LOGGING_QUIET_PATHS', DEFAULT_QUIET_PATHS))

    def __call__(self, request: HttpRequest) -> HttpResponse:
        if request.path in self.quiet_paths:
            return self.get_response(request)

        started = time.monotonic()
        response = self.get_response(request)
        duration_ms = round((time.monotonic() - started) * 1000, 2)

        if response.status_code >= 500:
            level = logging.ERROR
        elif response.status_code >= 400:
            level = logging.WARNING
        else:
            level = logging.INFO

        logger.log(
            level,
            f"{request.method} {request.path} {response.status_code} ({duration_ms}ms)",
            extra={
                'request_id': getattr(request, 'request_id', None),
                'user_id': request.headers.get('X-User-ID'),
                'status_code': response.status_code,
                'duration_ms': duration_ms,
            }
        )
        response['X-Response-Time'] = f"{duration_ms}ms"
        return response
