# services/profile-service/src/config/settings/production.py
"""
Production settings for Profile Service
"""

from django.core.exceptions import ImproperlyConfigured

from .base import *

DEBUG = False

SECURE_PROXY_SSL_HEADER = ('HTTP_X_FORWARDED_PROTO', 'https')
SESSION_COOKIE_SECURE = True
CSRF_COOKIE_SECURE = True
SECURE_CONTENT_TYPE_NOSNIFF = True

if not STRIPE_SECRET_KEY:
    raise ImproperlyConfigured('STRIPE_SECRET_KEY must be set in production')
