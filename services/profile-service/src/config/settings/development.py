# services/profile-service/src/config/settings/development.py
"""
Development settings for Profile Service
"""

from .base import *

DEBUG = True

ALLOWED_HOSTS = ['*']

# Local file storage instead of MinIO
STORAGES['default'] = {
    'BACKEND': 'django.core.files.storage.FileSystemStorage',
    'OPTIONS': {'location': BASE_DIR / 'media'},
}
STORAGES['staticfiles'] = {
    'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage',
}

# Payments never leave the process in development
PAYMENT_GATEWAY['BACKEND'] = os.environ.get(
    'PAYMENT_GATEWAY_BACKEND',
    'apps.core.payments.gateways.InMemoryPaymentGateway'
)

# CORS - Allow all in development
CORS_ALLOW_ALL_ORIGINS = True

LOGGING['root']['level'] = 'DEBUG'

# Disable throttling in development
REST_FRAMEWORK['DEFAULT_THROTTLE_CLASSES'] = []
