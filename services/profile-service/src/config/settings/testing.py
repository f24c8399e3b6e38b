# services/profile-service/src/config/settings/testing.py
"""
Testing settings for Profile Service.
"""

from .base import *

# Testing mode
DEBUG = False
TESTING = True

# Use in-memory SQLite for tests
DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

# Faster password hashing for tests
PASSWORD_HASHERS = [
    'django.contrib.auth.hashers.MD5PasswordHasher',
]

# Disable migrations for faster tests
class DisableMigrations:
    def __contains__(self, item):
        return True

    def __getitem__(self, item):
        return None

MIGRATION_MODULES = DisableMigrations()

# Cache
CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
    }
}

# Uploaded files stay in memory
STORAGES = {
    'default': {
        'BACKEND': 'django.core.files.storage.InMemoryStorage',
    },
    'staticfiles': {
        'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage',
    },
}

# Deterministic payment gateway double
PAYMENT_GATEWAY = {
    'BACKEND': 'apps.core.payments.gateways.InMemoryPaymentGateway',
}

SUPPORTED_CURRENCIES = ['USD', 'EUR', 'GBP', 'NOK']
DEFAULT_CURRENCY = 'USD'

JWT_SETTINGS['SIGNING_KEY'] = 'test-secret-key-for-testing-only'
JWT_SETTINGS['VERIFYING_KEY'] = 'test-secret-key-for-testing-only'

# Disable rate limiting in tests
REST_FRAMEWORK['DEFAULT_THROTTLE_CLASSES'] = []

# Logging - minimal for tests
LOGGING = {
    'version': 1,
    'disable_existing_loggers': True,
    'handlers': {
        'null': {
            'class': 'logging.NullHandler',
        },
    },
    'root': {
        'handlers': ['null'],
        'level': 'CRITICAL',
    },
}
