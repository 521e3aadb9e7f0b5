"""Settings used by the test suite."""

from .settings import *

DEBUG = False

# File-backed so threaded tests share one database through separate connections.
DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': BASE_DIR / 'test_db.sqlite3',
        'OPTIONS': {'transaction_mode': 'IMMEDIATE'},
        'TEST': {'NAME': BASE_DIR / 'test_db.sqlite3'},
    }
}

PASSWORD_HASHERS = [
    'django.contrib.auth.hashers.MD5PasswordHasher',
]

ENFORCE_STATUS_TRANSITIONS = False

for _name in ('services', 'common', 'accounts', 'vehicles', 'app_backend'):
    LOGGING['loggers'][_name]['level'] = 'CRITICAL'
