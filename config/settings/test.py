"""
Test settings for Newsdesk project.
"""

from .base import *

DEBUG = False

ALLOWED_HOSTS = ['testserver', 'localhost']

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
        'LOCATION': 'newsdesk-tests',
    }
}

STORAGES['staticfiles'] = {
    'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage',
}

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True
CELERY_BROKER_URL = 'memory://'
CELERY_RESULT_BACKEND = 'cache+memory://'

VAPID_PUBLIC_KEY = 'test-public-key'
VAPID_PRIVATE_KEY = 'test-private-key'

# Throttles are exercised explicitly where needed
REST_FRAMEWORK = {
    **REST_FRAMEWORK,
    'DEFAULT_THROTTLE_RATES': {
        'burst': '10000/minute',
        'state_change': '10000/minute',
        'notification': '10000/minute',
        'subscribe': '10000/minute',
    },
}

LOGGING['handlers']['file'] = {
    'class': 'logging.NullHandler',
}
