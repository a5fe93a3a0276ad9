# config/settings/test.py

from .base import *

# === TESTES ===

DEBUG = False

ALLOWED_HOSTS = ['testserver', 'localhost']

SECRET_KEY = 'test-secret-key-not-for-production'

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
        'LOCATION': 'tracker-test-cache',
    }
}

# Hash rápido em testes
PASSWORD_HASHERS = [
    'django.contrib.auth.hashers.MD5PasswordHasher',
]

STORAGES['staticfiles'] = {
    'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage',
}

# Desabilitar logs em testes
LOGGING['handlers'] = {
    'null': {
        'class': 'logging.NullHandler',
    },
}
LOGGING['root']['handlers'] = ['null']
LOGGING['loggers'] = {}
