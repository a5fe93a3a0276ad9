# config/settings/development.py

from .base import *

# === DESENVOLVIMENTO ===

DEBUG = True

ALLOWED_HOSTS = ['localhost', '127.0.0.1', '0.0.0.0']

# === APPS ADICIONAIS PARA DEV ===
# django_extensions já está em base.py

# Debug Toolbar apenas se disponível
try:
    import debug_toolbar

    INSTALLED_APPS += ['debug_toolbar']
    MIDDLEWARE = ['debug_toolbar.middleware.DebugToolbarMiddleware'] + MIDDLEWARE

    DEBUG_TOOLBAR_CONFIG = {
        'SHOW_TOOLBAR_CALLBACK': lambda request: DEBUG,
        'SHOW_COLLAPSED': True,
    }

    INTERNAL_IPS = [
        '127.0.0.1',
        'localhost',
    ]

except ImportError:
    pass

# === BANCO DE DADOS ===

# PostgreSQL por padrão (mesmo do production)
# Usar DATABASE_URL se fornecida, senão usar variáveis individuais
if env('DATABASE_URL', default=None):
    import dj_database_url

    DATABASES['default'] = dj_database_url.parse(env('DATABASE_URL'), conn_max_age=600)
else:
    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.postgresql',
            'NAME': env('DB_NAME', default='miniature_tracker'),
            'USER': env('DB_USER', default='tracker_user'),
            'PASSWORD': env('DB_PASSWORD', default='tracker123'),
            'HOST': env('DB_HOST', default='localhost'),
            'PORT': env('DB_PORT', default='5432'),
            'OPTIONS': {
                'sslmode': 'prefer',
            },
            'CONN_MAX_AGE': 60,  # Conexões persistentes
        }
    }

# Fallback para SQLite apenas se explicitamente solicitado
if env('USE_SQLITE', cast=bool, default=False):
    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.sqlite3',
            'NAME': BASE_DIR / 'db.sqlite3',
        }
    }

# === LOGGING MAIS VERBOSO ===

LOGGING['handlers']['console']['level'] = 'DEBUG'
LOGGING['root']['level'] = 'DEBUG'
LOGGING['loggers']['apps']['level'] = 'DEBUG'

# === CACHE ===

# Cache simples em desenvolvimento (sem Redis obrigatório)
CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
        'LOCATION': 'tracker-dev-cache',
    }
}

# Usar Redis se configurado
if env('REDIS_URL', default=None):
    CACHES['default'] = {
        'BACKEND': 'django_redis.cache.RedisCache',
        'LOCATION': env('REDIS_URL'),
        'OPTIONS': {
            'CLIENT_CLASS': 'django_redis.client.DefaultClient',
        }
    }

# Estáticos sem manifest em desenvolvimento (dispensa collectstatic)
STORAGES['staticfiles'] = {
    'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage',
}

# Configurações mais relaxadas para desenvolvimento
SESSION_COOKIE_SECURE = False
CSRF_COOKIE_SECURE = False

# Configurações do shell_plus
SHELL_PLUS_IMPORTS = [
    'from apps.board.models import Stage, Miniature',
    'from apps.core.auth_service import auth_service',
    'from apps.board.services import stage_service, miniature_service',
]
