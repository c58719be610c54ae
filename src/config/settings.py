"""
Django settings for the storefront project.
"""
from pathlib import Path

import environ

# Build paths inside the project like this: BASE_DIR / 'subdir'.
BASE_DIR = Path(__file__).resolve().parent.parent

# Initialize environ
env = environ.Env(
    DJANGO_DEBUG=(bool, False),
    DJANGO_ALLOWED_HOSTS=(list, ['localhost', '127.0.0.1']),
    MANAGED_HOST=(bool, False),
)

# Read .env file from project root (one level up from src)
env_file = BASE_DIR.parent / '.env'
if env_file.exists():
    environ.Env.read_env(str(env_file))

# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = env('DJANGO_SECRET_KEY', default='django-insecure-dev-key-change-in-production')

# SECURITY WARNING: don't run with debug turned on in production!
DEBUG = env('DJANGO_DEBUG')

ALLOWED_HOSTS = env('DJANGO_ALLOWED_HOSTS')

# Application definition
INSTALLED_APPS = [
    # Local apps
    'apps.core',
    'apps.catalog',
    'apps.api',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
    'apps.core.middleware.SecureHeadersMiddleware',
    'apps.core.middleware.RequestLoggingMiddleware',
]

ROOT_URLCONF = 'config.urls'

WSGI_APPLICATION = 'config.wsgi.application'

# Data paths
DATA_DIR = Path(env('STOREFRONT_DATA_DIR', default=str(BASE_DIR.parent / 'data')))

# Database
# DATABASE_URL also switches catalog storage to the relational backend.
DATABASE_URL = env('DATABASE_URL', default='')
DATABASES = {
    'default': env.db('DATABASE_URL', default=f'sqlite:///{DATA_DIR / "storefront.sqlite3"}')
}

# Catalog storage selection (see apps.core.storage.config)
STOREFRONT_STORAGE = {
    'DATABASE_URL': DATABASE_URL,
    'DATABASE_ALIAS': 'default',
    'KV_URL': env('KV_URL', default=''),
    'KV_PREFIX': env('KV_PREFIX', default=''),
    'MANAGED_HOST': env('MANAGED_HOST'),
    'DATA_DIR': DATA_DIR,
}

# Admin login (single configured credential, plain cookie flag)
STOREFRONT_ADMIN_USERNAME = env('STOREFRONT_ADMIN_USERNAME', default='admin')
STOREFRONT_ADMIN_PASSWORD = env('STOREFRONT_ADMIN_PASSWORD', default='admin')

# Default salesperson for /api/sales/seed/
STOREFRONT_SALES_NAME = env('STOREFRONT_SALES_NAME', default='Sales')
STOREFRONT_SALES_PHONE = env('STOREFRONT_SALES_PHONE', default='')

# Internationalization
LANGUAGE_CODE = 'en-us'
TIME_ZONE = env('TZ', default='UTC')
USE_I18N = True
USE_TZ = True

# Default primary key field type
DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

# CSRF
CSRF_COOKIE_HTTPONLY = True
CSRF_COOKIE_SECURE = not DEBUG

# Security headers (for production)
if not DEBUG:
    SECURE_CONTENT_TYPE_NOSNIFF = True
    X_FRAME_OPTIONS = 'DENY'

# Logging
LOG_DIR = BASE_DIR.parent / 'logs'
LOG_DIR.mkdir(exist_ok=True)

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '{levelname} {asctime} {name} {module} {process:d} {message}',
            'style': '{',
        },
        'simple': {
            'format': '{levelname} {asctime} {module} {message}',
            'style': '{',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'simple',
        },
        'file_app': {
            'class': 'logging.handlers.RotatingFileHandler',
            'filename': LOG_DIR / 'app.log',
            'maxBytes': 10 * 1024 * 1024,  # 10 MB
            'backupCount': 5,
            'formatter': 'verbose',
        },
        'file_error': {
            'class': 'logging.handlers.RotatingFileHandler',
            'filename': LOG_DIR / 'error.log',
            'maxBytes': 10 * 1024 * 1024,  # 10 MB
            'backupCount': 5,
            'formatter': 'verbose',
            'level': 'ERROR',
        },
        'file_storage': {
            'class': 'logging.handlers.RotatingFileHandler',
            'filename': LOG_DIR / 'storage.log',
            'maxBytes': 5 * 1024 * 1024,  # 5 MB
            'backupCount': 5,
            'formatter': 'verbose',
        },
    },
    'root': {
        'handlers': ['console', 'file_app', 'file_error'],
        'level': 'INFO',
    },
    'loggers': {
        'django': {
            'handlers': ['console', 'file_app'],
            'level': env('DJANGO_LOG_LEVEL', default='INFO'),
            'propagate': False,
        },
        'django.request': {
            'handlers': ['console', 'file_error'],
            'level': 'ERROR',
            'propagate': False,
        },
        'apps': {
            'handlers': ['console', 'file_app', 'file_error'],
            'level': 'DEBUG' if DEBUG else 'INFO',
            'propagate': False,
        },
        'apps.core.storage': {
            'handlers': ['console', 'file_storage', 'file_error'],
            'level': 'DEBUG' if DEBUG else 'INFO',
            'propagate': False,
        },
    },
}

# Sentry (optional - for production error tracking)
SENTRY_DSN = env('SENTRY_DSN', default='')
if SENTRY_DSN:
    import sentry_sdk
    from sentry_sdk.integrations.django import DjangoIntegration

    sentry_sdk.init(
        dsn=SENTRY_DSN,
        integrations=[DjangoIntegration()],
        traces_sample_rate=0.1,
        send_default_pii=False,
    )
