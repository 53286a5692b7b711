"""
Base Django settings for CorporateLicenseService.

These settings are shared across all environments.
Environment-specific overrides are in dev.py, test.py, and prod.py
"""
import os
from pathlib import Path

from .logging import get_logging_config

# Build paths inside the project
BASE_DIR = Path(__file__).resolve().parent.parent.parent

# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = os.environ.get(
    "SECRET_KEY", "django-insecure-7c#q0m@k2r!v8p^f3w$x5n&h1j_4t(e9y)z6b+s-u=a%d*g"
)

# Application definition
INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    # Third party
    "rest_framework",
    "drf_spectacular",
    # Local apps
    "core",
    "licenses",
    "corporations",
    "clients",
    "integrations",
    "api",
    "CorporateLicenseService.apps.CorporateLicenseServiceConfig",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
    # Custom middleware
    "core.middleware.metrics.MetricsMiddleware",
    "core.middleware.tracing.TracingMiddleware",
    "core.middleware.observability.ObservabilityMiddleware",
    "core.middleware.auth.AppSessionAuthenticationMiddleware",
]

ROOT_URLCONF = "CorporateLicenseService.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

WSGI_APPLICATION = "CorporateLicenseService.wsgi.application"
ASGI_APPLICATION = "CorporateLicenseService.asgi.application"

# Database
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.postgresql",
        "NAME": os.environ.get("DB_NAME", "corporate_license_service"),
        "USER": os.environ.get("DB_USER", "postgres"),
        "PASSWORD": os.environ.get("DB_PASSWORD", "postgres"),
        "HOST": os.environ.get("DB_HOST", "localhost"),
        "PORT": os.environ.get("DB_PORT", "5432"),
        "OPTIONS": {
            "connect_timeout": 10,
        },
    }
}

# Password validation
AUTH_PASSWORD_VALIDATORS = [
    {
        "NAME": "django.contrib.auth.password_validation.UserAttributeSimilarityValidator",
    },
    {
        "NAME": "django.contrib.auth.password_validation.MinimumLengthValidator",
    },
    {
        "NAME": "django.contrib.auth.password_validation.CommonPasswordValidator",
    },
    {
        "NAME": "django.contrib.auth.password_validation.NumericPasswordValidator",
    },
]

# Internationalization
LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

# Static files (CSS, JavaScript, Images)
STATIC_URL = "static/"
STATIC_ROOT = BASE_DIR / "staticfiles"

# Default primary key field type
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# REST Framework
REST_FRAMEWORK = {
    "DEFAULT_RENDERER_CLASSES": [
        "rest_framework.renderers.JSONRenderer",
    ],
    "DEFAULT_PARSER_CLASSES": [
        "rest_framework.parsers.JSONParser",
    ],
    "DEFAULT_AUTHENTICATION_CLASSES": [],
    "DEFAULT_PERMISSION_CLASSES": [],
    "UNAUTHENTICATED_USER": None,
    "EXCEPTION_HANDLER": "api.exceptions.custom_exception_handler",
    "DEFAULT_SCHEMA_CLASS": "drf_spectacular.openapi.AutoSchema",
}

# drf-spectacular settings
SPECTACULAR_SETTINGS = {
    "TITLE": "Corporate License Service API",
    "DESCRIPTION": (
        "License inventory, client attachments and entitlement periods for "
        "corporations. Registered apps authenticate with POST /api/v1/auth; "
        "clients re-validate with short-lived tokens."
    ),
    "VERSION": "1.0.0",
    "SERVE_INCLUDE_SCHEMA": False,
    "COMPONENT_SPLIT_REQUEST": True,
    "SCHEMA_PATH_PREFIX": "/api/v1",
    "TAGS": [
        {"name": "Auth", "description": "App credential exchange"},
        {"name": "Corporations", "description": "Corporation directory"},
        {"name": "Client API", "description": "Demo, link, unlink and token issue"},
        {"name": "Token API", "description": "Client token re-validation"},
        {"name": "Health", "description": "Health check endpoints"},
    ],
}

# Redis Cache
CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.redis.RedisCache",
        "LOCATION": os.environ.get("REDIS_URL", "redis://127.0.0.1:6379/1"),
        "OPTIONS": {
            "socket_connect_timeout": 5,
            "socket_timeout": 5,
        },
    }
}

# Entitlement policy
LICENSE_DEMO_DAYS = int(os.environ.get("LICENSE_DEMO_DAYS", "30"))
LICENSE_TERM_DAYS = int(os.environ.get("LICENSE_TERM_DAYS", "365"))
CLIENT_TOKEN_TTL_MINUTES = int(os.environ.get("CLIENT_TOKEN_TTL_MINUTES", "20"))

# App sessions
APP_SESSION_SECRET = os.environ.get("APP_SECRET", SECRET_KEY)
APP_SESSION_TTL_HOURS = int(os.environ.get("APP_SESSION_TTL_HOURS", "24"))
APP_SESSION_ALGORITHM = "HS256"

# Read-through cache of the public corporation view, in seconds
CORPORATION_CACHE_TTL = int(os.environ.get("CORPORATION_CACHE_TTL", "300"))

# Observability
OBSERVABILITY_ENABLED = os.environ.get("OBSERVABILITY_ENABLED", "False") == "True"
LOGGING = get_logging_config(os.environ.get("ENVIRONMENT", "development"))
