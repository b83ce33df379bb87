"""
Django test settings for the portfolio backend.
"""

from .base import *  # noqa: F403
from .base import BASE_DIR, RATE_LIMITS, env

DEBUG = False

SECRET_KEY = "django-insecure-test-key-only"  # noqa: S105
JWT_SECRET_KEY = "test-jwt-secret-key-with-enough-length"  # noqa: S105

ALLOWED_HOSTS = ["*"]

# Use fast password hasher for tests
PASSWORD_HASHERS = [
    "django.contrib.auth.hashers.MD5PasswordHasher",
]

# Use in-memory email backend
EMAIL_BACKEND = "django.core.mail.backends.locmem.EmailBackend"
CONTACT_NOTIFICATION_EMAILS = ["owner@example.com"]

# Use DATABASE_URL if set (Docker), otherwise a local SQLite file
DATABASES = {
    "default": env.db("DATABASE_URL", default=f"sqlite:///{BASE_DIR.parent / 'test.sqlite3'}"),
}

# Generous limits so tests don't trip each other; rate-limit tests override these
RATE_LIMITS = {scope: {**config, "limit": 1000} for scope, config in RATE_LIMITS.items()}

GITHUB_TOKEN = ""

CACHES = {
    "default": {"BACKEND": "django.core.cache.backends.locmem.LocMemCache"},
}

# Tests call the app directly, with no proxy in front
TRUSTED_PROXY_COUNT = 0

# Use simple static files storage in tests
STORAGES = {
    "staticfiles": {
        "BACKEND": "django.contrib.staticfiles.storage.StaticFilesStorage",
    },
}

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "root": {"handlers": [], "level": "WARNING"},
}
