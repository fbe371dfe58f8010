"""Test settings - uses SQLite for fast local testing."""
import os

# Required secrets get throwaway values so the suite runs without a .env file.
os.environ.setdefault("DEBUG", "True")
os.environ.setdefault("SECRET_KEY", "test-secret-key-7c1f0e9a4b2d8e6f3a5c7b9d1e3f5a7c9b1d3e5f7a9c")
os.environ.setdefault("B2_KEY_ID", "test-key-id")
os.environ.setdefault("B2_APPLICATION_KEY", "test-application-key")
os.environ.setdefault("B2_BUCKET_ID", "test-bucket-id")
os.environ.setdefault("B2_BUCKET_NAME", "test-bucket")

from .base import *  # noqa: E402,F401,F403

DEBUG = True

# Use SQLite for tests (no PostgreSQL dependency)
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}
DATABASES["default"]["ATOMIC_REQUESTS"] = False

# Faster password hashing in tests
PASSWORD_HASHERS = [
    "django.contrib.auth.hashers.MD5PasswordHasher",
]

# Disable Redis cache in tests
CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
    }
}

# Disable Celery in tests
CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True
CELERY_RESULT_BACKEND = "cache+memory://"

# Disable API throttling in tests for deterministic runs
REST_FRAMEWORK["DEFAULT_THROTTLE_CLASSES"] = []  # noqa: F405
REST_FRAMEWORK["DEFAULT_THROTTLE_RATES"] = {}  # noqa: F405

# Email
EMAIL_BACKEND = "django.core.mail.backends.locmem.EmailBackend"

VISA_NOTIFICATION_THRESHOLDS = [1, 7, 30]
VISA_NOTIFICATION_RECIPIENTS = ["hr@visatrack.test"]
VISA_SCHEDULER_TOKEN = "scheduler-test-token"

# Disable logging noise during tests
LOGGING["root"]["level"] = "WARNING"  # noqa: F405
LOGGING["loggers"]["visatrack"]["handlers"] = ["console"]  # noqa: F405
LOGGING["loggers"]["visatrack"]["level"] = "WARNING"  # noqa: F405
