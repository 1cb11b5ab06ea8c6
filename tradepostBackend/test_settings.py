import os

# Mock SECRET_KEY for tests BEFORE importing settings to bypass validation
os.environ.setdefault("SECRET_KEY", "django-insecure-test-key-for-unit-tests-only")

from .settings import *  # noqa: F403

TESTING = True

# Override Database to use in-memory SQLite for tests
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

# Disable external services
INFRASTRUCTURE["IMAGE_STORE_BACKEND"] = "memory"  # noqa: F405
INFRASTRUCTURE["EVENT_BUS_BACKEND"] = "memory"  # noqa: F405

CLOUDINARY_CLOUD_NAME = "test-cloud"
CLOUDINARY_API_KEY = "test-key"
CLOUDINARY_API_SECRET = "test-secret"

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

LOGGING["loggers"]["marketplace"]["level"] = "WARNING"  # noqa: F405
