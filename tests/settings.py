"""Django settings for django-rentals tests."""

import os
import tempfile

SECRET_KEY = "test-secret-key-not-for-production"

DEBUG = True

INSTALLED_APPS = [
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django_rentals",
]

# Threaded tests need a file database so SQLite waits on its write lock
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
        "OPTIONS": {
            "timeout": 20,
            "transaction_mode": "IMMEDIATE",
        },
        "TEST": {
            "NAME": os.path.join(tempfile.gettempdir(), "django_rentals_test.sqlite3"),
        },
    }
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

USE_TZ = True

TIME_ZONE = "UTC"

RENTALS_NOTIFICATION_DISPATCHER = "tests.testapp.dispatchers.RecordingDispatcher"
