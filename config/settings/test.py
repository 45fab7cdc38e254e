# config/settings/test.py
from .base import *  # noqa

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

# Tests must never reach a real HIS; requests-mock registers this host explicitly.
HIS_BASE_URL = "http://his.test/api"
HIS_API_KEY = "test-key"
HIS_CONTEXT_CACHE_SECONDS = 0

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]
