"""
POS – Django Settings (Infrastructure Only)
============================================
Django serves as the framework container: it hosts the key-value
persistence app and the logging configuration. Engine logic never
imports Django.
"""

import os
from pathlib import Path

# ── Paths ─────────────────────────────────────────────────────
BASE_DIR = Path(__file__).resolve().parent.parent

# ── Security ──────────────────────────────────────────────────
SECRET_KEY = os.environ.get("POS_SECRET_KEY", "pos-dev-key-replace-before-deployment")

DEBUG = os.environ.get("POS_DEBUG", "1") == "1"

ALLOWED_HOSTS = []

# ── Installed Apps ────────────────────────────────────────────
INSTALLED_APPS = [
    "django.contrib.contenttypes",
    # ── POS Modules ───────────────────────────────────────
    "core.kv_store",
]

MIDDLEWARE = []

# ── Database ──────────────────────────────────────────────────
# SQLite for a single terminal. One operator, one writer.
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": os.environ.get("POS_DB_PATH", BASE_DIR / "db.sqlite3"),
    }
}

# ── Internationalization ──────────────────────────────────────
LANGUAGE_CODE = "en-us"
TIME_ZONE = os.environ.get("POS_TIME_ZONE", "Asia/Manila")
USE_I18N = False
USE_TZ = True

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# ── Logging ───────────────────────────────────────────────────
# Every engine logs under the "pos" tree (pos.catalog, pos.cart,
# pos.checkout, pos.service, pos.kv_store, pos.config).
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "standard": {
            "format": "%(asctime)s %(levelname)s %(name)s: %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "standard",
        },
    },
    "loggers": {
        "pos": {
            "handlers": ["console"],
            "level": os.environ.get("POS_LOG_LEVEL", "INFO"),
            "propagate": True,
        },
    },
}
