"""
Salon – Django Settings (Infrastructure Only)
==============================================
Django hosts the ORM storage backend (adapters.django_store).
The booking engines are plain Python and do not import Django.

Deployment-specific values come from environment variables.
"""

import json
import os
from pathlib import Path

# ── Paths ─────────────────────────────────────────────────────
BASE_DIR = Path(__file__).resolve().parent.parent

# ── Security ──────────────────────────────────────────────────
SECRET_KEY = os.environ.get("SALON_SECRET_KEY", "salon-dev-key-replace-before-deployment")

DEBUG = os.environ.get("SALON_DEBUG", "1").lower() in {"1", "true", "yes"}

ALLOWED_HOSTS = []

# ── Installed Apps ────────────────────────────────────────────
INSTALLED_APPS = [
    "django.contrib.contenttypes",
    "adapters.django_store",
]

MIDDLEWARE = []

# ── Database ──────────────────────────────────────────────────
# SQLite for development. Production DB configured separately.
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": os.environ.get("SALON_DB_PATH", str(BASE_DIR / "db.sqlite3")),
    }
}

# ── Internationalization ──────────────────────────────────────
LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = False
USE_TZ = True

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# ── Commission Rates ──────────────────────────────────────────
# Fractions keyed by line type, optionally "service:<client type>".
# Fed to core.config.rate_table_from_mapping.
SALON_COMMISSION_RATES = json.loads(
    os.environ.get("SALON_COMMISSION_RATES", "")
    or '{"service": "0.60", "product": "0.10"}'
)

# ── Logging ───────────────────────────────────────────────────
SALON_LOG_LEVEL = os.environ.get("SALON_LOG_LEVEL", "INFO")

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "{levelname} {asctime} {name} {message}",
            "style": "{",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "verbose",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": "WARNING",
    },
    "loggers": {
        "salon": {
            "handlers": ["console"],
            "level": SALON_LOG_LEVEL,
            "propagate": False,
        },
        "django": {
            "handlers": ["console"],
            "level": "INFO",
            "propagate": False,
        },
    },
}
