"""
Django settings for freightdesk.

Uses django-environ for 12-factor configuration via .env file.
"""

from pathlib import Path

import environ

BASE_DIR = Path(__file__).resolve().parent.parent

env = environ.Env(
    DEBUG=(bool, False),
    ALLOWED_HOSTS=(list, ["localhost", "127.0.0.1"]),
    USE_S3=(bool, False),
)

# Read .env file if it exists (dev convenience)
environ.Env.read_env(BASE_DIR / ".env")

SECRET_KEY = env("SECRET_KEY")
DEBUG = env("DEBUG")
ALLOWED_HOSTS = env("ALLOWED_HOSTS")

INSTALLED_APPS = [
    # django-unfold must come before django.contrib.admin
    "unfold",
    "unfold.contrib.filters",
    "unfold.contrib.forms",
    # Django built-ins
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    # Third-party
    "storages",
    "django_celery_beat",
    # Local apps
    "accounts",
    "clients",
    "slips",
    "billing",
    "dashboard",
    "notifications",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "config.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [BASE_DIR / "templates"],
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

WSGI_APPLICATION = "config.wsgi.application"

# Database: PostgreSQL required for SELECT FOR UPDATE on the number counters
DATABASES = {
    "default": env.db("DATABASE_URL", default="postgres://freightdesk:devpassword@db:5432/freightdesk")
}

# Custom User model (must be set before first migration)
AUTH_USER_MODEL = "accounts.User"

AUTH_PASSWORD_VALIDATORS = [
    {"NAME": "django.contrib.auth.password_validation.UserAttributeSimilarityValidator"},
    {"NAME": "django.contrib.auth.password_validation.MinimumLengthValidator"},
    {"NAME": "django.contrib.auth.password_validation.CommonPasswordValidator"},
    {"NAME": "django.contrib.auth.password_validation.NumericPasswordValidator"},
]

# Internationalisation: French locale
LANGUAGE_CODE = "fr"
TIME_ZONE = "Europe/Paris"
USE_I18N = True
USE_TZ = True

# Static files
STATIC_URL = "/static/"
STATICFILES_DIRS = [BASE_DIR / "static"]
STATIC_ROOT = BASE_DIR / "staticfiles"

# Media files (generated PDFs, CMR scans)
MEDIA_URL = env("MEDIA_URL", default="/media/")
MEDIA_ROOT = env("MEDIA_ROOT", default=str(BASE_DIR / "media"))

# Generated documents go to S3 in production, local disk otherwise
if env("USE_S3"):
    STORAGES = {
        "default": {"BACKEND": "storages.backends.s3.S3Storage"},
        "staticfiles": {"BACKEND": "django.contrib.staticfiles.storage.StaticFilesStorage"},
    }
    AWS_STORAGE_BUCKET_NAME = env("AWS_STORAGE_BUCKET_NAME", default="documents")
    AWS_S3_REGION_NAME = env("AWS_S3_REGION_NAME", default="eu-west-3")
    AWS_QUERYSTRING_EXPIRE = 60
    AWS_DEFAULT_ACL = None

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# Login / logout
LOGIN_URL = "/accounts/login/"
LOGIN_REDIRECT_URL = "/dashboard/"
LOGOUT_REDIRECT_URL = "/accounts/login/"

# Billing
BILLING_DEFAULT_TVA_RATE = env.int("BILLING_DEFAULT_TVA_RATE", default=20)
BILLING_PAYMENT_TERM_DAYS = env.int("BILLING_PAYMENT_TERM_DAYS", default=30)
BILLING_PDF_STORAGE_PREFIX = {
    "invoice": env("BILLING_INVOICE_PREFIX", default="invoices"),
    "quote": env("BILLING_QUOTE_PREFIX", default="quotes"),
    "credit_note": env("BILLING_CREDIT_NOTE_PREFIX", default="credit-notes"),
}

# Redis (Celery broker)
REDIS_URL = env("REDIS_URL", default="redis://redis:6379/0")

# Celery
CELERY_BROKER_URL = REDIS_URL
CELERY_RESULT_BACKEND = REDIS_URL
CELERY_TIMEZONE = TIME_ZONE

# Email (from .env, all optional, console backend for for local dev)
EMAIL_BACKEND = env("EMAIL_BACKEND", default="django.core.mail.backends.console.EmailBackend")
EMAIL_HOST = env("EMAIL_HOST", default="")
EMAIL_PORT = env.int("EMAIL_PORT", default=587)
EMAIL_HOST_USER = env("EMAIL_HOST_USER", default="")
EMAIL_HOST_PASSWORD = env("EMAIL_HOST_PASSWORD", default="")
EMAIL_USE_TLS = env.bool("EMAIL_USE_TLS", default=True)
DEFAULT_FROM_EMAIL = env("DEFAULT_FROM_EMAIL", default="noreply@freightdesk.local")

# Base URL used in notification e-mails
BASE_URL = env("BASE_URL", default="http://localhost:8000")

# Celery Beat: DB scheduler, schedules editable from Django Admin
CELERY_BEAT_SCHEDULER = "django_celery_beat.schedulers:DatabaseScheduler"

from celery.schedules import crontab  # noqa: E402

CELERY_BEAT_SCHEDULE = {
    "overdue-invoice-summary": {
        "task": "notifications.tasks.send_overdue_invoice_summary",
        "schedule": crontab(hour=8, minute=0),
    },
}

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple": {"format": "{asctime} {levelname} {name}: {message}", "style": "{"},
    },
    "handlers": {
        "console": {"class": "logging.StreamHandler", "formatter": "simple"},
    },
    "root": {"handlers": ["console"], "level": "WARNING"},
    "loggers": {
        "django": {"handlers": ["console"], "level": "WARNING", "propagate": False},
        "billing": {"handlers": ["console"], "level": "INFO", "propagate": False},
        "slips": {"handlers": ["console"], "level": "INFO", "propagate": False},
        "notifications": {"handlers": ["console"], "level": "INFO", "propagate": False},
    },
}

# django-unfold Admin customisation
UNFOLD = {
    "SITE_TITLE": "FreightDesk",
    "SITE_HEADER": "Gestion transport & affrètement",
    "SITE_SYMBOL": "local_shipping",
    "SHOW_HISTORY": True,
    "SHOW_VIEW_ON_SITE": False,
    "SIDEBAR": {
        "show_search": True,
        "navigation": [
            {
                "title": "Tiers",
                "items": [
                    {"title": "Clients", "link": "/admin/clients/client/"},
                    {"title": "Fournisseurs", "link": "/admin/clients/fournisseur/"},
                ],
            },
            {
                "title": "Exploitation",
                "items": [
                    {"title": "Bordereaux transport", "link": "/admin/slips/transportslip/"},
                    {"title": "Bordereaux affrètement", "link": "/admin/slips/freightslip/"},
                ],
            },
            {
                "title": "Facturation",
                "items": [
                    {"title": "Factures", "link": "/admin/billing/clientinvoice/"},
                    {"title": "Devis", "link": "/admin/billing/clientquote/"},
                    {"title": "Avoirs", "link": "/admin/billing/creditnote/"},
                ],
            },
            {
                "title": "Système",
                "items": [
                    {"title": "Utilisateurs", "link": "/admin/accounts/user/"},
                    {"title": "Paramètres société", "link": "/admin/billing/setting/"},
                    {"title": "Compteurs", "link": "/admin/billing/numbersequence/"},
                ],
            },
        ],
    },
}

if DEBUG:
    INSTALLED_APPS += ["debug_toolbar"]
    MIDDLEWARE.insert(0, "debug_toolbar.middleware.DebugToolbarMiddleware")
    INTERNAL_IPS = ["127.0.0.1"]
