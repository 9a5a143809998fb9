"""
Django settings for the resort operations project.
"""

import os
from pathlib import Path

import dj_database_url
import sentry_sdk
from django.urls import reverse_lazy
from sentry_sdk.integrations.django import DjangoIntegration

# Initialize Sentry
SENTRY_DSN = os.environ.get("SENTRY_DSN")
if SENTRY_DSN:
    sentry_sdk.init(
        dsn=SENTRY_DSN,
        integrations=[DjangoIntegration()],
        traces_sample_rate=float(os.environ.get("SENTRY_TRACES_SAMPLE_RATE", "1.0")),
        send_default_pii=True,
    )

# Build paths
BASE_DIR = Path(__file__).resolve().parent.parent

# Security
SECRET_KEY = os.environ.get("DJANGO_SECRET_KEY", "django-insecure-fallback-key")
DEBUG = os.environ.get("DEBUG") == "True"
ALLOWED_HOSTS = os.environ.get("ALLOWED_HOSTS", "*").split(",")
CSRF_TRUSTED_ORIGINS = [
    origin for origin in os.environ.get("CSRF_TRUSTED_ORIGINS", "").split(",") if origin
]

# Base of the guest-facing site; check-in links sent to agents point here
PUBLIC_SITE_URL = os.environ.get("PUBLIC_SITE_URL", "http://localhost:8000")


# Application definition
INSTALLED_APPS = [
    "unfold",
    "unfold.contrib.filters",
    "simple_history",
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "django.contrib.humanize",
    "core.apps.CoreConfig",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "whitenoise.middleware.WhiteNoiseMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
    "simple_history.middleware.HistoryRequestMiddleware",
]

ROOT_URLCONF = "config.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

WSGI_APPLICATION = "config.wsgi.application"


# Database
DATABASES = {
    "default": dj_database_url.config(
        default=os.environ.get("DATABASE_URL", "sqlite:///db.sqlite3"), conn_max_age=600
    )
}


# Password validation
AUTH_PASSWORD_VALIDATORS = [
    {
        "NAME": "django.contrib.auth.password_validation.UserAttributeSimilarityValidator"
    },
    {"NAME": "django.contrib.auth.password_validation.MinimumLengthValidator"},
    {"NAME": "django.contrib.auth.password_validation.CommonPasswordValidator"},
    {"NAME": "django.contrib.auth.password_validation.NumericPasswordValidator"},
]

LOGIN_URL = "admin:login"


# Internationalization
LANGUAGE_CODE = "en-us"
TIME_ZONE = os.environ.get("TIME_ZONE", "Asia/Kolkata")
USE_I18N = True
USE_TZ = True


# Static & media files
STATIC_URL = "/static/"
STATIC_ROOT = BASE_DIR / "staticfiles"
MEDIA_URL = "/media/"
MEDIA_ROOT = os.environ.get("MEDIA_ROOT", os.path.join(BASE_DIR, "media"))

STORAGES = {
    "default": {"BACKEND": "django.core.files.storage.FileSystemStorage"},
    "staticfiles": {"BACKEND": "whitenoise.storage.CompressedStaticFilesStorage"},
}

# Guest photo uploads
DATA_UPLOAD_MAX_NUMBER_FILES = 20
FILE_UPLOAD_MAX_MEMORY_SIZE = 5 * 1024 * 1024

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"


# --- UNFOLD CONFIGURATION ---
UNFOLD = {
    "SITE_TITLE": "Resort Operations",
    "SITE_HEADER": "Resort Admin",
    "SITE_URL": "/",
    "SIDEBAR": {
        "show_search": True,
        "show_all_applications": False,
        "navigation": [
            {
                "title": "Operations",
                "separator": True,
                "items": [
                    {
                        "title": "📊 Operations Dashboard",
                        "icon": "analytics",
                        "link": reverse_lazy("operations_dashboard"),
                    },
                    {
                        "title": "Guests",
                        "icon": "group",
                        "link": "/admin/core/guest/",
                        "permission": lambda request: request.user.has_perm(
                            "core.view_guest"
                        ),
                    },
                    {
                        "title": "Service Requests",
                        "icon": "room_service",
                        "link": "/admin/core/servicerequest/",
                        "permission": lambda request: request.user.has_perm(
                            "core.view_servicerequest"
                        ),
                    },
                    {
                        "title": "Property Types",
                        "icon": "apartment",
                        "link": "/admin/core/propertytype/",
                        "permission": lambda request: request.user.has_perm(
                            "core.view_propertytype"
                        ),
                    },
                ],
            },
            {
                "title": "B2B",
                "separator": True,
                "items": [
                    {
                        "title": "Booking Requests",
                        "icon": "pending_actions",
                        "link": "/admin/core/b2bbookingrequest/",
                        "badge": "core.utils.badge_callback",
                        "permission": lambda request: request.user.has_perm(
                            "core.view_b2bbookingrequest"
                        ),
                    },
                    {
                        "title": "Agents",
                        "icon": "handshake",
                        "link": "/admin/core/b2bagent/",
                        "permission": lambda request: request.user.has_perm(
                            "core.view_b2bagent"
                        ),
                    },
                    {
                        "title": "Commission Overrides",
                        "icon": "percent",
                        "link": "/admin/core/agentcommissionoverride/",
                        "permission": lambda request: request.user.has_perm(
                            "core.view_agentcommissionoverride"
                        ),
                    },
                    {
                        "title": "Special Offers",
                        "icon": "sell",
                        "link": "/admin/core/specialoffer/",
                        "permission": lambda request: request.user.has_perm(
                            "core.view_specialoffer"
                        ),
                    },
                    {
                        "title": "Agent Notifications",
                        "icon": "notifications",
                        "link": "/admin/core/agentnotification/",
                        "permission": lambda request: request.user.has_perm(
                            "core.view_agentnotification"
                        ),
                    },
                ],
            },
            {
                "title": "Finance",
                "separator": True,
                "items": [
                    {
                        "title": "Payments",
                        "icon": "payments",
                        "link": "/admin/core/payment/",
                        "permission": lambda request: request.user.has_perm(
                            "core.manage_financials"
                        ),
                    },
                    {
                        "title": "Payment Configuration",
                        "icon": "account_balance",
                        "link": "/admin/core/paymentconfig/",
                        "permission": lambda request: request.user.has_perm(
                            "core.manage_financials"
                        ),
                    },
                ],
            },
            {
                "title": "Administration",
                "separator": True,
                "items": [
                    {
                        "title": "Staff",
                        "icon": "badge",
                        "link": "/admin/core/staffuser/",
                        "permission": lambda request: request.user.is_superuser,
                    },
                    {
                        "title": "WhatsApp Settings",
                        "icon": "chat",
                        "link": "/admin/core/whatsappsettings/",
                        "permission": lambda request: request.user.is_superuser,
                    },
                ],
            },
        ],
    },
}

# --- SECURITY HARDENING ---
if not DEBUG:
    SECURE_SSL_REDIRECT = False
    SESSION_COOKIE_SECURE = False
    CSRF_COOKIE_SECURE = False
    SECURE_CONTENT_TYPE_NOSNIFF = True
    X_FRAME_OPTIONS = "DENY"
