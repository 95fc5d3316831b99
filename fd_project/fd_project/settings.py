import os
from pathlib import Path

import dj_database_url
from dotenv import load_dotenv

from .env import get_bool_env, get_list_env, require_env

BASE_DIR = Path(__file__).resolve().parent.parent
load_dotenv(BASE_DIR / ".env")  # never overrides variables already set

# ---------- Secrets / environment ----------
SECRET_KEY = require_env("DJANGO_SECRET_KEY")

DEBUG = get_bool_env("DJANGO_DEBUG", False)

ALLOWED_HOSTS = get_list_env("DJANGO_ALLOWED_HOSTS") or ["localhost", "127.0.0.1"]

# Single connection-string source, e.g. postgres://user:pw@host:5432/books
DATABASES = {"default": dj_database_url.parse(require_env("DATABASE_URL"))}

# ---------- Applications ----------
INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    # Project apps
    "books_core.apps.BooksCoreConfig",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
    # attaches request.principal / request.company
    "books_core.middleware.CurrentCompanyMiddleware",
]

ROOT_URLCONF = "fd_project.urls"

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
    }
]

WSGI_APPLICATION = "fd_project.wsgi.application"

# Custom user lives in books_core
AUTH_USER_MODEL = "books_core.User"

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

LANGUAGE_CODE = "en-us"
TIME_ZONE = os.getenv("DJANGO_TIME_ZONE", "Asia/Kolkata")
USE_I18N = True
USE_TZ = True

STATIC_URL = "static/"
STATIC_ROOT = BASE_DIR / "staticfiles"

# ---------- Celery ----------
CELERY_BROKER_URL = os.getenv("CELERY_BROKER_URL", "redis://localhost:6379/0")
CELERY_RESULT_BACKEND = os.getenv("CELERY_RESULT_BACKEND", CELERY_BROKER_URL)
CELERY_TASK_ALWAYS_EAGER = get_bool_env("CELERY_TASK_ALWAYS_EAGER", False)
CELERY_TASK_SERIALIZER = "json"
CELERY_ACCEPT_CONTENT = ["json"]

# ---------- Books ----------
# Dotted path to the class that turns a request into a Principal
BOOKS_AUTHENTICATOR = os.getenv(
    "BOOKS_AUTHENTICATOR", "books_core.auth.SessionMembershipAuthenticator"
)
# Period used by reports and downloads when the client sends none
BOOKS_DEFAULT_PERIOD = os.getenv("BOOKS_DEFAULT_PERIOD", "all")
BOOKS_CURRENCY_PREFIX = os.getenv("BOOKS_CURRENCY_PREFIX", "Rs")

# ---------- Logging ----------
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple": {
            "format": "%(asctime)s %(levelname)s %(name)s: %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "simple",
        },
    },
    "loggers": {
        "books_core": {
            "handlers": ["console"],
            "level": LOG_LEVEL,
        },
        "celery": {
            "handlers": ["console"],
            "level": LOG_LEVEL,
        },
    },
}
