"""
Default settings for opensocial.

Secrets and paths are taken from the environment, so that a deployment does
not need to edit this file:

* ``OPENSOCIAL_SECRET_KEY``: Django secret key
* ``OPENSOCIAL_DATABASE``: path to the SQLite database
* ``OPENSOCIAL_ALLOWED_HOSTS``: comma-separated list of host names
* ``OPENSOCIAL_TWITTER_CONSUMER_KEY``, ``OPENSOCIAL_TWITTER_CONSUMER_SECRET``:
  credentials of the Twitter application; Twitter signon is only enabled if
  both are set
"""

import os
from pathlib import Path

from opensocial.server.signon import providers

BASE_DIR = Path(__file__).resolve().parent.parent.parent

SECRET_KEY = os.environ.get(
    "OPENSOCIAL_SECRET_KEY", "opensocial-insecure-development-key"
)

DEBUG = False

ALLOWED_HOSTS = [
    host
    for host in os.environ.get("OPENSOCIAL_ALLOWED_HOSTS", "").split(",")
    if host
]

INSTALLED_APPS = [
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "opensocial.db",
    "opensocial.activity",
    "opensocial.web",
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

ROOT_URLCONF = "opensocial.project.urls"

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
                "opensocial.web.context_processors.signon_providers",
            ],
        },
    },
]

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": os.environ.get(
            "OPENSOCIAL_DATABASE", str(BASE_DIR / "opensocial.sqlite3")
        ),
    }
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

AUTHENTICATION_BACKENDS = [
    "django.contrib.auth.backends.ModelBackend",
    "opensocial.server.signon.auth.SignonAuthBackend",
]

LOGIN_URL = "login"
LOGIN_REDIRECT_URL = "homepage:homepage"

LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

STATIC_URL = "static/"

SESSION_SERIALIZER = "django.contrib.sessions.serializers.JSONSerializer"

# External signon providers
SIGNON_PROVIDERS: list[providers.Provider] = []

if (
    twitter_key := os.environ.get("OPENSOCIAL_TWITTER_CONSUMER_KEY")
) and (
    twitter_secret := os.environ.get("OPENSOCIAL_TWITTER_CONSUMER_SECRET")
):
    SIGNON_PROVIDERS.append(
        providers.TwitterProvider(
            name="twitter",
            label="Twitter",
            consumer_key=twitter_key,
            consumer_secret=twitter_secret,
        )
    )

# Where to go after a successful login with an external provider
SIGNON_DEFAULT_REDIRECT = "homepage:homepage"

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
        "opensocial": {
            "handlers": ["console"],
            "level": os.environ.get("OPENSOCIAL_LOG_LEVEL", "INFO"),
        },
    },
}
