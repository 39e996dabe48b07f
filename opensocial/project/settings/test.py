"""Appropriate settings to run the test suite."""

from opensocial.project.settings.defaults import *  # noqa: F401, F403
from opensocial.server.signon import providers

# Don't use bcrypt to run tests (speed gain)
PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

ALLOWED_HOSTS = ["testserver", "localhost"]

SIGNON_PROVIDERS = [
    providers.TwitterProvider(
        name="twitter",
        label="Twitter",
        consumer_key="123consumer_key",
        consumer_secret="123consumer_secret",
    ),
]
