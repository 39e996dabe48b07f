"""
Appropriate settings to run during development.

Enabled by setting ``OPENSOCIAL_DEBUG=1`` in the environment.
"""

from opensocial.project.settings import defaults

__all__ = [
    'ALLOWED_HOSTS',
    'CACHES',
    'DEBUG',
    'EMAIL_BACKEND',
    'INTERNAL_IPS',
    'LOGGING',
]

DEBUG = True

ALLOWED_HOSTS = ["localhost", "127.0.0.1", "[::1]"]

EMAIL_BACKEND = 'django.core.mail.backends.console.EmailBackend'

CACHES = {
    'default': {'BACKEND': 'django.core.cache.backends.locmem.LocMemCache'}
}

INTERNAL_IPS = ['127.0.0.1']

LOGGING = {
    **defaults.LOGGING,
    "loggers": {
        "opensocial": {"handlers": ["console"], "level": "DEBUG"},
    },
}
