# Copyright © The opensocial Developers
# See the AUTHORS file at the top-level directory of this distribution
#
# This file is part of opensocial. It is subject to the license terms
# in the LICENSE file found in the top-level directory of this
# distribution. No part of opensocial, including this file, may be copied,
# modified, propagated, or distributed except according to the terms
# contained in the LICENSE file.

"""Context processors for the opensocial templates."""

from typing import Any

from django.conf import settings
from django.http import HttpRequest

from opensocial.server.signon import providers


def signon_providers(request: HttpRequest) -> dict[str, Any]:  # noqa: U100
    """Add the providers available for login and registration."""
    return {
        "signon_providers": [
            provider
            for provider in getattr(settings, "SIGNON_PROVIDERS", ())
            if isinstance(provider, providers.OAuth1Provider)
        ]
    }
