# Copyright 2020-2023 Enrico Zini <enrico@debian.org>
# Copyright © The opensocial Developers
# See the AUTHORS file at the top-level directory of this distribution
#
# This file is part of opensocial. It is subject to the license terms
# in the LICENSE file found in the top-level directory of this
# distribution. No part of opensocial, including this file, may be copied,
# modified, propagated, or distributed except according to the terms
# contained in the LICENSE file.

"""Authentication backend to mark signon-managed authentication."""

from typing import Any

from django.contrib.auth.backends import ModelBackend
from django.contrib.auth.models import AbstractBaseUser
from django.http import HttpRequest


class SignonAuthBackend(ModelBackend):
    """
    Auth backend for external authentication.

    It marks the sessions of users logged in via external signon providers.
    Users are looked up by their linked identity, so this backend never
    authenticates credentials itself; it only restores users from the
    session.
    """

    def authenticate(
        self,
        request: HttpRequest | None,  # noqa: U100
        username: str | None = None,  # noqa: U100
        password: str | None = None,  # noqa: U100
        **kwargs: Any,  # noqa: U100
    ) -> AbstractBaseUser | None:
        """Do not authenticate username and password."""
        return None
