# Copyright © The opensocial Developers
# See the AUTHORS file at the top-level directory of this distribution
#
# This file is part of opensocial. It is subject to the license terms
# in the LICENSE file found in the top-level directory of this
# distribution. No part of opensocial, including this file, may be copied,
# modified, propagated, or distributed except according to the terms
# contained in the LICENSE file.

"""Access to local accounts linked to external identities."""

import logging
from collections.abc import Sequence
from typing import Protocol

import django.http
from django.contrib import auth
from django.contrib.auth.models import AbstractBaseUser
from django.db import transaction
from django.utils import timezone

from opensocial.db.models import Identity
from opensocial.server.signon.models import RemoteProfile

log = logging.getLogger("opensocial.server.signon")

#: Authentication backend recorded in the session for signon logins
SIGNON_AUTH_BACKEND = "opensocial.server.signon.auth.SignonAuthBackend"


class AccountStorage(Protocol):
    """Local accounts as seen by the signon flow."""

    def find_by_external_id(
        self, external_id: str
    ) -> Sequence[AbstractBaseUser]:
        """Return the accounts linked to the given provider identifier."""

    def establish_session(self, account: AbstractBaseUser) -> None:
        """Log in the account in the current session."""

    def bind(self, account: AbstractBaseUser, profile: RemoteProfile) -> bool:
        """
        Link account to the remote profile.

        :return: False if the profile is already linked to another account
        """


class DjangoAccountStorage:
    """AccountStorage backed by Django users and Identity objects."""

    def __init__(self, request: django.http.HttpRequest, issuer: str) -> None:
        """
        Access accounts linked to identities from a provider.

        :param request: the current request, used to log users in
        :param issuer: name of the provider
        """
        self.request = request
        self.issuer = issuer

    def find_by_external_id(
        self, external_id: str
    ) -> Sequence[AbstractBaseUser]:
        """Return the accounts linked to the given provider identifier."""
        identities = (
            Identity.objects.for_issuer(self.issuer)
            .bound()
            .filter(subject=external_id)
            .select_related("user")
            .order_by("user__pk")
        )
        return [identity.user for identity in identities if identity.user]

    def establish_session(self, account: AbstractBaseUser) -> None:
        """Log in the account, and record the use of its identity."""
        Identity.objects.for_issuer(self.issuer).filter(user=account).update(
            last_used=timezone.now()
        )
        log.debug("logging in user %s", account)
        auth.login(self.request, account, backend=SIGNON_AUTH_BACKEND)

    @transaction.atomic
    def bind(self, account: AbstractBaseUser, profile: RemoteProfile) -> bool:
        """Link account to the remote profile, creating its Identity."""
        identity, _ = Identity.objects.get_or_create(
            issuer=self.issuer, subject=profile.id
        )
        if identity.user is not None and identity.user != account:
            log.warning(
                "%s: identity already bound to %s, not rebinding to %s",
                identity,
                identity.user,
                account,
            )
            return False
        identity.user = account
        identity.claims = profile.model_dump()
        identity.save()
        log.info("%s: bound to identity %s", account, identity)
        return True
