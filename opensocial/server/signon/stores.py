# Copyright © The opensocial Developers
# See the AUTHORS file at the top-level directory of this distribution
#
# This file is part of opensocial. It is subject to the license terms
# in the LICENSE file found in the top-level directory of this
# distribution. No part of opensocial, including this file, may be copied,
# modified, propagated, or distributed except according to the terms
# contained in the LICENSE file.

"""Storage of signon state between the requests of a signon flow."""

from collections.abc import MutableMapping
from typing import Any, Protocol

from opensocial.server.signon.models import (
    PendingAuthState,
    PendingRegistration,
    TokenPair,
)
from opensocial.server.signon.providers import session_key


class SessionStore(Protocol):
    """Session-scoped storage for the signon state of one provider."""

    def put_request_token(self, token: TokenPair) -> None:
        """Store the request token issued before leaving for the provider."""

    def pop_request_token(self) -> TokenPair | None:
        """
        Return the stored request token and remove it from the store.

        :return: the token, or None if either part of it was missing
        """

    def put_access_token(self, token: TokenPair) -> None:
        """Store the permanent access token."""

    def stage_registration(self, registration: PendingRegistration) -> None:
        """Store profile information for the registration form."""

    def pending_registration(self) -> PendingRegistration | None:
        """Return the staged registration, if any."""

    def clear(self) -> None:
        """Forget all signon state."""


class DjangoSessionStore:
    """SessionStore keeping PendingAuthState in a Django session."""

    def __init__(
        self, session: MutableMapping[str, Any], provider_name: str
    ) -> None:
        """
        Store signon state for a provider.

        :param session: the Django session of the current request
        :param provider_name: name of the provider, used to namespace the
                              session key
        """
        self.session = session
        self.key = session_key(provider_name)

    def load(self) -> PendingAuthState:
        """Load the current state from the session."""
        if (data := self.session.get(self.key)) is None:
            return PendingAuthState()
        return PendingAuthState.model_validate(data)

    def save(self, state: PendingAuthState) -> None:
        """Write state to the session."""
        self.session[self.key] = state.model_dump(mode="json")

    def put_request_token(self, token: TokenPair) -> None:
        """Store the request token issued before leaving for the provider."""
        state = self.load()
        state.oauth_token = token.token
        state.oauth_token_secret = token.token_secret
        self.save(state)

    def pop_request_token(self) -> TokenPair | None:
        """Return the stored request token and remove it from the store."""
        state = self.load()
        token, secret = state.oauth_token, state.oauth_token_secret
        if token is not None or secret is not None:
            state.oauth_token = state.oauth_token_secret = None
            self.save(state)
        if not token or not secret:
            return None
        return TokenPair(token=token, token_secret=secret)

    def put_access_token(self, token: TokenPair) -> None:
        """Store the permanent access token."""
        state = self.load()
        state.access_token = token
        self.save(state)

    def stage_registration(self, registration: PendingRegistration) -> None:
        """Store profile information for the registration form."""
        state = self.load()
        state.access_token = registration.access_token
        state.mail = registration.mail
        state.name = registration.name
        self.save(state)

    def pending_registration(self) -> PendingRegistration | None:
        """Return the staged registration, if any."""
        return self.load().pending_registration()

    def clear(self) -> None:
        """Forget all signon state."""
        self.session.pop(self.key, None)
