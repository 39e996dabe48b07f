# Copyright 2020-2023 Enrico Zini <enrico@debian.org>
# Copyright © The opensocial Developers
# See the AUTHORS file at the top-level directory of this distribution
#
# This file is part of opensocial. It is subject to the license terms
# in the LICENSE file found in the top-level directory of this
# distribution. No part of opensocial, including this file, may be copied,
# modified, propagated, or distributed except according to the terms
# contained in the LICENSE file.

"""
Logic to authenticate a request using signon Providers.

A signon with an OAuth 1.0a provider goes through these steps:

1. :py:meth:`Signon.begin` gets a request token, stores it in the session,
   and sends the user to the provider to authorize the login.
2. The provider sends the user back to a callback view, which calls
   :py:meth:`Signon.login_callback` or :py:meth:`Signon.register_callback`.
3. The callback exchanges the request token for an access token, loads the
   remote profile, and looks up the local account linked to it.
4. If an active account is found, it is logged in. In the registration flow,
   if no account is found, the profile is staged in the session to prefill
   the registration form.

Every step returns a :py:class:`RedirectSignal`, which views turn into a
redirect response.
"""

import dataclasses
import logging
from typing import Any, Protocol
from urllib.parse import urlencode

from django.contrib import messages
from django.contrib.auth.models import AbstractBaseUser
from django.shortcuts import resolve_url
from django.utils.translation import gettext as _

from opensocial.server.signon import providers
from opensocial.server.signon.accounts import AccountStorage
from opensocial.server.signon.models import (
    ErrorKind,
    Flow,
    PendingRegistration,
    RemoteProfile,
    TokenPair,
)
from opensocial.server.signon.providers import OAuthClientError
from opensocial.server.signon.stores import SessionStore

log = logging.getLogger("opensocial.server.signon")


class OAuthClient(Protocol):
    """Client performing the OAuth 1.0a requests to a provider."""

    def get_request_token(self, callback_url: str) -> TokenPair:
        """Obtain a temporary request token."""

    def get_authorization_url(self, request_token: TokenPair) -> str:
        """Return the URL where the user authorizes the login."""

    def exchange_token(
        self, request_token: TokenPair, verifier: str | None
    ) -> TokenPair:
        """Exchange a verified request token for an access token."""

    def fetch_profile(self, access_token: TokenPair) -> RemoteProfile | None:
        """Load the profile of the user owning the access token."""


@dataclasses.dataclass(frozen=True)
class Notice:
    """Message to show to the user, with a django.contrib.messages level."""

    level: int
    message: str


@dataclasses.dataclass(frozen=True)
class RedirectSignal:
    """Where to send the user at the end of a signon step."""

    #: URL name or URL, as accepted by ``resolve_url``
    to: str
    #: Arguments used to reverse the URL name
    kwargs: dict[str, Any] = dataclasses.field(default_factory=dict)
    #: Query string arguments added to the URL
    query: dict[str, str] = dataclasses.field(default_factory=dict)
    notice: Notice | None = None
    #: Set if the step failed
    error: ErrorKind | None = None

    def url(self) -> str:
        """Build the target URL."""
        url = resolve_url(self.to, **self.kwargs)
        if self.query:
            url += "?" + urlencode(self.query)
        return url


class SignonFailed(Exception):
    """Exception raised when a signon step cannot continue."""

    def __init__(self, kind: ErrorKind, notice: str) -> None:
        """
        Describe the failure.

        :param kind: reason of the failure
        :param notice: translated message to show to the user
        """
        super().__init__(notice)
        self.kind = kind
        self.notice = notice


class Signon:
    """
    Signon flow for one provider.

    The collaborators are passed explicitly, so the flow does not depend on
    the current request: views create them from the request.
    """

    #: URL names of the pages where each flow starts
    entry_pages = {
        Flow.LOGIN: "login",
        Flow.REGISTER: "user:register",
    }

    def __init__(
        self,
        provider: providers.Provider,
        *,
        oauth: OAuthClient,
        accounts: AccountStorage,
        store: SessionStore,
        default_redirect: str = "homepage:homepage",
    ) -> None:
        """
        Create the signon flow.

        :param provider: provider definition
        :param oauth: client for the provider
        :param accounts: storage of local accounts
        :param store: session storage for the state of the flow
        :param default_redirect: where to go after a successful login
        """
        self.provider = provider
        self.oauth = oauth
        self.accounts = accounts
        self.store = store
        self.default_redirect = default_redirect
        #: Access token obtained by fetch_profile
        self.access_token: TokenPair | None = None

    @property
    def network(self) -> str:
        """User-visible name of the provider."""
        return self.provider.label

    def failure(self, exc: SignonFailed, flow: Flow) -> RedirectSignal:
        """Send the user back to the start of the flow with an error."""
        return RedirectSignal(
            self.entry_pages[flow],
            notice=Notice(messages.ERROR, exc.notice),
            error=exc.kind,
        )

    def _request_token(self, callback_url: str) -> TokenPair:
        """
        Get a request token from the provider.

        :raises SignonFailed: if the provider does not issue one
        """
        try:
            return self.oauth.get_request_token(callback_url)
        except OAuthClientError:
            raise SignonFailed(
                ErrorKind.REQUEST_TOKEN_FAILED,
                _("Could not connect to %(network)s. Try again later.")
                % {"network": self.network},
            )

    def begin(self, flow: Flow, callback_url: str) -> RedirectSignal:
        """Get a request token and send the user to the provider."""
        try:
            request_token = self._request_token(callback_url)
        except SignonFailed as exc:
            return self.failure(exc, flow)
        self.store.put_request_token(request_token)
        return RedirectSignal(self.oauth.get_authorization_url(request_token))

    def _load_profile(self, verifier: str | None) -> RemoteProfile:
        """
        Exchange the request token and load the remote profile.

        :raises SignonFailed: if the token or the profile are not valid
        """
        invalid_token = _("%(network)s login failed. Token is not valid.") % {
            "network": self.network
        }

        # The request token can only be used once
        if (request_token := self.store.pop_request_token()) is None:
            log.warning("%s: request token not found in session", self.network)
            raise SignonFailed(ErrorKind.INVALID_TOKEN, invalid_token)

        try:
            access_token = self.oauth.exchange_token(request_token, verifier)
        except OAuthClientError:
            raise SignonFailed(ErrorKind.INVALID_TOKEN, invalid_token)

        self.store.put_access_token(access_token)
        self.access_token = access_token

        profile = self.oauth.fetch_profile(access_token)
        if profile is None or not profile.id:
            log.warning("%s: no usable profile returned", self.network)
            raise SignonFailed(
                ErrorKind.PROFILE_FETCH_FAILED,
                _(
                    "%(network)s login failed, could not load %(network)s"
                    " profile. Contact the site administrator."
                )
                % {"network": self.network},
            )

        return profile

    def fetch_profile(
        self, flow: Flow, verifier: str | None
    ) -> RemoteProfile | RedirectSignal:
        """
        Load the remote profile after the provider sent the user back.

        :param flow: flow the user is in, used to choose where to go on
                     failure
        :param verifier: ``oauth_verifier`` sent back by the provider
        :return: the profile, or where to send the user on failure
        """
        try:
            return self._load_profile(verifier)
        except SignonFailed as exc:
            return self.failure(exc, flow)

    def resolve(self, external_id: str) -> AbstractBaseUser | None:
        """Look up the local account linked to a provider identifier."""
        accounts = self.accounts.find_by_external_id(external_id)
        if not accounts:
            return None
        if len(accounts) > 1:
            log.warning(
                "%s: %d accounts linked to %s, using %s",
                self.network,
                len(accounts),
                external_id,
                accounts[0],
            )
        return accounts[0]

    def _check_active(self, account: AbstractBaseUser, flow: Flow) -> None:
        """
        Refuse blocked accounts.

        :raises SignonFailed: if the account is blocked
        """
        if account.is_active:
            return
        log.info("%s: blocked account, login refused", account)
        if flow == Flow.LOGIN:
            notice = _(
                "Your account is blocked. Contact the site administrator."
            )
        else:
            notice = _(
                "You already have account on this site, but your account is"
                " blocked. Contact the site administrator."
            )
        raise SignonFailed(ErrorKind.ACCOUNT_BLOCKED, notice)

    def finalize(
        self, account: AbstractBaseUser, flow: Flow
    ) -> RedirectSignal:
        """Log in an account found for the remote profile."""
        try:
            self._check_active(account, flow)
        except SignonFailed as exc:
            return self.failure(exc, flow)

        self.accounts.establish_session(account)
        log.info("%s: logged in via %s", account, self.network)

        if flow == Flow.LOGIN:
            return RedirectSignal(self.default_redirect)
        return RedirectSignal(
            "user:detail", kwargs={"username": account.get_username()}
        )

    def stage(
        self, profile: RemoteProfile, access_token: TokenPair
    ) -> RedirectSignal:
        """Keep the profile in the session for the registration form."""
        self.store.stage_registration(
            PendingRegistration(
                access_token=access_token, mail=None, name=profile.name
            )
        )
        log.info(
            "%s: staged registration for remote user %s",
            self.network,
            profile.name,
        )
        return RedirectSignal(
            self.entry_pages[Flow.REGISTER],
            query={"provider": self.provider.name},
            notice=Notice(
                messages.INFO,
                _(
                    "You are now connected with %(network)s,"
                    " please continue registration"
                )
                % {"network": self.network},
            ),
        )

    def login_callback(self, verifier: str | None) -> RedirectSignal:
        """Log in the account linked to the remote profile."""
        profile = self.fetch_profile(Flow.LOGIN, verifier)
        if isinstance(profile, RedirectSignal):
            return profile

        if (account := self.resolve(profile.id)) is None:
            log.info(
                "%s: no account linked to remote user %s",
                self.network,
                profile.id,
            )
            return RedirectSignal(
                "signon:login_notice", kwargs={"name": self.provider.name}
            )

        return self.finalize(account, Flow.LOGIN)

    def register_callback(self, verifier: str | None) -> RedirectSignal:
        """Log in the linked account, or start registering a new one."""
        profile = self.fetch_profile(Flow.REGISTER, verifier)
        if isinstance(profile, RedirectSignal):
            return profile

        if (account := self.resolve(profile.id)) is None:
            assert self.access_token is not None
            return self.stage(profile, self.access_token)

        return self.finalize(account, Flow.REGISTER)

    def complete_registration(self, account: AbstractBaseUser) -> bool:
        """
        Link a newly registered account to the staged remote profile.

        :return: True if the account has been linked
        """
        if (pending := self.store.pending_registration()) is None:
            return False

        profile = self.oauth.fetch_profile(pending.access_token)
        self.store.clear()
        if profile is None:
            log.warning(
                "%s: cannot load profile to link %s", self.network, account
            )
            return False

        return self.accounts.bind(account, profile)
