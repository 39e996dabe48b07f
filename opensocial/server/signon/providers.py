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
OAuth 1.0a signon providers.

Providers are listed in the SIGNON_PROVIDERS django setting, as instances of
`Provider` subclasses. Each one is referenced in URLs and in the session by
its ``name``.

For example, to enable Twitter signon::

    SIGNON_PROVIDERS = [
        providers.TwitterProvider(
            name="twitter",
            label="Twitter",
            consumer_key=os.environ["TWITTER_CONSUMER_KEY"],
            consumer_secret=os.environ["TWITTER_CONSUMER_SECRET"],
        ),
    ]
"""

import logging
from typing import Any, TYPE_CHECKING

from opensocial.server.signon.models import Flow, RemoteProfile, TokenPair

if TYPE_CHECKING:  # pragma: no cover
    import django.http

# Settings import this module to define providers: Django and requests are
# only imported inside the functions that use them.

log = logging.getLogger("opensocial.server.signon")


def get(name: str) -> "Provider":
    """
    Return the provider configured with the given name.

    :raises ImproperlyConfigured: if SIGNON_PROVIDERS is not set, or has no
                                  Provider called ``name``
    """
    from django.conf import settings
    from django.core.exceptions import ImproperlyConfigured

    try:
        configured = settings.SIGNON_PROVIDERS
    except AttributeError:
        raise ImproperlyConfigured(
            f"signon provider {name} requested,"
            " but SIGNON_PROVIDERS is not defined in settings"
        )

    provider = next((p for p in configured if p.name == name), None)
    if provider is None:
        raise ImproperlyConfigured(
            f"signon provider {name} requested,"
            " but not found in SIGNON_PROVIDERS setting"
        )
    if not isinstance(provider, Provider):
        raise ImproperlyConfigured(
            f"signon provider {name} requested, but its entry in"
            " SIGNON_PROVIDERS setting is not a Provider"
        )
    return provider


def session_key(name: str) -> str:
    """Return the session key holding the signon state of a provider."""
    return f"signon_{name}"


class OAuthClientError(Exception):
    """Exception raised when the provider refuses an OAuth request."""


class BoundProvider:
    """A provider together with the request being served."""

    def __init__(
        self, provider: "Provider", request: "django.http.HttpRequest"
    ) -> None:
        """Pair provider with request."""
        self.provider = provider
        self.request = request

    def __getattr__(self, name: str) -> Any:
        """Read missing attributes from the provider."""
        return getattr(self.provider, name)

    def logout(self) -> None:
        """Forget the signon state of this provider."""
        self.request.session.pop(session_key(self.provider.name), None)


class Provider:
    """Definition of an external signon provider."""

    #: Name used in URLs, session keys and Identity.issuer
    name: str
    #: Name shown to users, such as "Twitter"
    label: str
    #: Static file with the provider logo, if any
    icon: str | None
    #: Provider-specific settings
    options: dict[str, Any]
    #: BoundProvider subclass returned by bind()
    bound_class: type[BoundProvider] = BoundProvider

    def __init__(
        self,
        name: str,
        label: str,
        *,
        icon: str | None = None,
        options: dict[str, Any] | None = None,
    ) -> None:
        """
        Define a signon provider.

        Subclasses add their own keyword arguments.
        """
        self.name = name
        self.label = label
        self.icon = icon
        self.options = options or {}

    def bind(self, request: "django.http.HttpRequest") -> BoundProvider:
        """Return the provider bound to request."""
        return self.bound_class(self, request)


class BoundOAuth1Provider(BoundProvider):
    """
    Bound version of an OAuth 1.0a provider.

    This is the OAuth client used by the signon flow: every method performs
    one signed request to the provider.
    """

    provider: "OAuth1Provider"

    def _session(self, **kwargs: Any) -> Any:
        """Create an OAuth1Session signed with the consumer credentials."""
        from requests_oauthlib import OAuth1Session

        return OAuth1Session(
            self.provider.consumer_key,
            client_secret=self.provider.consumer_secret,
            **kwargs,
        )

    def callback_url(self, flow: Flow) -> str:
        """Return the absolute URL the provider redirects back to."""
        from django.urls import reverse

        return self.request.build_absolute_uri(
            reverse(f"signon:{flow}_callback", args=(self.provider.name,))
        )

    def get_request_token(self, callback_url: str) -> TokenPair:
        """
        Obtain a temporary request token from the provider.

        :raises OAuthClientError: if the provider does not issue a token
        """
        import requests

        oauth = self._session(callback_uri=callback_url)
        try:
            tokens = oauth.fetch_request_token(
                self.provider.url_request_token, timeout=self.provider.timeout
            )
        except (ValueError, requests.RequestException) as exc:
            log.warning("%s: cannot get a request token: %s", self.name, exc)
            raise OAuthClientError(str(exc)) from exc
        return TokenPair(
            token=tokens["oauth_token"],
            token_secret=tokens["oauth_token_secret"],
        )

    def get_authorization_url(self, request_token: TokenPair) -> str:
        """Return the provider URL where the user authorizes the login."""
        oauth = self._session()
        url = oauth.authorization_url(
            self.provider.url_authorize, request_token=request_token.token
        )
        assert isinstance(url, str)
        return url

    def exchange_token(
        self, request_token: TokenPair, verifier: str | None
    ) -> TokenPair:
        """
        Exchange a verified request token for a permanent access token.

        :raises OAuthClientError: if the provider refuses the exchange
        """
        import requests

        oauth = self._session(
            resource_owner_key=request_token.token,
            resource_owner_secret=request_token.token_secret,
            verifier=verifier,
        )
        try:
            tokens = oauth.fetch_access_token(
                self.provider.url_access_token, timeout=self.provider.timeout
            )
        except (ValueError, requests.RequestException) as exc:
            log.warning("%s: access token refused: %s", self.name, exc)
            raise OAuthClientError(str(exc)) from exc
        log.debug("%s: obtained access token", self.name)
        return TokenPair(
            token=tokens["oauth_token"],
            token_secret=tokens["oauth_token_secret"],
        )

    def fetch_profile(self, access_token: TokenPair) -> RemoteProfile | None:
        """
        Load the profile of the user owning the access token.

        :return: the profile, or None if the provider did not return one
        """
        import requests

        oauth = self._session(
            resource_owner_key=access_token.token,
            resource_owner_secret=access_token.token_secret,
        )
        try:
            response = oauth.get(
                self.provider.url_profile,
                params=self.provider.profile_params,
                timeout=self.provider.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except (ValueError, requests.RequestException) as exc:
            log.warning("%s: cannot load profile: %s", self.name, exc)
            return None
        return self.provider.parse_profile(data)


class OAuth1Provider(Provider):
    """OAuth 1.0a identity provider."""

    bound_class = BoundOAuth1Provider

    def __init__(
        self,
        *args: Any,
        consumer_key: str,
        consumer_secret: str,
        url_request_token: str,
        url_authorize: str,
        url_access_token: str,
        url_profile: str,
        profile_params: dict[str, str] | None = None,
        timeout: float = 30,
        **kwargs: Any,
    ) -> None:
        """
        Define an OAuth 1.0a provider.

        :param consumer_key: key of the application registered with the
            provider
        :param consumer_secret: secret of the application registered with the
            provider
        :param url_request_token: endpoint issuing temporary request tokens
        :param url_authorize: page where the user authorizes the application
        :param url_access_token: endpoint exchanging a verified request token
            for an access token
        :param url_profile: API endpoint returning the profile of the user
            owning the access token
        :param profile_params: query string arguments for ``url_profile``
        :param timeout: timeout in seconds for requests to the provider
        """
        super().__init__(*args, **kwargs)
        self.consumer_key = consumer_key
        self.consumer_secret = consumer_secret
        self.url_request_token = url_request_token
        self.url_authorize = url_authorize
        self.url_access_token = url_access_token
        self.url_profile = url_profile
        self.profile_params: dict[str, str] = profile_params or {}
        self.timeout = timeout

    def parse_profile(self, data: Any) -> RemoteProfile | None:
        """
        Build a RemoteProfile from the data returned by ``url_profile``.

        :return: the profile, or None if data has no account identifier
        """
        if not isinstance(data, dict) or not data.get("id"):
            return None
        return RemoteProfile(
            id=str(data["id"]),
            name=data.get("name") or str(data["id"]),
            email=data.get("email"),
        )


class TwitterProvider(OAuth1Provider):
    """Twitter OAuth 1.0a identity provider."""

    def __init__(
        self, *args: Any, url: str = "https://api.twitter.com", **kwargs: Any
    ) -> None:
        """
        Define a Twitter provider.

        :param url: URL to the root of the Twitter API. It will be used to
            automatically generate all ``url_*`` arguments for OAuth1Provider
        """
        kwargs.setdefault("icon", "signon/twitter.svg")
        kwargs["url_request_token"] = f"{url}/oauth/request_token"
        kwargs["url_authorize"] = f"{url}/oauth/authenticate"
        kwargs["url_access_token"] = f"{url}/oauth/access_token"
        kwargs["url_profile"] = f"{url}/1.1/account/verify_credentials.json"
        kwargs.setdefault(
            "profile_params",
            {"include_email": "true", "skip_status": "true"},
        )
        super().__init__(*args, **kwargs)

    def parse_profile(self, data: Any) -> RemoteProfile | None:
        """Use ``id_str`` and ``screen_name`` from Twitter user objects."""
        if not isinstance(data, dict) or not (user_id := data.get("id_str")):
            return None
        return RemoteProfile(
            id=user_id,
            name=data.get("screen_name") or data.get("name") or user_id,
            email=data.get("email") or None,
        )
