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
Views needed to interact with external authentication providers.

The logout hook is implemented as a mixin for the normal
django.contrib.auth.LogoutView.
"""

from typing import Any

from django import http
from django.conf import settings
from django.contrib import messages
from django.core.exceptions import ImproperlyConfigured
from django.http import HttpRequest, HttpResponse, HttpResponseBase
from django.utils.decorators import method_decorator
from django.views.decorators.cache import never_cache
from django.views.generic import TemplateView, View

from opensocial.server.signon import providers
from opensocial.server.signon.accounts import DjangoAccountStorage
from opensocial.server.signon.models import Flow
from opensocial.server.signon.signon import RedirectSignal, Signon
from opensocial.server.signon.stores import DjangoSessionStore


def signal_response(
    request: HttpRequest, signal: RedirectSignal
) -> http.HttpResponseRedirect:
    """Queue the notice of a RedirectSignal and redirect to its target."""
    if signal.notice is not None:
        messages.add_message(
            request, signal.notice.level, signal.notice.message
        )
    return http.HttpResponseRedirect(signal.url())


def make_signon(
    request: HttpRequest, provider: providers.OAuth1Provider
) -> Signon:
    """Create the signon flow for a provider and the current request."""
    bound = provider.bind(request)
    assert isinstance(bound, providers.BoundOAuth1Provider)
    return Signon(
        provider,
        oauth=bound,
        accounts=DjangoAccountStorage(request, provider.name),
        store=DjangoSessionStore(request.session, provider.name),
        default_redirect=getattr(
            settings, "SIGNON_DEFAULT_REDIRECT", "homepage:homepage"
        ),
    )


def get_oauth1_provider(name: str) -> providers.OAuth1Provider:
    """
    Look up an OAuth 1.0a provider by name.

    :raises Http404: if there is no such provider
    """
    try:
        provider = providers.get(name)
    except ImproperlyConfigured:
        raise http.Http404
    if not isinstance(provider, providers.OAuth1Provider):
        raise http.Http404
    return provider


class SignonLogoutMixin:
    """Mixin to forget signon state in a logout view."""

    @method_decorator(never_cache)
    def dispatch(
        self, request: HttpRequest, *args: Any, **kwargs: Any
    ) -> HttpResponse:
        """Wrap the normal logout to also forget signon state."""
        for provider in getattr(settings, "SIGNON_PROVIDERS", ()):
            provider.bind(request).logout()
        assert isinstance(self, View)
        return super().dispatch(request, *args, **kwargs)


class SignonViewMixin:
    """Access the signon flow of the provider named in the URL."""

    kwargs: dict[str, Any]
    request: HttpRequest

    def get_signon(self) -> Signon:
        """Create the signon flow for this request."""
        provider = get_oauth1_provider(self.kwargs["name"])
        return make_signon(self.request, provider)


class SignonBeginView(SignonViewMixin, View):
    """Send the user to the provider to log in or register."""

    flow: Flow = Flow.LOGIN

    @method_decorator(never_cache)
    def get(
        self, request: HttpRequest, *args: Any, **kwargs: Any
    ) -> HttpResponseBase:
        """Get a request token and redirect to the provider."""
        signon = self.get_signon()
        assert isinstance(signon.oauth, providers.BoundOAuth1Provider)
        callback_url = signon.oauth.callback_url(self.flow)
        return signal_response(request, signon.begin(self.flow, callback_url))


class SignonLoginCallbackView(SignonViewMixin, View):
    """
    Handle the callback from the provider at the end of a login.

    If successful, this logs in the account linked to the remote profile.
    """

    @method_decorator(never_cache)
    def get(
        self, request: HttpRequest, *args: Any, **kwargs: Any
    ) -> HttpResponseBase:
        """Log in the user coming back from the provider."""
        signon = self.get_signon()
        signal = signon.login_callback(request.GET.get("oauth_verifier"))
        return signal_response(request, signal)


class SignonRegisterCallbackView(SignonViewMixin, View):
    """
    Handle the callback from the provider at the end of a registration.

    If the remote profile is already linked to an account, this logs it in;
    otherwise the profile is kept to prefill the registration form.
    """

    @method_decorator(never_cache)
    def get(
        self, request: HttpRequest, *args: Any, **kwargs: Any
    ) -> HttpResponseBase:
        """Continue the registration of the user coming back."""
        signon = self.get_signon()
        signal = signon.register_callback(request.GET.get("oauth_verifier"))
        return signal_response(request, signal)


class SignonLoginNoticeView(TemplateView):
    """Explain that no account is linked to the remote profile."""

    template_name = "account/login_notice.html"

    def get_context_data(self, **kwargs: Any) -> dict[str, Any]:
        """Add the provider to the context."""
        ctx = super().get_context_data(**kwargs)
        ctx["provider"] = get_oauth1_provider(self.kwargs["name"])
        return ctx
