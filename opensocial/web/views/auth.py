# Copyright © The opensocial Developers
# See the AUTHORS file at the top-level directory of this distribution
#
# This file is part of opensocial. It is subject to the license terms
# in the LICENSE file found in the top-level directory of this
# distribution. No part of opensocial, including this file, may be copied,
# modified, propagated, or distributed except according to the terms
# contained in the LICENSE file.

"""opensocial auth views."""

from functools import cached_property
from typing import Any

from django import http
from django.contrib import auth, messages
from django.contrib.auth import views as auth_views
from django.http import HttpRequest, HttpResponse, HttpResponseBase
from django.shortcuts import redirect
from django.urls import reverse
from django.utils.translation import gettext as _
from django.views.generic import DetailView, FormView

from opensocial.server.signon.models import PendingRegistration
from opensocial.server.signon.signon import Signon
from opensocial.server.signon.views import (
    SignonLogoutMixin,
    get_oauth1_provider,
    make_signon,
)
from opensocial.web.forms import RegistrationForm

#: Backend recorded in the session of users who registered locally
MODEL_AUTH_BACKEND = "django.contrib.auth.backends.ModelBackend"


class LoginView(auth_views.LoginView):
    """Class for the login view."""

    template_name = "account/login.html"

    def get_context_data(self, *args: Any, **kwargs: Any) -> dict[str, Any]:
        """Tell the base template we are a login view."""
        ctx = super().get_context_data(**kwargs)
        ctx["is_login_view"] = True
        return ctx


class LogoutView(SignonLogoutMixin, auth_views.LogoutView):
    """Class for the logout view."""

    template_name = "account/logged_out.html"


class RegisterView(FormView):  # type: ignore[type-arg]
    """
    Register a new local account.

    When called with ``?provider=<name>`` after a registration with an
    external provider, the form is prefilled with the remote profile, and the
    new account is linked to it.
    """

    template_name = "account/register.html"
    form_class = RegistrationForm

    def dispatch(
        self, request: HttpRequest, *args: Any, **kwargs: Any
    ) -> HttpResponseBase:
        """Send logged in users to their own page."""
        if request.user.is_authenticated:
            url = reverse(
                "user:detail",
                kwargs={"username": request.user.get_username()},
            )
            # A username shadowing this page would redirect to itself
            if url == request.path:
                return redirect("homepage:homepage")
            return redirect(url)
        return super().dispatch(request, *args, **kwargs)

    @cached_property
    def signon(self) -> Signon | None:
        """Return the signon flow of the provider given in the URL."""
        if not (name := self.request.GET.get("provider")):
            return None
        try:
            provider = get_oauth1_provider(name)
        except http.Http404:
            return None
        return make_signon(self.request, provider)

    @cached_property
    def pending(self) -> PendingRegistration | None:
        """Return the registration staged by the provider, if any."""
        if self.signon is None:
            return None
        return self.signon.store.pending_registration()

    def get_initial(self) -> dict[str, Any]:
        """Prefill the form with the remote profile."""
        initial = super().get_initial()
        if self.pending is not None:
            initial["username"] = self.pending.name
            if self.pending.mail:
                initial["email"] = self.pending.mail
        return initial

    def get_context_data(self, **kwargs: Any) -> dict[str, Any]:
        """Add the provider being registered with."""
        ctx = super().get_context_data(**kwargs)
        ctx["provider"] = (
            self.signon.provider if self.pending is not None else None
        )
        return ctx

    def form_valid(self, form: RegistrationForm) -> HttpResponse:
        """Create the account, link it, and log it in."""
        user = form.save()

        if self.pending is not None:
            assert self.signon is not None
            network = self.signon.network
            if self.signon.complete_registration(user):
                messages.success(
                    self.request,
                    _("Your account is now linked to %(network)s.")
                    % {"network": network},
                )
            else:
                messages.warning(
                    self.request,
                    _("Your account could not be linked to %(network)s.")
                    % {"network": network},
                )

        auth.login(self.request, user, backend=MODEL_AUTH_BACKEND)
        return redirect("user:detail", username=user.get_username())


class UserDetailView(DetailView):  # type: ignore[type-arg]
    """Show user details."""

    model = auth.get_user_model()
    template_name = "web/user-detail.html"
    slug_field = "username"
    slug_url_kwarg = "username"
    # We need something that is not "user" not to confuse it with the
    # current user
    context_object_name = "person"
