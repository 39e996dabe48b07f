# Copyright © The opensocial Developers
# See the AUTHORS file at the top-level directory of this distribution
#
# This file is part of opensocial. It is subject to the license terms
# in the LICENSE file found in the top-level directory of this
# distribution. No part of opensocial, including this file, may be copied,
# modified, propagated, or distributed except according to the terms
# contained in the LICENSE file.

"""
opensocial URL Configuration.

User account pages live under ``/user/``, including the endpoints that
external signon providers redirect back to.
"""

from django.urls import URLPattern, URLResolver, include, path

from opensocial.web.views.auth import LoginView, LogoutView

urlpatterns: list[URLPattern | URLResolver] = [
    path("", include("opensocial.web.urls.homepage", namespace="homepage")),
    path("login/", LoginView.as_view(), name="login"),
    path("logout/", LogoutView.as_view(), name="logout"),
    path("user/", include("opensocial.web.urls.signon", namespace="signon")),
    path("user/", include("opensocial.web.urls.user", namespace="user")),
]
