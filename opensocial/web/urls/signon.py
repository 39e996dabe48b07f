# Copyright © The opensocial Developers
# See the AUTHORS file at the top-level directory of this distribution
#
# This file is part of opensocial. It is subject to the license terms
# in the LICENSE file found in the top-level directory of this
# distribution. No part of opensocial, including this file, may be copied,
# modified, propagated, or distributed except according to the terms
# contained in the LICENSE file.

"""URLs for signon with external providers."""

from django.urls import path

from opensocial.server.signon import views
from opensocial.server.signon.models import Flow

app_name = "signon"

urlpatterns = [
    path(
        "login/<str:name>/",
        views.SignonBeginView.as_view(flow=Flow.LOGIN),
        name="login",
    ),
    path(
        "login/<str:name>/callback/",
        views.SignonLoginCallbackView.as_view(),
        name="login_callback",
    ),
    path(
        "login/<str:name>/notice/",
        views.SignonLoginNoticeView.as_view(),
        name="login_notice",
    ),
    path(
        "register/<str:name>/",
        views.SignonBeginView.as_view(flow=Flow.REGISTER),
        name="register",
    ),
    path(
        "register/<str:name>/callback/",
        views.SignonRegisterCallbackView.as_view(),
        name="register_callback",
    ),
]
