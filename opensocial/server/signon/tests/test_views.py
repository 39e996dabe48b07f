# Copyright © The opensocial Developers
# See the AUTHORS file at the top-level directory of this distribution
#
# This file is part of opensocial. It is subject to the license terms
# in the LICENSE file found in the top-level directory of this
# distribution. No part of opensocial, including this file, may be copied,
# modified, propagated, or distributed except according to the terms
# contained in the LICENSE file.

"""Tests for signon views."""

import contextlib
from collections.abc import Generator
from typing import Any
from unittest import mock

from django.contrib import auth, messages
from django.contrib.messages import get_messages
from django.test import override_settings
from django.urls import reverse

from opensocial.server.signon import providers
from opensocial.server.signon.models import RemoteProfile, TokenPair
from opensocial.server.signon.providers import (
    BoundOAuth1Provider,
    OAuthClientError,
)
from opensocial.server.signon.signon import Notice, RedirectSignal
from opensocial.server.signon.views import signal_response
from opensocial.test.django import TestCase, TestResponseType

REQUEST_TOKEN = TokenPair(token="request", token_secret="request-secret")
ACCESS_TOKEN = TokenPair(token="access", token_secret="access-secret")
PROFILE = RemoteProfile(id="123", name="jdoe", email="jdoe@example.org")


class SignonViewsTests(TestCase):
    """Test the signon views with the Twitter provider."""

    @contextlib.contextmanager
    def mock_oauth(
        self, profile: RemoteProfile | None = PROFILE, **kwargs: Any
    ) -> Generator[dict[str, mock.MagicMock], None, None]:
        """Mock the requests to the provider."""
        kwargs.setdefault("get_request_token", REQUEST_TOKEN)
        kwargs.setdefault("exchange_token", ACCESS_TOKEN)
        kwargs.setdefault("fetch_profile", profile)
        with contextlib.ExitStack() as stack:
            mocks = {}
            for name, value in kwargs.items():
                if isinstance(value, Exception):
                    patcher = mock.patch.object(
                        BoundOAuth1Provider, name, side_effect=value
                    )
                else:
                    patcher = mock.patch.object(
                        BoundOAuth1Provider, name, return_value=value
                    )
                mocks[name] = stack.enter_context(patcher)
            yield mocks

    def set_request_token(self) -> None:
        """Simulate a signon started with Twitter."""
        session = self.client.session
        session["signon_twitter"] = {
            "oauth_token": "request",
            "oauth_token_secret": "request-secret",
        }
        session.save()

    def assertRedirectMessages(
        self, response: TestResponseType, url: str, expected: list[str]
    ) -> None:
        """Check the redirect target and the queued messages."""
        self.assertRedirects(response, url, fetch_redirect_response=False)
        self.assertEqual(
            [str(m) for m in get_messages(response.wsgi_request)], expected
        )

    def assertLoggedInAs(self, username: str | None) -> None:
        """Check who is logged in the test client session."""
        user_id = self.client.session.get(auth.SESSION_KEY)
        if username is None:
            self.assertIsNone(user_id)
        else:
            user = auth.get_user_model().objects.get(username=username)
            self.assertEqual(user_id, str(user.pk))

    def test_unknown_provider(self) -> None:
        """Unknown providers are not found."""
        for name in (
            "signon:login",
            "signon:login_callback",
            "signon:login_notice",
            "signon:register",
            "signon:register_callback",
        ):
            with self.subTest(name=name):
                response = self.client.get(reverse(name, args=("mastodon",)))
                self.assertEqual(response.status_code, 404)

    @override_settings(
        SIGNON_PROVIDERS=[providers.Provider(name="twitter", label="Twitter")]
    )
    def test_not_oauth1_provider(self) -> None:
        """Providers that do not speak OAuth 1.0a are not found."""
        response = self.client.get(reverse("signon:login", args=("twitter",)))
        self.assertEqual(response.status_code, 404)

    def test_begin_login(self) -> None:
        """Login sends the user to Twitter."""
        with self.mock_oauth() as mocks:
            response = self.client.get("/user/login/twitter/")
        self.assertRedirects(
            response,
            "https://api.twitter.com/oauth/authenticate?oauth_token=request",
            fetch_redirect_response=False,
        )
        mocks["get_request_token"].assert_called_once_with(
            "http://testserver/user/login/twitter/callback/"
        )
        self.assertEqual(
            self.client.session["signon_twitter"]["oauth_token"], "request"
        )
        self.assertIn("no-cache", response["Cache-Control"])

    def test_begin_register(self) -> None:
        """Registration uses its own callback."""
        with self.mock_oauth() as mocks:
            self.client.get("/user/register/twitter/")
        mocks["get_request_token"].assert_called_once_with(
            "http://testserver/user/register/twitter/callback/"
        )

    def test_begin_failed(self) -> None:
        """Twitter does not give a request token."""
        with self.mock_oauth(get_request_token=OAuthClientError("refused")):
            response = self.client.get("/user/register/twitter/")
        self.assertRedirectMessages(
            response,
            "/user/register/",
            ["Could not connect to Twitter. Try again later."],
        )

    def test_login_callback(self) -> None:
        """A linked account is logged in."""
        user = self.make_user("jdoe")
        self.make_identity(user=user, subject="123")
        self.set_request_token()
        with self.mock_oauth() as mocks:
            response = self.client.get(
                "/user/login/twitter/callback/",
                {"oauth_token": "request", "oauth_verifier": "verifier"},
            )
        self.assertRedirectMessages(response, "/", [])
        mocks["exchange_token"].assert_called_once_with(
            REQUEST_TOKEN, "verifier"
        )
        mocks["fetch_profile"].assert_called_once_with(ACCESS_TOKEN)
        self.assertLoggedInAs("jdoe")

        # The request token cannot be used again
        with self.mock_oauth() as mocks:
            response = self.client.get(
                "/user/login/twitter/callback/", {"oauth_verifier": "verifier"}
            )
        self.assertRedirectMessages(
            response, "/login/", ["Twitter login failed. Token is not valid."]
        )
        mocks["exchange_token"].assert_not_called()

    def test_login_callback_no_token(self) -> None:
        """A callback without a request token in session fails."""
        with self.mock_oauth() as mocks:
            response = self.client.get(
                "/user/login/twitter/callback/", {"oauth_verifier": "verifier"}
            )
        self.assertRedirectMessages(
            response, "/login/", ["Twitter login failed. Token is not valid."]
        )
        mocks["exchange_token"].assert_not_called()
        mocks["fetch_profile"].assert_not_called()

    def test_login_callback_no_profile(self) -> None:
        """Twitter does not return the profile."""
        self.set_request_token()
        with self.mock_oauth(profile=None):
            response = self.client.get(
                "/user/login/twitter/callback/", {"oauth_verifier": "verifier"}
            )
        self.assertRedirectMessages(
            response,
            "/login/",
            [
                "Twitter login failed, could not load Twitter profile."
                " Contact the site administrator."
            ],
        )
        self.assertLoggedInAs(None)

    def test_login_callback_blocked(self) -> None:
        """A blocked account is not logged in."""
        user = self.make_user("jdoe", is_active=False)
        self.make_identity(user=user, subject="123")
        self.set_request_token()
        with self.mock_oauth():
            response = self.client.get(
                "/user/login/twitter/callback/", {"oauth_verifier": "verifier"}
            )
        self.assertRedirectMessages(
            response,
            "/login/",
            ["Your account is blocked. Contact the site administrator."],
        )
        self.assertLoggedInAs(None)

    def test_login_callback_no_account(self) -> None:
        """Without a linked account, the user is told how to register."""
        self.set_request_token()
        with self.mock_oauth():
            response = self.client.get(
                "/user/login/twitter/callback/", {"oauth_verifier": "verifier"}
            )
        self.assertRedirectMessages(
            response, "/user/login/twitter/notice/", []
        )
        self.assertLoggedInAs(None)

        response = self.client.get("/user/login/twitter/notice/")
        self.assertContains(response, "linked to your Twitter")
        self.assertContains(response, 'href="/user/register/twitter/"')

    def test_register_callback(self) -> None:
        """A linked account is logged in and sent to its page."""
        user = self.make_user("jdoe")
        self.make_identity(user=user, subject="123")
        self.set_request_token()
        with self.mock_oauth():
            response = self.client.get(
                "/user/register/twitter/callback/",
                {"oauth_verifier": "verifier"},
            )
        self.assertRedirectMessages(response, "/user/jdoe/", [])
        self.assertLoggedInAs("jdoe")

    def test_register_callback_blocked(self) -> None:
        """A blocked account is not logged in."""
        user = self.make_user("jdoe", is_active=False)
        self.make_identity(user=user, subject="123")
        self.set_request_token()
        with self.mock_oauth():
            response = self.client.get(
                "/user/register/twitter/callback/",
                {"oauth_verifier": "verifier"},
            )
        self.assertRedirectMessages(
            response,
            "/user/register/",
            [
                "You already have account on this site, but your account is"
                " blocked. Contact the site administrator."
            ],
        )
        self.assertLoggedInAs(None)

    def test_register_callback_no_account(self) -> None:
        """Without a linked account, the registration continues."""
        self.set_request_token()
        with self.mock_oauth():
            response = self.client.get(
                "/user/register/twitter/callback/",
                {"oauth_verifier": "verifier"},
            )
        self.assertRedirectMessages(
            response,
            "/user/register/?provider=twitter",
            [
                "You are now connected with Twitter,"
                " please continue registration"
            ],
        )
        self.assertEqual(
            self.client.session["signon_twitter"],
            {
                "oauth_token": None,
                "oauth_token_secret": None,
                "access_token": {
                    "token": "access",
                    "token_secret": "access-secret",
                },
                "mail": None,
                "name": "jdoe",
            },
        )
        self.assertLoggedInAs(None)

    def test_logout(self) -> None:
        """Logging out forgets the signon state."""
        self.client.force_login(self.make_user("jdoe"))
        self.set_request_token()
        response = self.client.post("/logout/")
        self.assertEqual(response.status_code, 200)
        self.assertNotIn("signon_twitter", self.client.session)
        self.assertLoggedInAs(None)


class SignalResponseTests(TestCase):
    """Test turning a RedirectSignal into a response."""

    def test_notice(self) -> None:
        """The notice is queued as a message."""
        request = self.make_request()
        response = signal_response(
            request,
            RedirectSignal(
                "user:register",
                query={"provider": "twitter"},
                notice=Notice(messages.INFO, "Continue registration"),
            ),
        )
        self.assertEqual(response.status_code, 302)
        self.assertEqual(
            response["Location"], "/user/register/?provider=twitter"
        )
        self.assertMessages(request, ["Continue registration"])

    def test_no_notice(self) -> None:
        """Signals without notice only redirect."""
        request = self.make_request()
        response = signal_response(request, RedirectSignal("login"))
        self.assertEqual(response["Location"], "/login/")
        self.assertMessages(request, [])
