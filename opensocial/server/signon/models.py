# Copyright © The opensocial Developers
# See the AUTHORS file at the top-level directory of this distribution
#
# This file is part of opensocial. It is subject to the license terms
# in the LICENSE file found in the top-level directory of this
# distribution. No part of opensocial, including this file, may be copied,
# modified, propagated, or distributed except according to the terms
# contained in the LICENSE file.

"""Data exchanged with external signon providers."""

import enum

import pydantic


class ErrorKind(enum.StrEnum):
    """Reasons for a failed signon."""

    #: The request token pair is missing, expired or was refused
    INVALID_TOKEN = "invalid-token"
    #: The provider did not return a usable profile
    PROFILE_FETCH_FAILED = "profile-fetch-failed"
    #: The local account matching the remote profile is disabled
    ACCOUNT_BLOCKED = "account-blocked"
    #: The provider did not hand out a request token
    REQUEST_TOKEN_FAILED = "request-token-failed"


class Flow(enum.StrEnum):
    """Kind of signon flow the user started."""

    LOGIN = "login"
    REGISTER = "register"


class TokenPair(pydantic.BaseModel):
    """OAuth 1.0a credentials: a token and its secret."""

    model_config = pydantic.ConfigDict(frozen=True)

    token: str
    token_secret: str


class RemoteProfile(pydantic.BaseModel):
    """User profile returned by the provider."""

    model_config = pydantic.ConfigDict(frozen=True)

    #: Stable identifier of the user in the provider
    id: str
    #: Login name of the user in the provider
    name: str
    email: str | None = None


class PendingRegistration(pydantic.BaseModel):
    """Profile information staged to prefill the registration form."""

    access_token: TokenPair
    mail: str | None = None
    name: str


class PendingAuthState(pydantic.BaseModel):
    """
    Signon state kept in the session between requests.

    There is one of these for each provider.
    """

    oauth_token: str | None = None
    oauth_token_secret: str | None = None
    access_token: TokenPair | None = None
    mail: str | None = None
    name: str | None = None

    def pending_registration(self) -> PendingRegistration | None:
        """Return the staged registration data, if any."""
        if self.access_token is None or self.name is None:
            return None
        return PendingRegistration(
            access_token=self.access_token, mail=self.mail, name=self.name
        )
