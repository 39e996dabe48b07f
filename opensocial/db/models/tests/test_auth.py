# Copyright © The opensocial Developers
# See the AUTHORS file at the top-level directory of this distribution
#
# This file is part of opensocial. It is subject to the license terms
# in the LICENSE file found in the top-level directory of this
# distribution. No part of opensocial, including this file, may be copied,
# modified, propagated, or distributed except according to the terms
# contained in the LICENSE file.

"""Tests for the authentication models."""

from django.db import IntegrityError, transaction

from opensocial.db.models import Identity
from opensocial.test.django import TestCase


class IdentityTests(TestCase):
    """Tests for the Identity class."""

    def test_str(self) -> None:
        """Stringification should show the unique key."""
        ident = Identity(issuer="twitter", subject="123456789")
        self.assertEqual(str(ident), "twitter:123456789")

    def test_unique_issuer_subject(self) -> None:
        """A remote account can only have one identity."""
        self.make_identity(issuer="twitter", subject="123")
        with transaction.atomic(), self.assertRaises(IntegrityError):
            self.make_identity(issuer="twitter", subject="123")
        # The same subject in another issuer is a different account
        self.make_identity(issuer="mastodon", subject="123")

    def test_for_issuer(self) -> None:
        """Identities can be filtered by issuer."""
        twitter = self.make_identity(issuer="twitter", subject="123")
        self.make_identity(issuer="mastodon", subject="123")
        self.assertQuerySetEqual(
            Identity.objects.for_issuer("twitter"), [twitter]
        )

    def test_bound(self) -> None:
        """Identities can be filtered by having a user."""
        bound = self.make_identity(user=self.make_user(), subject="123")
        self.make_identity(subject="456")
        self.assertQuerySetEqual(Identity.objects.bound(), [bound])

    def test_user_deleted(self) -> None:
        """Deleting a user unbinds its identities."""
        user = self.make_user()
        identity = self.make_identity(user=user)
        user.delete()
        identity.refresh_from_db()
        self.assertIsNone(identity.user)
