# Copyright © The opensocial Developers
# See the AUTHORS file at the top-level directory of this distribution
#
# This file is part of opensocial. It is subject to the license terms
# in the LICENSE file found in the top-level directory of this
# distribution. No part of opensocial, including this file, may be copied,
# modified, propagated, or distributed except according to the terms
# contained in the LICENSE file.

"""Forms for the opensocial web interface."""

from django import forms
from django.contrib.auth import get_user_model
from django.contrib.auth.forms import UserCreationForm
from django.utils.translation import gettext as _

#: Usernames whose user page would be shadowed by other pages under /user/
RESERVED_USERNAMES = frozenset({"login", "register"})


class RegistrationForm(UserCreationForm):  # type: ignore[type-arg]
    """Form to register a new local account."""

    email = forms.EmailField(
        required=False,
        help_text="Optional. Used to contact you about your account.",
    )

    class Meta(UserCreationForm.Meta):
        model = get_user_model()
        fields = ("username", "email")

    def clean_username(self) -> str:
        """Refuse usernames reserved for other pages."""
        username = super().clean_username()
        assert isinstance(username, str)
        if username.lower() in RESERVED_USERNAMES:
            raise forms.ValidationError(
                _("This username is reserved."), code="reserved"
            )
        return username
