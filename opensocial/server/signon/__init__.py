# Copyright 2020-2023 Enrico Zini <enrico@debian.org>
# Copyright © The opensocial Developers
# See the AUTHORS file at the top-level directory of this distribution
#
# This file is part of opensocial. It is subject to the license terms
# in the LICENSE file found in the top-level directory of this
# distribution. No part of opensocial, including this file, may be copied,
# modified, propagated, or distributed except according to the terms
# contained in the LICENSE file.

"""Signon with external providers."""

# Code in this module is almost a standalone library: it only depends on the
# Identity model and on the URL names of the login and registration pages.
#
# Provider definitions are imported from settings.py, so importing this
# package must not pull in Django models.
