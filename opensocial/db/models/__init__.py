# Copyright © The opensocial Developers
# See the AUTHORS file at the top-level directory of this distribution
#
# This file is part of opensocial. It is subject to the license terms
# in the LICENSE file found in the top-level directory of this
# distribution. No part of opensocial, including this file, may be copied,
# modified, propagated, or distributed except according to the terms
# contained in the LICENSE file.

"""Data models for the db application."""

from opensocial.db.models.auth import Identity, IdentityQuerySet
from opensocial.db.models.groups import Group, GroupContent, Node

__all__ = [
    "Group",
    "GroupContent",
    "Identity",
    "IdentityQuerySet",
    "Node",
]
