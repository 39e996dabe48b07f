# Copyright © The opensocial Developers
# See the AUTHORS file at the top-level directory of this distribution
#
# This file is part of opensocial. It is subject to the license terms
# in the LICENSE file found in the top-level directory of this
# distribution. No part of opensocial, including this file, may be copied,
# modified, propagated, or distributed except according to the terms
# contained in the LICENSE file.

"""Database models for groups and the content shared in them."""

from typing import TYPE_CHECKING

from django.conf import settings
from django.db import models
from django.db.models import UniqueConstraint

if TYPE_CHECKING:
    from django_stubs_ext.db.models import TypedModelMeta
else:
    TypedModelMeta = object


class Group(models.Model):
    """A group of users sharing content."""

    name = models.CharField(max_length=255, unique=True)
    members = models.ManyToManyField(
        settings.AUTH_USER_MODEL, related_name="social_groups", blank=True
    )

    def __str__(self) -> str:
        """Return str for the object."""
        return self.name


class Node(models.Model):
    """A piece of content, such as a topic or an event."""

    title = models.CharField(max_length=255)
    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        related_name="nodes",
        null=True,
        on_delete=models.SET_NULL,
    )
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self) -> str:
        """Return str for the object."""
        return self.title


class GroupContent(models.Model):
    """
    Association of a node with a group it has been shared in.

    A node can be cross-posted to several groups, with one GroupContent for
    each of them.
    """

    class Meta(TypedModelMeta):
        constraints = [
            UniqueConstraint(
                fields=["group", "node"],
                name="%(app_label)s_%(class)s_unique_group_node",
            ),
        ]

    group = models.ForeignKey(
        Group, related_name="contents", on_delete=models.CASCADE
    )
    node = models.ForeignKey(
        Node, related_name="group_contents", on_delete=models.CASCADE
    )
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self) -> str:
        """Return str for the object."""
        return f"{self.group}:{self.node}"
