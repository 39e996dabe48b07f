# Copyright © The opensocial Developers
# See the AUTHORS file at the top-level directory of this distribution
#
# This file is part of opensocial. It is subject to the license terms
# in the LICENSE file found in the top-level directory of this
# distribution. No part of opensocial, including this file, may be copied,
# modified, propagated, or distributed except according to the terms
# contained in the LICENSE file.

"""
Conditions deciding whether an entity creates activity stream items.

Each condition declares the kinds of entities it applies to, and is looked up
by its identifier in :py:data:`CONDITIONS`::

    if is_valid_condition("group_content_node_single_group", group_content):
        ...

An entity of a kind not declared by the condition never satisfies it.
"""

import abc
import enum
from typing import Any, ClassVar

from django.db.models import Model

from opensocial.activity.cross_posting import CrossPostingService
from opensocial.db.models import Group, GroupContent, Node


class EntityKind(enum.StrEnum):
    """Kinds of entities that can generate activities."""

    GROUP = "group"
    GROUP_CONTENT = "group_content"
    NODE = "node"


#: Entity kind of each model class
ENTITY_KINDS: dict[type[Model], EntityKind] = {
    Group: EntityKind.GROUP,
    GroupContent: EntityKind.GROUP_CONTENT,
    Node: EntityKind.NODE,
}


def entity_kind(entity: Any) -> EntityKind | None:
    """Return the kind of entity, or None if it cannot generate activities."""
    return ENTITY_KINDS.get(type(entity))


class UnknownCondition(KeyError):
    """Exception raised when looking up an undefined condition."""


class ActivityEntityCondition(abc.ABC):
    """Base class for activity entity conditions."""

    #: Identifier of the condition
    condition_id: ClassVar[str]
    #: User-visible description
    label: ClassVar[str]
    #: Kinds of entities the condition applies to
    entity_kinds: ClassVar[frozenset[EntityKind]]

    def is_valid_condition(self, entity: Any) -> bool:
        """Check the condition, if it applies to entities of this kind."""
        if entity_kind(entity) not in self.entity_kinds:
            return False
        return self.is_valid_entity_condition(entity)

    @abc.abstractmethod
    def is_valid_entity_condition(self, entity: Any) -> bool:
        """Check the condition on an entity of one of entity_kinds."""


class GroupContentSingleActivityEntityCondition(ActivityEntityCondition):
    """The node of a group content exists only in one group."""

    condition_id = "group_content_node_single_group"
    label = "Node exists in single group"
    entity_kinds = frozenset({EntityKind.GROUP_CONTENT})

    def __init__(
        self, cross_posting_service: CrossPostingService | None = None
    ) -> None:
        """Use the given cross-posting service."""
        self.cross_posting_service = (
            cross_posting_service or CrossPostingService()
        )

    def is_valid_entity_condition(self, entity: GroupContent) -> bool:
        """Check that the node is not shared in other groups."""
        return not self.cross_posting_service.node_exists_in_multiple_groups(
            entity
        )


class GroupContentMultipleActivityEntityCondition(
    GroupContentSingleActivityEntityCondition
):
    """The node of a group content exists in more than one group."""

    condition_id = "group_content_node_multiple_groups"
    label = "Node exists in multiple groups"

    def is_valid_entity_condition(self, entity: GroupContent) -> bool:
        """Check that the node is shared in other groups."""
        return self.cross_posting_service.node_exists_in_multiple_groups(
            entity
        )


#: Available conditions, by identifier
CONDITIONS: dict[str, type[ActivityEntityCondition]] = {
    cls.condition_id: cls
    for cls in (
        GroupContentSingleActivityEntityCondition,
        GroupContentMultipleActivityEntityCondition,
    )
}


def get_condition(condition_id: str, **kwargs: Any) -> ActivityEntityCondition:
    """
    Instantiate a condition by identifier.

    :param kwargs: passed to the condition constructor
    :raises UnknownCondition: if no condition has that identifier
    """
    try:
        condition_class = CONDITIONS[condition_id]
    except KeyError:
        raise UnknownCondition(condition_id)
    return condition_class(**kwargs)


def is_valid_condition(condition_id: str, entity: Any, **kwargs: Any) -> bool:
    """Check a condition on an entity."""
    return get_condition(condition_id, **kwargs).is_valid_condition(entity)
