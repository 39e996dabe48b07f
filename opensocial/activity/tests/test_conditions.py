# Copyright © The opensocial Developers
# See the AUTHORS file at the top-level directory of this distribution
#
# This file is part of opensocial. It is subject to the license terms
# in the LICENSE file found in the top-level directory of this
# distribution. No part of opensocial, including this file, may be copied,
# modified, propagated, or distributed except according to the terms
# contained in the LICENSE file.

"""Tests for activity entity conditions."""

from unittest import mock

from opensocial.activity.conditions import (
    CONDITIONS,
    EntityKind,
    GroupContentMultipleActivityEntityCondition,
    GroupContentSingleActivityEntityCondition,
    UnknownCondition,
    entity_kind,
    get_condition,
    is_valid_condition,
)
from opensocial.activity.cross_posting import CrossPostingService
from opensocial.db.models import Group
from opensocial.test.django import TestCase


class EntityKindTests(TestCase):
    """Test mapping entities to their kind."""

    def test_entity_kind(self) -> None:
        """Each model has its kind."""
        node = self.make_node()
        (content,) = self.share(node, "Hikers")
        self.assertEqual(entity_kind(node), EntityKind.NODE)
        self.assertEqual(entity_kind(content), EntityKind.GROUP_CONTENT)
        self.assertEqual(entity_kind(content.group), EntityKind.GROUP)
        self.assertIsNone(entity_kind(self.make_user()))
        self.assertIsNone(entity_kind("node"))


class ConditionLookupTests(TestCase):
    """Test looking up conditions by identifier."""

    def test_conditions(self) -> None:
        """All conditions are registered under their identifier."""
        self.assertEqual(
            CONDITIONS,
            {
                "group_content_node_single_group": (
                    GroupContentSingleActivityEntityCondition
                ),
                "group_content_node_multiple_groups": (
                    GroupContentMultipleActivityEntityCondition
                ),
            },
        )

    def test_get_condition(self) -> None:
        """Conditions are instantiated with the given arguments."""
        service = CrossPostingService()
        condition = get_condition(
            "group_content_node_single_group", cross_posting_service=service
        )
        assert isinstance(condition, GroupContentSingleActivityEntityCondition)
        self.assertIs(condition.cross_posting_service, service)

    def test_unknown(self) -> None:
        """Unknown identifiers raise UnknownCondition."""
        with self.assertRaises(UnknownCondition) as exc:
            get_condition("does_not_exist")
        self.assertIsInstance(exc.exception, KeyError)
        with self.assertRaises(UnknownCondition):
            is_valid_condition("does_not_exist", self.make_node())


class GroupContentConditionTests(TestCase):
    """Test the conditions on cross-posted group content."""

    def test_single_group(self) -> None:
        """Content shared only in one group."""
        (content,) = self.share(self.make_node(), "Hikers")
        self.assertTrue(
            is_valid_condition("group_content_node_single_group", content)
        )
        self.assertFalse(
            is_valid_condition("group_content_node_multiple_groups", content)
        )

    def test_multiple_groups(self) -> None:
        """Content cross-posted in more groups."""
        content, _ = self.share(self.make_node(), "Hikers", "Climbers")
        self.assertFalse(
            is_valid_condition("group_content_node_single_group", content)
        )
        self.assertTrue(
            is_valid_condition("group_content_node_multiple_groups", content)
        )

    def test_other_entity_kinds(self) -> None:
        """Entities that are not group content never match."""
        node = self.make_node()
        self.share(node, "Hikers")
        for entity in (node, Group.objects.get(name="Hikers"), None):
            for condition_id in CONDITIONS:
                with self.subTest(entity=entity, condition=condition_id):
                    self.assertFalse(is_valid_condition(condition_id, entity))

    def test_other_entity_kinds_skip_lookup(self) -> None:
        """The cross-posting service is not queried for other kinds."""
        service = mock.Mock(spec=CrossPostingService)
        condition = GroupContentSingleActivityEntityCondition(service)
        self.assertFalse(condition.is_valid_condition(self.make_node()))
        service.node_exists_in_multiple_groups.assert_not_called()

    def test_service(self) -> None:
        """The condition answers with the cross-posting service."""
        (content,) = self.share(self.make_node(), "Hikers")
        service = mock.Mock(spec=CrossPostingService)
        for shared, single, multiple in (
            (True, False, True),
            (False, True, False),
        ):
            with self.subTest(shared=shared):
                service.node_exists_in_multiple_groups.return_value = shared
                self.assertEqual(
                    GroupContentSingleActivityEntityCondition(
                        service
                    ).is_valid_condition(content),
                    single,
                )
                self.assertEqual(
                    GroupContentMultipleActivityEntityCondition(
                        service
                    ).is_valid_condition(content),
                    multiple,
                )
        service.node_exists_in_multiple_groups.assert_called_with(content)
