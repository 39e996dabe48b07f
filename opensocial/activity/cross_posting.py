# Copyright © The opensocial Developers
# See the AUTHORS file at the top-level directory of this distribution
#
# This file is part of opensocial. It is subject to the license terms
# in the LICENSE file found in the top-level directory of this
# distribution. No part of opensocial, including this file, may be copied,
# modified, propagated, or distributed except according to the terms
# contained in the LICENSE file.

"""Information about content shared in more than one group."""

import logging

from django.db.models import QuerySet

from opensocial.db.models import Group, GroupContent

log = logging.getLogger("opensocial.activity")


class CrossPostingService:
    """Answer questions about nodes cross-posted to several groups."""

    def groups_for_node(self, group_content: GroupContent) -> QuerySet[Group]:
        """Return the groups the node of group_content is shared in."""
        return Group.objects.filter(
            contents__node_id=group_content.node_id
        ).distinct()

    def node_exists_in_multiple_groups(
        self, group_content: GroupContent
    ) -> bool:
        """Check if the node of group_content is shared in 2 or more groups."""
        count = self.groups_for_node(group_content).count()
        log.debug(
            "node %s is shared in %d groups", group_content.node_id, count
        )
        return count > 1
