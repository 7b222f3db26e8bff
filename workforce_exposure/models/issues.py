"""
Structured records of data the aggregations skipped or repaired.

Unresolved references are not errors: the computation continues without
the offending entity. These records let calling layers decide whether to
warn, instead of the information living only in logs.
"""

from enum import Enum
from typing import Optional

from workforce_exposure.models.base import CamelModel


class IssueKind(str, Enum):
    """What kind of repair or skip happened."""
    UNRESOLVED_ROLE = "unresolved_role"        # role reference not found in the report
    ROLE_WITHOUT_TASKS = "role_without_tasks"  # role resolved but has no task mix
    ORPHAN_PARENT = "orphan_parent"            # parent id missing, node promoted to root
    PARENT_CYCLE = "parent_cycle"              # node in a parent cycle, promoted to root
    DUPLICATE_NODE = "duplicate_node"          # repeated node id, later copy ignored
    UNCATALOGED_ROLE = "uncataloged_role"      # role has no catalog entry for task ranking


class ResolutionIssue(CamelModel):
    """
    One skipped or repaired item.

    Attributes:
        kind: Issue category
        reference: The id or key that could not be used as given
        context: Where it was found (node id, company id, ...)
        reason: Short human-readable explanation
    """
    kind: IssueKind
    reference: str
    context: Optional[str] = None
    reason: Optional[str] = None
