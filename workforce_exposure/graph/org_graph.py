"""
Org Graph Builder.

Builds a read-only tree view over a report's flat hierarchy and rolls
headcount and exposure shares up from the leaves:

    leaf -> team -> department -> ... -> root

Rules:
- weight(node) = node headcount, or 1 when unknown
- aggregate headcount = own headcount + children's known aggregates
  (None when nothing in the subtree reports one)
- aggregate shares = weighted mean over the node and every descendant
  that declares a share (None without samples)

Broken structure never raises. Unknown parents, parent cycles and repeated
node ids are repaired (promoted to root or ignored) and recorded as
ResolutionIssue entries on the graph.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from workforce_exposure.models import IssueKind, OrgNode, OrgReport, OrgRole, ResolutionIssue

logger = logging.getLogger(__name__)

_VISITING = 1
_DONE = 2


@dataclass(frozen=True)
class NodeAggregate:
    """Rolled-up metrics for a node's subtree (node included)."""
    headcount: Optional[int] = None
    automation_share: Optional[float] = None
    augmentation_share: Optional[float] = None
    descendant_count: int = 0


@dataclass
class OrgGraphNode:
    """
    A hierarchy node placed in the tree.

    Attributes:
        id: Node id
        data: The report node as given
        children: Child ids, sorted by headcount desc then name
        parent_id: Effective parent (None for roots, including promoted ones)
        roles: Resolved dominant roles carrying per-node headcount
        aggregate: Subtree rollup
    """
    id: str
    data: OrgNode
    children: List[str] = field(default_factory=list)
    parent_id: Optional[str] = None
    roles: List[OrgRole] = field(default_factory=list)
    aggregate: NodeAggregate = field(default_factory=NodeAggregate)


@dataclass
class OrgGraph:
    """Tree view over one report."""
    nodes: Dict[str, OrgGraphNode] = field(default_factory=dict)
    roots: List[str] = field(default_factory=list)
    roles_by_key: Dict[str, OrgRole] = field(default_factory=dict)
    issues: List[ResolutionIssue] = field(default_factory=list)


@dataclass
class _Rollup:
    headcount: Optional[int] = None
    automation_sum: float = 0.0
    automation_weight: float = 0.0
    augmentation_sum: float = 0.0
    augmentation_weight: float = 0.0
    descendant_count: int = 0

    def to_aggregate(self) -> NodeAggregate:
        return NodeAggregate(
            headcount=self.headcount,
            automation_share=(
                self.automation_sum / self.automation_weight if self.automation_weight > 0 else None
            ),
            augmentation_share=(
                self.augmentation_sum / self.augmentation_weight if self.augmentation_weight > 0 else None
            ),
            descendant_count=self.descendant_count,
        )


# =============================================================================
# Role resolution
# =============================================================================

def role_keys(role: OrgRole) -> List[str]:
    """Lookup keys for a role in priority order: code, normalised title, title."""
    keys = []
    for value in (role.code, role.normalized_title, role.title):
        key = (value or "").strip().lower()
        if key:
            keys.append(key)
    return keys


def build_role_lookup(roles: List[OrgRole]) -> Dict[str, OrgRole]:
    """Index roles by every key; the first role claiming a key keeps it."""
    lookup: Dict[str, OrgRole] = {}
    for role in roles or []:
        for key in role_keys(role):
            lookup.setdefault(key, role)
    return lookup


def _role_sort_key(role: OrgRole):
    headcount = role.headcount if role.headcount is not None else -1
    return (-headcount, (role.title or "").casefold())


def resolve_node_roles(node: OrgNode, lookup: Dict[str, OrgRole],
                       issues: Optional[List[ResolutionIssue]] = None) -> List[OrgRole]:
    """
    Resolve a node's dominant-role references against the role lookup.

    Each resolved role is a copy carrying the entry's headcount (else the
    role's own). When none of them has a positive headcount the node's
    headcount is split equally, the last role taking the remainder. The
    split never hands out more than the node headcount.
    """
    resolved: List[OrgRole] = []
    seen = set()

    for entry in node.dominant_roles:
        key = entry.key
        if not key or key in seen:
            continue
        seen.add(key)

        role = lookup.get(key)
        if role is None:
            logger.warning(f"Node {node.id}: role reference '{entry.role_id}' not found, skipping")
            if issues is not None:
                issues.append(ResolutionIssue(
                    kind=IssueKind.UNRESOLVED_ROLE,
                    reference=entry.role_id,
                    context=node.id,
                    reason="role reference not found in report roles",
                ))
            continue

        headcount = entry.headcount if entry.headcount is not None else role.headcount
        resolved.append(role.model_copy(update={"headcount": headcount}))

    has_headcount = any(role.headcount is not None and role.headcount > 0 for role in resolved)
    if resolved and not has_headcount and node.headcount is not None and node.headcount > 0:
        equal_share = max(1, node.headcount // len(resolved))
        remaining = node.headcount
        split = []
        for index, role in enumerate(resolved):
            if index == len(resolved) - 1:
                headcount = max(0, remaining)
            else:
                headcount = min(equal_share, remaining)
                remaining -= headcount
            split.append(role.model_copy(update={"headcount": headcount}))
        resolved = split

    return sorted(resolved, key=_role_sort_key)


# =============================================================================
# Structure
# =============================================================================

def _node_sort_key(node: OrgNode):
    return (
        node.headcount is None,
        -(node.headcount or 0),
        node.name.casefold(),
        node.id,
    )


def _dedupe_nodes(hierarchy: List[OrgNode], issues: List[ResolutionIssue]) -> Dict[str, OrgNode]:
    nodes: Dict[str, OrgNode] = {}
    for node in hierarchy:
        if node.id in nodes:
            logger.warning(f"Duplicate node id '{node.id}', keeping the first occurrence")
            issues.append(ResolutionIssue(
                kind=IssueKind.DUPLICATE_NODE,
                reference=node.id,
                context=node.name,
                reason="node id already used, later copy ignored",
            ))
            continue
        nodes[node.id] = node
    return nodes


def _resolve_parents(nodes: Dict[str, OrgNode], issues: List[ResolutionIssue]) -> Dict[str, Optional[str]]:
    """Effective parent per node: unknown parents and cycle members become roots."""
    parent_of: Dict[str, Optional[str]] = {}
    for node_id, node in nodes.items():
        parent_id = node.parent_id
        if parent_id is not None and parent_id not in nodes:
            logger.warning(f"Node {node_id}: parent '{parent_id}' not found, promoting to root")
            issues.append(ResolutionIssue(
                kind=IssueKind.ORPHAN_PARENT,
                reference=parent_id,
                context=node_id,
                reason="parent id not found, node promoted to root",
            ))
            parent_id = None
        parent_of[node_id] = parent_id

    # Each node has one parent, so every connected component holds at most
    # one cycle; breaking it at its earliest node is enough.
    position = {node_id: index for index, node_id in enumerate(nodes)}
    state: Dict[str, int] = {}
    for start in nodes:
        if start in state:
            continue
        path = []
        current = start
        while current is not None and current not in state:
            state[current] = _VISITING
            path.append(current)
            current = parent_of[current]

        if current is not None and state[current] == _VISITING:
            cycle = path[path.index(current):]
            promoted = min(cycle, key=position.__getitem__)
            logger.warning(f"Node {promoted}: parent cycle through {len(cycle)} node(s), promoting to root")
            issues.append(ResolutionIssue(
                kind=IssueKind.PARENT_CYCLE,
                reference=parent_of[promoted] or promoted,
                context=promoted,
                reason=f"parent cycle of {len(cycle)} node(s), node promoted to root",
            ))
            parent_of[promoted] = None

        for node_id in path:
            state[node_id] = _DONE

    return parent_of


def _rollup(nodes: Dict[str, OrgNode], children: Dict[str, List[str]],
            roots: List[str]) -> Dict[str, NodeAggregate]:
    """Single iterative post-order pass over the forest."""
    memo: Dict[str, _Rollup] = {}

    for root in roots:
        stack = [(root, False)]
        while stack:
            node_id, expanded = stack.pop()
            if not expanded:
                stack.append((node_id, True))
                for child_id in children[node_id]:
                    stack.append((child_id, False))
                continue

            node = nodes[node_id]
            rollup = _Rollup(headcount=node.headcount)
            weight = node.headcount if node.headcount is not None else 1

            if node.automation_share is not None:
                rollup.automation_sum += node.automation_share * weight
                rollup.automation_weight += weight
            if node.augmentation_share is not None:
                rollup.augmentation_sum += node.augmentation_share * weight
                rollup.augmentation_weight += weight

            for child_id in children[node_id]:
                child = memo[child_id]
                if child.headcount is not None:
                    rollup.headcount = (rollup.headcount or 0) + child.headcount
                rollup.automation_sum += child.automation_sum
                rollup.automation_weight += child.automation_weight
                rollup.augmentation_sum += child.augmentation_sum
                rollup.augmentation_weight += child.augmentation_weight
                rollup.descendant_count += 1 + child.descendant_count

            memo[node_id] = rollup

    return {node_id: rollup.to_aggregate() for node_id, rollup in memo.items()}


def build_org_graph(report: OrgReport) -> OrgGraph:
    """
    Build the tree view and subtree aggregates for a report.

    Args:
        report: Company report

    Returns:
        OrgGraph with nodes keyed by id, sorted roots and any issues found
    """
    issues: List[ResolutionIssue] = []
    nodes = _dedupe_nodes(report.hierarchy, issues)
    parent_of = _resolve_parents(nodes, issues)

    children: Dict[str, List[str]] = {node_id: [] for node_id in nodes}
    roots: List[str] = []
    for node_id, parent_id in parent_of.items():
        if parent_id is None:
            roots.append(node_id)
        else:
            children[parent_id].append(node_id)

    def sort_ids(ids: List[str]) -> List[str]:
        return sorted(ids, key=lambda node_id: _node_sort_key(nodes[node_id]))

    children = {node_id: sort_ids(child_ids) for node_id, child_ids in children.items()}
    roots = sort_ids(roots)

    lookup = build_role_lookup(report.roles)
    aggregates = _rollup(nodes, children, roots)

    graph_nodes: Dict[str, OrgGraphNode] = {}
    for node_id, node in nodes.items():
        graph_nodes[node_id] = OrgGraphNode(
            id=node_id,
            data=node,
            children=children[node_id],
            parent_id=parent_of[node_id],
            roles=resolve_node_roles(node, lookup, issues),
            aggregate=aggregates[node_id],
        )

    logger.debug(f"Built org graph: {len(graph_nodes)} nodes, {len(roots)} roots, {len(issues)} issues")
    return OrgGraph(nodes=graph_nodes, roots=roots, roles_by_key=lookup, issues=issues)


# =============================================================================
# Traversal helpers
# =============================================================================

def collect_descendants(graph: OrgGraph, node_id: str) -> List[OrgGraphNode]:
    """The node and every node below it, depth first. Empty for an unknown id."""
    stack = [node_id]
    visited: List[OrgGraphNode] = []
    while stack:
        node = graph.nodes.get(stack.pop())
        if node is None:
            continue
        visited.append(node)
        stack.extend(node.children)
    return visited


def get_root_nodes(graph: OrgGraph) -> List[OrgGraphNode]:
    return [graph.nodes[root_id] for root_id in graph.roots if root_id in graph.nodes]


def get_children(graph: OrgGraph, node_id: str) -> List[OrgGraphNode]:
    node = graph.nodes.get(node_id)
    if node is None:
        return []
    return [graph.nodes[child_id] for child_id in node.children if child_id in graph.nodes]
