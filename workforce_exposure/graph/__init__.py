"""Org graph: tree view and bottom-up rollup over a report hierarchy."""

from workforce_exposure.graph.org_graph import (
    NodeAggregate,
    OrgGraph,
    OrgGraphNode,
    build_org_graph,
    build_role_lookup,
    collect_descendants,
    get_children,
    get_root_nodes,
    resolve_node_roles,
    role_keys,
)

__all__ = [
    "NodeAggregate",
    "OrgGraph",
    "OrgGraphNode",
    "build_org_graph",
    "build_role_lookup",
    "collect_descendants",
    "get_children",
    "get_root_nodes",
    "resolve_node_roles",
    "role_keys",
]
