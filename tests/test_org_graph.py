"""
Org Graph Builder Tests.

Tests for:
- Subtree rollup of headcount and shares
- Sibling ordering and structural repairs (orphans, cycles, duplicates)
- Dominant-role resolution on nodes
- Traversal helpers

Run with:
    pytest tests/test_org_graph.py -v
"""

import random

import pytest

from workforce_exposure.graph import (
    build_org_graph,
    build_role_lookup,
    collect_descendants,
    get_children,
    get_root_nodes,
)
from workforce_exposure.models import IssueKind, OrgNode, OrgReport, OrgRole


def make_report(nodes, roles=None):
    return OrgReport(hierarchy=[OrgNode(**node) for node in nodes], roles=roles or [])


def reachable_count(graph, node_id):
    return len(collect_descendants(graph, node_id)) - 1


# ============================================================================
# Aggregation Tests
# ============================================================================

class TestAggregation:
    """Tests for the bottom-up rollup."""

    def test_chain_share_comes_only_from_declaring_node(self):
        """Root share is the weighted mean over the only node that declares one."""
        report = make_report([
            {"id": "root", "name": "Root", "headcount": 100},
            {"id": "mid", "name": "Mid", "parent_id": "root", "headcount": 40},
            {"id": "leaf", "name": "Leaf", "parent_id": "mid", "headcount": 10, "automation_share": 0.5},
        ])

        graph = build_org_graph(report)
        root = graph.nodes["root"].aggregate

        # (0.5 * 10) / 10
        assert root.automation_share == pytest.approx(0.5)
        assert root.augmentation_share is None
        assert root.headcount == 150
        assert root.descendant_count == 2

    def test_weighted_mean_over_node_and_descendants(self):
        """Shares are weighted by each sample's headcount."""
        report = make_report([
            {"id": "root", "name": "Root", "headcount": 100, "automation_share": 0.2},
            {"id": "a", "name": "A", "parent_id": "root", "headcount": 50, "automation_share": 0.8},
            {"id": "b", "name": "B", "parent_id": "root", "headcount": 30},
        ])

        aggregate = build_org_graph(report).nodes["root"].aggregate

        assert aggregate.automation_share == pytest.approx((0.2 * 100 + 0.8 * 50) / 150)
        assert aggregate.headcount == 180

    def test_unknown_headcount_weighs_one(self):
        """A node without headcount still contributes its share with weight 1."""
        report = make_report([
            {"id": "root", "name": "Root", "augmentation_share": 0.1},
            {"id": "a", "name": "A", "parent_id": "root", "augmentation_share": 0.5},
        ])

        aggregate = build_org_graph(report).nodes["root"].aggregate

        assert aggregate.augmentation_share == pytest.approx(0.3)
        assert aggregate.headcount is None

    def test_headcount_from_descendants_only(self):
        """A node without headcount takes its children's known totals."""
        report = make_report([
            {"id": "root", "name": "Root"},
            {"id": "a", "name": "A", "parent_id": "root", "headcount": 20},
            {"id": "b", "name": "B", "parent_id": "root"},
        ])

        graph = build_org_graph(report)

        assert graph.nodes["root"].aggregate.headcount == 20
        assert graph.nodes["b"].aggregate.headcount is None

    def test_zero_headcount_is_known(self):
        """Zero is a known headcount, not a missing one."""
        report = make_report([{"id": "root", "name": "Root", "headcount": 0}])

        assert build_org_graph(report).nodes["root"].aggregate.headcount == 0

    def test_aggregation_invariant_to_child_order(self):
        """Shuffling the input order yields identical aggregates."""
        nodes = [{"id": "root", "name": "Root", "headcount": 10, "automation_share": 0.1}]
        for index in range(30):
            nodes.append({
                "id": f"n{index}",
                "name": f"Team {index % 7}",
                "parent_id": "root" if index < 6 else f"n{index % 6}",
                "headcount": (index * 13) % 50 if index % 4 else None,
                "automation_share": (index % 10) / 10 if index % 3 else None,
                "augmentation_share": (index % 5) / 10 if index % 2 else None,
            })

        expected = build_org_graph(make_report(nodes))
        rng = random.Random(7)
        for _ in range(5):
            shuffled = list(nodes)
            rng.shuffle(shuffled)
            graph = build_org_graph(make_report(shuffled))
            for node_id, node in expected.nodes.items():
                assert graph.nodes[node_id].aggregate == node.aggregate
                assert graph.nodes[node_id].children == node.children

    def test_descendant_count_on_chain(self):
        """Deep chains are handled without recursion limits."""
        depth = 5000
        nodes = [{"id": "n0", "name": "N0"}]
        for index in range(1, depth):
            nodes.append({"id": f"n{index}", "name": f"N{index}", "parent_id": f"n{index - 1}"})

        graph = build_org_graph(make_report(nodes))

        assert graph.nodes["n0"].aggregate.descendant_count == depth - 1
        assert graph.nodes[f"n{depth - 1}"].aggregate.descendant_count == 0
        for node_id in ("n0", "n10", "n2500"):
            assert graph.nodes[node_id].aggregate.descendant_count == reachable_count(graph, node_id)

    def test_descendant_count_on_balanced_tree(self):
        """Every node's count matches the nodes reachable through children."""
        nodes = [{"id": "1", "name": "1"}]
        for index in range(2, 128):
            nodes.append({"id": str(index), "name": str(index), "parent_id": str(index // 2)})

        graph = build_org_graph(make_report(nodes))

        assert graph.nodes["1"].aggregate.descendant_count == 126
        for node_id in graph.nodes:
            assert graph.nodes[node_id].aggregate.descendant_count == reachable_count(graph, node_id)


# ============================================================================
# Structure Tests
# ============================================================================

class TestStructure:
    """Tests for ordering and structural repairs."""

    def test_siblings_sorted_by_headcount_then_name(self):
        """Headcount desc, unknown headcount last, then case-insensitive name."""
        report = make_report([
            {"id": "root", "name": "Root"},
            {"id": "a", "name": "beta", "parent_id": "root", "headcount": 5},
            {"id": "b", "name": "Alpha", "parent_id": "root", "headcount": 5},
            {"id": "c", "name": "Gamma", "parent_id": "root", "headcount": 50},
            {"id": "d", "name": "Delta", "parent_id": "root"},
        ])

        graph = build_org_graph(report)

        assert graph.nodes["root"].children == ["c", "b", "a", "d"]

    def test_orphan_promoted_to_root(self):
        """A node whose parent is missing becomes a root and is reported."""
        report = make_report([
            {"id": "root", "name": "Root", "headcount": 10},
            {"id": "lost", "name": "Lost", "parent_id": "ghost", "headcount": 5},
        ])

        graph = build_org_graph(report)

        assert graph.roots == ["root", "lost"]
        assert graph.nodes["lost"].parent_id is None
        assert graph.nodes["lost"].data.parent_id == "ghost"
        issue = graph.issues[0]
        assert issue.kind == IssueKind.ORPHAN_PARENT
        assert issue.reference == "ghost"
        assert issue.context == "lost"

    def test_parent_cycle_promotes_first_node(self):
        """The first node of a cycle in input order becomes a root."""
        report = make_report([
            {"id": "b", "name": "B", "parent_id": "a", "headcount": 3},
            {"id": "a", "name": "A", "parent_id": "b", "headcount": 2},
            {"id": "c", "name": "C", "parent_id": "a", "headcount": 1},
        ])

        graph = build_org_graph(report)

        assert graph.roots == ["b"]
        assert graph.nodes["b"].aggregate.headcount == 6
        assert graph.nodes["b"].aggregate.descendant_count == 2
        assert [issue.kind for issue in graph.issues] == [IssueKind.PARENT_CYCLE]
        assert graph.issues[0].context == "b"

    def test_self_parent_is_a_cycle(self):
        """A node naming itself as parent is promoted to root."""
        report = make_report([{"id": "solo", "name": "Solo", "parent_id": "solo"}])

        graph = build_org_graph(report)

        assert graph.roots == ["solo"]
        assert graph.issues[0].kind == IssueKind.PARENT_CYCLE

    def test_duplicate_node_first_wins(self):
        """Repeated ids keep the first node."""
        report = make_report([
            {"id": "x", "name": "First", "headcount": 1},
            {"id": "x", "name": "Second", "headcount": 2},
        ])

        graph = build_org_graph(report)

        assert len(graph.nodes) == 1
        assert graph.nodes["x"].data.name == "First"
        assert graph.issues[0].kind == IssueKind.DUPLICATE_NODE

    def test_blank_parent_is_root(self):
        """An empty parent id means root, not an orphan."""
        report = make_report([{"id": "r", "name": "R", "parent_id": "  "}])

        graph = build_org_graph(report)

        assert graph.roots == ["r"]
        assert graph.issues == []


# ============================================================================
# Role Resolution Tests
# ============================================================================

class TestRoleResolution:
    """Tests for resolving dominant roles on nodes."""

    def test_lookup_keys_first_match_wins(self):
        """Code, normalised title and title keys; earlier roles keep shared keys."""
        roles = [
            OrgRole(code="15-1252.00", title="Software Developers", normalized_title="software developers"),
            OrgRole(code="15-1253.00", title="Software Developers"),
        ]

        lookup = build_role_lookup(roles)

        assert lookup["15-1252.00"].code == "15-1252.00"
        assert lookup["15-1253.00"].code == "15-1253.00"
        assert lookup["software developers"].code == "15-1252.00"

    def test_references_resolved_case_insensitively(self, sample_report):
        """References match by trimmed lowercase key and carry node headcount."""
        graph = build_org_graph(sample_report)

        roles = graph.nodes["eng"].roles
        assert [role.code for role in roles] == ["15-1252.00"]
        assert roles[0].headcount == 400

    def test_unresolved_reference_recorded(self, sample_report):
        """Unknown references are skipped and reported."""
        graph = build_org_graph(sample_report)

        assert [role.code for role in graph.nodes["support"].roles] == ["43-4051.00"]
        unresolved = [issue for issue in graph.issues if issue.kind == IssueKind.UNRESOLVED_ROLE]
        assert len(unresolved) == 1
        assert unresolved[0].reference == "99-9999.00"
        assert unresolved[0].context == "support"

    def test_duplicate_references_ignored(self):
        """The same role listed twice on a node resolves once."""
        report = OrgReport.model_validate({
            "hierarchy": [{"id": "n", "name": "N", "dominantRoleIds": ["15-1252.00", " 15-1252.00 "]}],
            "roles": [{"code": "15-1252.00", "title": "Software Developers"}],
        })

        graph = build_org_graph(report)

        assert len(graph.nodes["n"].roles) == 1

    def test_node_headcount_split_equally(self):
        """Without role headcounts the node headcount is split, last role takes the rest."""
        report = OrgReport.model_validate({
            "hierarchy": [{"id": "n", "name": "N", "headcount": 10, "dominantRoleIds": ["a", "b", "c"]}],
            "roles": [
                {"code": "a", "title": "Zeta"},
                {"code": "b", "title": "Alpha"},
                {"code": "c", "title": "Mu"},
            ],
        })

        roles = build_org_graph(report).nodes["n"].roles

        assert [(role.code, role.headcount) for role in roles] == [("c", 4), ("b", 3), ("a", 3)]

    def test_small_node_headcount_not_over_allocated(self):
        """A node smaller than its role count hands out exactly its headcount."""
        report = OrgReport.model_validate({
            "hierarchy": [{"id": "n", "name": "N", "headcount": 1, "dominantRoleIds": ["r1", "r2", "r3"]}],
            "roles": [
                {"code": "r1", "title": "R1"},
                {"code": "r2", "title": "R2"},
                {"code": "r3", "title": "R3"},
            ],
        })

        roles = build_org_graph(report).nodes["n"].roles

        assert sum(role.headcount for role in roles) == 1
        assert [(role.code, role.headcount) for role in roles] == [("r1", 1), ("r2", 0), ("r3", 0)]

    def test_role_headcount_falls_back_to_role(self):
        """An entry without headcount uses the role's own headcount."""
        report = OrgReport.model_validate({
            "hierarchy": [{"id": "n", "name": "N", "headcount": 10, "dominantRoleIds": ["a"]}],
            "roles": [{"code": "a", "title": "A", "headcount": 7}],
        })

        roles = build_org_graph(report).nodes["n"].roles

        assert roles[0].headcount == 7


# ============================================================================
# Traversal Tests
# ============================================================================

class TestTraversal:
    """Tests for graph traversal helpers."""

    def test_helpers(self, sample_report):
        """Roots, children and descendants follow the sorted structure."""
        graph = build_org_graph(sample_report)

        assert [node.id for node in get_root_nodes(graph)] == ["org"]
        assert [node.id for node in get_children(graph, "org")] == ["eng", "support"]
        assert {node.id for node in collect_descendants(graph, "org")} == {"org", "eng", "support"}

    def test_unknown_ids(self, sample_report):
        """Unknown ids yield empty results."""
        graph = build_org_graph(sample_report)

        assert get_children(graph, "missing") == []
        assert collect_descendants(graph, "missing") == []
