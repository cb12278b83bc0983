"""
Tests for Mutual Connection Resolution
"""

from src.models.entities import ContactRecord
from src.models.graph import build_graph
from src.models.mutuals import mutual_connection_details, mutual_connections


class TestMutualConnections:
    """Tests for two-hop contact sets."""

    def test_four_contact_fixture(self, four_graph):
        """Test second-degree sets for each fixture contact."""
        assert mutual_connections(four_graph, "A") == {"D"}
        assert mutual_connections(four_graph, "B") == frozenset()
        assert mutual_connections(four_graph, "C") == {"D"}
        assert mutual_connections(four_graph, "D") == {"A", "C"}

    def test_excludes_self_and_direct(self, four_graph):
        for contact_id in four_graph.node_ids:
            result = mutual_connections(four_graph, contact_id)
            assert contact_id not in result
            assert not result & set(four_graph.neighbors(contact_id))

    def test_unknown_contact(self, four_graph):
        assert mutual_connections(four_graph, "Z") == frozenset()

    def test_isolated_contact(self, disconnected_contacts):
        graph = build_graph(disconnected_contacts)
        assert mutual_connections(graph, "1") == frozenset()

    def test_multiple_routes_counted_once(self):
        """Test a candidate reachable through two bridges appears once."""
        graph = build_graph([
            ContactRecord(id="me", connections=["f1", "f2"]),
            ContactRecord(id="f1", connections=["target"]),
            ContactRecord(id="f2", connections=["target"]),
            ContactRecord(id="target"),
        ])
        assert mutual_connections(graph, "me") == {"target"}


class TestMutualConnectionDetails:
    """Tests for ranked mutual connection details."""

    def test_bridges_reported(self, four_graph):
        details = mutual_connection_details(four_graph, "D")

        assert [d.contact_id for d in details] == ["A", "C"]
        assert details[0].via == ("B",)
        assert details[0].name == "Alice"

    def test_sorted_by_shared_count(self):
        graph = build_graph([
            ContactRecord(id="me", connections=["f1", "f2"]),
            ContactRecord(id="f1", connections=["aa", "zz"]),
            ContactRecord(id="f2", connections=["zz"]),
            ContactRecord(id="aa"),
            ContactRecord(id="zz"),
        ])
        details = mutual_connection_details(graph, "me")

        assert [d.contact_id for d in details] == ["zz", "aa"]
        assert details[0].mutual_count == 2
        assert details[0].via == ("f1", "f2")

    def test_unknown_contact(self, four_graph):
        assert mutual_connection_details(four_graph, "Z") == []
