"""
Tests for Connector Ranking
"""

import networkx as nx
import pytest

from src.models.centrality import betweenness_centrality, get_connectors, rank_connectors
from src.models.errors import InvalidBoundError
from src.models.graph import NetworkGraph, build_graph


def to_networkx(graph: NetworkGraph) -> nx.Graph:
    nx_graph = nx.Graph()
    nx_graph.add_nodes_from(graph.node_ids)
    nx_graph.add_edges_from((e.source, e.target) for e in graph.edges)
    return nx_graph


class TestBetweennessCentrality:
    """Tests for Brandes betweenness."""

    def test_four_contact_values(self, four_graph):
        centrality = betweenness_centrality(four_graph)
        assert centrality["B"] == pytest.approx(2 / 3)
        assert centrality["A"] == 0.0
        assert centrality["C"] == 0.0
        assert centrality["D"] == 0.0

    def test_unnormalized(self, four_graph):
        """Test raw pair counts (B sits on A-D and C-D)."""
        assert betweenness_centrality(four_graph, normalized=False)["B"] == pytest.approx(2.0)

    def test_star_hub(self, star_graph):
        centrality = betweenness_centrality(star_graph)
        assert centrality["hub"] == pytest.approx(1.0)
        assert centrality["l1"] == 0.0

    @pytest.mark.parametrize("fixture", ["four_graph", "bridge_graph", "two_triangles_graph", "star_graph"])
    @pytest.mark.parametrize("normalized", [True, False])
    def test_matches_networkx(self, request, fixture, normalized):
        """Test exact agreement with networkx on the fixture graphs."""
        graph = request.getfixturevalue(fixture)
        expected = nx.betweenness_centrality(to_networkx(graph), normalized=normalized)
        actual = betweenness_centrality(graph, normalized=normalized)

        assert actual.keys() == expected.keys()
        for node_id, value in expected.items():
            assert actual[node_id] == pytest.approx(value)

    def test_isolated_nodes_zero(self, messy_contacts):
        centrality = betweenness_centrality(build_graph(messy_contacts))
        assert centrality["p4"] == 0.0
        assert all(value >= 0.0 for value in centrality.values())

    def test_empty_graph(self):
        assert betweenness_centrality(build_graph([])) == {}

    def test_workers_match_serial(self, bridge_graph):
        """Test threaded passes produce identical values."""
        serial = betweenness_centrality(bridge_graph)
        threaded = betweenness_centrality(bridge_graph, workers=4)
        assert threaded == serial

    def test_sampling_is_seeded(self, bridge_graph):
        first = betweenness_centrality(bridge_graph, sample_size=3, seed=7)
        second = betweenness_centrality(bridge_graph, sample_size=3, seed=7)
        assert first == second
        assert all(value >= 0.0 for value in first.values())

    def test_sample_covering_all_nodes_is_exact(self, bridge_graph):
        exact = betweenness_centrality(bridge_graph)
        assert betweenness_centrality(bridge_graph, sample_size=50, seed=1) == exact

    def test_sampling_keeps_isolated_zero(self, messy_contacts):
        centrality = betweenness_centrality(build_graph(messy_contacts), sample_size=2, seed=3)
        assert centrality["p4"] == 0.0

    def test_invalid_workers(self, four_graph):
        with pytest.raises(InvalidBoundError):
            betweenness_centrality(four_graph, workers=0)

    def test_invalid_sample_size(self, four_graph):
        with pytest.raises(InvalidBoundError):
            betweenness_centrality(four_graph, sample_size=-1)


class TestGetConnectors:
    """Tests for connector ranking."""

    def test_top_connector(self, four_graph):
        connectors = get_connectors(four_graph, top_n=1)

        assert len(connectors) == 1
        assert connectors[0].contact_id == "B"
        assert connectors[0].name == "Bob"
        assert connectors[0].degree == 3
        assert connectors[0].rank == 1

    def test_ties_broken_by_id(self, four_graph):
        connectors = get_connectors(four_graph, top_n=10)
        assert [c.contact_id for c in connectors] == ["B", "A", "C", "D"]
        assert [c.rank for c in connectors] == [1, 2, 3, 4]

    def test_bridge_ordering(self, bridge_graph):
        connectors = get_connectors(bridge_graph, top_n=3)

        assert [c.contact_id for c in connectors] == ["m", "a3", "b1"]
        assert connectors[0].centrality == pytest.approx(9 / 15)
        assert connectors[1].centrality == pytest.approx(8 / 15)

    def test_min_degree_filter(self, four_graph):
        connectors = get_connectors(four_graph, top_n=10, min_degree=2)
        assert [c.contact_id for c in connectors] == ["B", "A", "C"]

    def test_zero_top_n(self, four_graph):
        assert get_connectors(four_graph, top_n=0) == []

    def test_negative_top_n(self, four_graph):
        with pytest.raises(InvalidBoundError, match="top_n"):
            get_connectors(four_graph, top_n=-1)

    def test_rank_precomputed(self, four_graph):
        ranked = rank_connectors(four_graph, {"D": 0.5}, top_n=2)
        assert [c.contact_id for c in ranked] == ["D", "A"]
