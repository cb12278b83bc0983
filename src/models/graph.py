"""
Network Graph Construction

Builds an immutable undirected contact graph from a snapshot of contact records.
"""

import logging
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping, Optional

import networkx as nx

from src.models.entities import ConnectionDiagnostics, ContactRecord, Edge, GraphNode

logger = logging.getLogger(__name__)


class NetworkGraph:
    """Read-only undirected graph of contacts.

    Nodes keep first-appearance order, edges keep insertion order and each
    node's neighbours are listed in the order their edges were added. All
    query functions rely on that order for deterministic results.
    """

    __slots__ = ("_nodes", "_edges", "_adjacency", "_edge_keys")

    def __init__(
        self,
        nodes: Mapping[str, GraphNode],
        edges: Iterable[Edge],
        adjacency: Mapping[str, Iterable[str]],
    ):
        self._nodes = MappingProxyType(dict(nodes))
        self._edges = tuple(edges)
        self._adjacency = MappingProxyType(
            {node_id: tuple(adjacency.get(node_id, ())) for node_id in self._nodes}
        )
        self._edge_keys = frozenset(edge.key for edge in self._edges)

    def __repr__(self) -> str:
        return f"NetworkGraph(nodes={self.node_count}, edges={self.edge_count})"

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    def __iter__(self) -> Iterator[str]:
        return iter(self._nodes)

    @property
    def nodes(self) -> Mapping[str, GraphNode]:
        return self._nodes

    @property
    def edges(self) -> tuple[Edge, ...]:
        return self._edges

    @property
    def node_ids(self) -> tuple[str, ...]:
        return tuple(self._nodes)

    @property
    def node_count(self) -> int:
        return len(self._nodes)

    @property
    def edge_count(self) -> int:
        return len(self._edges)

    def has_node(self, node_id: str) -> bool:
        return node_id in self._nodes

    def get_node(self, node_id: str) -> Optional[GraphNode]:
        return self._nodes.get(node_id)

    def get_contact(self, node_id: str) -> Optional[ContactRecord]:
        node = self._nodes.get(node_id)
        return node.contact if node else None

    def neighbors(self, node_id: str) -> tuple[str, ...]:
        """Neighbours in edge-insertion order (empty for unknown ids)."""
        return self._adjacency.get(node_id, ())

    def degree(self, node_id: str) -> int:
        return len(self._adjacency.get(node_id, ()))

    def has_edge(self, a: str, b: str) -> bool:
        return frozenset((a, b)) in self._edge_keys

    def to_networkx(self) -> nx.Graph:
        """Copy into an undirected networkx graph.

        Node and edge insertion order are preserved, so networkx iteration
        follows the same order as this graph.
        """
        nx_graph = nx.Graph()
        nx_graph.add_nodes_from(self._nodes)
        nx_graph.add_edges_from((edge.source, edge.target) for edge in self._edges)
        return nx_graph


class GraphBuilder:
    """Turns contact records into a NetworkGraph.

    This is the only place connection lists are sanitized: self links,
    duplicate links and links to contacts outside the snapshot are dropped
    here and counted in the diagnostics.
    """

    def __init__(self):
        self._reset()

    def _reset(self) -> None:
        self._nodes: dict[str, GraphNode] = {}
        self._adjacency: dict[str, list[str]] = {}
        self._edges: list[Edge] = []
        self._edge_keys: set[frozenset[str]] = set()

        self._total_references = 0
        self._matched = 0
        self._self_references = 0
        self._unmatched: dict[str, None] = {}

    def _add_node(self, contact: ContactRecord) -> None:
        if contact.id in self._nodes:
            logger.debug(f"Duplicate contact id {contact.id}, keeping first record")
            return
        self._nodes[contact.id] = GraphNode(id=contact.id, contact=contact)
        self._adjacency[contact.id] = []

    def _add_edge(self, a: str, b: str) -> None:
        key = frozenset((a, b))
        if key in self._edge_keys:
            return
        self._edge_keys.add(key)
        self._edges.append(Edge(source=a, target=b))
        self._adjacency[a].append(b)
        self._adjacency[b].append(a)

    def _link(self, contact: ContactRecord) -> None:
        for connection_id in contact.connections:
            self._total_references += 1

            if connection_id == contact.id:
                self._self_references += 1
                continue

            if connection_id not in self._nodes:
                self._unmatched[connection_id] = None
                continue

            self._matched += 1
            self._add_edge(contact.id, connection_id)

    def _diagnostics(self) -> ConnectionDiagnostics:
        isolated = [node_id for node_id, adj in self._adjacency.items() if not adj]
        match_rate = 0
        if self._total_references > 0:
            match_rate = round(self._matched / self._total_references * 100)

        return ConnectionDiagnostics(
            total_connection_references=self._total_references,
            matched_connections=self._matched,
            self_references=self._self_references,
            unmatched_connections=list(self._unmatched),
            isolated_contacts=isolated,
            match_rate=match_rate,
        )

    def build_with_diagnostics(
        self,
        contacts: Iterable[ContactRecord],
    ) -> tuple[NetworkGraph, ConnectionDiagnostics]:
        """Build a graph and report how the connection lists were matched.

        Args:
            contacts: Contact snapshot

        Returns:
            Tuple of (graph, diagnostics)
        """
        self._reset()
        contacts = list(contacts)

        # All nodes first so forward references resolve
        for contact in contacts:
            self._add_node(contact)

        for contact in contacts:
            self._link(contact)

        graph = NetworkGraph(self._nodes, self._edges, self._adjacency)
        diagnostics = self._diagnostics()

        logger.info(
            f"Built network graph: {graph.node_count} nodes, {graph.edge_count} edges "
            f"({diagnostics.match_rate}% of connection references matched)"
        )
        if diagnostics.unmatched_connections:
            logger.debug(
                f"Dropped {len(diagnostics.unmatched_connections)} dangling connection ids"
            )

        return graph, diagnostics

    def build(self, contacts: Iterable[ContactRecord]) -> NetworkGraph:
        """Build a graph from a contact snapshot."""
        graph, _ = self.build_with_diagnostics(contacts)
        return graph


def build_graph(contacts: Iterable[ContactRecord]) -> NetworkGraph:
    """Convenience function to build a network graph.

    Args:
        contacts: Contact snapshot

    Returns:
        Immutable NetworkGraph
    """
    return GraphBuilder().build(contacts)


def build_graph_with_diagnostics(
    contacts: Iterable[ContactRecord],
) -> tuple[NetworkGraph, ConnectionDiagnostics]:
    """Convenience function returning the graph and its connection diagnostics."""
    return GraphBuilder().build_with_diagnostics(contacts)
