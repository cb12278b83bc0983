"""
Mutual Connection Resolution

Finds friend-of-a-friend candidates: contacts exactly two hops away.
"""

import logging

from src.models.entities import MutualConnection
from src.models.graph import NetworkGraph

logger = logging.getLogger(__name__)


def _second_degree(graph: NetworkGraph, contact_id: str) -> dict[str, list[str]]:
    """Map each two-hop contact to the direct contacts bridging to it.

    Keys appear in discovery order (neighbour order, then their neighbours).
    """
    direct = set(graph.neighbors(contact_id))
    bridges: dict[str, list[str]] = {}

    for neighbor in graph.neighbors(contact_id):
        for candidate in graph.neighbors(neighbor):
            if candidate == contact_id or candidate in direct:
                continue
            bridges.setdefault(candidate, []).append(neighbor)

    return bridges


def mutual_connections(graph: NetworkGraph, contact_id: str) -> frozenset[str]:
    """Return contacts reachable in exactly two hops.

    Excludes the contact itself and anyone already directly connected.
    Unknown or isolated contacts yield an empty set.

    Args:
        graph: Network graph
        contact_id: Contact to find introductions for

    Returns:
        Set of contact ids
    """
    if not graph.has_node(contact_id):
        return frozenset()
    return frozenset(_second_degree(graph, contact_id))


def mutual_connection_details(
    graph: NetworkGraph,
    contact_id: str,
) -> list[MutualConnection]:
    """Two-hop candidates with the direct contacts they share with contact_id.

    Sorted by number of shared contacts (desc), then contact id.
    """
    if not graph.has_node(contact_id):
        return []

    details = [
        MutualConnection(
            contact_id=candidate,
            name=graph.nodes[candidate].contact.display_name,
            via=tuple(via),
        )
        for candidate, via in _second_degree(graph, contact_id).items()
    ]
    details.sort(key=lambda m: (-m.mutual_count, m.contact_id))

    logger.debug(f"Found {len(details)} mutual connection candidates for {contact_id}")
    return details
