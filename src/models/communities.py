"""
Community Detection

Groups contacts into clusters by moving each node into the neighbouring
community it has the most links into, until no node moves.
"""

import logging

from src.models.entities import Community
from src.models.errors import check_positive
from src.models.graph import NetworkGraph

logger = logging.getLogger(__name__)


def _assign_communities(graph: NetworkGraph, max_iterations: int) -> dict[str, str]:
    membership = {node_id: node_id for node_id in graph.node_ids}

    for iteration in range(1, max_iterations + 1):
        moved = False

        for node_id in graph.node_ids:
            current = membership[node_id]

            links: dict[str, int] = {}
            for neighbor in graph.neighbors(node_id):
                community = membership[neighbor]
                links[community] = links.get(community, 0) + 1

            best = current
            best_links = links.get(current, 0)
            # First community (in neighbour order) wins ties
            for community, count in links.items():
                if count > best_links:
                    best, best_links = community, count

            if best != current:
                membership[node_id] = best
                moved = True

        if not moved:
            logger.debug(f"Community assignment converged after {iteration} iterations")
            break

    return membership


def _describe(graph: NetworkGraph, community_id: str, members: list[str]) -> Community:
    member_set = set(members)
    internal_links = 0
    total_degree = 0

    for node_id in members:
        neighbors = graph.neighbors(node_id)
        total_degree += len(neighbors)
        internal_links += sum(1 for n in neighbors if n in member_set)

    internal_edges = internal_links / 2
    possible = len(members) * (len(members) - 1) / 2

    return Community(
        id=community_id,
        member_ids=tuple(members),
        density=internal_edges / possible if possible > 0 else 0.0,
        avg_degree=total_degree / len(members),
    )


def detect_communities(graph: NetworkGraph, max_iterations: int = 10) -> list[Community]:
    """Detect communities of closely connected contacts.

    Args:
        graph: Network graph
        max_iterations: Maximum number of passes over all nodes

    Returns:
        Communities ordered by size (desc), then id
    """
    check_positive("max_iterations", max_iterations)

    membership = _assign_communities(graph, max_iterations)

    grouped: dict[str, list[str]] = {}
    for node_id in graph.node_ids:
        grouped.setdefault(membership[node_id], []).append(node_id)

    communities = [
        _describe(graph, community_id, members)
        for community_id, members in grouped.items()
    ]
    communities.sort(key=lambda c: (-c.size, c.id))

    logger.info(f"Detected {len(communities)} communities across {graph.node_count} contacts")
    return communities
