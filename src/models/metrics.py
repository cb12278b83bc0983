"""
Network Metrics

Aggregate statistics, clustering coefficients, connected components and
the extended network summary.
"""

import logging
from typing import Optional

import networkx as nx

from src.models.centrality import get_connectors
from src.models.entities import NetworkMetrics, NetworkSummary
from src.models.errors import check_non_negative
from src.models.graph import NetworkGraph
from src.models.paths import bfs_distances

logger = logging.getLogger(__name__)


def calculate_metrics(graph: NetworkGraph) -> NetworkMetrics:
    """Calculate node/edge counts, average degree and density.

    Density is the fraction of all possible node pairs that are linked.
    """
    total_nodes = graph.node_count
    total_edges = graph.edge_count

    avg_degree = 2 * total_edges / total_nodes if total_nodes > 0 else 0.0

    density = 0.0
    if total_nodes >= 2:
        possible_edges = total_nodes * (total_nodes - 1) / 2
        density = total_edges / possible_edges

    return NetworkMetrics(
        total_nodes=total_nodes,
        total_edges=total_edges,
        avg_degree=avg_degree,
        network_density=density,
    )


def clustering_coefficients(graph: NetworkGraph) -> dict[str, float]:
    """Local clustering coefficient per node (0 when degree < 2)."""
    coefficients = nx.clustering(graph.to_networkx())
    return {node_id: float(coefficients[node_id]) for node_id in graph.node_ids}


def connected_components(graph: NetworkGraph) -> list[list[str]]:
    """Connected components, largest first (ties keep graph order).

    Members are listed in graph order.
    """
    position = {node_id: i for i, node_id in enumerate(graph.node_ids)}
    components = [
        sorted(component, key=position.__getitem__)
        for component in nx.connected_components(graph.to_networkx())
    ]
    components.sort(key=lambda c: (-len(c), position[c[0]]))
    return components


def largest_component_size(graph: NetworkGraph) -> int:
    components = connected_components(graph)
    return len(components[0]) if components else 0


def average_path_length(graph: NetworkGraph, sample_size: int = 50) -> float:
    """Mean hop distance between connected pairs.

    Only the first sample_size nodes (graph order) are considered, which
    keeps the cost bounded on large snapshots.
    """
    check_non_negative("sample_size", sample_size)

    sampled = list(graph.node_ids[:sample_size])
    total = 0
    pairs = 0

    for i, source in enumerate(sampled):
        distances = bfs_distances(graph, source)
        for target in sampled[i + 1:]:
            if target in distances:
                total += distances[target]
                pairs += 1

    return total / pairs if pairs else 0.0


def summarize_network(
    graph: NetworkGraph,
    key_connectors: int = 5,
    path_length_sample: int = 50,
    min_degree: int = 0,
    normalized: bool = True,
    sample_size: Optional[int] = None,
    seed: Optional[int] = None,
    workers: int = 1,
) -> NetworkSummary:
    """Build the extended network summary.

    The connector arguments are passed to get_connectors, so large
    snapshots can use sampled centrality here too.

    Args:
        graph: Network graph
        key_connectors: Number of top connectors to include
        path_length_sample: Node sample size for average path length
        min_degree: Ignore connectors with fewer connections than this
        normalized: Scale centrality to [0, 1]
        sample_size: Approximate centrality using this many BFS sources
        seed: Seed for source sampling
        workers: Number of threads for the per-source passes

    Returns:
        NetworkSummary
    """
    components = connected_components(graph)
    coefficients = clustering_coefficients(graph)
    avg_clustering = (
        sum(coefficients.values()) / len(coefficients) if coefficients else 0.0
    )

    summary = NetworkSummary(
        metrics=calculate_metrics(graph),
        largest_component_size=len(components[0]) if components else 0,
        component_count=len(components),
        avg_path_length=average_path_length(graph, sample_size=path_length_sample),
        avg_clustering=avg_clustering,
        key_connectors=get_connectors(
            graph,
            top_n=key_connectors,
            min_degree=min_degree,
            normalized=normalized,
            sample_size=sample_size,
            seed=seed,
            workers=workers,
        ),
    )

    logger.info(
        f"Network summary: {summary.component_count} components, "
        f"largest {summary.largest_component_size}, "
        f"avg path length {summary.avg_path_length:.2f}"
    )
    return summary
