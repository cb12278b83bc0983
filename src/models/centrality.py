"""
Connector Ranking

Betweenness centrality (Brandes' accumulation method) and the ranking of
structurally important "connector" contacts.
"""

import logging
import random
from collections import deque
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

from src.models.entities import ConnectorScore
from src.models.errors import check_non_negative, check_positive
from src.models.graph import NetworkGraph

logger = logging.getLogger(__name__)


def _single_source_dependencies(graph: NetworkGraph, source: str) -> dict[str, float]:
    """One Brandes pass: dependency of `source` on every other node.

    BFS counts shortest paths (sigma) and records predecessors; nodes are
    then popped in reverse BFS order to accumulate dependencies (delta).
    """
    stack: list[str] = []
    predecessors: dict[str, list[str]] = {source: []}
    sigma: dict[str, float] = {source: 1.0}
    distance: dict[str, int] = {source: 0}
    queue = deque([source])

    while queue:
        v = queue.popleft()
        stack.append(v)
        for w in graph.neighbors(v):
            if w not in distance:
                distance[w] = distance[v] + 1
                sigma[w] = 0.0
                predecessors[w] = []
                queue.append(w)
            if distance[w] == distance[v] + 1:
                sigma[w] += sigma[v]
                predecessors[w].append(v)

    delta = dict.fromkeys(stack, 0.0)
    while stack:
        w = stack.pop()
        coefficient = (1.0 + delta[w]) / sigma[w]
        for v in predecessors[w]:
            delta[v] += sigma[v] * coefficient

    delta.pop(source)
    return delta


def _select_sources(
    graph: NetworkGraph,
    sample_size: Optional[int],
    seed: Optional[int],
) -> list[str]:
    node_ids = list(graph.node_ids)
    if sample_size is None or sample_size >= len(node_ids):
        return node_ids
    rng = random.Random(seed)
    chosen = set(rng.sample(node_ids, sample_size))
    # Keep graph order so merged sums do not depend on the sample's order
    return [node_id for node_id in node_ids if node_id in chosen]


def betweenness_centrality(
    graph: NetworkGraph,
    normalized: bool = True,
    sample_size: Optional[int] = None,
    seed: Optional[int] = None,
    workers: int = 1,
) -> dict[str, float]:
    """Calculate betweenness centrality for every node.

    Runs one BFS per source node, O(V*E) overall. Each unordered pair is
    counted once. With normalized=True values are divided by the number of
    pairs not involving the node, (n-1)(n-2)/2, so they fall in [0, 1].

    Args:
        graph: Network graph
        normalized: Scale values to [0, 1]
        sample_size: Use only this many randomly chosen sources and rescale
            (approximation for large graphs)
        seed: Seed for source sampling
        workers: Number of threads for the per-source passes

    Returns:
        Mapping of node id to centrality (>= 0, 0 for isolated nodes)

    Raises:
        InvalidBoundError: If sample_size is negative or workers < 1
    """
    check_positive("workers", workers)
    if sample_size is not None:
        check_non_negative("sample_size", sample_size)

    centrality = dict.fromkeys(graph.node_ids, 0.0)
    n = graph.node_count
    if n == 0:
        return centrality

    sources = _select_sources(graph, sample_size, seed)

    if workers > 1 and len(sources) > 1:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            # map() yields in submission order, so summation order is fixed
            passes = pool.map(lambda s: _single_source_dependencies(graph, s), sources)
            for dependencies in passes:
                for node_id, value in dependencies.items():
                    centrality[node_id] += value
    else:
        for source in sources:
            for node_id, value in _single_source_dependencies(graph, source).items():
                centrality[node_id] += value

    # Every pair was seen from both endpoints
    scale = 0.5
    if sources and len(sources) < n:
        scale *= n / len(sources)
    if normalized and n > 2:
        scale /= (n - 1) * (n - 2) / 2

    for node_id in centrality:
        centrality[node_id] = max(0.0, centrality[node_id] * scale)

    logger.debug(f"Computed betweenness centrality from {len(sources)} of {n} sources")
    return centrality


def rank_connectors(
    graph: NetworkGraph,
    centrality: dict[str, float],
    top_n: int,
    min_degree: int = 0,
) -> list[ConnectorScore]:
    """Rank precomputed centrality values.

    Ties are broken by contact id so the ranking is reproducible.
    """
    check_non_negative("top_n", top_n)
    check_non_negative("min_degree", min_degree)

    eligible = [
        node_id for node_id in graph.node_ids
        if graph.degree(node_id) >= min_degree
    ]
    eligible.sort(key=lambda node_id: (-centrality.get(node_id, 0.0), node_id))

    results = []
    for rank, node_id in enumerate(eligible[:top_n], 1):
        contact = graph.nodes[node_id].contact
        results.append(ConnectorScore(
            contact_id=node_id,
            name=contact.display_name,
            centrality=centrality.get(node_id, 0.0),
            degree=graph.degree(node_id),
            rank=rank,
        ))
    return results


def get_connectors(
    graph: NetworkGraph,
    top_n: int = 10,
    min_degree: int = 0,
    normalized: bool = True,
    sample_size: Optional[int] = None,
    seed: Optional[int] = None,
    workers: int = 1,
) -> list[ConnectorScore]:
    """Identify the top-N connectors by betweenness centrality.

    Args:
        graph: Network graph
        top_n: Number of connectors to return (all nodes if larger)
        min_degree: Ignore nodes with fewer connections than this
        normalized: Scale centrality to [0, 1]
        sample_size: Approximate using this many BFS sources
        seed: Seed for source sampling
        workers: Number of threads for the per-source passes

    Returns:
        ConnectorScore list, highest centrality first

    Raises:
        InvalidBoundError: If top_n or min_degree is negative
    """
    check_non_negative("top_n", top_n)
    check_non_negative("min_degree", min_degree)

    if top_n == 0:
        return []

    centrality = betweenness_centrality(
        graph,
        normalized=normalized,
        sample_size=sample_size,
        seed=seed,
        workers=workers,
    )
    connectors = rank_connectors(graph, centrality, top_n, min_degree=min_degree)

    logger.info(f"Ranked {len(connectors)} connectors from {graph.node_count} contacts")
    return connectors
