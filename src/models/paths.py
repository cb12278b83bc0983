"""
Introduction Path Discovery

Breadth-first shortest paths and bounded multi-path enumeration between
contacts, each path scored for introduction "warmth".
"""

import logging
from collections import deque
from typing import Optional

from src.models.entities import IntroductionPath
from src.models.errors import check_non_negative, check_positive
from src.models.graph import NetworkGraph

logger = logging.getLogger(__name__)

MAX_WARMTH = 100
MIN_WARMTH = 1
HOP_PENALTY = 25

DEFAULT_CANDIDATE_CAP = 500


def warmth_score(hops: int) -> int:
    """Score a path by its hop count.

    Direct connections (and the trivial path) score 100; every extra
    intermediary costs 25 points, floored at 1.
    """
    score = MAX_WARMTH - (hops - 1) * HOP_PENALTY
    return max(MIN_WARMTH, min(MAX_WARMTH, score))


def make_path(graph: NetworkGraph, contact_ids: list[str]) -> IntroductionPath:
    """Wrap a sequence of node ids as a scored IntroductionPath."""
    return IntroductionPath(
        contact_ids=tuple(contact_ids),
        contacts=tuple(graph.nodes[node_id].contact for node_id in contact_ids),
        warmth_score=warmth_score(len(contact_ids) - 1),
    )


def bfs_distances(
    graph: NetworkGraph,
    source: str,
    max_depth: Optional[int] = None,
) -> dict[str, int]:
    """Hop distance from source to every reachable node.

    Args:
        graph: Network graph
        source: Start node
        max_depth: Stop expanding beyond this many hops

    Returns:
        Mapping of node id to distance (empty if source is unknown)
    """
    if not graph.has_node(source):
        return {}

    distances = {source: 0}
    queue = deque([source])

    while queue:
        node = queue.popleft()
        depth = distances[node]
        if max_depth is not None and depth >= max_depth:
            continue
        for neighbor in graph.neighbors(node):
            if neighbor not in distances:
                distances[neighbor] = depth + 1
                queue.append(neighbor)

    return distances


def find_path(
    graph: NetworkGraph,
    from_id: str,
    to_id: str,
    max_depth: Optional[int] = None,
) -> Optional[IntroductionPath]:
    """Find the shortest introduction path between two contacts.

    Neighbours are expanded in edge-insertion order, so the same snapshot
    always yields the same path when several shortest paths exist.

    Args:
        graph: Network graph
        from_id: Contact asking for the introduction
        to_id: Contact to be introduced to
        max_depth: Optional limit on the number of hops

    Returns:
        IntroductionPath, or None when either contact is unknown or no
        path exists within max_depth

    Raises:
        InvalidBoundError: If max_depth is negative
    """
    if max_depth is not None:
        check_non_negative("max_depth", max_depth)

    if not graph.has_node(from_id) or not graph.has_node(to_id):
        logger.debug(f"No path: unknown contact in ({from_id}, {to_id})")
        return None

    if from_id == to_id:
        return make_path(graph, [from_id])

    parents: dict[str, Optional[str]] = {from_id: None}
    depths = {from_id: 0}
    queue = deque([from_id])

    while queue:
        node = queue.popleft()
        if max_depth is not None and depths[node] >= max_depth:
            continue

        for neighbor in graph.neighbors(node):
            if neighbor in parents:
                continue
            parents[neighbor] = node
            depths[neighbor] = depths[node] + 1

            if neighbor == to_id:
                return make_path(graph, _walk_back(parents, to_id))

            queue.append(neighbor)

    logger.debug(f"No path between {from_id} and {to_id}")
    return None


def _walk_back(parents: dict[str, Optional[str]], target: str) -> list[str]:
    path = []
    node: Optional[str] = target
    while node is not None:
        path.append(node)
        node = parents[node]
    path.reverse()
    return path


def find_all_paths(
    graph: NetworkGraph,
    from_id: str,
    to_id: str,
    max_depth: int = 4,
    max_paths: int = 5,
    candidate_cap: int = DEFAULT_CANDIDATE_CAP,
) -> list[IntroductionPath]:
    """Enumerate several distinct introduction routes, warmest first.

    Simple paths are enumerated depth-first with an increasing depth limit,
    so every path of n hops is found before any path of n + 1 hops.
    Branches that cannot reach the target within the remaining depth are
    pruned using BFS distances from the target. Enumeration stops once
    candidate_cap paths have been collected.

    Args:
        graph: Network graph
        from_id: Contact asking for the introduction
        to_id: Contact to be introduced to
        max_depth: Maximum number of hops per path
        max_paths: Maximum number of paths to return
        candidate_cap: Maximum number of candidate paths to collect

    Returns:
        Paths sorted by warmth (desc), hops (asc), then discovery order

    Raises:
        InvalidBoundError: If a bound is negative or candidate_cap < 1
    """
    check_non_negative("max_depth", max_depth)
    check_non_negative("max_paths", max_paths)
    check_positive("candidate_cap", candidate_cap)

    if max_paths == 0:
        return []
    if not graph.has_node(from_id) or not graph.has_node(to_id):
        return []
    if from_id == to_id:
        return [make_path(graph, [from_id])]

    to_target = bfs_distances(graph, to_id, max_depth=max_depth)
    if from_id not in to_target:
        logger.debug(f"No path between {from_id} and {to_id} within {max_depth} hops")
        return []

    candidates: list[list[str]] = []
    shortest = to_target[from_id]

    for limit in range(shortest, max_depth + 1):
        _collect_paths(graph, from_id, to_id, limit, to_target, candidates, candidate_cap)
        if len(candidates) >= candidate_cap:
            logger.debug(f"Path enumeration hit candidate cap ({candidate_cap})")
            break

    # sorted() is stable, so equal keys keep discovery order
    paths = [make_path(graph, ids) for ids in candidates]
    paths = sorted(paths, key=lambda p: (-p.warmth_score, p.hops))

    return paths[:max_paths]


def _collect_paths(
    graph: NetworkGraph,
    from_id: str,
    to_id: str,
    length: int,
    to_target: dict[str, int],
    out: list[list[str]],
    cap: int,
) -> None:
    """Append every simple path of exactly `length` hops to out."""
    path = [from_id]
    on_path = {from_id}
    # Explicit stack of neighbour iterators keeps deep searches off the call stack
    stack = [iter(graph.neighbors(from_id))]

    while stack and len(out) < cap:
        depth = len(path) - 1
        neighbor = next(stack[-1], None)

        if neighbor is None:
            stack.pop()
            on_path.discard(path.pop())
            continue

        if neighbor in on_path:
            continue

        next_depth = depth + 1
        if neighbor == to_id:
            if next_depth == length:
                out.append(path + [to_id])
            continue

        remaining = to_target.get(neighbor)
        if remaining is None or next_depth + remaining > length:
            continue

        path.append(neighbor)
        on_path.add(neighbor)
        stack.append(iter(graph.neighbors(neighbor)))
