"""
Influence Scoring

Combines degree, betweenness, clustering and eigenvector centrality into a
single 0-100 influence score per contact.
"""

import logging
from typing import Optional

import networkx as nx

from src.models.centrality import betweenness_centrality
from src.models.entities import InfluenceScore
from src.models.graph import NetworkGraph
from src.models.metrics import clustering_coefficients

logger = logging.getLogger(__name__)


class InfluenceCalculator:
    """Weighted combination of centrality measures.

    Formula:
        score = 0.3 * degree/n + 0.4 * betweenness
              + 0.15 * clustering + 0.15 * eigenvector
    """

    DEFAULT_WEIGHTS = {
        "degree": 0.3,
        "betweenness": 0.4,
        "clustering": 0.15,
        "eigenvector": 0.15,
    }

    def __init__(
        self,
        weights: Optional[dict[str, float]] = None,
        max_iterations: int = 100,
        tolerance: float = 1e-6,
    ):
        """Initialize calculator.

        Args:
            weights: Per-factor weights (missing factors use defaults)
            max_iterations: Power iteration limit for eigenvector centrality
            tolerance: Convergence threshold for eigenvector centrality
        """
        self.weights = self.DEFAULT_WEIGHTS.copy()
        if weights:
            for key, value in weights.items():
                if key not in self.weights:
                    logger.warning(f"Unknown influence factor: {key}")
                    continue
                self.weights[key] = value
        self.max_iterations = max_iterations
        self.tolerance = tolerance

    def eigenvector_centrality(self, graph: NetworkGraph) -> dict[str, float]:
        """Eigenvector centrality (L2-normalised), falling back to PageRank
        when the power iteration does not converge."""
        if graph.node_count == 0:
            return {}

        nx_graph = graph.to_networkx()
        try:
            centrality = nx.eigenvector_centrality(
                nx_graph, max_iter=self.max_iterations, tol=self.tolerance
            )
        except nx.PowerIterationFailedConvergence:
            logger.warning(
                f"Eigenvector centrality did not converge in {self.max_iterations} "
                f"iterations, using PageRank instead"
            )
            centrality = nx.pagerank(nx_graph)

        return {node_id: float(centrality[node_id]) for node_id in graph.node_ids}

    def calculate(self, graph: NetworkGraph) -> list[InfluenceScore]:
        """Score and rank every contact.

        Returns:
            InfluenceScore list, highest first (ties by contact id)
        """
        n = graph.node_count
        if n == 0:
            return []

        betweenness = betweenness_centrality(graph)
        clustering = clustering_coefficients(graph)
        eigenvector = self.eigenvector_centrality(graph)

        rows = []
        for node_id in graph.node_ids:
            factors = {
                "degree": graph.degree(node_id) / n,
                "betweenness": betweenness[node_id],
                "clustering": clustering[node_id],
                "eigenvector": max(0.0, eigenvector[node_id]),
            }
            score = sum(self.weights[k] * v for k, v in factors.items())
            rows.append((node_id, score * 100, factors))

        rows.sort(key=lambda row: (-row[1], row[0]))

        return [
            InfluenceScore(
                contact_id=node_id,
                score=max(0.0, score),
                rank=rank,
                **factors,
            )
            for rank, (node_id, score, factors) in enumerate(rows, 1)
        ]


def calculate_influence_scores(graph: NetworkGraph) -> list[InfluenceScore]:
    """Convenience function using default weights."""
    return InfluenceCalculator().calculate(graph)
