"""
Data Models and Graph Algorithms

Pydantic models for contacts and query results, plus the network graph
engine built on them.
"""

from src.models.entities import (
    ContactRecord,
    GraphNode,
    Edge,
    NetworkMetrics,
    ConnectionDiagnostics,
    IntroductionPath,
    MutualConnection,
    ConnectorScore,
    Community,
    InfluenceScore,
    NetworkSummary,
)
from src.models.errors import InvalidBoundError
from src.models.graph import (
    NetworkGraph,
    GraphBuilder,
    build_graph,
    build_graph_with_diagnostics,
)
from src.models.metrics import (
    calculate_metrics,
    clustering_coefficients,
    connected_components,
    summarize_network,
)
from src.models.mutuals import mutual_connections, mutual_connection_details
from src.models.paths import find_path, find_all_paths, warmth_score
from src.models.centrality import betweenness_centrality, get_connectors
from src.models.communities import detect_communities
from src.models.influence import InfluenceCalculator, calculate_influence_scores

__all__ = [
    "ContactRecord",
    "GraphNode",
    "Edge",
    "NetworkMetrics",
    "ConnectionDiagnostics",
    "IntroductionPath",
    "MutualConnection",
    "ConnectorScore",
    "Community",
    "InfluenceScore",
    "NetworkSummary",
    "InvalidBoundError",
    "NetworkGraph",
    "GraphBuilder",
    "build_graph",
    "build_graph_with_diagnostics",
    "calculate_metrics",
    "clustering_coefficients",
    "connected_components",
    "summarize_network",
    "mutual_connections",
    "mutual_connection_details",
    "find_path",
    "find_all_paths",
    "warmth_score",
    "betweenness_centrality",
    "get_connectors",
    "detect_communities",
    "InfluenceCalculator",
    "calculate_influence_scores",
]
