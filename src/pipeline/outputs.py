"""
Output Generation

Generates CSV, Markdown, and JSON reports from network graph analysis.
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from src.models.centrality import get_connectors
from src.models.communities import detect_communities
from src.models.entities import (
    Community,
    ConnectionDiagnostics,
    ConnectorScore,
    IntroductionPath,
    NetworkSummary,
)
from src.models.graph import NetworkGraph
from src.models.metrics import summarize_network
from src.utils.config import Config

logger = logging.getLogger(__name__)


def _csv_text(value: Optional[str]) -> str:
    """Quote a text field for CSV output."""
    return '"' + (value or "").replace('"', '""') + '"'


class OutputGenerator:
    """Generates various output formats from graph analysis results."""

    def __init__(
        self,
        output_dir: str | Path = "./outputs",
        formats: Optional[list[str]] = None,
        timestamp_filenames: bool = True,
        max_items_per_section: int = 20,
        include_methodology: bool = True,
    ):
        """Initialize output generator.

        Args:
            output_dir: Directory for output files
            formats: List of formats to generate (csv, markdown, json)
            timestamp_filenames: Whether to include timestamp in filenames
            max_items_per_section: Maximum items per report section
            include_methodology: Whether to include methodology in reports
        """
        self.output_dir = Path(output_dir)
        self.formats = formats or ["csv", "markdown", "json"]
        self.timestamp_filenames = timestamp_filenames
        self.max_items_per_section = max_items_per_section
        self.include_methodology = include_methodology

        # Create output directory
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def _get_filename(self, base_name: str, extension: str) -> Path:
        """Generate output filename."""
        if self.timestamp_filenames:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            filename = f"{base_name}_{timestamp}.{extension}"
        else:
            filename = f"{base_name}.{extension}"
        return self.output_dir / filename

    def _connectors_to_csv(self, connectors: list[ConnectorScore]) -> str:
        """Convert connector rankings to CSV format."""
        lines = ["rank,contact_id,name,centrality,degree"]

        for c in connectors:
            lines.append(
                f"{c.rank},"
                f"{_csv_text(c.contact_id)},"
                f"{_csv_text(c.name)},"
                f"{c.centrality:.6f},"
                f"{c.degree}"
            )

        return "\n".join(lines)

    def _paths_to_csv(self, paths: list[IntroductionPath]) -> str:
        """Convert introduction paths to CSV format."""
        lines = ["rank,hops,warmth_score,path"]

        for i, p in enumerate(paths, 1):
            names = " > ".join(c.display_name for c in p.contacts)
            lines.append(f"{i},{p.hops},{p.warmth_score},{_csv_text(names)}")

        return "\n".join(lines)

    def _generate_summary_md(
        self,
        summary: NetworkSummary,
        diagnostics: Optional[ConnectionDiagnostics],
    ) -> str:
        """Generate network summary markdown report."""
        metrics = summary.metrics
        lines = ["# Network Summary\n"]

        lines.extend([
            f"*Generated: {datetime.now().strftime('%Y-%m-%d %H:%M')}*\n",
            "## Overview\n",
            "| Metric | Value |",
            "|--------|-------|",
            f"| Contacts | {metrics.total_nodes} |",
            f"| Connections | {metrics.total_edges} |",
            f"| Average degree | {metrics.avg_degree:.2f} |",
            f"| Network density | {metrics.network_density:.3f} |",
            f"| Components | {summary.component_count} |",
            f"| Largest component | {summary.largest_component_size} |",
            f"| Average path length | {summary.avg_path_length:.2f} |",
            f"| Average clustering | {summary.avg_clustering:.3f} |",
        ])

        if diagnostics is not None:
            lines.extend([
                "\n## Connection Data Quality\n",
                f"- **References declared**: {diagnostics.total_connection_references}",
                f"- **Matched**: {diagnostics.matched_connections} ({diagnostics.match_rate}%)",
                f"- **Self references**: {diagnostics.self_references}",
                f"- **Unmatched ids**: {len(diagnostics.unmatched_connections)}",
                f"- **Isolated contacts**: {len(diagnostics.isolated_contacts)}",
            ])

        if summary.key_connectors:
            lines.extend([
                "\n## Key Connectors\n",
                "| Rank | Name | Degree | Centrality |",
                "|------|------|--------|------------|",
            ])
            for c in summary.key_connectors:
                lines.append(f"| {c.rank} | {c.name} | {c.degree} | {c.centrality:.3f} |")

        return "\n".join(lines)

    def _generate_connectors_md(self, connectors: list[ConnectorScore]) -> str:
        """Generate connector ranking markdown report."""
        lines = ["# Key Connectors\n"]

        if self.include_methodology:
            lines.extend([
                "## Methodology\n",
                "Connectors are ranked by betweenness centrality: the share of "
                "shortest paths between other contacts that pass through them.\n",
                "- **High centrality**: bridges between otherwise separate groups",
                "- **Zero centrality**: not on anyone's shortest path\n",
            ])

        lines.extend([
            f"*Generated: {datetime.now().strftime('%Y-%m-%d %H:%M')}*\n",
            "| Rank | Name | ID | Degree | Centrality |",
            "|------|------|----|--------|------------|",
        ])

        for c in connectors[:self.max_items_per_section]:
            lines.append(f"| {c.rank} | {c.name} | {c.contact_id} | {c.degree} | {c.centrality:.4f} |")

        return "\n".join(lines)

    def _generate_paths_md(
        self,
        paths: list[IntroductionPath],
        from_name: str,
        to_name: str,
    ) -> str:
        """Generate introduction paths markdown report."""
        lines = [f"# Introduction Paths: {from_name} to {to_name}\n"]

        if self.include_methodology:
            lines.extend([
                "## Methodology\n",
                "Warmth starts at 100 for a direct connection and drops by 25 "
                "for every additional intermediary (minimum 1).\n",
            ])

        if not paths:
            lines.append("*No introduction path found.*")
            return "\n".join(lines)

        for i, p in enumerate(paths[:self.max_items_per_section], 1):
            route = " > ".join(c.display_name for c in p.contacts)
            lines.extend([
                f"### Path {i} (warmth {p.warmth_score}, {p.hops} hops)\n",
                route + "\n",
            ])
            for contact in p.intermediaries:
                detail = ", ".join(v for v in (contact.position, contact.company) if v)
                lines.append(f"- Ask **{contact.display_name}**" + (f" ({detail})" if detail else ""))
            lines.append("")

        return "\n".join(lines)

    def _generate_communities_md(self, communities: list[Community], graph: NetworkGraph) -> str:
        """Generate communities markdown report."""
        lines = ["# Network Communities\n"]

        lines.extend([
            f"*Communities detected: {len(communities)}*\n",
            "| # | Size | Density | Avg Degree | Members |",
            "|---|------|---------|------------|---------|",
        ])

        for i, c in enumerate(communities[:self.max_items_per_section], 1):
            names = [graph.nodes[m].contact.display_name for m in c.member_ids[:5]]
            if c.size > 5:
                names.append(f"+{c.size - 5} more")
            lines.append(
                f"| {i} | {c.size} | {c.density:.2f} | {c.avg_degree:.2f} | {', '.join(names)} |"
            )

        return "\n".join(lines)

    def generate_network_summary(
        self,
        summary: NetworkSummary,
        diagnostics: Optional[ConnectionDiagnostics] = None,
    ) -> dict[str, Path]:
        """Generate network summary reports.

        Returns:
            Dictionary of format -> filepath
        """
        generated = {}

        if "markdown" in self.formats:
            md_content = self._generate_summary_md(summary, diagnostics)
            filepath = self._get_filename("network_summary", "md")
            filepath.write_text(md_content)
            generated["markdown"] = filepath

        if "json" in self.formats:
            json_data = {
                "generated_at": datetime.now().isoformat(),
                "summary": summary.model_dump(),
                "diagnostics": diagnostics.model_dump() if diagnostics else None,
            }
            filepath = self._get_filename("network_summary", "json")
            filepath.write_text(json.dumps(json_data, indent=2, default=str))
            generated["json"] = filepath

        logger.info(f"Generated network summary reports: {list(generated.keys())}")
        return generated

    def generate_connectors(self, connectors: list[ConnectorScore]) -> dict[str, Path]:
        """Generate connector ranking reports."""
        generated = {}

        if "csv" in self.formats:
            filepath = self._get_filename("key_connectors", "csv")
            filepath.write_text(self._connectors_to_csv(connectors))
            generated["csv"] = filepath

        if "markdown" in self.formats:
            filepath = self._get_filename("key_connectors", "md")
            filepath.write_text(self._generate_connectors_md(connectors))
            generated["markdown"] = filepath

        if "json" in self.formats:
            filepath = self._get_filename("key_connectors", "json")
            filepath.write_text(json.dumps([c.model_dump() for c in connectors], indent=2))
            generated["json"] = filepath

        logger.info(f"Generated connector reports: {list(generated.keys())}")
        return generated

    def generate_introduction_paths(
        self,
        paths: list[IntroductionPath],
        from_name: str,
        to_name: str,
    ) -> dict[str, Path]:
        """Generate introduction path reports."""
        generated = {}

        # Sanitize names for filename
        safe = "".join(c if c.isalnum() else "_" for c in f"{from_name}_to_{to_name}".lower())

        if "csv" in self.formats:
            filepath = self._get_filename(f"paths_{safe}", "csv")
            filepath.write_text(self._paths_to_csv(paths))
            generated["csv"] = filepath

        if "markdown" in self.formats:
            filepath = self._get_filename(f"paths_{safe}", "md")
            filepath.write_text(self._generate_paths_md(paths, from_name, to_name))
            generated["markdown"] = filepath

        if "json" in self.formats:
            json_data = {
                "from": from_name,
                "to": to_name,
                "paths": [
                    {
                        "contact_ids": list(p.contact_ids),
                        "names": [c.display_name for c in p.contacts],
                        "hops": p.hops,
                        "warmth_score": p.warmth_score,
                    }
                    for p in paths
                ],
            }
            filepath = self._get_filename(f"paths_{safe}", "json")
            filepath.write_text(json.dumps(json_data, indent=2))
            generated["json"] = filepath

        logger.info(f"Generated introduction path reports: {list(generated.keys())}")
        return generated

    def generate_communities(
        self,
        communities: list[Community],
        graph: NetworkGraph,
    ) -> dict[str, Path]:
        """Generate community reports."""
        generated = {}

        if "markdown" in self.formats:
            filepath = self._get_filename("communities", "md")
            filepath.write_text(self._generate_communities_md(communities, graph))
            generated["markdown"] = filepath

        if "json" in self.formats:
            json_data = [
                {**c.model_dump(), "size": c.size}
                for c in communities
            ]
            filepath = self._get_filename("communities", "json")
            filepath.write_text(json.dumps(json_data, indent=2))
            generated["json"] = filepath

        logger.info(f"Generated community reports: {list(generated.keys())}")
        return generated


def generate_outputs(
    graph: NetworkGraph,
    diagnostics: Optional[ConnectionDiagnostics] = None,
    output_dir: str | Path = "./outputs",
    formats: Optional[list[str]] = None,
    config: Optional[Config] = None,
) -> dict[str, dict[str, Path]]:
    """Convenience function to generate all graph reports.

    Args:
        graph: Network graph
        diagnostics: Connection diagnostics from the build step
        output_dir: Output directory
        formats: Formats to generate (default: config.output.formats)
        config: Analysis and report settings (default: built-in defaults)

    Returns:
        Dictionary of report_type -> format -> filepath
    """
    config = config or Config()
    settings = config.connectors

    generator = OutputGenerator(
        output_dir=output_dir,
        formats=formats or config.output.formats,
        timestamp_filenames=config.output.timestamp_filenames,
        max_items_per_section=config.output.markdown.max_items_per_section,
        include_methodology=config.output.markdown.include_methodology,
    )

    summary = summarize_network(
        graph,
        key_connectors=config.metrics.key_connectors,
        path_length_sample=config.metrics.path_length_sample,
        min_degree=config.connectors.min_degree,
        normalized=config.connectors.normalized,
        sample_size=config.connectors.sample_size,
        seed=config.connectors.seed,
        workers=config.connectors.workers,
    )
    connectors = get_connectors(
        graph,
        top_n=settings.top_n,
        min_degree=settings.min_degree,
        normalized=settings.normalized,
        sample_size=settings.sample_size,
        seed=settings.seed,
        workers=settings.workers,
    )
    communities = detect_communities(
        graph, max_iterations=config.metrics.community_max_iterations
    )

    results = {
        "network_summary": generator.generate_network_summary(summary, diagnostics),
        "key_connectors": generator.generate_connectors(connectors),
        "communities": generator.generate_communities(communities, graph),
    }

    # Drop report types that produced nothing in the requested formats
    return {name: files for name, files in results.items() if files}
