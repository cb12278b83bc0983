"""
Contact Network Graph CLI

Command-line interface for analysing contact snapshots as a relationship graph.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

# Initialize console for rich output
console = Console()


def setup_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """Configure logging with rich handler."""
    handlers = [RichHandler(console=console, show_path=False)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(message)s",
        handlers=handlers,
        force=True,
    )


def _load_graph(ctx: click.Context, input_file: str):
    """Load a snapshot and build its graph, exiting on failure."""
    from src.models.graph import build_graph_with_diagnostics
    from src.pipeline.ingest import load_contacts
    from src.pipeline.normalize import resolve_connection_names

    config = ctx.obj["config"]

    try:
        snapshot = load_contacts(input_file)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error loading snapshot: {e}[/red]")
        sys.exit(1)

    contacts = snapshot.contacts
    if config.resolution.enabled:
        contacts = resolve_connection_names(
            contacts, threshold=config.resolution.fuzzy_threshold
        )

    graph, diagnostics = build_graph_with_diagnostics(contacts)
    return graph, diagnostics


def _require_contact(graph, contact_id: str) -> None:
    if not graph.has_node(contact_id):
        console.print(f"[yellow]Unknown contact: {contact_id}[/yellow]")


def _print_path_table(paths) -> None:
    table = Table(show_header=True, header_style="bold")
    table.add_column("#", justify="right")
    table.add_column("Route")
    table.add_column("Hops", justify="right")
    table.add_column("Warmth", justify="right")

    for i, p in enumerate(paths, 1):
        table.add_row(
            str(i),
            " > ".join(c.display_name for c in p.contacts),
            str(p.hops),
            str(p.warmth_score),
        )

    console.print(table)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output")
@click.option(
    "--config", "-c",
    "config_path",
    default=None,
    type=click.Path(exists=True, dir_okay=False),
    help="Path to config.yaml",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, quiet: bool, config_path: Optional[str]) -> None:
    """Contact Network Graph - find connectors and warm introduction paths."""
    from src.utils.config import load_config

    ctx.ensure_object(dict)

    config = load_config(Path(config_path) if config_path else None)
    ctx.obj["config"] = config

    if verbose:
        ctx.obj["log_level"] = "DEBUG"
    elif quiet:
        ctx.obj["log_level"] = "WARNING"
    else:
        ctx.obj["log_level"] = config.logging.level

    setup_logging(ctx.obj["log_level"], config.logging.file)


input_option = click.option(
    "--input", "-i",
    "input_file",
    required=True,
    type=click.Path(exists=True, dir_okay=False),
    help="Contact snapshot file (.json or .csv)",
)


@cli.command()
@input_option
@click.pass_context
def stats(ctx: click.Context, input_file: str) -> None:
    """Show network metrics and connection data quality."""
    from src.models.metrics import summarize_network

    config = ctx.obj["config"]
    graph, diagnostics = _load_graph(ctx, input_file)
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
    metrics = summary.metrics

    console.print("\n[bold blue]Network Statistics[/bold blue]")
    console.print("=" * 50)

    table = Table(show_header=False)
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")

    table.add_row("Contacts", str(metrics.total_nodes))
    table.add_row("Connections", str(metrics.total_edges))
    table.add_row("Average degree", f"{metrics.avg_degree:.2f}")
    table.add_row("Network density", f"{metrics.network_density:.3f}")
    table.add_row("Components", str(summary.component_count))
    table.add_row("Largest component", str(summary.largest_component_size))
    table.add_row("Average path length", f"{summary.avg_path_length:.2f}")
    table.add_row("Average clustering", f"{summary.avg_clustering:.3f}")

    console.print(table)

    console.print("\n[bold]Connection Data Quality:[/bold]")
    console.print(f"  • References declared: {diagnostics.total_connection_references}")
    console.print(f"  • Matched: {diagnostics.matched_connections} ({diagnostics.match_rate}%)")
    console.print(f"  • Self references: {diagnostics.self_references}")
    console.print(f"  • Unmatched ids: {len(diagnostics.unmatched_connections)}")
    console.print(f"  • Isolated contacts: {len(diagnostics.isolated_contacts)}")
    console.print()


@cli.command()
@input_option
@click.argument("from_id")
@click.argument("to_id")
@click.option("--max-depth", type=click.IntRange(min=0), default=None, help="Maximum hops")
@click.pass_context
def path(
    ctx: click.Context,
    input_file: str,
    from_id: str,
    to_id: str,
    max_depth: Optional[int],
) -> None:
    """Find the shortest introduction path between two contacts."""
    from src.models.paths import find_path

    graph, _ = _load_graph(ctx, input_file)
    _require_contact(graph, from_id)
    _require_contact(graph, to_id)

    result = find_path(graph, from_id, to_id, max_depth=max_depth)

    if result is None:
        console.print(f"\n[yellow]No introduction path from {from_id} to {to_id}[/yellow]")
        return

    console.print(f"\n[bold]Introduction path ({result.hops} hops, warmth {result.warmth_score}):[/bold]")
    _print_path_table([result])


@cli.command()
@input_option
@click.argument("from_id")
@click.argument("to_id")
@click.option("--max-depth", type=click.IntRange(min=0), default=None, help="Maximum hops per path")
@click.option("--max-paths", type=click.IntRange(min=0), default=None, help="Maximum paths to return")
@click.option(
    "--output", "-o",
    "output_dir",
    default=None,
    type=click.Path(file_okay=False, dir_okay=True),
    help="Also write path reports to this directory",
)
@click.pass_context
def paths(
    ctx: click.Context,
    input_file: str,
    from_id: str,
    to_id: str,
    max_depth: Optional[int],
    max_paths: Optional[int],
    output_dir: Optional[str],
) -> None:
    """List several introduction routes, warmest first."""
    from src.models.paths import find_all_paths
    from src.pipeline.outputs import OutputGenerator

    config = ctx.obj["config"]
    graph, _ = _load_graph(ctx, input_file)
    _require_contact(graph, from_id)
    _require_contact(graph, to_id)

    results = find_all_paths(
        graph,
        from_id,
        to_id,
        max_depth=config.graph.max_depth if max_depth is None else max_depth,
        max_paths=config.graph.max_paths if max_paths is None else max_paths,
        candidate_cap=config.graph.candidate_cap,
    )

    if output_dir:
        generator = OutputGenerator(
            output_dir=output_dir,
            formats=config.output.formats,
            timestamp_filenames=config.output.timestamp_filenames,
            max_items_per_section=config.output.markdown.max_items_per_section,
            include_methodology=config.output.markdown.include_methodology,
        )
        from_contact = graph.get_contact(from_id)
        to_contact = graph.get_contact(to_id)
        files = generator.generate_introduction_paths(
            results,
            from_contact.display_name if from_contact else from_id,
            to_contact.display_name if to_contact else to_id,
        )
        for fmt, filepath in files.items():
            console.print(f"  • {fmt}: [cyan]{filepath}[/cyan]")

    if not results:
        console.print(f"\n[yellow]No introduction paths from {from_id} to {to_id}[/yellow]")
        return

    console.print(f"\n[bold]Found {len(results)} introduction paths:[/bold]\n")
    _print_path_table(results)


@cli.command()
@input_option
@click.argument("contact_id")
@click.pass_context
def mutuals(ctx: click.Context, input_file: str, contact_id: str) -> None:
    """List friend-of-a-friend contacts for introductions."""
    from src.models.mutuals import mutual_connection_details

    graph, _ = _load_graph(ctx, input_file)
    _require_contact(graph, contact_id)

    details = mutual_connection_details(graph, contact_id)
    if not details:
        console.print(f"\n[yellow]No second-degree contacts for {contact_id}[/yellow]")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("Name")
    table.add_column("Via")
    table.add_column("Mutuals", justify="right")

    for m in details:
        via_names = [graph.nodes[v].contact.display_name for v in m.via]
        table.add_row(m.name, ", ".join(via_names), str(m.mutual_count))

    console.print(table)


@cli.command()
@input_option
@click.option("--top", "-n", "top_n", type=click.IntRange(min=0), default=None, help="Number of connectors")
@click.option("--min-degree", type=click.IntRange(min=0), default=None, help="Minimum connections")
@click.option("--sample-size", type=click.IntRange(min=0), default=None, help="Approximate with N sources")
@click.option("--workers", type=click.IntRange(min=1), default=None, help="Threads for centrality")
@click.pass_context
def connectors(
    ctx: click.Context,
    input_file: str,
    top_n: Optional[int],
    min_degree: Optional[int],
    sample_size: Optional[int],
    workers: Optional[int],
) -> None:
    """Rank key connectors by betweenness centrality."""
    from src.models.centrality import get_connectors

    settings = ctx.obj["config"].connectors
    graph, _ = _load_graph(ctx, input_file)

    ranked = get_connectors(
        graph,
        top_n=settings.top_n if top_n is None else top_n,
        min_degree=settings.min_degree if min_degree is None else min_degree,
        normalized=settings.normalized,
        sample_size=settings.sample_size if sample_size is None else sample_size,
        seed=settings.seed,
        workers=settings.workers if workers is None else workers,
    )

    table = Table(show_header=True, header_style="bold")
    table.add_column("#", justify="right")
    table.add_column("Name")
    table.add_column("Degree", justify="right")
    table.add_column("Centrality", justify="right")

    for c in ranked:
        table.add_row(str(c.rank), c.name, str(c.degree), f"{c.centrality:.4f}")

    console.print(table)


@cli.command()
@input_option
@click.pass_context
def communities(ctx: click.Context, input_file: str) -> None:
    """Detect clusters of closely connected contacts."""
    from src.models.communities import detect_communities

    config = ctx.obj["config"]
    graph, _ = _load_graph(ctx, input_file)
    found = detect_communities(graph, max_iterations=config.metrics.community_max_iterations)

    table = Table(show_header=True, header_style="bold")
    table.add_column("#", justify="right")
    table.add_column("Size", justify="right")
    table.add_column("Density", justify="right")
    table.add_column("Members")

    for i, c in enumerate(found, 1):
        names = [graph.nodes[m].contact.display_name for m in c.member_ids]
        table.add_row(str(i), str(c.size), f"{c.density:.2f}", ", ".join(names))

    console.print(table)


@cli.command()
@input_option
@click.option("--top", "-n", "top_n", type=click.IntRange(min=0), default=10, help="Number of contacts")
@click.pass_context
def influence(ctx: click.Context, input_file: str, top_n: int) -> None:
    """Rank contacts by composite influence score."""
    from src.models.influence import calculate_influence_scores

    graph, _ = _load_graph(ctx, input_file)
    scores = calculate_influence_scores(graph)[:top_n]

    table = Table(show_header=True, header_style="bold")
    table.add_column("#", justify="right")
    table.add_column("Name")
    table.add_column("Score", justify="right")
    table.add_column("Betweenness", justify="right")
    table.add_column("Clustering", justify="right")

    for s in scores:
        table.add_row(
            str(s.rank),
            graph.nodes[s.contact_id].contact.display_name,
            f"{s.score:.1f}",
            f"{s.betweenness:.3f}",
            f"{s.clustering:.2f}",
        )

    console.print(table)


@cli.command()
@input_option
@click.option(
    "--output", "-o",
    "output_dir",
    default=None,
    type=click.Path(file_okay=False, dir_okay=True),
    help="Output directory for reports",
)
@click.option(
    "--format", "-f",
    "formats",
    multiple=True,
    type=click.Choice(["csv", "markdown", "json"]),
    help="Output formats to generate",
)
@click.pass_context
def report(
    ctx: click.Context,
    input_file: str,
    output_dir: Optional[str],
    formats: tuple[str, ...],
) -> None:
    """Generate network summary, connector and community reports."""
    from src.pipeline.outputs import generate_outputs

    config = ctx.obj["config"]
    graph, diagnostics = _load_graph(ctx, input_file)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
    ) as progress:
        task = progress.add_task("Generating reports...", total=None)
        output_files = generate_outputs(
            graph,
            diagnostics,
            output_dir=output_dir or config.output.directory,
            formats=list(formats) or None,
            config=config,
        )
        progress.update(task, completed=True)

    console.print("\n[bold]Reports Generated:[/bold]")
    for report_type, files in output_files.items():
        for fmt, filepath in files.items():
            console.print(f"  • {report_type}.{fmt}: [cyan]{filepath}[/cyan]")


@cli.command()
@click.pass_context
def version(ctx: click.Context) -> None:
    """Show version information."""
    from src import __version__

    console.print(f"Contact Network Graph v{__version__}")


def main() -> None:
    """Entry point for the CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
