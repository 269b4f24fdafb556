"""ansible-viz CLI entry point."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import click

from ansible_viz import __version__

if TYPE_CHECKING:
    from ansible_viz.pipeline import PipelineResult


@click.group()
@click.version_option(version=__version__, prog_name="ansible-viz")
@click.option("--verbose", "-v", is_flag=True, help="Show debugging output.")
@click.option("--quiet", "-q", is_flag=True, help="Minimal output (errors only).")
@click.pass_context
def main(ctx: click.Context, *, verbose: bool, quiet: bool) -> None:
    """ansible-viz - dependency graphs for Ansible playbooks and roles."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet

    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _print_stats(result: PipelineResult) -> None:
    """Print category counts and stage summaries to stderr."""
    from rich.console import Console
    from rich.table import Table

    console = Console(stderr=True)

    counts = result.decoration.by_category()
    table = Table(title="By Category", show_header=False, box=None, padding=(0, 1))
    table.add_column("category", style="cyan")
    table.add_column("count", justify="right")
    for category in sorted(counts, key=lambda c: c.value):
        table.add_row(category.value, str(counts[category]))
    console.print(table)
    console.print()

    console.print(
        f"  Nodes: [bold]{len(result.graph)}[/]   "
        f"Edges: [bold]{len(result.graph.edges)}[/]   "
        f"Elided: [bold]{len(result.elision.elided)}[/]   "
        f"Excluded: [bold]{result.nodes_excluded}[/] nodes, "
        f"[bold]{result.edges_excluded}[/] edges"
    )


@main.command()
@click.argument(
    "input_path",
    metavar="INPUT",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Options file (default: ./ansible-viz.yml when present).",
)
@click.option("--vars/--no-vars", "show_vars", default=None, help="Include vars.")
@click.option(
    "--usage/--no-usage",
    "show_usage",
    default=None,
    help="Connect vars to where they're used.",
)
@click.option("--legend/--no-legend", "with_legend", default=None, help="Include the legend.")
@click.option(
    "--exclude-nodes",
    "-e",
    "exclude_nodes",
    default=None,
    metavar="REGEXP",
    help="Regexp of nodes to exclude, e.g. 'role:myrole[1-3]|task:mytask[4-6]'.",
)
@click.option(
    "--exclude-edges",
    "-E",
    "exclude_edges",
    default=None,
    metavar="REGEXP",
    help="Regexp of edges to exclude, e.g. 'role:myrole[1-3] -> task:mytask[4-6]'.",
)
@click.option(
    "--output",
    "-o",
    "output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Where to write the graph JSON (default: stdout).",
)
@click.option("--stats", is_flag=True, help="Print category counts to stderr.")
def graph(
    input_path: Path,
    *,
    config_path: Path | None,
    show_vars: bool | None,
    show_usage: bool | None,
    with_legend: bool | None,
    exclude_nodes: str | None,
    exclude_edges: str | None,
    output: Path | None,
    stats: bool,
) -> None:
    """Build the decorated dependency graph for a resolved INPUT file."""
    from ansible_viz.config import (
        CONFIG_FILENAME,
        ConfigError,
        compile_pattern,
        load_options,
        merge_options,
    )
    from ansible_viz.graph import GraphError, graph_to_json
    from ansible_viz.input_loader import InputError, load_input
    from ansible_viz.pipeline import build_document, run_pipeline

    if config_path is None:
        config_path = Path.cwd() / CONFIG_FILENAME

    try:
        options = merge_options(
            load_options(config_path),
            show_vars=show_vars,
            show_usage=show_usage,
            with_legend=with_legend,
            exclude_nodes=compile_pattern(exclude_nodes, name="exclude-nodes"),
            exclude_edges=compile_pattern(exclude_edges, name="exclude-edges"),
        )
    except ConfigError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(2)

    try:
        data = load_input(input_path)
        result = run_pipeline(data, options)
    except (InputError, GraphError) as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    document = build_document(result.graph, with_legend=options.with_legend)
    text = graph_to_json(document)

    if output is None:
        click.echo(text)
    else:
        output.write_text(text + "\n", encoding="utf-8")
        click.echo(f"Wrote {output}", err=True)

    if stats:
        _print_stats(result)
