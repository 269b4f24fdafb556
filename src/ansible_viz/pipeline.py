"""Build -> elide -> decorate -> filter, for one annotated dictionary.

The stages run strictly in this order: variable classification reads the
incoming edges left after elision, and the filters key on the tooltips set
by decoration.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from ansible_viz.config import GraphOptions
from ansible_viz.graph.builder import build_graph
from ansible_viz.graph.decorate import DecorationResult, decorate
from ansible_viz.graph.elision import ElisionResult, elide
from ansible_viz.graph.filters import drop_vars, exclude_edges, exclude_nodes
from ansible_viz.graph.legend import make_legend
from ansible_viz.graph.model import Graph
from ansible_viz.graph.styles import DEFAULT_STYLES, StyleTable

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = logging.getLogger(__name__)

GRAPH_TITLE = "Ansible dependencies"


@dataclass
class PipelineResult:
    """The decorated graph plus what each stage did to it."""

    graph: Graph
    elision: ElisionResult = field(default_factory=ElisionResult)
    decoration: DecorationResult = field(default_factory=DecorationResult)
    vars_dropped: int = 0
    nodes_excluded: int = 0
    edges_excluded: int = 0


def run_pipeline(
    data: Mapping[str, Any],
    options: GraphOptions | None = None,
    *,
    styles: StyleTable = DEFAULT_STYLES,
) -> PipelineResult:
    """Turn the annotated dictionary into a decorated, filtered graph."""
    options = options or GraphOptions()

    logger.info("Building graph")
    graph = build_graph(data, styles=styles, show_usage=options.show_usage)
    graph.attrs.update({"tooltip": " ", "label": GRAPH_TITLE, "fontsize": 36})

    logger.info("Eliding pass-through nodes")
    result = PipelineResult(graph=graph)
    result.elision = elide(graph)

    logger.info("Decorating")
    result.decoration = decorate(graph, styles)

    if not options.show_vars:
        result.vars_dropped = drop_vars(graph)
    if options.exclude_nodes is not None:
        result.nodes_excluded = exclude_nodes(graph, options.exclude_nodes)
    if options.exclude_edges is not None:
        result.edges_excluded = exclude_edges(graph, options.exclude_edges)

    graph.attrs["rankdir"] = "LR"
    graph.name = "dependencies"
    graph.is_cluster = True
    logger.info("Graph ready: %d nodes, %d edges", len(graph), len(graph.edges))
    return result


def graph_from_data(
    data: Mapping[str, Any],
    options: GraphOptions | None = None,
    *,
    styles: StyleTable = DEFAULT_STYLES,
) -> Graph:
    return run_pipeline(data, options, styles=styles).graph


def build_document(
    graph: Graph,
    *,
    with_legend: bool = True,
    styles: StyleTable = DEFAULT_STYLES,
) -> Graph:
    """Wrap *graph* (and the legend) in the top-level document graph."""
    document = Graph(attrs={"rankdir": "LR", "ranksep": 2, "tooltip": " "})
    document.add_subgraph(graph)
    if with_legend:
        document.add_subgraph(make_legend(styles))
    return document
