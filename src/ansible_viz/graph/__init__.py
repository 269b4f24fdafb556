"""Graph domain: model, builder, elision, decoration, filters, legend, export."""

from ansible_viz.graph.builder import GraphBuilder, build_graph
from ansible_viz.graph.decorate import (
    ROLE_UNUSED_SUFFIX,
    UNDEFINED_SUFFIX,
    UNUSED_SUFFIX,
    DecorationResult,
    classify,
    decorate,
)
from ansible_viz.graph.elision import ElisionResult, elide, is_pass_through
from ansible_viz.graph.export import graph_to_dict, graph_to_json
from ansible_viz.graph.filters import drop_vars, exclude_edges, exclude_nodes
from ansible_viz.graph.legend import make_legend
from ansible_viz.graph.model import (
    DanglingEndpointError,
    DuplicateIdError,
    Edge,
    EdgeKind,
    Graph,
    GraphError,
    MissingFqnError,
    Node,
    NodeType,
    Origin,
    UnknownAttributeError,
)
from ansible_viz.graph.styles import (
    DEFAULT_STYLES,
    Category,
    EdgeStyle,
    Style,
    StyleTable,
    hsl,
    rank_for,
)

__all__ = [
    "DEFAULT_STYLES",
    "ROLE_UNUSED_SUFFIX",
    "UNDEFINED_SUFFIX",
    "UNUSED_SUFFIX",
    "Category",
    "DanglingEndpointError",
    "DecorationResult",
    "DuplicateIdError",
    "Edge",
    "EdgeKind",
    "EdgeStyle",
    "ElisionResult",
    "Graph",
    "GraphBuilder",
    "GraphError",
    "MissingFqnError",
    "Node",
    "NodeType",
    "Origin",
    "Style",
    "StyleTable",
    "UnknownAttributeError",
    "build_graph",
    "classify",
    "decorate",
    "drop_vars",
    "elide",
    "exclude_edges",
    "exclude_nodes",
    "graph_to_dict",
    "graph_to_json",
    "hsl",
    "is_pass_through",
    "make_legend",
    "rank_for",
]
