"""JSON-ready export of a decorated graph for the diagram renderer."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from ansible_viz.graph.styles import rank_for

if TYPE_CHECKING:
    from ansible_viz.graph.model import Edge, Graph, Node


def _node_to_dict(node: Node) -> dict[str, Any]:
    return {
        "id": node.id,
        "type": node.type.value if node.type is not None else None,
        "defaults": node.defaults,
        "rank": rank_for(node),
        "attrs": dict(node.attrs),
    }


def _edge_to_dict(edge: Edge) -> dict[str, Any]:
    return {
        "src": edge.src,
        "dst": edge.dst,
        "ordinal": edge.ordinal,
        "kind": edge.kind.value if edge.kind is not None else None,
        "attrs": dict(edge.attrs),
    }


def graph_to_dict(graph: Graph) -> dict[str, Any]:
    """Serialize *graph* and its sub-graphs, preserving insertion order."""
    return {
        "name": graph.name,
        "cluster": graph.is_cluster,
        "attrs": dict(graph.attrs),
        "nodes": [_node_to_dict(n) for n in graph.nodes],
        "edges": [_edge_to_dict(e) for e in graph.edges],
        "subgraphs": [graph_to_dict(sub) for sub in graph.subgraphs],
    }


def graph_to_json(graph: Graph, *, indent: int | None = 2) -> str:
    return json.dumps(graph_to_dict(graph), ensure_ascii=False, indent=indent)
