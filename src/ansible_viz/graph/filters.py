"""Post-decoration filters applied on behalf of the command line."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from ansible_viz.graph.model import NodeType

if TYPE_CHECKING:
    from ansible_viz.graph.model import Edge, Graph, Node

logger = logging.getLogger(__name__)


def _compile(pattern: str | re.Pattern[str]) -> re.Pattern[str]:
    return pattern if isinstance(pattern, re.Pattern) else re.compile(pattern)


def node_text(node: Node) -> list[str]:
    """Texts a node exclusion pattern is matched against."""
    texts = [node.id]
    for key in ("label", "tooltip"):
        value = node.attrs.get(key)
        if value:
            texts.append(str(value))
    return texts


def edge_text(edge: Edge) -> list[str]:
    """Texts an edge exclusion pattern is matched against."""
    texts = [f"{edge.src} -> {edge.dst}"]
    for key in ("label", "tooltip"):
        value = edge.attrs.get(key)
        if value:
            texts.append(str(value))
    return texts


def drop_vars(graph: Graph) -> int:
    """Cut every variable node; returns the number of nodes removed."""
    to_cut = graph.find_nodes(lambda n: n.type is NodeType.VAR)
    graph.cut(*to_cut)
    logger.debug("Dropped %d variable nodes", len(to_cut))
    return len(to_cut)


def exclude_nodes(graph: Graph, pattern: str | re.Pattern[str]) -> int:
    """Cut nodes whose id, label or tooltip matches *pattern*.

    e.g. ``role:myrole[1-3]|task:mytask[4-6]``
    """
    regex = _compile(pattern)
    to_cut = graph.find_nodes(lambda n: any(regex.search(t) for t in node_text(n)))
    graph.cut(*to_cut)
    logger.debug("Excluded %d nodes matching %r", len(to_cut), regex.pattern)
    return len(to_cut)


def exclude_edges(graph: Graph, pattern: str | re.Pattern[str]) -> int:
    """Remove edges whose ``src -> dst`` text or tooltip matches *pattern*.

    e.g. ``role:myrole[1-3] -> task:mytask[4-6]``
    """
    regex = _compile(pattern)
    to_remove = [e for e in graph.edges if any(regex.search(t) for t in edge_text(e))]
    graph.remove_edges(*to_remove)
    logger.debug("Excluded %d edges matching %r", len(to_remove), regex.pattern)
    return len(to_remove)
