"""Elision of pass-through nodes.

Given ``a -> main -> c`` the graph becomes ``a -> c``.  Candidates are nodes
named ``main`` (``tasks/main.yml``, ``vars/main.yml``) and role default
varsets.  Their outgoing edges are re-created from their predecessors with
the same attributes, kind and origin; their incoming edges are dropped.

A candidate with several predecessors is fanned out: each outgoing edge is
duplicated once per distinct predecessor.  A candidate without predecessors
is simply removed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ansible_viz.graph.model import NodeType

if TYPE_CHECKING:
    from ansible_viz.graph.model import Graph, Node

logger = logging.getLogger(__name__)

PASS_THROUGH_NAME = "main"


@dataclass
class ElisionResult:
    """Summary of an elision pass."""

    elided: list[str] = field(default_factory=list)
    rerouted: int = 0
    fanned_out: list[str] = field(default_factory=list)


def is_pass_through(node: Node) -> bool:
    """Whether *node* is an elision candidate."""
    if node.record is None:
        return False
    if node.name == PASS_THROUGH_NAME:
        return True
    return node.type is NodeType.VARSET and node.defaults


def elide_node(graph: Graph, node: Node) -> int:
    """Reroute *node*'s outgoing edges to its predecessors and cut it.

    Returns the number of edges created.
    """
    preds = [p for p in graph.predecessors(node) if p is not node]
    created = 0
    for edge in graph.outgoing(node):
        if edge.dst == node.id:
            continue
        for pred in preds:
            graph.add_edge(
                pred,
                edge.dst,
                edge.attrs,
                kind=edge.kind,
                origin=edge.origin,
                owner=node.id,
            )
            created += 1
    graph.cut(node)
    return created


def elide(graph: Graph) -> ElisionResult:
    """Elide every pass-through node of *graph* in place.

    Candidates are collected once, before any rewriting, and visited in node
    order.  Predecessors are read at visit time, so a chain of candidates
    collapses onto the first non-candidate ancestor.
    """
    result = ElisionResult()
    for node in graph.find_nodes(is_pass_through):
        preds = graph.predecessors(node)
        if len(preds) > 1:
            logger.debug(
                "Fanning out %s to %d predecessors: %s",
                node.id,
                len(preds),
                ", ".join(p.id for p in preds),
            )
            result.fanned_out.append(node.id)
        elif not preds:
            logger.debug("Removing %s: no predecessor to reroute to", node.id)
        result.rerouted += elide_node(graph, node)
        result.elided.append(node.id)

    logger.debug(
        "Elided %d nodes, rerouted %d edges", len(result.elided), result.rerouted
    )
    return result
