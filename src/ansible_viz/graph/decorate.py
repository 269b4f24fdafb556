"""Classification and decoration of graph nodes.

Must run after :func:`ansible_viz.graph.elision.elide`: variable categories
depend on the final incoming edges of each node.  Edge origins survive
elision, so a variable defined in a role's defaults still reads as
default-sourced once the defaults node is gone.

Variable categories, first match wins:

1. never used                                   -> ``var_unused``
2. not defined                                  -> ``var_undefined``
3. every incoming edge comes from role defaults -> ``var_default``
4. every incoming edge comes from a task        -> ``var_fact``
5. anything else                                -> ``var``

Rules 3 and 4 read the origin of every incoming edge, usage edges included.
A variable with no incoming edges at all matches rule 3.

Roles that nothing points at are flagged ``role_unused``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ansible_viz.graph.model import NodeType
from ansible_viz.graph.styles import (
    BASE_CATEGORIES,
    DEFAULT_STYLES,
    TYPE_NAMES,
    Category,
    StyleTable,
)

if TYPE_CHECKING:
    from ansible_viz.graph.model import Graph, Node

logger = logging.getLogger(__name__)

UNUSED_SUFFIX = ". UNUSED."
UNDEFINED_SUFFIX = ". UNDEFINED."
ROLE_UNUSED_SUFFIX = ". Unused by any playbook"


@dataclass
class DecorationResult:
    """Category assigned to every decorated node, keyed by node id."""

    categories: dict[str, Category] = field(default_factory=dict)

    def count(self, category: Category) -> int:
        return sum(1 for c in self.categories.values() if c is category)

    def by_category(self) -> dict[Category, int]:
        counts: dict[Category, int] = {}
        for c in self.categories.values():
            counts[c] = counts.get(c, 0) + 1
        return counts


def classify_var(graph: Graph, node: Node) -> Category:
    """Refine the category of a variable node."""
    record = node.record or {}
    if not record.get("used"):
        return Category.VAR_UNUSED
    if not record.get("defined"):
        return Category.VAR_UNDEFINED

    origins = [e.origin for e in graph.incoming(node)]
    if all(o.type is NodeType.VARSET and o.defaults for o in origins):
        return Category.VAR_DEFAULT
    if all(o.type is NodeType.TASK for o in origins):
        return Category.VAR_FACT
    return Category.VAR


def classify(graph: Graph, node: Node) -> Category:
    """Category of a typed node, before the structural role check."""
    assert node.type is not None
    if node.type is NodeType.VAR:
        return classify_var(graph, node)
    return BASE_CATEGORIES[node.type]


def decorate_node(graph: Graph, node: Node, styles: StyleTable) -> Category:
    assert node.type is not None
    styles.apply(node.attrs, BASE_CATEGORIES[node.type])
    node.attrs["label"] = node.name
    node.attrs["tooltip"] = f"{TYPE_NAMES[node.type]} {node.id}"

    category = classify(graph, node)
    if category is not BASE_CATEGORIES[node.type]:
        styles.apply(node.attrs, category)
    if category is Category.VAR_UNUSED:
        node.attrs["tooltip"] += UNUSED_SUFFIX
    elif category is Category.VAR_UNDEFINED:
        node.attrs["tooltip"] += UNDEFINED_SUFFIX
    return category


def flag_unused_roles(
    graph: Graph,
    result: DecorationResult,
    styles: StyleTable,
) -> list[Node]:
    """Mark roles with no incoming edges; returns the flagged roles."""
    flagged = graph.find_nodes(
        lambda n: n.type is NodeType.ROLE and n.record is not None and not graph.incoming(n)
    )
    for role in flagged:
        styles.apply(role.attrs, Category.ROLE_UNUSED)
        role.attrs["tooltip"] += ROLE_UNUSED_SUFFIX
        result.categories[role.id] = Category.ROLE_UNUSED
    return flagged


def decorate(graph: Graph, styles: StyleTable = DEFAULT_STYLES) -> DecorationResult:
    """Assign a category, label, tooltip and style to every input node."""
    result = DecorationResult()
    for node in graph.find_nodes(lambda n: n.type is not None and n.record is not None):
        result.categories[node.id] = decorate_node(graph, node, styles)

    flagged = flag_unused_roles(graph, result, styles)
    logger.debug(
        "Decorated %d nodes, %d roles unused by any playbook",
        len(result.categories),
        len(flagged),
    )
    return result
