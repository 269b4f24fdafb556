"""Legend: a small fixed cluster showing one exemplar per category."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ansible_viz.graph.model import Graph, Node
from ansible_viz.graph.styles import DEFAULT_STYLES, Category, EdgeStyle, StyleTable, hsl

if TYPE_CHECKING:
    from ansible_viz.graph.styles import StyleKey

LEGEND_PREFIX = "legend:"

# (key, label, category)
_EXEMPLARS: list[tuple[str, str, Category]] = [
    ("playbook", "Playbook", Category.PLAYBOOK),
    ("role", "Role", Category.ROLE),
    ("unused_role", "Unused role", Category.ROLE_UNUSED),
    ("task", "Task", Category.TASK),
    ("varset", "Vars", Category.VARSET),
    ("var", "Var", Category.VAR),
    ("default", "Var default", Category.VAR_DEFAULT),
    ("main_var", "Main var", Category.VAR),
    ("unused", "Unused var", Category.VAR_UNUSED),
    ("undefined", "Undefined var", Category.VAR_UNDEFINED),
    ("fact", "Fact", Category.VAR_FACT),
]

# Decorations drawn over a base style.
_LAYERED: dict[Category, Category] = {Category.ROLE_UNUSED: Category.ROLE}

# (src key, dst key, label, edge style)
_RELATIONS: list[tuple[str, str, str, EdgeStyle | None]] = [
    ("playbook", "role", "calls", None),
    ("playbook", "task", "calls extra task", EdgeStyle.CALL_EXTRA_TASK),
    ("role", "task", "defines", None),
    ("role", "varset", "defines", None),
    ("role", "default", "defaults define", None),
    ("role", "main_var", "main task defines", None),
    ("varset", "var", "defines", None),
    ("varset", "unused", "defines", None),
    ("task", "undefined", "uses", EdgeStyle.USE_VAR),
    ("task", "fact", "defines", None),
]


def _styled_node(node_id: str, label: str, styles: StyleTable, key: StyleKey) -> Node:
    node = Node(id=node_id)
    base = _LAYERED.get(key) if isinstance(key, Category) else None
    if base is not None:
        styles.apply(node.attrs, base)
    styles.apply(node.attrs, key)
    node.attrs["label"] = label
    return node


def make_legend(styles: StyleTable = DEFAULT_STYLES) -> Graph:
    """Build the legend cluster.

    Each relationship is drawn through an unshaped node carrying its label,
    so the text sits in the middle of the arrow.
    """
    legend = Graph(
        "legend",
        is_cluster=True,
        attrs={"bgcolor": hsl(15, 3, 100), "label": "Legend", "fontsize": 36},
    )

    nodes: dict[str, Node] = {}
    for key, label, category in _EXEMPLARS:
        nodes[key] = legend.add_node(
            _styled_node(f"{LEGEND_PREFIX}{key}", label, styles, category)
        )

    for i, (src_key, dst_key, label, edge_style) in enumerate(_RELATIONS):
        attrs: dict[str, str] = {}
        if edge_style is not None:
            attrs.update(styles[edge_style].as_attrs())

        middle = legend.add_node(Node(id=f"{LEGEND_PREFIX}edge{i}"))
        middle.attrs.update({"label": label, "shape": "none"})

        first = legend.add_edge(nodes[src_key], middle, attrs)
        first.attrs["arrowhead"] = "none"
        legend.add_edge(middle, nodes[dst_key], attrs)

    return legend
