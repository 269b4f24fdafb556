"""Visual vocabulary: categories, the style table and rank hints."""

from __future__ import annotations

import enum
from dataclasses import dataclass, fields
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Union

from ansible_viz.graph.model import NodeType

if TYPE_CHECKING:
    from collections.abc import Mapping

    from ansible_viz.graph.model import Attrs, Node


def hsl(h: float, s: float, l: float) -> str:  # noqa: E741
    """Graphviz ``"h+s+v"`` colour string from percentages."""
    return "+".join(str(i / 100.0) for i in (h, s, l))


class Category(enum.Enum):
    """Semantic node category driving the visual encoding."""

    PLAYBOOK = "playbook"
    ROLE = "role"
    TASK = "task"
    VARSET = "varset"
    VAR = "var"
    ROLE_UNUSED = "role_unused"
    VAR_UNUSED = "var_unused"
    VAR_UNDEFINED = "var_undefined"
    VAR_DEFAULT = "var_default"
    VAR_FACT = "var_fact"


class EdgeStyle(enum.Enum):
    """Edge decorations."""

    USE_VAR = "use_var"
    CALL_TASK = "call_task"
    CALL_EXTRA_TASK = "call_extra_task"


StyleKey = Union[Category, EdgeStyle]


def _check_covers_node_types(mapping: Mapping[NodeType, Any], what: str) -> None:
    """Raise ``ValueError`` unless *mapping* has an entry for every node type."""
    missing = set(NodeType) - set(mapping)
    if missing:
        names = ", ".join(sorted(t.value for t in missing))
        msg = f"No {what} for node type(s): {names}"
        raise ValueError(msg)


# Base category per node type; defaults varsets share the varset look.
BASE_CATEGORIES: Mapping[NodeType, Category] = MappingProxyType({
    NodeType.PLAYBOOK: Category.PLAYBOOK,
    NodeType.ROLE: Category.ROLE,
    NodeType.TASK: Category.TASK,
    NodeType.VARSET: Category.VARSET,
    NodeType.VAR: Category.VAR,
})
_check_covers_node_types(BASE_CATEGORIES, "base category")

# Word used at the start of node tooltips.
TYPE_NAMES: Mapping[NodeType, str] = MappingProxyType({
    NodeType.PLAYBOOK: "Playbook",
    NodeType.ROLE: "Role",
    NodeType.TASK: "Task",
    NodeType.VARSET: "Vars",
    NodeType.VAR: "Var",
})
_check_covers_node_types(TYPE_NAMES, "tooltip name")


@dataclass(frozen=True)
class Style:
    """A fixed set of visual attributes; ``None`` fields are not applied."""

    shape: str | None = None
    style: str | None = None
    fillcolor: str | None = None
    fontcolor: str | None = None
    color: str | None = None
    tooltip: str | None = None

    def as_attrs(self) -> dict[str, str]:
        attrs: dict[str, str] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is not None:
                attrs[f.name] = value
        return attrs


@dataclass(frozen=True)
class StyleTable:
    """Immutable mapping from category/edge style to :class:`Style`."""

    styles: Mapping[StyleKey, Style]

    def __post_init__(self) -> None:
        object.__setattr__(self, "styles", MappingProxyType(dict(self.styles)))

    def __getitem__(self, key: StyleKey) -> Style:
        return self.styles.get(key, Style())

    def apply(self, attrs: Attrs, key: StyleKey) -> Attrs:
        """Add or override the entries of *key*'s style in *attrs*."""
        attrs.update(self[key].as_attrs())
        return attrs


DEFAULT_STYLES = StyleTable({
    # Node styles
    Category.PLAYBOOK: Style(shape="folder", style="filled", fillcolor=hsl(66, 8, 100)),
    Category.ROLE: Style(shape="house", style="filled", fillcolor=hsl(66, 24, 100)),
    Category.TASK: Style(shape="octagon", style="filled", fillcolor=hsl(66, 40, 100)),
    Category.VARSET: Style(shape="box3d", style="filled", fillcolor=hsl(33, 8, 100)),
    Category.VAR: Style(shape="oval", style="filled", fillcolor=hsl(33, 60, 80)),
    # Node decorations
    Category.ROLE_UNUSED: Style(style="filled", fillcolor=hsl(82, 24, 100)),
    Category.VAR_UNUSED: Style(
        style="filled", fillcolor=hsl(88, 50, 100), fontcolor=hsl(0, 0, 0)
    ),
    Category.VAR_UNDEFINED: Style(style="filled", fillcolor=hsl(88, 100, 100)),
    Category.VAR_DEFAULT: Style(
        style="filled", fillcolor=hsl(33, 90, 60), fontcolor=hsl(0, 0, 100)
    ),
    Category.VAR_FACT: Style(style="filled", fillcolor=hsl(33, 70, 100)),
    # Edge styles
    EdgeStyle.USE_VAR: Style(color="lightgrey", tooltip="uses var"),
    EdgeStyle.CALL_TASK: Style(color="blue", style="dashed"),
    EdgeStyle.CALL_EXTRA_TASK: Style(color="red"),
})


def rank_for(node: Node) -> str | None:
    """Rank hint for the renderer: playbooks first, variables last."""
    if node.type is NodeType.PLAYBOOK:
        return "source"
    if node.type in (NodeType.TASK, NodeType.VARSET):
        return "same"
    if node.type is NodeType.VAR:
        return "sink"
    return None
