"""Graph builder: turns the annotated configuration dictionary into a graph.

The input is the mapping produced by the resolver stage::

    {"role": [role, ...], "playbook": [playbook, ...]}

Records are mappings carrying at least ``name`` and ``fqn``.  References
between records (``role_deps``, a playbook's ``role``/``task``, a task's
``uses``) may be the referenced record itself or its ``fqn`` string.

All nodes are registered before any edge is drawn.  Edges are never
deduplicated: a variable used by two tasks gets two ``uses var`` edges.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from ansible_viz.graph.model import EdgeKind, Graph, MissingFqnError, Node
from ansible_viz.graph.styles import DEFAULT_STYLES, EdgeStyle, StyleTable

if TYPE_CHECKING:
    from collections.abc import Iterable

    from ansible_viz.graph.model import Edge

logger = logging.getLogger(__name__)

Record = Mapping[str, Any]

# Kind of record an edge points at, for error messages.
_TARGET_KINDS = {
    EdgeKind.INCLUDES: "role",
    EdgeKind.CALLS_TASK: "task",
    EdgeKind.CALLS_EXTRA_TASK: "role",
    EdgeKind.SETS_FACT: "var",
    EdgeKind.DEFINES_VAR: "var",
    EdgeKind.USES_VAR: "var",
}


def _items(record: Record, key: str) -> list[Any]:
    """Return ``record[key]`` as a list, treating missing/None as empty."""
    return list(record.get(key) or [])


def _owner(record: Record) -> str:
    return str(record.get("fqn") or record.get("name") or "?")


def _fqn(ref: Record | str, kind: str, owner: Record) -> str:
    """The fqn of a reference, which is either a record or the fqn itself."""
    if isinstance(ref, str):
        return ref
    if isinstance(ref, Mapping) and ref.get("fqn"):
        return str(ref["fqn"])
    name = ref.get("name") if isinstance(ref, Mapping) else None
    raise MissingFqnError(kind, None if name is None else str(name), _owner(owner))


class GraphBuilder:
    """Populate a :class:`Graph` from the annotated dictionary.

    Parameters
    ----------
    styles:
        Style table used for the styled relationships (task calls, extra
        role calls, variable usage).
    show_usage:
        When *False*, ``uses var`` edges are not drawn.
    bypass_main_varset:
        When *True*, a role's varset named ``main`` gets no ``role -> varset``
        edge and its variables hang directly off the role.
    """

    def __init__(
        self,
        *,
        styles: StyleTable = DEFAULT_STYLES,
        show_usage: bool = True,
        bypass_main_varset: bool = False,
    ) -> None:
        self.styles = styles
        self.show_usage = show_usage
        self.bypass_main_varset = bypass_main_varset

    def build(self, data: Mapping[str, Iterable[Record]]) -> Graph:
        graph = Graph()
        roles = list(data.get("role") or [])
        playbooks = list(data.get("playbook") or [])

        self.add_nodes(graph, roles, playbooks)
        self.connect_playbooks(graph, playbooks)
        self.connect_roles(graph, roles)
        if self.show_usage:
            self.connect_usage(graph, roles)

        logger.debug(
            "Built graph: %d nodes, %d edges from %d roles and %d playbooks",
            len(graph),
            len(graph.edges),
            len(roles),
            len(playbooks),
        )
        return graph

    # -- nodes -------------------------------------------------------------

    def add_nodes(
        self,
        graph: Graph,
        roles: list[Record],
        playbooks: list[Record],
    ) -> None:
        for role in roles:
            graph.add_node(Node.from_record(role, "role"))
            owner = _owner(role)
            for task in _items(role, "task"):
                graph.add_node(Node.from_record(task, "task", owner=owner))
                for var in _items(task, "var"):
                    graph.add_node(Node.from_record(var, "var", owner=_owner(task)))
            for varset in _items(role, "varset"):
                graph.add_node(Node.from_record(varset, "varset", owner=owner))
                for var in _items(varset, "var"):
                    graph.add_node(Node.from_record(var, "var", owner=_owner(varset)))
        # Roles and tasks referenced by playbooks already have nodes.
        for playbook in playbooks:
            graph.add_node(Node.from_record(playbook, "playbook"))

    # -- edges -------------------------------------------------------------

    def connect(
        self,
        graph: Graph,
        src: Record | str,
        dst: Record | str,
        kind: EdgeKind,
        *,
        owner: Record,
        style: EdgeStyle | None = None,
    ) -> Edge:
        edge = graph.add_edge(
            _fqn(src, "source", owner),
            _fqn(dst, _TARGET_KINDS[kind], owner),
            {"tooltip": kind.value},
            kind=kind,
            owner=_owner(owner),
        )
        if style is not None:
            self.styles.apply(edge.attrs, style)
        return edge

    def connect_playbooks(self, graph: Graph, playbooks: list[Record]) -> None:
        for playbook in playbooks:
            for role in _items(playbook, "role"):
                self.connect(graph, playbook, role, EdgeKind.INCLUDES, owner=playbook)
            for task in _items(playbook, "task"):
                self.connect(
                    graph,
                    playbook,
                    task,
                    EdgeKind.CALLS_TASK,
                    owner=playbook,
                    style=EdgeStyle.CALL_TASK,
                )

    def connect_roles(self, graph: Graph, roles: list[Record]) -> None:
        for role in roles:
            for dep in _items(role, "role_deps"):
                self.connect(
                    graph,
                    role,
                    dep,
                    EdgeKind.CALLS_EXTRA_TASK,
                    owner=role,
                    style=EdgeStyle.CALL_EXTRA_TASK,
                )

            for task in _items(role, "task"):
                self.connect(graph, role, task, EdgeKind.CALLS_TASK, owner=role)
                for var in _items(task, "var"):
                    if var.get("defined"):
                        self.connect(graph, task, var, EdgeKind.SETS_FACT, owner=task)

            for varset in _items(role, "varset"):
                bypass = self.bypass_main_varset and varset.get("name") == "main"
                if not bypass:
                    self.connect(graph, role, varset, EdgeKind.DEFINES_VAR, owner=role)
                definer = role if bypass else varset
                for var in _items(varset, "var"):
                    self.connect(graph, definer, var, EdgeKind.DEFINES_VAR, owner=varset)

    def connect_usage(self, graph: Graph, roles: list[Record]) -> None:
        for role in roles:
            for task in _items(role, "task"):
                for var in _items(task, "uses"):
                    self.connect(
                        graph,
                        task,
                        var,
                        EdgeKind.USES_VAR,
                        owner=task,
                        style=EdgeStyle.USE_VAR,
                    )


def build_graph(
    data: Mapping[str, Iterable[Record]],
    *,
    styles: StyleTable = DEFAULT_STYLES,
    show_usage: bool = True,
    bypass_main_varset: bool = False,
) -> Graph:
    """Build the raw dependency graph for *data*."""
    builder = GraphBuilder(
        styles=styles,
        show_usage=show_usage,
        bypass_main_varset=bypass_main_varset,
    )
    return builder.build(data)
