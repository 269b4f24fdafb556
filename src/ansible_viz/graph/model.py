"""Directed, attributed multigraph used by the dependency grapher.

Nodes and edges live in dense lists owned by the :class:`Graph` (an arena).
Nodes keep their adjacency as lists of edge indices and edges refer to their
endpoints by node id, so there are no reference cycles between the two.
Removed slots are tombstoned (``None``) which keeps every index stable for the
lifetime of the graph.
"""

from __future__ import annotations

import enum
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class GraphError(Exception):
    """Base class for graph construction errors."""


class DuplicateIdError(GraphError):
    """Raised by :meth:`Graph.add_node` when the node id is already taken."""

    def __init__(self, node_id: str) -> None:
        self.node_id = node_id
        super().__init__(f"Duplicate node id '{node_id}'")


class DanglingEndpointError(GraphError):
    """Raised by :meth:`Graph.add_edge` when an endpoint was never added."""

    def __init__(self, side: str, endpoint_id: str, owner: str | None = None) -> None:
        self.side = side
        self.endpoint_id = endpoint_id
        self.owner = owner
        msg = f"Bad {side}: '{endpoint_id}' is not a node in the graph"
        if owner is not None:
            msg += f" (referenced from '{owner}')"
        super().__init__(msg)


class MissingFqnError(GraphError):
    """Raised when an input record or reference carries no ``fqn``."""

    def __init__(self, kind: str, name: str | None = None, owner: str | None = None) -> None:
        self.kind = kind
        self.name = name
        self.owner = owner
        msg = f"{kind.capitalize()} record"
        if name is not None:
            msg += f" '{name}'"
        msg += " has no 'fqn'"
        if owner is not None:
            msg += f" (in '{owner}')"
        super().__init__(msg)


class UnknownAttributeError(GraphError, KeyError):
    """Raised when an attribute outside :data:`ATTR_KEYS` is assigned."""

    def __str__(self) -> str:
        return str(self.args[0])


# ---------------------------------------------------------------------------
# Tags
# ---------------------------------------------------------------------------


class NodeType(enum.Enum):
    """Kind of configuration entity a node stands for."""

    PLAYBOOK = "playbook"
    ROLE = "role"
    TASK = "task"
    VARSET = "varset"
    VAR = "var"

    @classmethod
    def parse(cls, tag: str) -> tuple[NodeType, bool]:
        """Parse an input type tag into ``(type, defaults)``.

        ``vardefaults`` is a role's default-value set: a varset with the
        defaults flag raised.
        """
        if tag == "vardefaults":
            return cls.VARSET, True
        try:
            return cls(tag), False
        except ValueError:
            msg = f"Unknown node type '{tag}'"
            raise GraphError(msg) from None


class EdgeKind(enum.Enum):
    """Semantic relationship an edge represents; the value is its tooltip."""

    INCLUDES = "includes"
    CALLS_TASK = "calls task"
    CALLS_EXTRA_TASK = "calls extra task"
    SETS_FACT = "sets fact"
    DEFINES_VAR = "defines var"
    USES_VAR = "uses var"


# Recognized node, edge and graph attributes.
ATTR_KEYS = frozenset({
    "arrowhead",
    "bgcolor",
    "color",
    "fillcolor",
    "fontcolor",
    "fontsize",
    "label",
    "rankdir",
    "ranksep",
    "shape",
    "style",
    "tooltip",
})


class Attrs(dict[str, Any]):
    """Attribute mapping restricted to :data:`ATTR_KEYS`."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__()
        self.update(*args, **kwargs)

    def __setitem__(self, key: str, value: Any) -> None:
        if key not in ATTR_KEYS:
            msg = f"Unknown attribute '{key}'"
            raise UnknownAttributeError(msg)
        super().__setitem__(key, value)

    def update(self, *args: Any, **kwargs: Any) -> None:  # type: ignore[override]
        for key, value in dict(*args, **kwargs).items():
            self[key] = value

    def setdefault(self, key: str, default: Any = None) -> Any:
        if key not in self:
            self[key] = default
        return self[key]


# ---------------------------------------------------------------------------
# Nodes and edges
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Origin:
    """Type of the node an edge was first drawn from."""

    type: NodeType | None
    defaults: bool = False


@dataclass(eq=False)
class Node:
    """A graph node identified by its fully-qualified name."""

    id: str
    type: NodeType | None = None
    defaults: bool = False
    record: Mapping[str, Any] | None = None
    attrs: Attrs = field(default_factory=Attrs)
    index: int = field(default=-1, init=False, repr=False)
    incoming_ids: list[int] = field(default_factory=list, init=False, repr=False)
    outgoing_ids: list[int] = field(default_factory=list, init=False, repr=False)

    def __post_init__(self) -> None:
        if not isinstance(self.attrs, Attrs):
            self.attrs = Attrs(self.attrs)

    @classmethod
    def from_record(
        cls,
        record: Mapping[str, Any],
        default_type: str,
        *,
        owner: str | None = None,
    ) -> Node:
        """Create a node for an input record, keyed by its ``fqn``.

        Raises :class:`MissingFqnError` naming *owner* when the record has no
        ``fqn``.
        """
        if not isinstance(record, Mapping) or not record.get("fqn"):
            name = record.get("name") if isinstance(record, Mapping) else None
            raise MissingFqnError(default_type, None if name is None else str(name), owner)
        node_type, defaults = NodeType.parse(str(record.get("type") or default_type))
        return cls(id=str(record["fqn"]), type=node_type, defaults=defaults, record=record)

    @property
    def name(self) -> str:
        """Short display name, falling back to the id."""
        if self.record is not None and self.record.get("name") is not None:
            return str(self.record["name"])
        return self.id

    @property
    def origin(self) -> Origin:
        return Origin(self.type, self.defaults)


@dataclass(eq=False)
class Edge:
    """A directed edge; ``(src, dst, ordinal)`` is unique within a graph."""

    src: str
    dst: str
    ordinal: int
    kind: EdgeKind | None = None
    origin: Origin = field(default_factory=lambda: Origin(None))
    attrs: Attrs = field(default_factory=Attrs)
    index: int = field(default=-1, repr=False)

    @property
    def key(self) -> tuple[str, str, int]:
        return (self.src, self.dst, self.ordinal)


# ---------------------------------------------------------------------------
# Graph
# ---------------------------------------------------------------------------


class Graph:
    """Ordered multigraph with O(1) id lookup and index-based adjacency."""

    def __init__(
        self,
        name: str | None = None,
        *,
        is_cluster: bool = False,
        attrs: Mapping[str, Any] | None = None,
    ) -> None:
        self.name = name
        self.is_cluster = is_cluster
        self.attrs = Attrs(attrs or {})
        self.subgraphs: list[Graph] = []
        self._nodes: list[Node | None] = []
        self._edges: list[Edge | None] = []
        self._index: dict[str, int] = {}
        self._pair_counts: dict[tuple[str, str], int] = {}

    # -- queries -----------------------------------------------------------

    def __len__(self) -> int:
        return len(self._index)

    def __contains__(self, item: object) -> bool:
        if isinstance(item, Node):
            idx = self._index.get(item.id)
            return idx is not None and self._nodes[idx] is item
        return item in self._index

    def __iter__(self) -> Iterator[Node]:
        return iter(self.nodes)

    @property
    def nodes(self) -> list[Node]:
        """Live nodes in insertion order."""
        return [n for n in self._nodes if n is not None]

    @property
    def edges(self) -> list[Edge]:
        """Live edges in insertion order."""
        return [e for e in self._edges if e is not None]

    def by_id(self, node_id: str) -> Node:
        """Return the node with *node_id*; raises ``KeyError`` if absent."""
        node = self._nodes[self._index[node_id]]
        assert node is not None
        return node

    def get(self, node_id: str) -> Node | None:
        idx = self._index.get(node_id)
        return None if idx is None else self._nodes[idx]

    def find_nodes(self, predicate: Callable[[Node], bool]) -> list[Node]:
        return [n for n in self.nodes if predicate(n)]

    def incoming(self, node: Node | str) -> list[Edge]:
        """Edges ending at *node*, in insertion order."""
        return [self._edge_at(i) for i in self._live(node).incoming_ids]

    def outgoing(self, node: Node | str) -> list[Edge]:
        """Edges starting at *node*, in insertion order."""
        return [self._edge_at(i) for i in self._live(node).outgoing_ids]

    def source(self, edge: Edge) -> Node:
        return self.by_id(edge.src)

    def destination(self, edge: Edge) -> Node:
        return self.by_id(edge.dst)

    def predecessors(self, node: Node | str) -> list[Node]:
        """Distinct source nodes of the incoming edges, first-seen order."""
        seen: dict[str, Node] = {}
        for edge in self.incoming(node):
            if edge.src not in seen:
                seen[edge.src] = self.by_id(edge.src)
        return list(seen.values())

    def successors(self, node: Node | str) -> list[Node]:
        seen: dict[str, Node] = {}
        for edge in self.outgoing(node):
            if edge.dst not in seen:
                seen[edge.dst] = self.by_id(edge.dst)
        return list(seen.values())

    # -- mutation ----------------------------------------------------------

    def add_node(self, node: Node) -> Node:
        """Register *node*; raises :class:`DuplicateIdError` on id collision."""
        if node.id in self._index:
            raise DuplicateIdError(node.id)
        node.index = len(self._nodes)
        node.incoming_ids = []
        node.outgoing_ids = []
        self._nodes.append(node)
        self._index[node.id] = node.index
        return node

    def add_edge(
        self,
        source: Node | str,
        destination: Node | str,
        attrs: Mapping[str, Any] | None = None,
        *,
        kind: EdgeKind | None = None,
        origin: Origin | None = None,
        owner: str | None = None,
    ) -> Edge:
        """Create an edge between two registered nodes.

        *owner* names the record the relationship came from; it is only used
        in the :class:`DanglingEndpointError` message.
        """
        src = self._endpoint(source, "src", owner)
        dst = self._endpoint(destination, "dst", owner)

        pair = (src.id, dst.id)
        ordinal = self._pair_counts.get(pair, 0)
        self._pair_counts[pair] = ordinal + 1

        edge = Edge(
            src=src.id,
            dst=dst.id,
            ordinal=ordinal,
            kind=kind,
            origin=origin if origin is not None else src.origin,
            attrs=Attrs(attrs or {}),
        )
        edge.index = len(self._edges)
        self._edges.append(edge)
        src.outgoing_ids.append(edge.index)
        dst.incoming_ids.append(edge.index)
        return edge

    def remove_edges(self, *edges: Edge) -> None:
        """Remove *edges*; edges already removed are ignored."""
        for edge in edges:
            if 0 <= edge.index < len(self._edges) and self._edges[edge.index] is edge:
                self._detach(edge)

    def cut(self, *nodes: Node | str) -> None:
        """Remove *nodes* and every edge incident to them.

        No rewiring happens here. Nodes that are not in the graph are ignored.
        """
        for item in nodes:
            node_id = item.id if isinstance(item, Node) else item
            idx = self._index.get(node_id)
            if idx is None:
                continue
            node = self._nodes[idx]
            assert node is not None
            for edge_index in list(node.incoming_ids) + list(node.outgoing_ids):
                edge = self._edges[edge_index]
                if edge is not None:
                    self._detach(edge)
            self._nodes[idx] = None
            del self._index[node_id]

    def add_subgraph(self, graph: Graph) -> Graph:
        self.subgraphs.append(graph)
        return graph

    def walk(self) -> Iterable[Graph]:
        """Yield this graph and every nested sub-graph, depth first."""
        yield self
        for sub in self.subgraphs:
            yield from sub.walk()

    # -- internals ---------------------------------------------------------

    def _edge_at(self, index: int) -> Edge:
        edge = self._edges[index]
        assert edge is not None
        return edge

    def _live(self, node: Node | str) -> Node:
        return self.by_id(node.id if isinstance(node, Node) else node)

    def _endpoint(self, endpoint: Node | str, side: str, owner: str | None) -> Node:
        node_id = endpoint.id if isinstance(endpoint, Node) else endpoint
        node = self.get(node_id)
        if node is None or (isinstance(endpoint, Node) and node is not endpoint):
            raise DanglingEndpointError(side, node_id, owner)
        return node

    def _detach(self, edge: Edge) -> None:
        src = self.get(edge.src)
        dst = self.get(edge.dst)
        if src is not None:
            src.outgoing_ids.remove(edge.index)
        if dst is not None:
            dst.incoming_ids.remove(edge.index)
        self._edges[edge.index] = None
