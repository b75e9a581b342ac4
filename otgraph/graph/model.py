"""Data model for the editable node/arc graph."""
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Tuple, Union

PropValue = Union[None, bool, int, float, str, List["PropValue"]]
PropBag = Dict[str, PropValue]
Arc = Tuple[str, str]


def clone_value(value: PropValue) -> PropValue:
    """Return a structural copy of a JSON-compatible property value."""

    if isinstance(value, list):
        return [clone_value(item) for item in value]
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    raise TypeError(f"Unsupported property value: {value!r}")


def clone_props(props: PropBag) -> PropBag:
    """Return a structural copy of a property bag."""

    return {str(key): clone_value(value) for key, value in props.items()}


@dataclass
class Node:
    """A named point in the tree holding a property bag and ordered children."""

    props: PropBag = field(default_factory=dict)
    children: Dict[str, "Node"] = field(default_factory=dict)
    order: List[str] = field(default_factory=list)

    def has_children(self) -> bool:
        return bool(self.order)

    def get(self, name: str) -> "Node | None":
        return self.children.get(name)

    def attach(self, name: str, child: "Node") -> "Node":
        """Insert ``child`` under ``name``; the name must be free."""

        if name in self.children:
            raise KeyError(f"Child '{name}' already exists")
        self.children[name] = child
        self.order.append(name)
        return child

    def detach(self, name: str) -> "Node":
        """Remove and return the child stored under ``name``."""

        child = self.children.pop(name)
        self.order.remove(name)
        return child

    def iter_children(self) -> Iterator[Tuple[str, "Node"]]:
        for name in self.order:
            yield name, self.children[name]

    def clone(self) -> "Node":
        copy = Node(props=clone_props(self.props))
        for name, child in self.iter_children():
            copy.attach(name, child.clone())
        return copy


@dataclass
class Graph:
    """The node tree plus the list of directed arcs between node paths."""

    nodes: Node = field(default_factory=Node)
    arcs: List[Arc] = field(default_factory=list)

    def clone(self) -> "Graph":
        return Graph(nodes=self.nodes.clone(), arcs=[(src, dst) for src, dst in self.arcs])

    def restore(self, other: "Graph") -> None:
        """Replace this graph's contents in place with those of ``other``."""

        self.nodes = other.nodes
        self.arcs = other.arcs


def make_graph() -> Graph:
    """Return a new, empty graph."""

    return Graph()


def nodes_equal(left: Node, right: Node) -> bool:
    """Compare two subtrees by names, properties and nesting."""

    if left.props != right.props:
        return False
    if set(left.children) != set(right.children):
        return False
    return all(nodes_equal(child, right.children[name]) for name, child in left.iter_children())


def graphs_equal(left: Graph, right: Graph) -> bool:
    """Structural equality ignoring child order and arc order."""

    if Counter(tuple(arc) for arc in left.arcs) != Counter(tuple(arc) for arc in right.arcs):
        return False
    return nodes_equal(left.nodes, right.nodes)


__all__ = [
    "Arc",
    "Graph",
    "Node",
    "PropBag",
    "PropValue",
    "clone_props",
    "clone_value",
    "graphs_equal",
    "make_graph",
    "nodes_equal",
]
