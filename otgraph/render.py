"""Human readable dumps of graphs and delta sequences for diagnostics."""
from __future__ import annotations

import json
from typing import List

from otgraph.graph.deltas import ArcDelta, Delta, DeltaLike, NodeDelta, is_sequence
from otgraph.graph.model import Graph, Node, PropBag, PropValue

INDENT = "  "


def prop_to_string(value: PropValue) -> str:
    if isinstance(value, list):
        return "[" + ",".join(prop_to_string(item) for item in value) + "]"
    return json.dumps(value)


def props_to_string(props: PropBag) -> str:
    return ", ".join(f"{key}={prop_to_string(value)}" for key, value in props.items())


def _node_to_string(node: Node, indent: int, *, root: bool = False) -> str:
    text = "" if root else f"[{props_to_string(node.props)}]"
    children: List[str] = [
        f"{INDENT * indent}{name} {_node_to_string(child, indent + 1)}"
        for name, child in node.iter_children()
    ]
    if children:
        if text:
            text += "\n"
        text += "\n".join(children)
    return text


def graph_to_string(graph: Graph) -> str:
    """Render the node tree, one node per line, followed by ``a -> b`` arcs."""

    arcs = "".join(f"\n{source} -> {target}" for source, target in graph.arcs)
    return f"{_node_to_string(graph.nodes, 0, root=True)}{arcs}"


def delta_to_string(delta: Delta) -> str:
    if isinstance(delta, NodeDelta):
        target = delta.path
        args = props_to_string(delta.props)
    elif isinstance(delta, ArcDelta):
        target = ", ".join(delta.paths)
        args = ""
    else:
        raise TypeError(f"Unsupported delta type: {type(delta).__name__}")
    return f"{delta.op} ({target}) {args}".rstrip()


def deltas_to_string(deltas: DeltaLike, indent: int = 0) -> str:
    """Render ``deltas`` one per line, indenting nested groups."""

    if is_sequence(deltas):
        separator = "\n" + INDENT * indent
        return separator.join(deltas_to_string(item, indent + 1) for item in deltas)
    return delta_to_string(deltas)


__all__ = ["delta_to_string", "deltas_to_string", "graph_to_string", "prop_to_string"]
