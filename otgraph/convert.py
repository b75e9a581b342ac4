"""Conversion between graphs and the delta sequences that build them."""
from __future__ import annotations

from typing import Optional

from otgraph.graph.deltas import Connect, DeltaLike, NewNode
from otgraph.graph.model import Graph, Node, clone_props, make_graph
from otgraph.graph.paths import join_path
from otgraph.graph.store import apply_deltas_to_graph


def _nodes_to_deltas(node: Node, deltas: list, prefix: str) -> list:
    for name, child in node.iter_children():
        path = join_path(prefix, name)
        group: list = [NewNode(path=path, props=clone_props(child.props))]
        _nodes_to_deltas(child, group, path)
        deltas.append(group)
    return deltas


def deltas_from_graph(graph: Graph, deltas: Optional[list] = None) -> list:
    """Return the delta sequence that rebuilds ``graph`` from empty.

    Each node becomes a group holding its ``newnode`` followed by its
    descendants' groups; one ``connect`` per arc follows all node groups.
    When ``deltas`` is given the result is appended to it.
    """

    if deltas is None:
        deltas = []
    _nodes_to_deltas(graph.nodes, deltas, "")
    for source, target in graph.arcs:
        deltas.append(Connect(paths=(source, target)))
    return deltas


def graph_from_deltas(deltas: DeltaLike) -> Graph:
    """Apply ``deltas`` to a freshly made empty graph."""

    return apply_deltas_to_graph(make_graph(), deltas)


__all__ = ["deltas_from_graph", "graph_from_deltas"]
