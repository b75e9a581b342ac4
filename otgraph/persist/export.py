"""Graph export utilities.

The JSON shape mirrors the full-graph snapshots exchanged with collaborators::

    {"nodes": {"a": {"_props": {...}, "b": {"_props": {...}}}},
     "arcs": [["a", "a.b"]]}
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, Literal, Mapping

import networkx as nx

from otgraph.graph.deltas import Connect, NewNode
from otgraph.graph.model import Graph, Node, clone_props
from otgraph.graph.paths import join_path

PROPS_KEY = "_props"


def _node_to_payload(node: Node) -> Dict[str, Any]:
    payload: Dict[str, Any] = {PROPS_KEY: clone_props(node.props)}
    for name, child in node.iter_children():
        payload[name] = _node_to_payload(child)
    return payload


def graph_to_payload(graph: Graph) -> Dict[str, Any]:
    """Return the plain mapping form of ``graph``."""

    nodes = _node_to_payload(graph.nodes)
    nodes.pop(PROPS_KEY)
    return {"nodes": nodes, "arcs": [[source, target] for source, target in graph.arcs]}


def _payload_to_deltas(nodes: Mapping[str, Any], prefix: str, deltas: list) -> list:
    for name, value in nodes.items():
        if name == PROPS_KEY:
            continue
        if not isinstance(value, Mapping):
            raise ValueError(f"Node payload for '{join_path(prefix, name)}' must be a mapping")
        path = join_path(prefix, name)
        group: list = [NewNode(path=path, props=clone_props(value.get(PROPS_KEY) or {}))]
        _payload_to_deltas(value, path, group)
        deltas.append(group)
    return deltas


def graph_from_payload(payload: Mapping[str, Any]) -> Graph:
    """Rebuild a graph from its plain mapping form by replaying deltas."""

    from otgraph.convert import graph_from_deltas

    if not isinstance(payload, Mapping):
        raise TypeError(f"Graph payload must be a mapping, got {type(payload).__name__}")
    deltas = _payload_to_deltas(payload.get("nodes") or {}, "", [])
    for arc in payload.get("arcs") or []:
        deltas.append(Connect(paths=arc))
    return graph_from_deltas(deltas)


def _graphml_value(value: Any) -> Any:
    if isinstance(value, (bool, int, float, str)):
        return value
    return json.dumps(value)


@dataclass
class GraphExporter:
    """Serialize the in-memory graph to a portable representation."""

    graph: Graph

    def to_networkx(self) -> nx.MultiDiGraph:
        """Return a :class:`networkx.MultiDiGraph` keyed by node path.

        Tree containment becomes ``CONTAINS`` edges and arcs become ``ARC``
        edges; parallel arcs are preserved.
        """

        result = nx.MultiDiGraph()

        def visit(node: Node, prefix: str) -> None:
            for name, child in node.iter_children():
                path = join_path(prefix, name)
                result.add_node(path, **clone_props(child.props))
                if prefix:
                    result.add_edge(prefix, path, type="CONTAINS")
                visit(child, path)

        visit(self.graph.nodes, "")
        for source, target in self.graph.arcs:
            result.add_edge(source, target, type="ARC")
        return result

    def export(self, *, format: Literal["graphml", "json"] = "json") -> str:
        """Export the graph to the requested ``format``."""

        if format == "json":
            return json.dumps(graph_to_payload(self.graph))
        if format == "graphml":
            exported = self.to_networkx()
            for _, data in exported.nodes(data=True):
                for key, value in list(data.items()):
                    data[key] = _graphml_value(value)
            return "\n".join(nx.generate_graphml(exported))
        raise ValueError(f"Unsupported export format: {format}")
