"""Graph subpackage containing the data model, addressing and apply engine."""

from .deltas import Connect, DelNode, Delta, Disconnect, NewNode, Repath
from .model import Graph, Node, graphs_equal, make_graph
from .query import QueryService
from .store import GraphStore, apply_deltas_to_graph

__all__ = [
    "Connect",
    "DelNode",
    "Delta",
    "Disconnect",
    "Graph",
    "GraphStore",
    "NewNode",
    "Node",
    "QueryService",
    "Repath",
    "apply_deltas_to_graph",
    "graphs_equal",
    "make_graph",
]
