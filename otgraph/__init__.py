"""otgraph package initialization.

Operational-transform engine for a path-addressed node/arc graph.  The
functions exported here form the public surface used by collaborators such
as a live-collaboration transport or an editor front end.
"""

from .convert import deltas_from_graph, graph_from_deltas
from .errors import ConflictFailure, IntegrityViolation, LookupFailure, OTError
from .graph.deltas import (
    Connect,
    DelNode,
    Delta,
    Disconnect,
    NewNode,
    Repath,
    deltas_from_payload,
    deltas_to_payload,
)
from .graph.model import Graph, Node, graphs_equal, make_graph
from .graph.query import QueryService
from .graph.store import GraphStore, apply_deltas_to_graph
from .persist.export import GraphExporter, graph_from_payload, graph_to_payload
from .render import deltas_to_string, graph_to_string
from .session import EditSession
from .transform.inverse import inverse_delta
from .transform.rebase import merge_deltas_to_graph, rebase

__all__ = [
    "ConflictFailure",
    "Connect",
    "DelNode",
    "Delta",
    "Disconnect",
    "EditSession",
    "Graph",
    "GraphExporter",
    "GraphStore",
    "IntegrityViolation",
    "LookupFailure",
    "NewNode",
    "Node",
    "OTError",
    "QueryService",
    "Repath",
    "apply_deltas_to_graph",
    "deltas_from_graph",
    "deltas_from_payload",
    "deltas_to_payload",
    "deltas_to_string",
    "graph_from_deltas",
    "graph_from_payload",
    "graph_to_payload",
    "graph_to_string",
    "graphs_equal",
    "inverse_delta",
    "make_graph",
    "merge_deltas_to_graph",
    "rebase",
]
