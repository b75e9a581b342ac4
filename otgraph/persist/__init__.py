"""Persistence utilities for otgraph."""

from .export import GraphExporter, graph_from_payload, graph_to_payload
from .snapshot import SnapshotManager

__all__ = ["GraphExporter", "SnapshotManager", "graph_from_payload", "graph_to_payload"]
