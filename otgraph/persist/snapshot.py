"""Graph snapshot management."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from otgraph.graph.model import Graph


@dataclass
class SnapshotManager:
    """Maintain in-memory snapshots of the graph for quick rollback."""

    history: List[Graph] = field(default_factory=list)

    def snapshot(self, graph: Graph) -> None:
        """Persist a structural copy of ``graph`` in ``history``."""

        self.history.append(graph.clone())

    def rollback(self) -> Graph:
        """Return the most recent snapshot."""

        if not self.history:
            raise RuntimeError("No snapshots available")
        return self.history.pop()

    def discard(self) -> None:
        """Drop the most recent snapshot once it is no longer needed."""

        if not self.history:
            raise RuntimeError("No snapshots available")
        self.history.pop()

    def __len__(self) -> int:
        return len(self.history)
