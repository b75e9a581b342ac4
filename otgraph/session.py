"""Editing sessions holding a local delta log against a shared base graph."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List

from otgraph.errors import ConflictFailure, LookupFailure
from otgraph.graph.deltas import DeltaLike, clone_deltas
from otgraph.graph.ids import new_id
from otgraph.graph.model import Graph, make_graph
from otgraph.graph.store import GraphStore, apply_deltas_to_graph
from otgraph.transform.inverse import inverse_delta
from otgraph.transform.rebase import rebase

LOGGER = logging.getLogger(__name__)


@dataclass
class EditSession:
    """Accumulate local edits and reconcile them with concurrent sessions.

    ``base`` is the snapshot every pending local edit was authored against.
    Edits are applied to the working graph in :attr:`store` immediately and
    recorded in the log until :meth:`reconcile` folds them into a new base.
    """

    base: Graph = field(default_factory=make_graph)
    session_id: str = field(default_factory=lambda: new_id("session"))
    store: GraphStore = field(init=False)
    log: List[DeltaLike] = field(init=False, default_factory=list)

    def __post_init__(self) -> None:
        self.base = self.base.clone()
        self.store = GraphStore(graph=self.base.clone(), actor=self.session_id)

    @property
    def graph(self) -> Graph:
        return self.store.graph

    def edit(self, deltas: DeltaLike) -> Graph:
        """Apply ``deltas`` locally; a failing sequence leaves the graph unchanged."""

        self.store.apply(deltas, atomic=True)
        self.log.append(clone_deltas(deltas))
        return self.graph

    def undo(self) -> DeltaLike:
        """Revert the most recent local edit and return the inverse applied."""

        if not self.log:
            raise LookupFailure("nothing to undo")
        undo = inverse_delta(self.log[-1])
        self.store.apply(undo, atomic=True)
        self.log.pop()
        self.store.event_bus.emit(level="info", msg="Undid last edit", action="undo", actor=self.session_id)
        return undo

    def pending(self) -> list:
        """Return a copy of the local edits not yet reconciled."""

        return [clone_deltas(entry) for entry in self.log]

    def reconcile(self, remote: DeltaLike) -> list:
        """Fold concurrent ``remote`` edits in ahead of the local log.

        The local log is rebased onto ``remote`` and the working graph is
        rebuilt as ``base + remote + rebased local``; that graph becomes the
        new base and the log is cleared.  On conflict or apply failure the
        session is left exactly as it was.
        """

        merged: list = []
        try:
            rebase(self.pending(), remote, merged)
        except ConflictFailure as exc:
            self.store.event_bus.emit(level="warning", msg=str(exc), action="conflict", actor=self.session_id)
            raise
        rebuilt = apply_deltas_to_graph(self.base.clone(), merged)

        self.store.graph.restore(rebuilt)
        self.base = rebuilt.clone()
        self.log = []
        LOGGER.info("Session %s reconciled %d merged entries", self.session_id, len(merged))
        self.store.event_bus.emit(
            level="info",
            msg=f"Reconciled {len(merged)} entries",
            action="rebase",
            actor=self.session_id,
        )
        return merged


__all__ = ["EditSession"]
