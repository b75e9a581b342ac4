"""Apply engine and in-memory store for the editable graph.

:func:`apply_deltas_to_graph` is the only mutation entry point: the graph is
created empty and changed exclusively by applying deltas in order, which keeps
the delta log authoritative and replayable.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from otgraph.config import get_bool
from otgraph.errors import IntegrityViolation, LookupFailure
from otgraph.graph.deltas import (
    ArcDelta,
    Connect,
    DelNode,
    Delta,
    DeltaLike,
    Disconnect,
    NewNode,
    Repath,
    flatten,
)
from otgraph.graph.model import Arc, Graph, Node, clone_props
from otgraph.graph.paths import (
    create_child,
    is_within,
    resolve,
    resolve_container,
    resolve_parent,
)
from otgraph.graph.query import QueryService
from otgraph.obs.events import EventBus
from otgraph.persist.snapshot import SnapshotManager

LOGGER = logging.getLogger(__name__)


def _touched(deltas: List[Delta]) -> List[str]:
    paths: List[str] = []
    for delta in deltas:
        for path in (delta.paths if isinstance(delta, ArcDelta) else (delta.path,)):
            if path not in paths:
                paths.append(path)
    return paths


def _apply_repath(graph: Graph, delta: Repath) -> None:
    src, dst = delta.paths
    container, name = resolve_container(graph.nodes, src)
    if container is None:
        raise LookupFailure(f"repath failed; couldn't find source: {src}")
    existing, _ = resolve_container(graph.nodes, dst)
    if existing is not None:
        raise IntegrityViolation(f"repath failed; destination already exists: {dst}")
    target = resolve_parent(graph.nodes, dst)
    if is_within(dst, src):
        raise IntegrityViolation(f"repath failed; cannot move {src} inside itself")

    node = container.detach(name)
    target.attach(dst.rsplit(".", 1)[-1], node)
    graph.arcs[:] = [
        (dst if arc[0] == src else arc[0], dst if arc[1] == src else arc[1])
        for arc in graph.arcs
    ]


def _apply_newnode(graph: Graph, delta: NewNode) -> None:
    props = clone_props(delta.props)
    try:
        node = create_child(graph.nodes, delta.path)
    except LookupFailure as exc:
        raise IntegrityViolation(f"newnode failed; {exc}") from exc
    node.props.update(props)


def _apply_delnode(graph: Graph, delta: DelNode) -> None:
    container, name = resolve_container(graph.nodes, delta.path)
    if container is None:
        raise LookupFailure(f"delnode failed: path not found: {delta.path}")
    node: Node = container.children[name]
    if node.props != delta.props:
        raise IntegrityViolation(f"delnode failed; properties do not match at {delta.path}")
    if node.has_children():
        raise IntegrityViolation(f"delnode failed; node has children: {delta.path}")
    container.detach(name)


def _apply_connect(graph: Graph, delta: Connect) -> None:
    if any(tuple(arc) == delta.paths for arc in graph.arcs):
        raise IntegrityViolation(f"connect failed: arc already exists: {delta.paths}")
    graph.arcs.append(delta.paths)


def _apply_disconnect(graph: Graph, delta: Disconnect) -> None:
    matches = [index for index, arc in enumerate(graph.arcs) if tuple(arc) == delta.paths]
    if not matches:
        raise IntegrityViolation(f"disconnect failed: no matching arc found: {delta.paths}")
    if len(matches) > 1:
        raise IntegrityViolation(f"disconnect failed: more than one matching arc: {delta.paths}")
    del graph.arcs[matches[0]]


_HANDLERS = {
    Repath: _apply_repath,
    NewNode: _apply_newnode,
    DelNode: _apply_delnode,
    Connect: _apply_connect,
    Disconnect: _apply_disconnect,
}


def apply_delta(graph: Graph, delta: Delta) -> None:
    """Execute a single delta against ``graph``."""

    handler = _HANDLERS.get(type(delta))
    if handler is None:
        raise TypeError(f"Unsupported delta type: {type(delta).__name__}")
    LOGGER.debug("apply %s %s", delta.op, getattr(delta, "path", None) or getattr(delta, "paths", None))
    handler(graph, delta)


def apply_deltas_to_graph(graph: Graph, deltas: DeltaLike) -> Graph:
    """Apply ``deltas`` to ``graph`` in place and return it for chaining.

    Failure aborts immediately; operations executed before the failing one
    remain committed.  Snapshot the graph first when atomicity is required.
    """

    for delta in flatten(deltas):
        apply_delta(graph, delta)
    return graph


@dataclass
class GraphStore:
    """Wrapper pairing a :class:`Graph` with snapshots and an event log."""

    graph: Graph = field(default_factory=Graph)
    snapshots: SnapshotManager = field(default_factory=SnapshotManager)
    event_bus: EventBus = field(default_factory=EventBus)
    actor: Optional[str] = None

    def apply(self, deltas: DeltaLike, *, atomic: Optional[bool] = None) -> Graph:
        """Apply ``deltas``; with ``atomic`` a failure restores the prior graph.

        ``atomic`` defaults to the ``OTGRAPH_ATOMIC_APPLY`` setting.
        """

        if atomic is None:
            atomic = get_bool("OTGRAPH_ATOMIC_APPLY", False)
        if not atomic:
            apply_deltas_to_graph(self.graph, deltas)
            self._emit_applied(deltas)
            return self.graph

        self.snapshots.snapshot(self.graph)
        try:
            apply_deltas_to_graph(self.graph, deltas)
        except Exception as exc:
            self.graph.restore(self.snapshots.rollback())
            LOGGER.error("Rolled back failed delta sequence: %s", exc)
            self.event_bus.emit(
                level="error",
                msg=str(exc),
                action="rollback",
                actor=self.actor,
            )
            raise
        self.snapshots.discard()
        self._emit_applied(deltas)
        return self.graph

    def _emit_applied(self, deltas: DeltaLike) -> None:
        applied = list(flatten(deltas))
        self.event_bus.emit(
            level="info",
            msg=f"Applied {len(applied)} delta(s)",
            action="apply",
            actor=self.actor,
            ops=[delta.op for delta in applied],
            paths=_touched(applied),
        )

    def get_node(self, path: str) -> Optional[Node]:
        """Return the node at ``path`` or ``None`` when absent."""

        try:
            return resolve(self.graph.nodes, path)
        except LookupFailure:
            return None

    def query(self) -> QueryService:
        """Return a read-only :class:`QueryService` over the current graph."""

        return QueryService(self.graph)

    def arcs(self) -> List[Arc]:
        """Return a copy of the arc list."""

        return [tuple(arc) for arc in self.graph.arcs]


__all__ = ["GraphStore", "apply_delta", "apply_deltas_to_graph"]
