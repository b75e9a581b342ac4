"""Rebase concurrent delta sequences by graph path.

Two sequences authored against the same base graph are merged by rewriting
the second in terms of the first.  Because edits are addressed by path rather
than by position, edits on disjoint subtrees always merge cleanly; only
operations touching the same path or arc endpoint can conflict.  Compatible
duplicates are dropped and renames are propagated, but incompatible edits
raise :class:`~otgraph.errors.ConflictFailure` instead of being reconciled.
"""
from __future__ import annotations

import logging
from typing import List, Optional

from otgraph.errors import ConflictFailure
from otgraph.graph.deltas import (
    ArcDelta,
    Connect,
    DelNode,
    Delta,
    DeltaLike,
    Disconnect,
    NewNode,
    NodeDelta,
    Repath,
    clone_deltas,
    is_sequence,
)
from otgraph.graph.model import Graph
from otgraph.graph.store import apply_deltas_to_graph
from otgraph.persist.snapshot import SnapshotManager

LOGGER = logging.getLogger(__name__)


def _touched_paths(delta: Delta) -> tuple:
    if isinstance(delta, NodeDelta):
        return (delta.path,)
    if isinstance(delta, ArcDelta):
        return delta.paths
    raise TypeError(f"Unsupported delta type: {type(delta).__name__}")


def _transform_single(b: Delta, a: Delta) -> Optional[Delta]:
    """Return ``b`` adjusted for the effects of ``a``, or ``None`` to drop it."""

    b = b.clone()
    if isinstance(a, (Connect, Disconnect)):
        if type(b) is type(a) and b.paths == a.paths:
            LOGGER.debug("drop duplicate %s %s", a.op, a.paths)
            return None
    elif isinstance(a, NewNode):
        if b == a:
            LOGGER.debug("drop duplicate newnode %s", a.path)
            return None
        if isinstance(b, NodeDelta) and b.path == a.path:
            raise ConflictFailure(f"cannot create node; path already exists: {a.path}")
    elif isinstance(a, DelNode):
        if isinstance(b, DelNode) and b.path == a.path:
            LOGGER.debug("drop duplicate delnode %s", a.path)
            return None
        if a.path in _touched_paths(b):
            raise ConflictFailure(f"cannot delete node; path is used in subsequent edit: {a.path}")
    elif isinstance(a, Repath):
        src, dst = a.paths
        if isinstance(b, NodeDelta):
            if b.path == src:
                b.path = dst
        elif isinstance(b, ArcDelta):
            b.paths = tuple(dst if path == src else path for path in b.paths)
    else:
        raise TypeError(f"Unsupported delta type: {type(a).__name__}")
    return b


def transform(b: DeltaLike, a: DeltaLike) -> Optional[DeltaLike]:
    """Return ``b`` rewritten so it applies after ``a``.

    ``None`` means every part of ``b`` was dropped as a duplicate.  Nested
    groups of ``b`` keep their shape; groups left empty are removed.
    """

    if is_sequence(a):
        b = clone_deltas(b)
        for step in a:
            b = transform(b, step)
            if b is None:
                return None
        return b
    if is_sequence(b):
        kept: List[DeltaLike] = []
        for item in b:
            adjusted = transform(item, a)
            if adjusted is not None:
                kept.append(adjusted)
        return kept or None
    return _transform_single(b, a)


def rebase(b: DeltaLike, a: DeltaLike, out: Optional[list] = None) -> Optional[DeltaLike]:
    """Rebase ``b`` onto ``a``, appending "``a`` then adjusted ``b``" to ``out``.

    ``a`` is copied into ``out`` unchanged and in order, followed by the
    elements of ``b`` rewritten for ``a``'s effects (duplicates dropped,
    renamed paths followed).  The adjusted ``b`` is also returned.  Neither
    input is mutated.

    When ``a`` is a sequence every element of ``a`` is emitted first and the
    adjusted ``b`` follows once, after the last of them, rather than after
    each step.

    Raises :class:`ConflictFailure` when ``a`` and ``b`` cannot both be
    honoured; ``out`` is left unchanged in that case.
    """

    if out is None:
        out = []
    try:
        adjusted = transform(b, a)
    except ConflictFailure as exc:
        LOGGER.warning("Rebase conflict: %s", exc)
        raise
    if is_sequence(a):
        out.extend(clone_deltas(a))
    else:
        out.append(a.clone())
    if adjusted is None:
        return None
    if is_sequence(adjusted):
        out.extend(adjusted)
    else:
        out.append(adjusted)
    return adjusted


def merge_deltas_to_graph(graph: Graph, deltas_a: DeltaLike, deltas_b: DeltaLike) -> list:
    """Commit two concurrent sequences to ``graph``: ``a`` first, then rebased ``b``.

    The rebase runs before anything is applied, so a conflict leaves the
    graph untouched.  The merged sequence is then applied atomically: if any
    delta fails the graph is restored and the error re-raised.  Returns the
    merged sequence that was applied.
    """

    merged: list = []
    rebase(deltas_b, deltas_a, merged)

    snapshots = SnapshotManager()
    snapshots.snapshot(graph)
    try:
        apply_deltas_to_graph(graph, merged)
    except Exception:
        graph.restore(snapshots.rollback())
        LOGGER.error("Merge failed; graph restored to its previous state")
        raise
    return merged


__all__ = ["merge_deltas_to_graph", "rebase", "transform"]
