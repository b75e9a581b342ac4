"""Inverse operator for deltas and delta sequences."""
from __future__ import annotations

from otgraph.graph.deltas import (
    Connect,
    DelNode,
    Delta,
    DeltaLike,
    Disconnect,
    NewNode,
    Repath,
    is_sequence,
)
from otgraph.graph.model import clone_props


def _inverse_single(delta: Delta) -> Delta:
    if isinstance(delta, NewNode):
        return DelNode(path=delta.path, props=clone_props(delta.props))
    if isinstance(delta, DelNode):
        return NewNode(path=delta.path, props=clone_props(delta.props))
    if isinstance(delta, Connect):
        return Disconnect(paths=delta.paths)
    if isinstance(delta, Disconnect):
        return Connect(paths=delta.paths)
    if isinstance(delta, Repath):
        src, dst = delta.paths
        return Repath(paths=(dst, src))
    raise TypeError(f"Unsupported delta type: {type(delta).__name__}")


def inverse_delta(delta: DeltaLike) -> DeltaLike:
    """Return the edit that undoes ``delta``.

    Sequences are inverted element-wise in reverse order, so
    ``inverse_delta([a, b]) == [inverse_delta(b), inverse_delta(a)]``.
    Applying the result after ``delta`` restores a structurally equal graph.
    """

    if is_sequence(delta):
        return [inverse_delta(item) for item in reversed(delta)]
    return _inverse_single(delta)


__all__ = ["inverse_delta"]
