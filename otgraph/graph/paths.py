"""Dot-separated path addressing over the node tree.

A path such as ``"a.b.c"`` names the node reached from the (unnamed) root by
following the children ``a``, ``b`` and ``c`` in turn.  Paths are the only
addressing mechanism; there is no positional indexing.
"""
from __future__ import annotations

from typing import List, Optional, Tuple

from otgraph.errors import IntegrityViolation, LookupFailure
from otgraph.graph.model import Node

SEPARATOR = "."


def split_path(path: str) -> List[str]:
    """Return the segments of ``path``.

    Empty paths and empty segments (``"a..b"``) cannot address a node and
    raise :class:`LookupFailure`.
    """

    if not isinstance(path, str):
        raise TypeError(f"Path must be a string, got {type(path).__name__}")
    steps = path.split(SEPARATOR)
    if not path or any(step == "" for step in steps):
        raise LookupFailure(f"invalid path: {path!r}")
    return steps


def join_path(*parts: str) -> str:
    """Join path fragments, ignoring empty ones."""

    return SEPARATOR.join(part for part in parts if part)


def parent_path(path: str) -> str:
    """Return the path of the parent, or ``""`` for top-level nodes."""

    return join_path(*split_path(path)[:-1])


def is_within(path: str, ancestor: str) -> bool:
    """Return ``True`` when ``path`` equals ``ancestor`` or lies beneath it."""

    return path == ancestor or path.startswith(ancestor + SEPARATOR)


def resolve(root: Node, path: str) -> Node:
    """Return the node at ``path``; raise :class:`LookupFailure` if missing."""

    node = root
    for step in split_path(path):
        child = node.get(step)
        if child is None:
            raise LookupFailure(f"failed to find path: {path} (missing '{step}')")
        node = child
    return node


def resolve_parent(root: Node, path: str) -> Node:
    """Return the node that would contain ``path``'s last segment."""

    parent = parent_path(path)
    return resolve(root, parent) if parent else root


def resolve_container(root: Node, path: str) -> Tuple[Optional[Node], str]:
    """Return ``(container, last_key)`` for the final node of ``path``.

    When the path cannot be fully resolved ``(None, first_missing_key)`` is
    returned instead of raising, so callers can use it as an existence check.
    """

    container: Optional[Node] = None
    last = ""
    node = root
    for step in split_path(path):
        child = node.get(step)
        if child is None:
            return None, step
        container, last, node = node, step, child
    return container, last


def create_child(root: Node, path: str) -> Node:
    """Create an empty node at ``path`` and return it.

    Every segment but the last must already exist (:class:`LookupFailure`
    otherwise) and the last must be free (:class:`IntegrityViolation`).
    """

    steps = split_path(path)
    parent = resolve_parent(root, path)
    last = steps[-1]
    if parent.get(last) is not None:
        raise IntegrityViolation(f"path already exists: {path}")
    return parent.attach(last, Node())


__all__ = [
    "SEPARATOR",
    "create_child",
    "is_within",
    "join_path",
    "parent_path",
    "resolve",
    "resolve_container",
    "resolve_parent",
    "split_path",
]
