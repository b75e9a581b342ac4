"""The five-operation edit language for the graph.

Every operation is invertible: destructive edits carry the full detail of what
they remove.  A *delta sequence* is a plain ``list`` whose elements are
:class:`Delta` instances or nested lists; nesting groups a node with its
descendants but the flattened order is what matters for application.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, ClassVar, Dict, Iterator, List, Mapping, Tuple, Type, Union

from otgraph.graph.model import PropBag, clone_props

RESERVED_KEYS = frozenset({"op", "path", "paths"})


@dataclass
class Delta:
    """Base class for a single atomic graph edit."""

    op: ClassVar[str] = ""

    def clone(self) -> "Delta":
        raise NotImplementedError

    def to_payload(self) -> Dict[str, Any]:
        raise NotImplementedError


@dataclass
class NodeDelta(Delta):
    """Operation addressing one node path and carrying its property bag."""

    path: str
    props: PropBag = field(default_factory=dict)

    def clone(self) -> "NodeDelta":
        return replace(self, props=clone_props(self.props))

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"op": self.op, "path": self.path}
        payload.update(clone_props(self.props))
        return payload


@dataclass
class ArcDelta(Delta):
    """Operation addressing a pair of node paths."""

    paths: Tuple[str, str]

    def __post_init__(self) -> None:
        self.paths = _coerce_pair(self.paths, self.op)

    def clone(self) -> "ArcDelta":
        return replace(self)

    def to_payload(self) -> Dict[str, Any]:
        return {"op": self.op, "paths": list(self.paths)}


@dataclass
class NewNode(NodeDelta):
    op: ClassVar[str] = "newnode"


@dataclass
class DelNode(NodeDelta):
    op: ClassVar[str] = "delnode"


@dataclass
class Connect(ArcDelta):
    op: ClassVar[str] = "connect"


@dataclass
class Disconnect(ArcDelta):
    op: ClassVar[str] = "disconnect"


@dataclass
class Repath(ArcDelta):
    """Move the subtree at ``paths[0]`` to ``paths[1]``."""

    op: ClassVar[str] = "repath"


DeltaLike = Union[Delta, List["DeltaLike"]]

OPERATIONS: Dict[str, Type[Delta]] = {
    cls.op: cls for cls in (NewNode, DelNode, Connect, Disconnect, Repath)
}


def _coerce_pair(value: Any, op: str) -> Tuple[str, str]:
    if isinstance(value, (str, bytes)) or not isinstance(value, (list, tuple)) or len(value) != 2:
        raise ValueError(f"{op or 'delta'} requires exactly two paths, got {value!r}")
    first, second = value
    if not isinstance(first, str) or not isinstance(second, str):
        raise ValueError(f"{op or 'delta'} paths must be strings, got {value!r}")
    return first, second


def is_sequence(value: Any) -> bool:
    """Return ``True`` for a delta sequence, ``False`` for a single delta."""

    if isinstance(value, list):
        return True
    if isinstance(value, Delta):
        return False
    raise TypeError(f"Expected a Delta or a list of deltas, got {type(value).__name__}")


def clone_deltas(value: DeltaLike) -> DeltaLike:
    """Return a structural copy of a delta or (nested) delta sequence."""

    if is_sequence(value):
        return [clone_deltas(item) for item in value]
    return value.clone()


def flatten(value: DeltaLike) -> Iterator[Delta]:
    """Yield the deltas of ``value`` in application order."""

    if is_sequence(value):
        for item in value:
            yield from flatten(item)
    else:
        yield value


def delta_from_payload(payload: Mapping[str, Any]) -> Delta:
    """Coerce a plain mapping such as ``{"op": "connect", "paths": [a, b]}``.

    Node operations take their properties from every key other than ``op`` and
    ``path``; a nested ``props`` mapping is merged in as well.
    """

    if not isinstance(payload, Mapping):
        raise TypeError(f"Delta payload must be a mapping, got {type(payload).__name__}")
    op = payload.get("op")
    cls = OPERATIONS.get(op)  # type: ignore[arg-type]
    if cls is None:
        raise ValueError(f"Unknown delta op: {op!r}")

    if issubclass(cls, ArcDelta):
        if "paths" not in payload:
            raise ValueError(f"{op} payload requires 'paths'")
        return cls(paths=payload["paths"])

    path = payload.get("path")
    if not isinstance(path, str) or not path:
        raise ValueError(f"{op} payload requires a non-empty 'path'")
    props: Dict[str, Any] = {}
    nested = payload.get("props")
    if isinstance(nested, Mapping):
        props.update(nested)
    for key, value in payload.items():
        if key in RESERVED_KEYS or (key == "props" and isinstance(nested, Mapping)):
            continue
        props[key] = value
    return cls(path=path, props=clone_props(props))


def deltas_from_payload(value: Any) -> DeltaLike:
    """Recursively coerce nested lists of delta mappings."""

    if isinstance(value, (list, tuple)):
        return [deltas_from_payload(item) for item in value]
    return delta_from_payload(value)


def deltas_to_payload(value: DeltaLike) -> Any:
    """Return the plain nested list/mapping form of ``value``."""

    if is_sequence(value):
        return [deltas_to_payload(item) for item in value]
    return value.to_payload()


__all__ = [
    "ArcDelta",
    "Connect",
    "DelNode",
    "Delta",
    "DeltaLike",
    "Disconnect",
    "NewNode",
    "NodeDelta",
    "OPERATIONS",
    "Repath",
    "clone_deltas",
    "delta_from_payload",
    "deltas_from_payload",
    "deltas_to_payload",
    "flatten",
    "is_sequence",
]
