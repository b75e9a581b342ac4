"""Query helpers for the editable graph."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, List, Tuple

from otgraph.graph.model import Arc, Graph, Node, PropBag, clone_props
from otgraph.graph.paths import join_path


@dataclass
class QueryService:
    """Read-only access patterns over a :class:`Graph`."""

    graph: Graph

    def walk(self) -> Iterator[Tuple[str, Node]]:
        """Yield ``(path, node)`` pairs depth-first in child order."""

        stack: List[Tuple[str, Node]] = [
            (name, child) for name, child in reversed(list(self.graph.nodes.iter_children()))
        ]
        while stack:
            path, node = stack.pop()
            yield path, node
            for name, child in reversed(list(node.iter_children())):
                stack.append((join_path(path, name), child))

    def by_props(self, **filters: Any) -> Iterable[Tuple[str, PropBag]]:
        """Return nodes whose properties match every key in ``filters``."""

        for path, node in self.walk():
            if all(key in node.props and node.props[key] == value for key, value in filters.items()):
                yield path, clone_props(node.props)

    def arcs_from(self, path: str) -> List[Arc]:
        return [tuple(arc) for arc in self.graph.arcs if arc[0] == path]

    def arcs_to(self, path: str) -> List[Arc]:
        return [tuple(arc) for arc in self.graph.arcs if arc[1] == path]

    def neighbors(self, path: str, *, hop: int = 1) -> Iterable[Dict[str, Any]]:
        """Yield paths reachable from ``path`` over arcs within ``hop`` steps."""

        visited = {path}
        frontier = {path}
        for depth in range(1, hop + 1):
            next_frontier = set()
            for current in sorted(frontier):
                for _, target in self.arcs_from(current):
                    if target in visited:
                        continue
                    visited.add(target)
                    next_frontier.add(target)
                    yield {"path": target, "hop": depth}
            frontier = next_frontier
