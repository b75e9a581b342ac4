"""Event bus recording what happened to a graph and who did it."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List

from otgraph.graph.ids import utc_now


@dataclass
class Event:
    """One entry in the edit history.

    ``ops`` lists the delta operations involved in application order and
    ``paths`` the distinct node paths they touched.
    """

    ts: str
    level: str
    msg: str
    action: str | None = None
    actor: str | None = None
    ops: List[str] = field(default_factory=list)
    paths: List[str] = field(default_factory=list)

    def touches(self, path: str) -> bool:
        """Return ``True`` when ``path`` or one of its descendants was touched."""

        return any(item == path or item.startswith(path + ".") for item in self.paths)


@dataclass
class EventBus:
    """Append-only in-memory event bus."""

    events: List[Event] = field(default_factory=list)

    def emit(
        self,
        *,
        level: str,
        msg: str,
        action: str | None = None,
        actor: str | None = None,
        ops: Iterable[str] | None = None,
        paths: Iterable[str] | None = None,
    ) -> Event:
        """Create and store a new :class:`Event`."""

        event = Event(
            ts=utc_now(),
            level=level,
            msg=msg,
            action=action,
            actor=actor,
            ops=list(ops or []),
            paths=list(paths or []),
        )
        self.events.append(event)
        return event

    def history(self, *, action: str | None = None, path: str | None = None) -> Iterable[Event]:
        """Return the chronological history, optionally by ``action`` or ``path``."""

        return tuple(
            event
            for event in self.events
            if (action is None or event.action == action) and (path is None or event.touches(path))
        )
