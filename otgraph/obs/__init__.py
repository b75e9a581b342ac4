"""Observability helpers."""

from .events import Event, EventBus

__all__ = ["Event", "EventBus"]
