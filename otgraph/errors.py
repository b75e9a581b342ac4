"""Exception taxonomy shared by the OT engine."""
from __future__ import annotations


class OTError(Exception):
    """Base exception for graph edit errors."""


class LookupFailure(OTError, LookupError):
    """A referenced path or arc does not exist where it is required."""


class IntegrityViolation(OTError):
    """An edit would break a structural invariant of the graph."""


class ConflictFailure(OTError):
    """Two concurrent edits cannot both be honoured."""


__all__ = ["ConflictFailure", "IntegrityViolation", "LookupFailure", "OTError"]
