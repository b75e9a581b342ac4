"""Transformations over delta sequences: inversion, rebasing and merging."""

from .inverse import inverse_delta
from .rebase import merge_deltas_to_graph, rebase

__all__ = ["inverse_delta", "merge_deltas_to_graph", "rebase"]
