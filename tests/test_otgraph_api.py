"""End-to-end checks against the public :mod:`otgraph` surface."""

from __future__ import annotations

import pytest

import otgraph


def test_inverse_roundtrip_from_payloads():
    graph = otgraph.make_graph()
    delta = otgraph.deltas_from_payload({"op": "newnode", "path": "a", "kind": "noise"})

    otgraph.apply_deltas_to_graph(graph, delta)
    otgraph.apply_deltas_to_graph(graph, otgraph.inverse_delta(delta))

    assert otgraph.graphs_equal(graph, otgraph.make_graph())


def test_graph_delta_roundtrip_with_arc():
    graph = otgraph.graph_from_deltas(
        otgraph.deltas_from_payload(
            [
                {"op": "newnode", "path": "a"},
                {"op": "newnode", "path": "a.b"},
                {"op": "connect", "paths": ["a", "a.b"]},
            ]
        )
    )
    rebuilt = otgraph.graph_from_deltas(otgraph.deltas_from_graph(graph))
    assert otgraph.graphs_equal(rebuilt, graph)
    assert otgraph.graph_to_string(rebuilt) == "a []\n  b []\na -> a.b"


def test_rebase_properties():
    out = []
    otgraph.rebase(
        otgraph.deltas_from_payload([{"op": "connect", "paths": ["a", "b"]}]),
        otgraph.deltas_from_payload([{"op": "connect", "paths": ["a", "b"]}]),
        out,
    )
    assert otgraph.deltas_to_payload(out) == [{"op": "connect", "paths": ["a", "b"]}]

    with pytest.raises(otgraph.ConflictFailure):
        otgraph.rebase([otgraph.Connect(paths=("a", "b"))], [otgraph.DelNode(path="a")], [])

    out = []
    otgraph.rebase([otgraph.Connect(paths=("a", "b"))], [otgraph.Repath(paths=("a", "a2"))], out)
    assert out[-1] == otgraph.Connect(paths=("a2", "b"))


def test_error_taxonomy_shares_a_base():
    assert issubclass(otgraph.LookupFailure, LookupError)
    for error in (otgraph.LookupFailure, otgraph.IntegrityViolation, otgraph.ConflictFailure):
        assert issubclass(error, otgraph.OTError)
