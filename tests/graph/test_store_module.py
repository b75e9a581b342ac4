"""Tests for :mod:`otgraph.graph.store`."""

from __future__ import annotations

import pytest

from otgraph.errors import IntegrityViolation, LookupFailure
from otgraph.graph.deltas import Connect, DelNode, Disconnect, NewNode, Repath
from otgraph.graph.model import make_graph
from otgraph.graph.store import GraphStore, apply_deltas_to_graph


def build_graph():
    return apply_deltas_to_graph(
        make_graph(),
        [
            [NewNode(path="a", props={"kind": "noise"}), [NewNode(path="a.b", props={"kind": "out"})]],
            NewNode(path="c"),
            Connect(paths=("a", "c")),
        ],
    )


def test_newnode_creates_node_with_copied_props():
    props = {"kind": "noise", "pos": [10, 10]}
    graph = apply_deltas_to_graph(make_graph(), NewNode(path="a", props=props))
    props["pos"].append(3)

    assert graph.nodes.children["a"].props == {"kind": "noise", "pos": [10, 10]}


def test_apply_returns_same_graph_for_chaining():
    graph = make_graph()
    assert apply_deltas_to_graph(graph, []) is graph


def test_newnode_failures_raise_integrity_violation():
    graph = build_graph()
    with pytest.raises(IntegrityViolation):
        apply_deltas_to_graph(graph, NewNode(path="a"))
    with pytest.raises(IntegrityViolation, match="newnode failed"):
        apply_deltas_to_graph(graph, NewNode(path="x.y"))
    assert "x" not in graph.nodes.children


def test_newnode_with_invalid_props_leaves_graph_unchanged():
    graph = make_graph()
    with pytest.raises(TypeError):
        apply_deltas_to_graph(graph, NewNode(path="a", props={"k": {"nested": 1}}))
    assert "a" not in graph.nodes.children
    assert graph.nodes.order == []


def test_delnode_requires_matching_props_and_no_children():
    graph = build_graph()
    with pytest.raises(IntegrityViolation, match="properties"):
        apply_deltas_to_graph(graph, DelNode(path="a.b", props={"kind": "stale"}))
    with pytest.raises(IntegrityViolation, match="children"):
        apply_deltas_to_graph(graph, DelNode(path="a", props={"kind": "noise"}))
    with pytest.raises(LookupFailure):
        apply_deltas_to_graph(graph, DelNode(path="missing"))

    apply_deltas_to_graph(graph, DelNode(path="a.b", props={"kind": "out"}))
    assert graph.nodes.children["a"].order == []


def test_connect_rejects_duplicate_arc():
    graph = build_graph()
    with pytest.raises(IntegrityViolation):
        apply_deltas_to_graph(graph, Connect(paths=("a", "c")))


def test_disconnect_removes_the_single_match():
    graph = build_graph()
    apply_deltas_to_graph(graph, Disconnect(paths=("a", "c")))
    assert graph.arcs == []
    with pytest.raises(IntegrityViolation, match="no matching arc"):
        apply_deltas_to_graph(graph, Disconnect(paths=("a", "c")))


def test_disconnect_with_ambiguous_arcs_raises():
    graph = build_graph()
    graph.arcs.append(("a", "c"))
    with pytest.raises(IntegrityViolation, match="more than one matching arc"):
        apply_deltas_to_graph(graph, Disconnect(paths=("a", "c")))


def test_repath_moves_subtree_and_rewrites_arcs():
    graph = build_graph()
    apply_deltas_to_graph(graph, [Connect(paths=("c", "a")), Repath(paths=("a", "c.a2"))])

    assert "a" not in graph.nodes.children
    moved = graph.nodes.children["c"].children["a2"]
    assert moved.props == {"kind": "noise"}
    assert moved.children["b"].props == {"kind": "out"}
    assert graph.arcs == [("c.a2", "c"), ("c", "c.a2")]


def test_repath_failures():
    graph = build_graph()
    with pytest.raises(LookupFailure):
        apply_deltas_to_graph(graph, Repath(paths=("missing", "z")))
    with pytest.raises(LookupFailure):
        apply_deltas_to_graph(graph, Repath(paths=("c", "x.y")))
    with pytest.raises(IntegrityViolation):
        apply_deltas_to_graph(graph, Repath(paths=("c", "a.b")))
    with pytest.raises(IntegrityViolation):
        apply_deltas_to_graph(graph, Repath(paths=("a", "a.b.z")))


def test_repath_into_missing_descendant_parent_is_lookup_failure():
    graph = build_graph()
    with pytest.raises(LookupFailure):
        apply_deltas_to_graph(graph, Repath(paths=("a", "a.x.y")))
    assert "a" in graph.nodes.children


def test_failure_keeps_earlier_operations_committed():
    graph = make_graph()
    with pytest.raises(IntegrityViolation):
        apply_deltas_to_graph(graph, [NewNode(path="a"), NewNode(path="b"), NewNode(path="a")])
    assert graph.nodes.order == ["a", "b"]


def test_unknown_values_are_rejected():
    with pytest.raises(TypeError):
        apply_deltas_to_graph(make_graph(), [{"op": "newnode", "path": "a"}])


def test_graph_store_atomic_apply_restores_on_failure():
    store = GraphStore(graph=build_graph())
    with pytest.raises(IntegrityViolation):
        store.apply([NewNode(path="d"), Connect(paths=("a", "c"))], atomic=True)

    assert store.get_node("d") is None
    assert store.arcs() == [("a", "c")]
    assert len(store.snapshots) == 0
    assert [event.action for event in store.event_bus.history()] == ["rollback"]


def test_graph_store_non_atomic_apply_keeps_partial_result():
    store = GraphStore(graph=build_graph())
    with pytest.raises(IntegrityViolation):
        store.apply([NewNode(path="d"), Connect(paths=("a", "c"))], atomic=False)
    assert store.get_node("d") is not None


def test_graph_store_atomic_default_from_environment(monkeypatch):
    monkeypatch.setenv("OTGRAPH_ATOMIC_APPLY", "true")
    store = GraphStore()
    with pytest.raises(IntegrityViolation):
        store.apply([NewNode(path="d"), NewNode(path="d")])
    assert store.get_node("d") is None


def test_graph_store_records_applied_ops():
    store = GraphStore(actor="tester")
    store.apply([NewNode(path="a"), [NewNode(path="a.b")]], atomic=False)

    event = list(store.event_bus.history(action="apply"))[0]
    assert event.actor == "tester"
    assert event.ops == ["newnode", "newnode"]
    assert event.paths == ["a", "a.b"]
    assert store.get_node("a.b") is not None


def test_graph_store_query_reflects_current_graph():
    store = GraphStore(graph=build_graph())
    store.apply(NewNode(path="d", props={"kind": "out"}), atomic=False)

    results = [path for path, _ in store.query().by_props(kind="out")]
    assert results == ["a.b", "d"]
    assert store.query().arcs_from("a") == [("a", "c")]
