"""Tests for :mod:`otgraph.graph.query`."""

from __future__ import annotations

from otgraph.convert import graph_from_deltas
from otgraph.graph.deltas import Connect, NewNode
from otgraph.graph.query import QueryService


def build_graph():
    return graph_from_deltas(
        [
            [NewNode(path="osc", props={"kind": "noise"}), [NewNode(path="osc.out", props={"kind": "port"})]],
            NewNode(path="filter", props={"kind": "lowpass"}),
            NewNode(path="dac", props={"kind": "port"}),
            Connect(paths=("osc", "filter")),
            Connect(paths=("filter", "dac")),
        ]
    )


def test_walk_is_depth_first_in_child_order():
    service = QueryService(build_graph())
    assert [path for path, _ in service.walk()] == ["osc", "osc.out", "filter", "dac"]


def test_by_props_filters_results():
    service = QueryService(build_graph())
    results = list(service.by_props(kind="port"))
    assert [path for path, _ in results] == ["osc.out", "dac"]
    assert results[1][1] == {"kind": "port"}


def test_arcs_from_and_to():
    service = QueryService(build_graph())
    assert service.arcs_from("osc") == [("osc", "filter")]
    assert service.arcs_to("dac") == [("filter", "dac")]


def test_neighbors_respects_hop():
    service = QueryService(build_graph())
    assert [item["path"] for item in service.neighbors("osc")] == ["filter"]
    assert list(service.neighbors("osc", hop=2)) == [
        {"path": "filter", "hop": 1},
        {"path": "dac", "hop": 2},
    ]


def test_neighbors_missing_node_yields_empty_iterator():
    service = QueryService(build_graph())
    assert list(service.neighbors("missing")) == []
