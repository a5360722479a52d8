# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Unit tests for cyclewatch_common.graph: builder and cycle engine."""

import sys
from typing import List

import pytest

from cyclewatch_common.graph import (
    InvalidReferenceError,
    ReferenceGraph,
    ReferencePair,
    build_graph,
    detect_cycle,
    find_cycles,
    has_cycle,
    iter_cycles,
)


def _assert_edge_consistent(graph: ReferenceGraph, cycle: List) -> None:
    assert len(cycle) >= 2
    assert cycle[0] == cycle[-1]
    for src, dst in zip(cycle, cycle[1:]):
        assert graph.has_edge(src, dst), f"{src} -> {dst} is not an edge"


# ---------------------------------------------------------------------------
# build_graph
# ---------------------------------------------------------------------------


class TestBuildGraph:
    def test_empty_input(self):
        graph = build_graph([])
        assert len(graph) == 0
        assert graph.nodes() == []

    def test_duplicate_pairs_collapse(self):
        graph = build_graph([("A", "B"), ("A", "B"), ("A", "C")])
        assert graph.neighbors("A") == ("B", "C")
        assert list(graph.edges()) == [ReferencePair("A", "B"), ReferencePair("A", "C")]

    def test_target_only_nodes_are_leaves(self):
        graph = build_graph([("A", "B")])
        assert "A" in graph
        assert "B" not in graph
        assert graph.neighbors("B") == ()

    def test_vertex_order_is_first_seen_as_source(self):
        graph = build_graph([("C", "A"), ("A", "B"), ("C", "B"), ("B", "C")])
        assert graph.nodes() == ["C", "A", "B"]
        assert graph.neighbors("C") == ("A", "B")

    def test_input_is_not_mutated(self):
        pairs = [("A", "B"), ("B", "A")]
        snapshot = list(pairs)
        build_graph(pairs)
        assert pairs == snapshot

    def test_accepts_generator(self):
        graph = build_graph((s, t) for s, t in [("A", "B"), ("B", "C")])
        assert graph.has_edge("B", "C")

    def test_non_string_identifiers(self):
        graph = build_graph([(1, 2), (2, (3, "x"))])
        assert graph.has_edge(2, (3, "x"))

    @pytest.mark.parametrize(
        "pairs, index",
        [
            ([(None, "B")], 0),
            ([("A", "B"), ("B", None)], 1),
            ([("A", "B"), ("A", "B", "C")], 1),
            ([("A",)], 0),
            ([42], 0),
            (["AB"], 0),
            ([("A", "B"), "AA"], 1),
            ([{"A", "B"}], 0),
            ([{"A": 1, "B": 2}], 0),
            ([(["A"], "B")], 0),
        ],
    )
    def test_invalid_pairs_rejected(self, pairs, index):
        with pytest.raises(InvalidReferenceError) as excinfo:
            build_graph(pairs)
        assert excinfo.value.index == index
        assert f"reference #{index}" in str(excinfo.value)

    def test_invalid_reference_error_is_value_error(self):
        with pytest.raises(ValueError, match="must not be None"):
            build_graph([("A", None)])


# ---------------------------------------------------------------------------
# has_cycle / find_cycles scenarios
# ---------------------------------------------------------------------------


class TestScenarios:
    def test_three_node_cycle_with_tail(self):
        pairs = [("A", "B"), ("B", "C"), ("C", "A"), ("D", "B")]
        assert has_cycle(pairs) is True
        assert find_cycles(pairs) == [["A", "B", "C", "A"]]

    def test_linear_chain(self):
        pairs = [("A", "B"), ("B", "C")]
        assert has_cycle(pairs) is False
        assert find_cycles(pairs) == []

    def test_self_loop(self):
        pairs = [("A", "A")]
        assert has_cycle(pairs) is True
        assert find_cycles(pairs) == [["A", "A"]]

    def test_empty(self):
        assert has_cycle([]) is False
        assert find_cycles([]) == []

    def test_two_node_cycle_and_separate_edge(self):
        pairs = [("A", "B"), ("B", "A"), ("C", "D")]
        assert has_cycle(pairs) is True
        cycles = find_cycles(pairs)
        assert cycles == [["A", "B", "A"]]
        assert not any("C" in c or "D" in c for c in cycles)


class TestCycleEngine:
    def test_diamond_is_acyclic(self):
        pairs = [("A", "B"), ("A", "C"), ("B", "D"), ("C", "D")]
        assert has_cycle(pairs) is False
        assert find_cycles(pairs) == []

    def test_self_loop_among_other_edges(self):
        pairs = [("A", "B"), ("B", "B"), ("B", "C")]
        assert has_cycle(pairs) is True
        assert ["B", "B"] in find_cycles(pairs)

    def test_continues_scanning_after_a_cycle(self):
        # B closes two loops: B->A and B->B
        pairs = [("A", "B"), ("B", "A"), ("B", "B")]
        assert find_cycles(pairs) == [["A", "B", "A"], ["B", "B"]]

    def test_overlapping_cycles_reported_separately(self):
        pairs = [("A", "B"), ("B", "C"), ("C", "A"), ("C", "B")]
        assert find_cycles(pairs) == [["A", "B", "C", "A"], ["B", "C", "B"]]

    def test_done_nodes_are_not_reexplored(self):
        # Cycle reachable from both A and E is only found once.
        pairs = [("A", "B"), ("B", "C"), ("C", "B"), ("E", "B")]
        assert find_cycles(pairs) == [["B", "C", "B"]]

    def test_order_follows_entry_points_and_neighbors(self):
        pairs = [("X", "X"), ("A", "B"), ("B", "A")]
        assert find_cycles(pairs) == [["X", "X"], ["A", "B", "A"]]

    def test_cycle_in_disconnected_component(self):
        pairs = [("A", "B"), ("B", "C"), ("D", "E"), ("E", "D")]
        assert find_cycles(pairs) == [["D", "E", "D"]]

    def test_cycles_are_edge_consistent(self):
        pairs = [
            ("a", "b"), ("b", "c"), ("c", "a"), ("c", "d"), ("d", "b"),
            ("d", "e"), ("e", "e"), ("f", "a"),
        ]
        graph = build_graph(pairs)
        cycles = find_cycles(graph)
        assert cycles
        for cycle in cycles:
            _assert_edge_consistent(graph, cycle)

    def test_accepts_prebuilt_graph(self):
        graph = build_graph([("A", "B"), ("B", "A")])
        assert has_cycle(graph) is True
        assert find_cycles(graph) == [["A", "B", "A"]]

    def test_idempotent(self):
        pairs = [("A", "B"), ("B", "C"), ("C", "A"), ("C", "C")]
        graph = build_graph(pairs)
        assert find_cycles(graph) == find_cycles(graph)
        assert has_cycle(graph) == has_cycle(graph)
        assert find_cycles(pairs) == find_cycles(pairs)

    def test_has_cycle_agrees_with_find_cycles(self):
        for pairs in (
            [],
            [("A", "B")],
            [("A", "B"), ("B", "A")],
            [("A", "B"), ("A", "C"), ("C", "A")],
        ):
            assert has_cycle(pairs) == bool(find_cycles(pairs))

    def test_invalid_input_propagates(self):
        with pytest.raises(InvalidReferenceError):
            has_cycle([("A", None)])
        with pytest.raises(InvalidReferenceError):
            find_cycles([(None, "A")])

    def test_deep_chain_does_not_hit_recursion_limit(self):
        depth = sys.getrecursionlimit() * 3
        pairs = [(i, i + 1) for i in range(depth)]
        assert has_cycle(pairs) is False
        pairs.append((depth, 0))
        cycles = find_cycles(pairs)
        assert len(cycles) == 1
        assert cycles[0][0] == 0
        assert cycles[0][-1] == 0
        assert len(cycles[0]) == depth + 2


class TestDetectAndIterCycles:
    def test_detect_cycle_returns_first(self):
        pairs = [("X", "X"), ("A", "B"), ("B", "A")]
        assert detect_cycle(pairs) == ["X", "X"]

    def test_detect_cycle_none_for_dag(self):
        assert detect_cycle([("A", "B"), ("B", "C")]) is None

    def test_iter_cycles_is_lazy_and_matches_find_cycles(self):
        pairs = [("A", "B"), ("B", "A"), ("B", "B")]
        it = iter_cycles(pairs)
        assert next(it) == ["A", "B", "A"]
        assert list(it) == [["B", "B"]]
        assert list(iter_cycles(pairs)) == find_cycles(pairs)
