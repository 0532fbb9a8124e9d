"""
Unit tests for cycle detection
"""
import pytest

from callcycle.analysis.cycles import (
    IgnorePolicy,
    CycleDetector,
    build_call_graph,
    detect_cycle,
    detect_cycles,
)
from callcycle.analysis.cycles.detector import CycleSet, RecursionStack


@pytest.fixture()
def cycles_of(declare):
    def _cycles_of(edges, namespace_filter="app", ignore_list=frozenset()):
        policy = IgnorePolicy.create(namespace_filter, ignore_list)
        graph = build_call_graph(declare(edges), namespace_filter, ignore_list)
        return detect_cycles(graph, policy)

    return _cycles_of


def test_acyclic_chain(cycles_of):
    assert cycles_of({"A.f": ["B.g"], "B.g": ["C.h"], "C.h": []}) == []


def test_diamond_has_no_cycle(cycles_of):
    edges = {"A.f": ["B.g", "C.h"], "B.g": ["D.i"], "C.h": ["D.i"], "D.i": []}
    assert cycles_of(edges) == []
    reordered = {"D.i": [], "C.h": ["D.i"], "B.g": ["D.i"], "A.f": ["C.h", "B.g"]}
    assert cycles_of(reordered) == []


def test_self_call(cycles_of):
    assert cycles_of({"A.f": ["A.f"]}) == ["A.f -> A.f"]


def test_two_node_cycle_reported_once(cycles_of):
    assert cycles_of({"A.f": ["B.g"], "B.g": ["A.f"]}) == ["A.f -> B.g -> A.f"]
    assert cycles_of({"B.g": ["A.f"], "A.f": ["B.g"]}) == ["B.g -> A.f -> B.g"]


def test_duplicate_edges_do_not_duplicate_chains(cycles_of):
    assert cycles_of({"A.f": ["B.g", "B.g"], "B.g": ["A.f", "A.f"]}) == ["A.f -> B.g -> A.f"]


def test_chain_starts_at_the_repeated_method(cycles_of):
    edges = {"R.r": ["A.f"], "A.f": ["B.g"], "B.g": ["C.h"], "C.h": ["A.f"]}
    assert cycles_of(edges) == ["A.f -> B.g -> C.h -> A.f"]


def test_independent_cycles_in_discovery_order(cycles_of):
    edges = {
        "A.f": ["B.g", "C.h"],
        "B.g": ["A.f"],
        "C.h": ["D.i"],
        "D.i": ["C.h"],
    }
    assert cycles_of(edges) == ["A.f -> B.g -> A.f", "C.h -> D.i -> C.h"]


def test_found_cycle_stops_scanning_the_path(cycles_of):
    # A.f -> C.h -> A.f is never reported: A.f stops at its first cycle and
    # is already visited when C.h is searched from its own root.
    edges = {"A.f": ["B.g", "C.h"], "B.g": ["A.f"], "C.h": ["A.f"]}
    assert cycles_of(edges) == ["A.f -> B.g -> A.f"]


def test_every_cycle_closes_on_its_first_method(cycles_of):
    edges = {
        "A.f": ["B.g"],
        "B.g": ["C.h", "A.f"],
        "C.h": ["B.g"],
        "D.i": ["E.j"],
        "E.j": ["F.k"],
        "F.k": ["D.i"],
    }
    chains = cycles_of(edges)
    assert chains
    for chain in chains:
        names = chain.split(" -> ")
        assert len(names) >= 2
        assert names[0] == names[-1]


def test_ignored_closing_method_suppresses_cycle(cycles_of):
    edges = {"A.f": ["B.g"], "B.g": ["A.f"]}
    assert cycles_of(edges, ignore_list={"A.f"}) == []
    assert cycles_of(edges, ignore_list={"B.g"}) == []


def test_namespace_filter_excludes_whole_subgraph(cycles_of):
    edges = {
        "A.f": ["other:X.a"],
        "other:X.a": ["other:X.b"],
        "other:X.b": ["other:X.a"],
    }
    assert cycles_of(edges, namespace_filter="app") == []
    assert cycles_of(edges, namespace_filter="") == ["X.a -> X.b -> X.a"]


def test_ignored_method_still_traversed_but_never_closes(declare):
    # The graph is built without an ignore list, detection runs with one:
    # A.f may be entered as an intermediate node but never closes a cycle.
    graph = build_call_graph(declare({"A.f": ["B.g"], "B.g": ["A.f"]}), "app")
    assert detect_cycles(graph, IgnorePolicy.create("app", {"A.f"})) == []

    graph = build_call_graph(declare({"B.g": ["A.f"], "A.f": ["B.g"]}), "app")
    assert detect_cycles(graph, IgnorePolicy.create("app", {"A.f"})) == ["B.g -> A.f -> B.g"]


def test_detection_is_repeatable(declare):
    edges = {"A.f": ["B.g", "C.h"], "B.g": ["A.f"], "C.h": ["C.h"]}
    graph = build_call_graph(declare(edges), "app")
    policy = IgnorePolicy.create("app")
    first = detect_cycles(graph, policy)
    second = detect_cycles(graph, policy)
    assert set(first) == set(second)
    assert len(first) == 2


def test_deep_chain_does_not_exhaust_the_stack(method):
    depth = 5000
    nodes = [method("N.m%d" % i) for i in range(depth)]
    declarations = [(nodes[i], [nodes[(i + 1) % depth]]) for i in range(depth)]
    graph = build_call_graph(declarations, "app")

    chains = detect_cycles(graph, IgnorePolicy.create("app"))

    assert len(chains) == 1
    names = chains[0].split(" -> ")
    assert len(names) == depth + 1
    assert names[0] == names[-1] == "N.m0"
    assert names[1] == "N.m1"


def test_detect_cycle_leaves_stack_balanced(declare, method):
    graph = build_call_graph(declare({"A.f": ["B.g", "C.h"], "B.g": [], "C.h": ["A.f"]}), "app")
    visited, stack, cycles = set(), RecursionStack(), CycleSet()
    policy = IgnorePolicy.create("app")

    assert detect_cycle(method("A.f"), graph, visited, stack, cycles, policy) is True
    assert len(stack) == 0
    assert list(cycles) == ["A.f -> C.h -> A.f"]
    assert visited == {method("A.f"), method("B.g"), method("C.h")}

    # black nodes are not searched again
    assert detect_cycle(method("C.h"), graph, visited, stack, cycles, policy) is False


def test_leaf_becomes_visited(declare, method):
    graph = build_call_graph(declare({"A.f": []}), "app")
    visited, stack, cycles = set(), RecursionStack(), CycleSet()

    assert detect_cycle(method("A.f"), graph, visited, stack, cycles, IgnorePolicy()) is False
    assert visited == {method("A.f")}
    assert len(stack) == 0
    assert len(cycles) == 0


def test_detector_state_after_run(declare, method):
    graph = build_call_graph(declare({"A.f": ["B.g"], "B.g": ["A.f"], "C.h": []}), "app")
    detector = CycleDetector(graph, IgnorePolicy.create("app"))

    assert detector.run() == ["A.f -> B.g -> A.f"]
    assert detector.visited == {method("A.f"), method("B.g"), method("C.h")}
    assert len(detector.stack) == 0


def test_cycle_set_keeps_first_insertion_order():
    cycles = CycleSet()
    assert cycles.add("B.g -> B.g")
    assert cycles.add("A.f -> A.f")
    assert not cycles.add("B.g -> B.g")
    assert list(cycles) == ["B.g -> B.g", "A.f -> A.f"]
    assert "A.f -> A.f" in cycles
