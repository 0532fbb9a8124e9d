"""
Unit tests for callcycle.machinery.callgraph
"""
import pytest

from callcycle.errors import CallGraphError
from callcycle.machinery import CallGraph


def test_callees_keep_source_order_and_duplicates(method):
    a, b, c = method("A.f"), method("B.g"), method("C.h")
    graph = CallGraph()
    graph.add_edge(a, b)
    graph.add_edge(a, c)
    graph.add_edge(a, b)

    assert graph.callees(a) == (b, c, b)
    assert graph.edge_count() == 3
    assert list(graph.edges()) == [(a, b), (a, c), (a, b)]


def test_callee_is_not_made_a_key(method):
    a, b = method("A.f"), method("B.g")
    graph = CallGraph()
    graph.add_edge(a, b)

    assert a in graph
    assert b not in graph
    assert graph.callees(b) == ()
    assert len(graph) == 1


def test_add_node_keeps_existing_callees(method):
    a, b = method("A.f"), method("B.g")
    graph = CallGraph()
    graph.add_edge(a, b)
    graph.add_node(a)
    graph.add_node(b)

    assert graph.get() == {a: (b,), b: ()}
    assert list(graph.nodes()) == [a, b]


def test_frozen_graph_rejects_mutation(method):
    a, b = method("A.f"), method("B.g")
    graph = CallGraph()
    graph.add_node(a)
    assert graph.freeze() is graph
    assert graph.frozen

    with pytest.raises(CallGraphError):
        graph.add_edge(a, b)
    with pytest.raises(CallGraphError):
        graph.add_node(b)
    assert graph.callees(a) == ()
