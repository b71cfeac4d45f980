import pytest

from componentry.errors import CircularReferenceError
from componentry.graph import DependencyGraph


@pytest.fixture
def graph() -> DependencyGraph:
    return DependencyGraph()


def test_node_without_dependencies_resolves_to_nothing(graph):
    graph.add("one")
    assert graph.resolve("one") == []


def test_unknown_node_resolves_to_nothing(graph):
    assert graph.resolve("unknown") == []


def test_dependencies_come_before_dependees(graph):
    graph.add_dependencies("three", ["one", "two"])
    graph.add_dependencies("two", ["one"])

    assert graph.resolve("three") == ["one", "two"]


def test_order_follows_declaration_order(graph):
    graph.add_dependencies("a", ["c", "b"])
    assert graph.resolve("a") == ["c", "b"]


def test_only_reachable_nodes_are_resolved(graph):
    graph.add_dependencies("a", ["b"])
    graph.add_dependencies("x", ["a"])

    assert graph.resolve("a") == ["b"]


def test_duplicate_edges_are_ignored(graph):
    graph.add_dependencies("a", ["b"])
    graph.add_dependencies("a", ["b"])

    assert graph.dependencies_of("a") == ["b"]
    assert graph.resolve("a") == ["b"]


def test_cycle_is_detected(graph):
    graph.add_dependencies("one", ["two"])
    graph.add_dependencies("two", ["one"])

    with pytest.raises(CircularReferenceError, match="Circular reference detected") as raised:
        graph.resolve("one")

    assert raised.value.paths == ["one", "two"]


def test_self_dependency_is_a_cycle(graph):
    graph.add_dependencies("one", ["one"])

    with pytest.raises(CircularReferenceError):
        graph.resolve("one")


def test_cycle_reachable_through_dependency_is_detected(graph):
    graph.add_dependencies("top", ["a"])
    graph.add_dependencies("a", ["b"])
    graph.add_dependencies("b", ["a"])

    with pytest.raises(CircularReferenceError):
        graph.resolve("top")


def test_unrelated_cycle_does_not_fail_resolution(graph):
    graph.add_dependencies("a", ["b"])
    graph.add_dependencies("x", ["y"])
    graph.add_dependencies("y", ["x"])

    assert graph.resolve("a") == ["b"]
