"""Directed dependency graph keyed by component path.

The registry keeps two of these, one for providers and one for built
components. Both grow lazily as paths are loaded and built, so the full graph
is never known upfront: every resolution orders whatever part of it is
reachable at that moment.
"""

from collections import deque
from typing import Iterable

from componentry.errors import CircularReferenceError

__all__ = ["DependencyGraph"]


class DependencyGraph:
    """
    Mutable graph where each node maps to the paths it depends on.

    Edges are kept in insertion order so that resolution order is
    deterministic for a given sequence of registrations.
    """

    def __init__(self):
        self._dependencies: dict[str, dict[str, None]] = {}

    def add(self, path: str):
        """Register ``path`` as a node if it is not already known."""
        self._dependencies.setdefault(path, {})

    def add_dependencies(self, dependee: str, dependencies: Iterable[str]):
        """
        Add one or more dependencies to the graph for a given dependee node.

        Args:
            dependee: The path whose dependencies are being registered.
            dependencies: The paths this dependee depends on.
        """
        edges = self._dependencies.setdefault(dependee, {})
        for dependency in dependencies:
            self.add(dependency)
            edges[dependency] = None

    def dependencies_of(self, path: str) -> list[str]:
        return list(self._dependencies.get(path, ()))

    def __contains__(self, path: str) -> bool:
        return path in self._dependencies

    def resolve(self, path: str) -> list[str]:
        """
        Order the transitive dependencies of ``path``, dependencies first.

        Args:
            path: The node whose dependencies should be ordered.

        Returns:
            Every path reachable from ``path``, excluding ``path`` itself, in an
            order where each dependency precedes its dependees.

        Raises:
            CircularReferenceError: If a cycle is reachable from ``path``.
        """
        remaining = self._reachable_from(path)

        ready = deque(
            node for node, dependencies in remaining.items() if not dependencies
        )
        order = []

        while ready:
            next_item = ready.popleft()
            order.append(next_item)
            self._remove_dependency(next_item, remaining, ready)

        if remaining:
            raise CircularReferenceError(sorted(remaining))

        order.remove(path)
        return order

    def _reachable_from(self, path: str) -> dict[str, set[str]]:
        reachable: dict[str, set[str]] = {}
        pending = deque([path])

        while pending:
            node = pending.popleft()
            if node in reachable:
                continue
            dependencies = self.dependencies_of(node)
            reachable[node] = set(dependencies)
            pending.extend(dependencies)

        return reachable

    @staticmethod
    def _remove_dependency(next_item, remaining, ready):
        """
        Remove a resolved node from the graph and update readiness of dependents.

        Args:
            next_item: The path that has just been ordered.
            remaining: The unresolved part of the graph.
            ready: A queue of paths whose dependencies are all ordered.
        """
        del remaining[next_item]

        for dependee, dependencies in remaining.items():
            if next_item in dependencies:
                dependencies.discard(next_item)
                if not dependencies:
                    ready.append(dependee)
