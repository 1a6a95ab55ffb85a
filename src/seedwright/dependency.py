"""Dependency graph for ordering entity writes."""

from collections import deque
from collections.abc import Hashable

from seedwright.exceptions import PersistenceError


class CircularReferenceError(PersistenceError):
    """Circular dependency detected between pending entities."""

    def __init__(self, nodes: list[str]):
        nodes_str = ", ".join(nodes)
        super().__init__(
            f"Circular reference detected between pending entities: {nodes_str}\n\n"
            f"Suggestions:\n"
            f"1. Flush one side first, then assign the back-reference\n"
            f"2. Make one of the relations nullable and set it after flush()"
        )


class DependencyGraph:
    """
    Directed graph of write dependencies.

    Nodes keep insertion order so that independent nodes are written in the
    order they were registered.
    """

    def __init__(self):
        self._graph: dict[Hashable, set[Hashable]] = {}  # node -> dependencies
        self._dependents: dict[Hashable, list[Hashable]] = {}  # node -> dependents
        self._labels: dict[Hashable, str] = {}

    def add_node(self, node: Hashable, label: str | None = None) -> None:
        """Add a node to the graph."""
        if node not in self._graph:
            self._graph[node] = set()
            self._dependents[node] = []
        if label or node not in self._labels:
            self._labels[node] = label or str(node)

    def add_dependency(self, node: Hashable, depends_on: Hashable) -> None:
        """Add a dependency: node must be written after depends_on."""
        self.add_node(node)
        self.add_node(depends_on)
        if depends_on not in self._graph[node]:
            self._graph[node].add(depends_on)
            self._dependents[depends_on].append(node)

    def get_dependencies(self, node: Hashable) -> list[Hashable]:
        """Get all nodes that this node depends on."""
        return list(self._graph.get(node, set()))

    def topological_sort(self) -> list[Hashable]:
        """
        Sort nodes in dependency order using Kahn's algorithm.

        Each edge is visited once, so sorting is linear in nodes + edges.

        Returns:
            Nodes in order such that dependencies come before dependents.

        Raises:
            CircularReferenceError: If circular dependency detected
        """
        in_degree = {node: len(deps) for node, deps in self._graph.items()}

        queue = deque(node for node in self._graph if in_degree[node] == 0)
        result = []

        while queue:
            node = queue.popleft()
            result.append(node)

            for dependent in self._dependents[node]:
                in_degree[dependent] -= 1
                if in_degree[dependent] == 0:
                    queue.append(dependent)

        if len(result) != len(self._graph):
            done = set(result)
            missing = [self._labels[n] for n in self._graph if n not in done]
            raise CircularReferenceError(missing)

        return result
