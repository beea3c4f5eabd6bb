"""Dependency graph analyzer - dependents and depth levels for a task collection.

Tasks are stored in an arena (a list indexed by position) and edges as
integer adjacency lists, so traversal runs on an explicit stack and never
recurses, whatever the depth of the graph.
"""

from collections.abc import Sequence

from loguru import logger

from project_master.core.exceptions import CyclicGraphError
from project_master.tasks.models import DependencyNode, Task

WHITE, GRAY, BLACK = 0, 1, 2


class DependencyGraphAnalyzer:
    """
    Build the full dependency graph over a project's tasks.

    Each node carries its raw dependency list, the tasks that depend on it,
    and its level: the length of the longest dependency chain ending there.

    Example:
        >>> analyzer = DependencyGraphAnalyzer()
        >>> graph = analyzer.build_graph(tasks)
        >>> graph["task-1"].level
        0
        >>> graph["task-1"].dependents
        ['task-2', 'task-3']
    """

    def build_graph(
        self,
        tasks: Sequence[Task],
        strict: bool = True,
    ) -> dict[str, DependencyNode]:
        """
        Build a dependency graph for visualization and analysis.

        Args:
            tasks: Tasks of one project, expected to have passed validation.
            strict: Raise on cycles. When False, a back edge is counted as
                level 0 and only a warning is logged. Levels are memoized, so
                on cyclic input they depend on traversal order and are only a
                best-effort hint.

        Returns:
            Task ID -> DependencyNode, in input order.

        Raises:
            CyclicGraphError: If ``strict`` and the graph contains a cycle.
        """
        logger.debug(f"Building dependency graph for {len(tasks)} tasks")

        # Later duplicates of an id replace earlier ones
        arena: dict[str, Task] = {}
        for task in tasks:
            arena[task.id] = task

        ids = list(arena)
        index = {task_id: i for i, task_id in enumerate(ids)}

        adjacency: list[list[int]] = [
            [index[dep] for dep in arena[task_id].dependencies if dep in index]
            for task_id in ids
        ]

        dependents: list[list[str]] = [[] for _ in ids]
        for i, deps in enumerate(adjacency):
            for dep in deps:
                dependents[dep].append(ids[i])

        levels = self._calculate_levels(ids, adjacency, strict)

        graph = {
            task_id: DependencyNode(
                task=arena[task_id],
                dependencies=list(arena[task_id].dependencies),
                dependents=dependents[i],
                level=levels[i],
            )
            for i, task_id in enumerate(ids)
        }

        logger.debug(f"Dependency graph depth: {max(levels, default=0)}")
        return graph

    # =========================================================================
    # LEVEL CALCULATION
    # =========================================================================

    @staticmethod
    def _calculate_levels(
        ids: list[str],
        adjacency: list[list[int]],
        strict: bool,
    ) -> list[int]:
        """Post-order DFS over the arena assigning longest-chain levels."""
        colors = [WHITE] * len(ids)
        levels = [0] * len(ids)

        for root in range(len(ids)):
            if colors[root] != WHITE:
                continue

            colors[root] = GRAY
            stack: list[tuple[int, int]] = [(root, 0)]

            while stack:
                node, edge_index = stack[-1]
                deps = adjacency[node]

                if edge_index < len(deps):
                    stack[-1] = (node, edge_index + 1)
                    dep = deps[edge_index]
                    if colors[dep] == WHITE:
                        colors[dep] = GRAY
                        stack.append((dep, 0))
                    elif colors[dep] == GRAY:
                        path = [ids[n] for n, _ in stack]
                        cycle = path[path.index(ids[dep]):] + [ids[dep]]
                        if strict:
                            raise CyclicGraphError(cycle)
                        logger.warning(
                            f"Cycle in dependency graph, counting branch as level 0: "
                            f"{' -> '.join(cycle)}"
                        )
                    continue

                # Gray dependencies are back edges; they contribute level 0 + 1
                level = 0
                for dep in deps:
                    dep_level = levels[dep] if colors[dep] == BLACK else 0
                    level = max(level, dep_level + 1)
                levels[node] = level
                colors[node] = BLACK
                stack.pop()

        return levels

    # =========================================================================
    # UTILITY METHODS
    # =========================================================================

    @staticmethod
    def roots(graph: dict[str, DependencyNode]) -> list[str]:
        """Get IDs of tasks with no known dependencies (level 0)."""
        return [task_id for task_id, node in graph.items() if node.level == 0]

    @staticmethod
    def critical_path(graph: dict[str, DependencyNode]) -> list[str]:
        """
        Find the longest dependency chain in a built graph.

        Args:
            graph: Result of :meth:`build_graph`.

        Returns:
            Task IDs from a root task to the deepest task.
        """
        if not graph:
            return []

        current = max(graph, key=lambda task_id: graph[task_id].level)
        path = [current]

        while graph[current].level > 0:
            deps = [d for d in graph[current].dependencies if d in graph]
            if not deps:
                break
            current = max(deps, key=lambda d: graph[d].level)
            if current in path:
                break
            path.append(current)

        return list(reversed(path))


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def build_task_dependency_graph(
    tasks: Sequence[Task],
    strict: bool = True,
) -> dict[str, DependencyNode]:
    """
    Convenience function to build a dependency graph.

    Example:
        >>> graph = build_task_dependency_graph(tasks)
        >>> max(node.level for node in graph.values())
        3
    """
    return DependencyGraphAnalyzer().build_graph(tasks, strict=strict)
