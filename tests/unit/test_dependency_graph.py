"""Unit tests for dependency graph analysis."""

import pytest

from project_master.core.exceptions import CyclicGraphError
from project_master.tasks.dependency_graph import (
    DependencyGraphAnalyzer,
    build_task_dependency_graph,
)
from project_master.tasks.models import Task


class TestDependencyGraphAnalyzer:
    """Tests for DependencyGraphAnalyzer."""

    def test_levels(self, chain_tasks: list) -> None:
        """Test longest-chain levels on a diamond."""
        graph = DependencyGraphAnalyzer().build_graph(chain_tasks)

        assert graph["task-1"].level == 0
        assert graph["task-2"].level == 1
        assert graph["task-3"].level == 1
        assert graph["task-4"].level == 2

    def test_dependents(self, chain_tasks: list) -> None:
        """Test that dependents invert the dependency edges."""
        graph = DependencyGraphAnalyzer().build_graph(chain_tasks)

        assert graph["task-1"].dependents == ["task-2", "task-3"]
        assert graph["task-2"].dependents == ["task-4"]
        assert graph["task-4"].dependents == []

    def test_preserves_input_order(self, chain_tasks: list) -> None:
        """Test that nodes come back in input order."""
        graph = DependencyGraphAnalyzer().build_graph(list(reversed(chain_tasks)))

        assert list(graph) == ["task-4", "task-3", "task-2", "task-1"]
        assert graph["task-4"].level == 2

    def test_level_is_longest_path(self) -> None:
        """Test that a shortcut edge does not lower the level."""
        tasks = [
            Task(id="a", project_id="p", title="A"),
            Task(id="b", project_id="p", title="B", dependencies=["a"]),
            Task(id="c", project_id="p", title="C", dependencies=["b"]),
            Task(id="d", project_id="p", title="D", dependencies=["a", "c"]),
        ]

        graph = DependencyGraphAnalyzer().build_graph(tasks)

        assert graph["d"].level == 3

    def test_unknown_dependencies_ignored(self) -> None:
        """Test that edges to unknown ids add no level or dependent."""
        tasks = [Task(id="a", project_id="p", title="A", dependencies=["ghost"])]

        graph = DependencyGraphAnalyzer().build_graph(tasks)

        assert graph["a"].level == 0
        assert graph["a"].dependencies == ["ghost"]
        assert "ghost" not in graph

    def test_empty(self) -> None:
        """Test an empty task list."""
        assert DependencyGraphAnalyzer().build_graph([]) == {}

    def test_cycle_raises_in_strict_mode(self) -> None:
        """Test that corrupted input with a cycle is rejected."""
        tasks = [
            Task(id="a", project_id="p", title="A", dependencies=["b"]),
            Task(id="b", project_id="p", title="B", dependencies=["a"]),
        ]

        with pytest.raises(CyclicGraphError) as exc_info:
            DependencyGraphAnalyzer().build_graph(tasks)

        assert exc_info.value.cycle == ["a", "b", "a"]
        assert "a -> b -> a" in str(exc_info.value)

    def test_cycle_tolerated_when_not_strict(self) -> None:
        """Test that a back edge contributes level 0 + 1 outside strict mode."""
        tasks = [
            Task(id="a", project_id="p", title="A", dependencies=["b"]),
            Task(id="b", project_id="p", title="B", dependencies=["a"]),
        ]

        graph = DependencyGraphAnalyzer().build_graph(tasks, strict=False)

        assert graph["b"].level == 1
        assert graph["a"].level == 2

    def test_cycle_levels_follow_input_order(self) -> None:
        """Test that tolerated cycles resolve from whichever task comes first."""
        tasks = [
            Task(id="b", project_id="p", title="B", dependencies=["a"]),
            Task(id="a", project_id="p", title="A", dependencies=["b"]),
        ]

        graph = DependencyGraphAnalyzer().build_graph(tasks, strict=False)

        assert graph["a"].level == 1
        assert graph["b"].level == 2

    def test_deep_chain(self) -> None:
        """Test level computation deeper than the recursion limit."""
        depth = 5000
        tasks = [
            Task(
                id=f"t{i}",
                project_id="p",
                title=f"Task {i}",
                dependencies=[f"t{i - 1}"] if i else [],
            )
            for i in range(depth)
        ]

        graph = DependencyGraphAnalyzer().build_graph(tasks)

        assert graph[f"t{depth - 1}"].level == depth - 1

    def test_roots_and_critical_path(self, chain_tasks: list) -> None:
        """Test root listing and the deepest chain."""
        graph = build_task_dependency_graph(chain_tasks)

        assert DependencyGraphAnalyzer.roots(graph) == ["task-1"]
        assert DependencyGraphAnalyzer.critical_path(graph) == ["task-1", "task-2", "task-4"]
        assert DependencyGraphAnalyzer.critical_path({}) == []
