"""Dependency validator - checks a proposed dependency set before it is applied.

Rejects self-references, references to unknown tasks or tasks of another
project, and any edge set that would close a cycle in the project's graph.
"""

from collections.abc import Iterable, Sequence

from loguru import logger

from project_master.tasks.models import Task, ValidationResult

SELF_DEPENDENCY_ERROR = "Task cannot depend on itself"
CIRCULAR_DEPENDENCY_ERROR = "Circular dependency detected"


class DependencyValidator:
    """
    Validate a task's proposed dependencies against its project.

    The check is pure: it reads the task collection, never mutates it,
    and reports every violation at once instead of stopping at the first.

    Example:
        >>> validator = DependencyValidator()
        >>> result = validator.validate("task-2", ["task-2"], tasks)
        >>> result.errors[0]
        'Task cannot depend on itself'
    """

    def validate(
        self,
        task_id: str,
        proposed_dependencies: Iterable[str] | None,
        all_tasks: Sequence[Task],
        project_id: str | None = None,
    ) -> ValidationResult:
        """
        Validate proposed dependencies for a task.

        Args:
            task_id: Task receiving the dependencies (may not exist yet).
            proposed_dependencies: Dependency IDs to check.
            all_tasks: Every task currently in the project.
            project_id: Owning project of the task. Looked up from
                ``all_tasks`` when omitted.

        Returns:
            ValidationResult listing every violation found.
        """
        proposed = list(dict.fromkeys(proposed_dependencies or []))
        if not proposed:
            return ValidationResult.from_errors([])

        task_map = {task.id: task for task in all_tasks}
        errors: list[str] = []

        if task_id in proposed:
            errors.append(SELF_DEPENDENCY_ERROR)

        if project_id is None and task_id in task_map:
            project_id = task_map[task_id].project_id

        for dep_id in proposed:
            dep_task = task_map.get(dep_id)
            if dep_task is None:
                errors.append(f"Dependency task {dep_id} not found")
            elif project_id is not None and dep_task.project_id != project_id:
                errors.append(f"Dependency task {dep_id} is not in the same project")

        if self.has_cycle(task_id, proposed, task_map):
            errors.append(CIRCULAR_DEPENDENCY_ERROR)

        if errors:
            logger.debug(f"Dependencies for task {task_id} rejected: {errors}")

        return ValidationResult.from_errors(errors)

    # =========================================================================
    # CYCLE DETECTION
    # =========================================================================

    @staticmethod
    def has_cycle(
        task_id: str,
        proposed: list[str],
        task_map: dict[str, Task],
    ) -> bool:
        """
        Detect whether applying ``proposed`` to ``task_id`` closes a cycle.

        Depth-first traversal from ``task_id`` with an explicit stack. The
        proposed edges stand in for the task's own edges; every other task
        contributes its stored dependencies. Reaching a node that is still
        on the current path means a cycle.

        Args:
            task_id: Start node.
            proposed: Proposed dependency IDs for the start node.
            task_map: Task ID -> Task for the project.

        Returns:
            True if a cycle is reachable from ``task_id``.
        """

        def edges(node: str) -> list[str]:
            if node == task_id:
                return proposed
            task = task_map.get(node)
            return task.dependencies if task else []

        visited: set[str] = {task_id}
        on_path: set[str] = {task_id}
        stack: list[tuple[str, int]] = [(task_id, 0)]

        while stack:
            node, edge_index = stack[-1]
            deps = edges(node)

            if edge_index == len(deps):
                stack.pop()
                on_path.discard(node)
                continue

            stack[-1] = (node, edge_index + 1)
            neighbor = deps[edge_index]

            if neighbor in on_path:
                return True
            if neighbor not in visited:
                visited.add(neighbor)
                on_path.add(neighbor)
                stack.append((neighbor, 0))

        return False


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def validate_task_dependencies(
    task_id: str,
    dependencies: Iterable[str] | None,
    all_tasks: Sequence[Task],
    project_id: str | None = None,
) -> ValidationResult:
    """
    Convenience function to validate dependencies.

    Example:
        >>> result = validate_task_dependencies("b", ["a"], tasks)
        >>> result.is_valid
        True
    """
    return DependencyValidator().validate(task_id, dependencies, all_tasks, project_id)
