"""Next-task selection by status, dependency completion, priority and age."""

from collections.abc import Sequence

from loguru import logger

from project_master.tasks.models import Task, TaskStatus


class NextTaskSelector:
    """
    Recommend the single best task to start next.

    A task is eligible when it is not done, not in progress, not blocked
    (only when ``exclude_blocked`` is set) and every dependency resolves to
    a done task. Eligible tasks are ranked by priority, then oldest first.

    Note:
        ``blocked`` is a label set by a person or process, independent of
        dependency completion, so a blocked task whose dependencies are all
        done is still recommended unless ``exclude_blocked`` is True.

    Example:
        >>> selector = NextTaskSelector()
        >>> task = selector.select_next(tasks, exclude_blocked=True)
        >>> task.priority
        <TaskPriority.HIGH: 'high'>
    """

    def eligible_tasks(
        self,
        tasks: Sequence[Task],
        exclude_blocked: bool = False,
    ) -> list[Task]:
        """
        Filter tasks to those that can be started now.

        Args:
            tasks: Full task collection of one project.
            exclude_blocked: Also drop tasks with status ``blocked``.

        Returns:
            Eligible tasks in input order.
        """
        status_by_id = {task.id: task.status for task in tasks}
        available: list[Task] = []

        for task in tasks:
            if task.status == TaskStatus.DONE:
                continue
            if task.status == TaskStatus.IN_PROGRESS:
                continue
            if exclude_blocked and task.status == TaskStatus.BLOCKED:
                continue
            if all(status_by_id.get(dep) == TaskStatus.DONE for dep in task.dependencies):
                available.append(task)

        return available

    def select_next(
        self,
        tasks: Sequence[Task],
        exclude_blocked: bool = False,
    ) -> Task | None:
        """
        Find the next recommended task.

        Args:
            tasks: Full task collection of one project.
            exclude_blocked: Skip tasks with status ``blocked``.

        Returns:
            The highest-priority, oldest eligible task, or None.
        """
        available = self.eligible_tasks(tasks, exclude_blocked)
        if not available:
            logger.debug(f"No eligible task among {len(tasks)} tasks")
            return None

        # sorted() is stable: equal keys keep input order
        ranked = sorted(available, key=lambda t: (t.priority.rank, t.created_at))
        logger.debug(
            f"Selected task {ranked[0].id} out of {len(available)} eligible tasks"
        )
        return ranked[0]


def find_next_task(tasks: Sequence[Task], exclude_blocked: bool = False) -> Task | None:
    """Convenience function to select the next task."""
    return NextTaskSelector().select_next(tasks, exclude_blocked)
