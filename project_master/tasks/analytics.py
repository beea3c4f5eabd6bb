"""Project analytics - counts, completion rate and time tracking totals."""

from collections.abc import Sequence

from project_master.tasks.models import ProjectAnalytics, Task, TaskStatus, coerce_hours


def _hours(value: float | str | None) -> float:
    """Hour value as a number, with missing or invalid values counted as 0."""
    number = coerce_hours(value)
    return number if number is not None else 0.0


class ProjectAnalyticsAggregator:
    """
    Derive summary statistics from a project's tasks.

    Example:
        >>> analytics = ProjectAnalyticsAggregator().aggregate(tasks)
        >>> analytics.completion_rate
        40.0
    """

    def aggregate(self, tasks: Sequence[Task]) -> ProjectAnalytics:
        """
        Calculate project analytics.

        The efficiency ratio is estimated over actual hours, as a
        percentage: above 100 the work took less time than estimated.

        Args:
            tasks: Task collection of one project.

        Returns:
            ProjectAnalytics for the collection.
        """
        total_tasks = len(tasks)
        completed_tasks = sum(1 for t in tasks if t.status == TaskStatus.DONE)
        in_progress_tasks = sum(1 for t in tasks if t.status == TaskStatus.IN_PROGRESS)
        blocked_tasks = sum(1 for t in tasks if t.status == TaskStatus.BLOCKED)

        completion_rate = completed_tasks / total_tasks * 100 if total_tasks > 0 else 0.0

        total_estimated_hours = sum(_hours(t.estimated_hours) for t in tasks)
        total_actual_hours = sum(_hours(t.actual_hours) for t in tasks)

        timed = [
            t for t in tasks
            if t.status == TaskStatus.DONE and _hours(t.actual_hours) and t.completed_at
        ]
        average_task_duration = (
            sum(_hours(t.actual_hours) for t in timed) / len(timed) if timed else 0.0
        )

        efficiency_ratio = (
            total_estimated_hours / total_actual_hours * 100
            if total_estimated_hours > 0 and total_actual_hours > 0
            else 0.0
        )

        return ProjectAnalytics(
            total_tasks=total_tasks,
            completed_tasks=completed_tasks,
            in_progress_tasks=in_progress_tasks,
            blocked_tasks=blocked_tasks,
            completion_rate=completion_rate,
            total_estimated_hours=total_estimated_hours,
            total_actual_hours=total_actual_hours,
            average_task_duration=average_task_duration,
            efficiency_ratio=efficiency_ratio,
        )


def calculate_project_analytics(tasks: Sequence[Task]) -> ProjectAnalytics:
    """Convenience function to aggregate analytics."""
    return ProjectAnalyticsAggregator().aggregate(tasks)
