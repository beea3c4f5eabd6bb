"""Pydantic models for task management.

This module defines the data structures shared by the dependency
validator, graph analyzer, next-task selector and analytics aggregator,
as well as the task generation configuration and its output.
"""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Literal
from uuid import uuid4

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


def utcnow() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def coerce_hours(value: Any) -> float | None:
    """Convert a storage-level hour value to a float.

    Decimal columns usually arrive as strings. Missing, empty or
    unparseable values become ``None`` rather than zero.

    Example:
        >>> coerce_hours("4.50")
        4.5
        >>> coerce_hours("abc") is None
        True
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, Decimal):
        if not value.is_finite():
            return None
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(Decimal(value.strip()))
        except (InvalidOperation, ValueError):
            return None
    else:
        return None
    if number != number or number in (float("inf"), float("-inf")):
        return None
    return number


# =============================================================================
# ENUMS
# =============================================================================


class TaskStatus(str, Enum):
    """Workflow status of a task."""

    TODO = "todo"
    IN_PROGRESS = "in_progress"
    BLOCKED = "blocked"
    IN_REVIEW = "in_review"
    DONE = "done"


class TaskPriority(str, Enum):
    """Task priority, ordered from most to least urgent."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        """Sort rank (0=most urgent)."""
        return _PRIORITY_RANK[self]


_PRIORITY_RANK: dict[TaskPriority, int] = {
    TaskPriority.CRITICAL: 0,
    TaskPriority.HIGH: 1,
    TaskPriority.MEDIUM: 2,
    TaskPriority.LOW: 3,
}


class ProjectStatus(str, Enum):
    """Lifecycle status of a project."""

    PLANNING = "planning"
    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"
    ARCHIVED = "archived"


# =============================================================================
# TASKS AND PROJECTS
# =============================================================================


class Task(BaseModel):
    """A unit of work owned by a project.

    Tasks are plain snapshots: this core never persists or mutates them.
    Lifecycle updates go through :meth:`with_status`, which returns a copy.

    Example:
        >>> task = Task(
        ...     project_id="proj-1",
        ...     title="Create User model",
        ...     priority=TaskPriority.HIGH,
        ...     dependencies=["setup-task"],
        ... )
        >>> task.is_ready({"setup-task"})
        True
    """

    model_config = ConfigDict(frozen=False)

    id: str = Field(
        default_factory=lambda: str(uuid4()),
        description="Unique task identifier within the project",
    )
    project_id: str = Field(
        ...,
        description="Owning project identifier",
    )
    title: str = Field(
        ...,
        min_length=1,
        description="Task title",
    )
    description: str | None = Field(
        default=None,
        description="Detailed task description",
    )
    status: TaskStatus = Field(
        default=TaskStatus.TODO,
        description="Workflow status",
    )
    priority: TaskPriority = Field(
        default=TaskPriority.MEDIUM,
        description="Task priority",
    )
    dependencies: list[str] = Field(
        default_factory=list,
        description="Task IDs this task depends on",
    )
    estimated_hours: float | None = Field(
        default=None,
        ge=0,
        description="Estimated effort in hours",
    )
    actual_hours: float | None = Field(
        default=None,
        ge=0,
        description="Recorded effort in hours",
    )
    assignee: str | None = Field(
        default=None,
        description="Identity of the assignee",
    )
    notes: str | None = Field(
        default=None,
        description="Free-form notes",
    )
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
    completed_at: datetime | None = Field(
        default=None,
        description="Set only when the task transitions to done",
    )

    @field_validator("dependencies", mode="before")
    @classmethod
    def validate_dependencies(cls, v: Any) -> Any:
        """Treat a missing dependency array as empty."""
        return [] if v is None else v

    @field_validator("estimated_hours", "actual_hours", mode="before")
    @classmethod
    def validate_hours(cls, v: Any) -> float | None:
        """Coerce decimal strings; invalid values are undefined, not zero."""
        return coerce_hours(v)

    @field_validator("created_at", "updated_at", "completed_at")
    @classmethod
    def validate_timezone(cls, v: datetime | None) -> datetime | None:
        """Naive timestamps are taken as UTC so tasks stay comparable."""
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @model_validator(mode="after")
    def check_completion(self) -> "Task":
        """Keep ``completed_at`` set only on done tasks.

        A completion time on a task that is not done is cleared. A done task
        without one is kept as is, but it is left out of duration analytics.
        """
        if self.status != TaskStatus.DONE and self.completed_at is not None:
            logger.warning(
                f"Task {self.id} is {self.status.value} but has completed_at; clearing it"
            )
            self.completed_at = None
        elif self.status == TaskStatus.DONE and self.completed_at is None:
            logger.warning(f"Task {self.id} is done but has no completed_at")
        return self

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Task":
        """Build a task from a raw storage row.

        Args:
            row: Mapping with snake_case column names as stored.

        Returns:
            Task with hour columns coerced and empty optionals dropped.
        """
        data: dict[str, Any] = {
            "id": str(row["id"]),
            "project_id": str(row["project_id"]),
            "title": row["title"],
            "description": row.get("description") or None,
            "status": row.get("status") or TaskStatus.TODO,
            "priority": row.get("priority") or TaskPriority.MEDIUM,
            "dependencies": [str(d) for d in row.get("dependencies") or []],
            "estimated_hours": row.get("estimated_hours"),
            "actual_hours": row.get("actual_hours"),
            "assignee": row.get("assignee") or None,
            "notes": row.get("notes") or None,
            "completed_at": row.get("completed_at") or None,
        }
        for column in ("created_at", "updated_at"):
            if row.get(column) is not None:
                data[column] = row[column]
        return cls.model_validate(data)

    @property
    def is_done(self) -> bool:
        """Check if the task is complete."""
        return self.status == TaskStatus.DONE

    def is_ready(self, completed_tasks: set[str]) -> bool:
        """Check if all dependencies are satisfied.

        Args:
            completed_tasks: Set of completed task IDs.

        Returns:
            True if all dependencies are in completed_tasks.
        """
        return all(dep in completed_tasks for dep in self.dependencies)

    def with_status(self, status: TaskStatus, now: datetime | None = None) -> "Task":
        """Return a copy moved to ``status`` with ``completed_at`` kept consistent.

        Args:
            status: New workflow status.
            now: Timestamp to record; defaults to the current UTC time.

        Returns:
            Updated copy. ``completed_at`` is set when entering done, kept
            when already done, and cleared for every other status.
        """
        now = now or utcnow()
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        if status == TaskStatus.DONE:
            completed_at = self.completed_at if self.is_done and self.completed_at else now
        else:
            completed_at = None
        return self.model_copy(
            update={"status": status, "completed_at": completed_at, "updated_at": now}
        )


class Project(BaseModel):
    """Project context consumed by task generation."""

    model_config = ConfigDict(frozen=False)

    id: str = Field(default_factory=lambda: str(uuid4()))
    user_id: str | None = Field(
        default=None,
        description="Identity of the project owner",
    )
    name: str = Field(default="", max_length=255)
    description: str | None = None
    status: ProjectStatus = ProjectStatus.PLANNING
    prp_content: str | None = Field(
        default=None,
        description="Last requirement prompt used for generation",
    )
    context: dict[str, Any] = Field(
        default_factory=dict,
        description="Free-form key-value context passed to generation",
    )
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @field_validator("context", mode="before")
    @classmethod
    def validate_context(cls, v: Any) -> Any:
        """Treat a missing context blob as empty."""
        return {} if v is None else v

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Project":
        """Build a project from a raw storage row."""
        data: dict[str, Any] = {
            "id": str(row["id"]),
            "user_id": row.get("user_id"),
            "name": row.get("name") or "",
            "description": row.get("description") or None,
            "status": row.get("status") or ProjectStatus.PLANNING,
            "prp_content": row.get("prp_content") or None,
            "context": row.get("context"),
        }
        for column in ("created_at", "updated_at"):
            if row.get(column) is not None:
                data[column] = row[column]
        return cls.model_validate(data)


# =============================================================================
# RESULTS
# =============================================================================


class ValidationResult(BaseModel):
    """Outcome of a validation pass; returned, never raised."""

    model_config = ConfigDict(frozen=True)

    is_valid: bool
    errors: list[str] = Field(default_factory=list)

    @classmethod
    def from_errors(cls, errors: list[str]) -> "ValidationResult":
        """Build a result that is valid exactly when ``errors`` is empty."""
        return cls(is_valid=not errors, errors=list(errors))


class DependencyNode(BaseModel):
    """A task's position in the dependency graph."""

    task: Task
    dependencies: list[str] = Field(default_factory=list)
    dependents: list[str] = Field(default_factory=list)
    level: int = Field(default=0, ge=0)


class ProjectAnalytics(BaseModel):
    """Summary statistics over a project's tasks."""

    model_config = ConfigDict(frozen=True)

    total_tasks: int = 0
    completed_tasks: int = 0
    in_progress_tasks: int = 0
    blocked_tasks: int = 0
    completion_rate: float = 0.0
    total_estimated_hours: float = 0.0
    total_actual_hours: float = 0.0
    average_task_duration: float = 0.0
    efficiency_ratio: float = 0.0

    @property
    def todo_tasks(self) -> int:
        """Tasks that are neither done, in progress nor blocked."""
        return (
            self.total_tasks
            - self.completed_tasks
            - self.in_progress_tasks
            - self.blocked_tasks
        )


# =============================================================================
# TASK GENERATION
# =============================================================================


class TaskGenerationConfig(BaseModel):
    """Directives for one task generation request."""

    model_config = ConfigDict(frozen=True)

    max_tasks: int = Field(default=10, ge=1, le=100)
    include_milestones: bool = False
    default_priority: TaskPriority = TaskPriority.MEDIUM
    estimate_hours: bool = True
    generate_dependencies: bool = False


class AITask(BaseModel):
    """A generated task, not yet persisted."""

    title: str = Field(..., max_length=100)
    description: str
    priority: TaskPriority
    estimated_hours: float | None = None
    dependencies: list[str] | None = Field(
        default=None,
        description="Positional hints of the form task-index-<n>",
    )


class FallbackReason(str, Enum):
    """Why generation degraded to keyword extraction."""

    NOT_CONFIGURED = "not_configured"
    REQUEST_FAILED = "request_failed"
    UNPARSEABLE_RESPONSE = "unparseable_response"


class AIOrigin(BaseModel):
    """Batch produced from the completion service's output."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["ai"] = "ai"
    model: str | None = None


class FallbackOrigin(BaseModel):
    """Batch produced by deterministic keyword extraction."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["fallback"] = "fallback"
    reason: FallbackReason
    detail: str = ""


@dataclass
class GenerationResult:
    """An ordered batch of generated tasks tagged with its provenance."""

    tasks: list[AITask]
    origin: AIOrigin | FallbackOrigin
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def is_fallback(self) -> bool:
        """Check if the batch came from the fallback path."""
        return isinstance(self.origin, FallbackOrigin)

    def __len__(self) -> int:
        return len(self.tasks)

    def __iter__(self) -> Iterator[AITask]:
        return iter(self.tasks)

    def __getitem__(self, index: int) -> AITask:
        return self.tasks[index]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "tasks": [t.model_dump(exclude_none=True) for t in self.tasks],
            "origin": self.origin.model_dump(),
            "metadata": self.metadata,
        }
