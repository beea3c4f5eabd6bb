"""Task management - dependency validation, graph analysis and selection.

This module provides the pure computations over a project's tasks:
- Dependency validation (proposed edges -> ValidationResult)
- Graph analysis (tasks -> dependents and levels)
- Next-task selection (tasks -> best eligible task)
- Analytics (tasks -> summary statistics)
- Permission policies (project + identity -> PermissionResult)
"""

from project_master.tasks.access import (
    AllowListPolicy,
    Identity,
    OwnerPolicy,
    PermissionLevel,
    PermissionPolicy,
    PermissionResult,
    require_permission,
)
from project_master.tasks.analytics import (
    ProjectAnalyticsAggregator,
    calculate_project_analytics,
)
from project_master.tasks.dependency_graph import (
    DependencyGraphAnalyzer,
    build_task_dependency_graph,
)
from project_master.tasks.dependency_validator import (
    DependencyValidator,
    validate_task_dependencies,
)
from project_master.tasks.models import (
    AIOrigin,
    AITask,
    DependencyNode,
    FallbackOrigin,
    FallbackReason,
    GenerationResult,
    Project,
    ProjectAnalytics,
    ProjectStatus,
    Task,
    TaskGenerationConfig,
    TaskPriority,
    TaskStatus,
    ValidationResult,
)
from project_master.tasks.selector import NextTaskSelector, find_next_task

__all__ = [
    # Models
    "Task",
    "TaskStatus",
    "TaskPriority",
    "Project",
    "ProjectStatus",
    "ValidationResult",
    "DependencyNode",
    "ProjectAnalytics",
    "TaskGenerationConfig",
    "AITask",
    "AIOrigin",
    "FallbackOrigin",
    "FallbackReason",
    "GenerationResult",
    # Validation
    "DependencyValidator",
    "validate_task_dependencies",
    # Graph
    "DependencyGraphAnalyzer",
    "build_task_dependency_graph",
    # Selection
    "NextTaskSelector",
    "find_next_task",
    # Analytics
    "ProjectAnalyticsAggregator",
    "calculate_project_analytics",
    # Access
    "Identity",
    "PermissionLevel",
    "PermissionPolicy",
    "PermissionResult",
    "OwnerPolicy",
    "AllowListPolicy",
    "require_permission",
]
