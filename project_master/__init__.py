"""
Project Master - task management core for AI-assisted project planning.

Validates task dependencies, analyzes dependency graphs, recommends the
next task, aggregates project analytics and decomposes Product
Requirements Prompts (PRPs) into implementation tasks.
"""

__version__ = "0.1.0"
__author__ = "Project Master Team"

from project_master.core.service import PRPParseOutcome, ProjectMaster
from project_master.tasks.models import (
    GenerationResult,
    Project,
    Task,
    TaskGenerationConfig,
    TaskPriority,
    TaskStatus,
)

__all__ = [
    "ProjectMaster",
    "PRPParseOutcome",
    "Task",
    "TaskStatus",
    "TaskPriority",
    "Project",
    "TaskGenerationConfig",
    "GenerationResult",
    "__version__",
]
