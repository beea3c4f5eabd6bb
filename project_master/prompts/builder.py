"""
Prompt builder for task generation.

Combines the PRP content, the project's context blob and the generation
config's directives into a single prompt message.
"""

import json
from typing import Any

from loguru import logger

from project_master.prompts.templates import (
    DEPENDENCIES_DIRECTIVES,
    HOURS_DIRECTIVES,
    MILESTONES_DIRECTIVES,
    TASK_GENERATION_PROMPT,
)
from project_master.tasks.models import TaskGenerationConfig


def _pick(directives: tuple[str, str], enabled: bool) -> str:
    return directives[0] if enabled else directives[1]


def serialize_context(project_context: dict[str, Any] | None) -> str:
    """
    Serialize the project context blob for embedding in a prompt.

    Values that are not JSON-native (datetimes, UUIDs) are rendered with
    ``str`` so an arbitrary context never breaks prompt building.
    """
    return json.dumps(project_context or {}, indent=2, default=str, ensure_ascii=False)


def build_task_generation_prompt(
    prp_content: str,
    project_context: dict[str, Any] | None,
    config: TaskGenerationConfig,
) -> str:
    """
    Build the prompt asking the model for a JSON array of tasks.

    Args:
        prp_content: Sanitized requirement content.
        project_context: Free-form project context.
        config: Generation directives.

    Returns:
        Formatted prompt string.

    Example:
        >>> prompt = build_task_generation_prompt("Implement login", {}, TaskGenerationConfig())
        >>> "up to 10 concrete implementation tasks" in prompt
        True
    """
    optional_fields = ""
    if config.estimate_hours:
        optional_fields += '\n    "estimatedHours": 3,'
    if config.generate_dependencies:
        optional_fields += '\n    "dependencies": ["task-index-1", "task-index-2"],'

    prompt = TASK_GENERATION_PROMPT.format(
        max_tasks=config.max_tasks,
        prp_content=prp_content,
        project_context=serialize_context(project_context),
        hours_directive=_pick(HOURS_DIRECTIVES, config.estimate_hours),
        dependencies_directive=_pick(DEPENDENCIES_DIRECTIVES, config.generate_dependencies),
        milestones_directive=_pick(MILESTONES_DIRECTIVES, config.include_milestones),
        optional_fields=optional_fields,
    )

    logger.debug(f"Built task generation prompt ({len(prompt)} chars)")
    return prompt
