"""
Prompt templates for Project Master.

This module provides the prompt template used to turn a Product
Requirements Prompt (PRP) into implementation tasks.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# TEMPLATE MODEL
# =============================================================================


class PromptTemplate(BaseModel):
    """A reusable prompt template."""

    model_config = ConfigDict(frozen=True)

    name: str
    template: str
    description: str = ""
    variables: list[str] = Field(default_factory=list)

    def format(self, **kwargs: Any) -> str:
        """Format the template with provided values.

        Args:
            **kwargs: Template variable values.

        Returns:
            Formatted prompt string.
        """
        return self.template.format(**kwargs)

    def get_missing_variables(self, **kwargs: Any) -> list[str]:
        """Get list of variables not provided.

        Args:
            **kwargs: Provided variables.

        Returns:
            List of missing variable names.
        """
        return [v for v in self.variables if v not in kwargs]


# =============================================================================
# TASK GENERATION PROMPTS
# =============================================================================


TASK_GENERATION_PROMPT = PromptTemplate(
    name="task_generation",
    description="Parse a PRP into concrete implementation tasks returned as a JSON array",
    template="""Parse the following Product Requirements Prompt (PRP) and generate up to {max_tasks} concrete implementation tasks for an AI coding assistant.

PRP Content:
{prp_content}

Project Context:
{project_context}

Requirements:
- Generate specific, implementation-focused tasks with code patterns and file paths
- Each task should include validation gates (tests, type checking, linting)
- Focus on concrete implementation steps rather than abstract requirements
- Include specific file paths, library imports, and code examples where relevant
- Assign appropriate priority levels (critical, high, medium, low)
- {hours_directive}
- {dependencies_directive}
- {milestones_directive}

Return the response as a JSON array with this exact format:
[
  {{
    "title": "Implementation task title",
    "description": "Detailed implementation steps with file paths, code patterns, and validation requirements",
    "priority": "high|medium|low|critical",{optional_fields}
    "validationGates": ["tests", "type-check", "lint"],
    "implementationHints": ["specific code patterns", "file paths", "library imports"]
  }}
]

Important: Return only the JSON array, no additional text or formatting.""",
    variables=[
        "max_tasks",
        "prp_content",
        "project_context",
        "hours_directive",
        "dependencies_directive",
        "milestones_directive",
        "optional_fields",
    ],
)


HOURS_DIRECTIVES = (
    "Include estimated hours for each task",
    "Do not include time estimates",
)
DEPENDENCIES_DIRECTIVES = (
    "Identify task dependencies where logical, referring to earlier tasks as task-index-<n>",
    "Do not include dependencies",
)
MILESTONES_DIRECTIVES = (
    "Include milestone tasks with validation gates",
    "Focus on implementation tasks only",
)
