"""Project Master service - a single entry point over the task core.

This module wires settings, logging, the completion client and the
permission policy together, and exposes every core operation so callers
(tool handlers, HTTP routes, scripts) do not assemble the parts themselves.
"""

import random
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any

from loguru import logger

from project_master.core.config import Settings, get_settings
from project_master.core.log_config import configure_logging
from project_master.generation.client import AnthropicCompletionClient, CompletionClient
from project_master.generation.content import ContentValidator
from project_master.generation.pipeline import TaskGenerationPipeline
from project_master.tasks.access import (
    Identity,
    OwnerPolicy,
    PermissionLevel,
    PermissionPolicy,
    PermissionResult,
    require_permission,
)
from project_master.tasks.analytics import ProjectAnalyticsAggregator
from project_master.tasks.dependency_graph import DependencyGraphAnalyzer
from project_master.tasks.dependency_validator import DependencyValidator
from project_master.tasks.models import (
    DependencyNode,
    GenerationResult,
    Project,
    ProjectAnalytics,
    Task,
    TaskGenerationConfig,
    ValidationResult,
)
from project_master.tasks.selector import NextTaskSelector


@dataclass
class PRPParseOutcome:
    """Result of parsing a PRP for a project."""

    validation: ValidationResult
    sanitized_content: str | None = None
    result: GenerationResult | None = None
    project: Project | None = None

    @property
    def succeeded(self) -> bool:
        """Check if content passed validation and tasks were generated."""
        return self.validation.is_valid and self.result is not None


class ProjectMaster:
    """
    Main Project Master service.

    Example:
        >>> pm = ProjectMaster()
        >>> outcome = await pm.parse_prp(project, prp_text)
        >>> [t.title for t in outcome.result]
        ['Create User model', 'Implement login endpoint']

        >>> pm.next_task(tasks).title
        'Set up database'
    """

    def __init__(
        self,
        settings: Settings | None = None,
        client: CompletionClient | None = None,
        policy: PermissionPolicy | None = None,
        rng: random.Random | None = None,
        configure_logs: bool = True,
    ) -> None:
        """Initialize the service.

        Args:
            settings: Optional settings override. Uses cached settings if not provided.
            client: Completion client. Built from settings when not provided;
                without an API key generation always uses the fallback.
            policy: Permission policy. Defaults to owner-only access.
            rng: Random source for fallback hour estimates.
            configure_logs: Install the loguru sinks from settings.
        """
        self.settings = settings or get_settings()

        if configure_logs:
            configure_logging(self.settings)

        self.client = client or AnthropicCompletionClient.from_settings(self.settings)
        self.policy: PermissionPolicy = policy or OwnerPolicy()
        self.pipeline = TaskGenerationPipeline(self.client, rng=rng)

        self._validator = DependencyValidator()
        self._graph = DependencyGraphAnalyzer()
        self._selector = NextTaskSelector()
        self._analytics = ProjectAnalyticsAggregator()
        self._content = ContentValidator()

        logger.debug(
            f"ProjectMaster ready (completion client: "
            f"{self.client.model if self.client else 'none'})"
        )

    # =========================================================================
    # TASK OPERATIONS
    # =========================================================================

    def validate_dependencies(
        self,
        task_id: str,
        proposed_dependencies: Iterable[str] | None,
        all_tasks: Sequence[Task],
        project_id: str | None = None,
    ) -> ValidationResult:
        """Validate a proposed dependency set for a task."""
        return self._validator.validate(task_id, proposed_dependencies, all_tasks, project_id)

    def build_graph(
        self,
        tasks: Sequence[Task],
        strict: bool = True,
    ) -> dict[str, DependencyNode]:
        """Build the dependency graph of a project's tasks."""
        return self._graph.build_graph(tasks, strict=strict)

    def next_task(self, tasks: Sequence[Task], exclude_blocked: bool = False) -> Task | None:
        """Recommend the next task to start."""
        return self._selector.select_next(tasks, exclude_blocked)

    def analytics(self, tasks: Sequence[Task]) -> ProjectAnalytics:
        """Aggregate project analytics."""
        return self._analytics.aggregate(tasks)

    def check_permission(
        self,
        project: Project,
        identity: Identity,
        level: PermissionLevel = PermissionLevel.READ,
    ) -> PermissionResult:
        """Check an identity's access to a project with the configured policy."""
        return self.policy.check(project, identity, level)

    # =========================================================================
    # GENERATION
    # =========================================================================

    def validate_content(self, content: str | None) -> ValidationResult:
        """Validate PRP content."""
        return self._content.validate_content(content)

    def sanitize(self, content: str) -> str:
        """Sanitize PRP content."""
        return self._content.sanitize(content)

    def config_from_settings(self, **overrides: Any) -> TaskGenerationConfig:
        """
        Build a generation config from settings defaults.

        Args:
            **overrides: Fields that replace the defaults.

        Returns:
            TaskGenerationConfig.
        """
        values: dict[str, Any] = {"max_tasks": self.settings.project_master_max_tasks}
        values.update(overrides)
        return TaskGenerationConfig(**values)

    async def generate_tasks(
        self,
        content: str,
        project_context: dict[str, Any] | None = None,
        config: TaskGenerationConfig | None = None,
    ) -> GenerationResult:
        """Generate tasks from already validated and sanitized content."""
        return await self.pipeline.generate(
            content,
            project_context,
            config or self.config_from_settings(),
        )

    async def parse_prp(
        self,
        project: Project,
        content: str | None,
        config: TaskGenerationConfig | None = None,
        identity: Identity | None = None,
    ) -> PRPParseOutcome:
        """
        Validate, sanitize and decompose a PRP into tasks for a project.

        Args:
            project: Project the tasks are generated for.
            content: Raw PRP text.
            config: Generation directives. Defaults from settings.
            identity: Caller; when given, write access is required.

        Returns:
            PRPParseOutcome. Invalid content yields the validation errors
            and no batch.

        Raises:
            PermissionDeniedError: If ``identity`` lacks write access.
        """
        if identity is not None:
            require_permission(self.policy, project, identity, PermissionLevel.WRITE)

        validation = self.validate_content(content)
        if not validation.is_valid:
            logger.info(f"PRP for project {project.id} rejected: {validation.errors}")
            return PRPParseOutcome(validation=validation)

        sanitized = self.sanitize(content or "")
        result = await self.generate_tasks(sanitized, project.context, config)

        logger.info(
            f"Parsed PRP for project {project.id}: {len(result)} tasks "
            f"({result.origin.kind})"
        )

        return PRPParseOutcome(
            validation=validation,
            sanitized_content=sanitized,
            result=result,
            project=project.model_copy(update={"prp_content": sanitized}),
        )
