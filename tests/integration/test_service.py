"""Integration tests for the ProjectMaster service."""

import random

import pytest

from project_master import PRPParseOutcome, ProjectMaster
from project_master.core.config import Settings
from project_master.core.exceptions import PermissionDeniedError
from project_master.generation.content import EMPTY_CONTENT_ERROR
from project_master.tasks.access import AllowListPolicy, Identity, PermissionLevel
from project_master.tasks.models import (
    FallbackReason,
    Project,
    Task,
    TaskGenerationConfig,
    TaskStatus,
)


@pytest.fixture
def settings() -> Settings:
    """Provide settings without an API key."""
    return Settings(_env_file=None, anthropic_api_key=None, project_master_max_tasks=3)


@pytest.fixture
def project() -> Project:
    """Provide a project with generation context."""
    return Project(
        id="proj-1",
        user_id="testuser",
        name="Todo API",
        context={"stack": "fastapi", "database": "postgresql"},
    )


@pytest.mark.integration
class TestProjectMasterGeneration:
    """Tests for PRP parsing through the service."""

    @pytest.mark.asyncio
    async def test_parse_prp_with_ai(
        self, settings: Settings, fake_client, project: Project, sample_prp: str
    ) -> None:
        """Test the full flow with a completion client."""
        pm = ProjectMaster(settings=settings, client=fake_client, configure_logs=False)

        outcome = await pm.parse_prp(project, f"  {sample_prp}  ")

        assert isinstance(outcome, PRPParseOutcome)
        assert outcome.succeeded
        assert outcome.result is not None
        assert not outcome.result.is_fallback
        # max_tasks comes from settings
        assert len(outcome.result) == 3
        assert outcome.sanitized_content == sample_prp.strip()
        assert outcome.project.prp_content == sample_prp.strip()
        assert project.prp_content is None
        assert '"database": "postgresql"' in fake_client.prompts[0]

    @pytest.mark.asyncio
    async def test_parse_prp_without_key_uses_fallback(
        self, settings: Settings, project: Project, sample_prp: str
    ) -> None:
        """Test that a missing API key degrades to keyword extraction."""
        pm = ProjectMaster(settings=settings, rng=random.Random(3), configure_logs=False)

        outcome = await pm.parse_prp(project, sample_prp, TaskGenerationConfig(max_tasks=10))

        assert pm.client is None
        assert outcome.result.origin.reason == FallbackReason.NOT_CONFIGURED
        assert len(outcome.result) == 4

    @pytest.mark.asyncio
    async def test_parse_prp_failure_still_returns_tasks(
        self, settings: Settings, failing_client, project: Project, sample_prp: str
    ) -> None:
        """Test that a failing completion service never fails the request."""
        pm = ProjectMaster(settings=settings, client=failing_client, configure_logs=False)

        outcome = await pm.parse_prp(project, sample_prp, TaskGenerationConfig(max_tasks=2))

        assert outcome.result.is_fallback
        assert 0 < len(outcome.result) <= 2

    @pytest.mark.asyncio
    async def test_invalid_content_skips_generation(
        self, settings: Settings, fake_client, project: Project
    ) -> None:
        """Test that invalid content returns errors and no batch."""
        pm = ProjectMaster(settings=settings, client=fake_client, configure_logs=False)

        outcome = await pm.parse_prp(project, "")

        assert not outcome.succeeded
        assert EMPTY_CONTENT_ERROR in outcome.validation.errors
        assert outcome.result is None
        assert outcome.project is None
        assert fake_client.prompts == []

    @pytest.mark.asyncio
    async def test_parse_prp_requires_write_access(
        self, settings: Settings, fake_client, project: Project, sample_prp: str
    ) -> None:
        """Test the permission check when an identity is supplied."""
        pm = ProjectMaster(
            settings=settings,
            client=fake_client,
            policy=AllowListPolicy({"maintainer"}),
            configure_logs=False,
        )

        with pytest.raises(PermissionDeniedError):
            await pm.parse_prp(project, sample_prp, identity=Identity(login="testuser"))

        assert fake_client.prompts == []

    def test_config_from_settings(self, settings: Settings) -> None:
        """Test generation defaults from settings with overrides."""
        pm = ProjectMaster(settings=settings, configure_logs=False)

        config = pm.config_from_settings(generate_dependencies=True)

        assert config.max_tasks == 3
        assert config.generate_dependencies


@pytest.mark.integration
class TestProjectMasterTasks:
    """Tests for task operations through the service."""

    def test_task_lifecycle(self, settings: Settings) -> None:
        """Test validate, graph, select and analytics on one project."""
        pm = ProjectMaster(settings=settings, configure_logs=False)
        tasks = [
            Task(id="setup", project_id="proj-1", title="Set up database", estimated_hours=2),
            Task(id="model", project_id="proj-1", title="Create User model", estimated_hours=3),
        ]

        assert pm.validate_dependencies("model", ["setup"], tasks).is_valid
        tasks[1] = tasks[1].model_copy(update={"dependencies": ["setup"]})

        assert not pm.validate_dependencies("setup", ["model"], tasks).is_valid

        graph = pm.build_graph(tasks)
        assert graph["model"].level == 1
        assert graph["setup"].dependents == ["model"]

        assert pm.next_task(tasks).id == "setup"

        tasks[0] = tasks[0].with_status(TaskStatus.DONE).model_copy(update={"actual_hours": 1})
        assert pm.next_task(tasks).id == "model"

        analytics = pm.analytics(tasks)
        assert analytics.completion_rate == 50
        assert analytics.efficiency_ratio == 500

    def test_check_permission(self, settings: Settings, project: Project) -> None:
        """Test permission checks with the default owner policy."""
        pm = ProjectMaster(settings=settings, configure_logs=False)

        assert pm.check_permission(project, Identity(login="testuser")).has_permission
        assert not pm.check_permission(
            project, Identity(login="otheruser"), PermissionLevel.WRITE
        ).has_permission

    def test_content_helpers(self, settings: Settings) -> None:
        """Test content validation and sanitization through the service."""
        pm = ProjectMaster(settings=settings, configure_logs=False)

        assert not pm.validate_content("Short").is_valid
        assert pm.sanitize(" <b>'x'</b> ") == 'b"x"/b'
