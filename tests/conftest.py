"""Pytest configuration and shared fixtures."""

import os
import random
from datetime import datetime, timezone
from typing import Generator

import pytest

# Set test environment
os.environ.setdefault("PROJECT_MASTER_DEBUG", "true")
os.environ.setdefault("PROJECT_MASTER_LOG_LEVEL", "DEBUG")


@pytest.fixture
def mock_settings() -> Generator:
    """Provide mock settings for testing."""
    from project_master.core.config import clear_settings_cache

    # Clear any cached settings
    clear_settings_cache()

    yield

    # Clear again after test
    clear_settings_cache()


def _day(day: int) -> datetime:
    return datetime(2024, 1, day, tzinfo=timezone.utc)


@pytest.fixture
def sample_prp() -> str:
    """Provide a sample PRP document."""
    return """# User Authentication PRP

Goal: users can sign up and sign in to the dashboard.

Implement the User model with hashed passwords
Create the login API endpoint returning a session token
It is critical to build rate limiting for failed attempts
Document the onboarding flow for the support team
Write a test suite covering login and logout
"""


@pytest.fixture
def selection_tasks() -> list:
    """Provide a task mix covering every selection rule."""
    from project_master.tasks.models import Task, TaskPriority, TaskStatus

    return [
        Task(
            id="task1",
            project_id="proj-1",
            title="Completed Task",
            status=TaskStatus.DONE,
            priority=TaskPriority.HIGH,
            created_at=_day(1),
        ),
        Task(
            id="task2",
            project_id="proj-1",
            title="Blocked Task",
            status=TaskStatus.BLOCKED,
            priority=TaskPriority.CRITICAL,
            created_at=_day(2),
        ),
        Task(
            id="task3",
            project_id="proj-1",
            title="In Progress Task",
            status=TaskStatus.IN_PROGRESS,
            priority=TaskPriority.MEDIUM,
            created_at=_day(3),
        ),
        Task(
            id="task4",
            project_id="proj-1",
            title="Ready Task High Priority",
            status=TaskStatus.TODO,
            priority=TaskPriority.HIGH,
            created_at=_day(4),
        ),
        Task(
            id="task5",
            project_id="proj-1",
            title="Ready Task Medium Priority",
            status=TaskStatus.TODO,
            priority=TaskPriority.MEDIUM,
            created_at=_day(5),
        ),
        Task(
            id="task6",
            project_id="proj-1",
            title="Task with Completed Dependency",
            status=TaskStatus.TODO,
            priority=TaskPriority.HIGH,
            dependencies=["task1"],
            created_at=_day(6),
        ),
        Task(
            id="task7",
            project_id="proj-1",
            title="Task with Incomplete Dependency",
            status=TaskStatus.TODO,
            priority=TaskPriority.CRITICAL,
            dependencies=["task4"],
            created_at=_day(7),
        ),
    ]


@pytest.fixture
def analytics_tasks() -> list:
    """Provide tasks with estimates on all and actuals on the done ones."""
    from project_master.tasks.models import Task, TaskPriority, TaskStatus

    return [
        Task(
            id="task1",
            project_id="proj-1",
            title="Set up project",
            status=TaskStatus.DONE,
            priority=TaskPriority.HIGH,
            estimated_hours=4,
            actual_hours=5,
            completed_at=_day(1),
        ),
        Task(
            id="task2",
            project_id="proj-1",
            title="Create User model",
            status=TaskStatus.DONE,
            priority=TaskPriority.MEDIUM,
            estimated_hours=2,
            actual_hours=1.5,
            completed_at=_day(1),
        ),
        Task(
            id="task3",
            project_id="proj-1",
            title="Implement auth service",
            status=TaskStatus.IN_PROGRESS,
            priority=TaskPriority.CRITICAL,
            estimated_hours=8,
        ),
        Task(
            id="task4",
            project_id="proj-1",
            title="Write docs",
            status=TaskStatus.TODO,
            priority=TaskPriority.LOW,
            estimated_hours=3,
        ),
        Task(
            id="task5",
            project_id="proj-1",
            title="Create API endpoints",
            status=TaskStatus.BLOCKED,
            priority=TaskPriority.HIGH,
            estimated_hours=6,
        ),
    ]


@pytest.fixture
def chain_tasks() -> list:
    """Provide a diamond-shaped dependency graph: 1 -> (2, 3) -> 4."""
    from project_master.tasks.models import Task

    return [
        Task(id="task-1", project_id="proj-1", title="Initialize project"),
        Task(id="task-2", project_id="proj-1", title="Create User model", dependencies=["task-1"]),
        Task(id="task-3", project_id="proj-1", title="Create Todo model", dependencies=["task-1"]),
        Task(
            id="task-4",
            project_id="proj-1",
            title="Create API endpoints",
            dependencies=["task-2", "task-3"],
        ),
    ]


class FakeCompletionClient:
    """Completion client returning a canned response, or raising."""

    def __init__(self, response: str = "", error: Exception | None = None) -> None:
        self.model = "fake-model"
        self.response = response
        self.error = error
        self.prompts: list[str] = []

    async def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def make_client() -> type:
    """Provide the fake completion client class for custom responses."""
    return FakeCompletionClient


@pytest.fixture
def ai_response() -> str:
    """Provide a well-formed model response."""
    return """[
  {"title": "Create User model", "description": "SQLAlchemy model with password hash", "priority": "high", "estimatedHours": 3},
  {"title": "Implement login endpoint", "description": "POST /login returning a token", "priority": "critical", "estimatedHours": 4, "dependencies": ["task-index-0"]},
  {"title": "Write auth tests", "description": "Cover login and logout", "priority": "medium", "estimatedHours": 2}
]"""


@pytest.fixture
def fake_client(ai_response: str) -> FakeCompletionClient:
    """Provide a completion client answering with a valid task array."""
    return FakeCompletionClient(response=ai_response)


@pytest.fixture
def failing_client() -> FakeCompletionClient:
    """Provide a completion client whose request always fails."""
    from project_master.core.exceptions import CompletionServiceError

    return FakeCompletionClient(error=CompletionServiceError("Anthropic API error: 529 overloaded"))


@pytest.fixture
def rng() -> random.Random:
    """Provide a seeded random source."""
    return random.Random(42)


# Markers
def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: mark test as unit test")
    config.addinivalue_line("markers", "integration: mark test as integration test")
    config.addinivalue_line("markers", "slow: mark test as slow running")
