"""Task generation pipeline - PRP content to a bounded list of tasks.

The completion service is asked once for a JSON array of tasks. If the
request fails or the answer cannot be read, keyword-based extraction
produces the tasks instead, so ``generate`` always returns a batch.
"""

import math
import random
import re
from typing import Any

from loguru import logger

from project_master.generation.client import CompletionClient
from project_master.generation.extraction import extract_json_array
from project_master.prompts.builder import build_task_generation_prompt
from project_master.tasks.models import (
    AIOrigin,
    AITask,
    FallbackOrigin,
    FallbackReason,
    GenerationResult,
    TaskGenerationConfig,
    TaskPriority,
)

MAX_TITLE_LENGTH = 100
MIN_ESTIMATED_HOURS = 0.5
MAX_ESTIMATED_HOURS = 40.0

FALLBACK_KEYWORDS = (
    "implement",
    "create",
    "build",
    "code",
    "function",
    "class",
    "component",
    "api",
    "test",
)
VALIDATION_REMINDER = "\n\nValidation gates: Run tests and type checking after implementation."

_DEPENDENCY_TOKEN = re.compile(r"task-index-\d+")
_PRIORITIES = {p.value for p in TaskPriority}


class TaskGenerationPipeline:
    """
    Generate implementation tasks from PRP content.

    Uses the completion service for intelligent parsing with fallback to
    keyword extraction when it is unavailable or returns unusable output.
    The returned batch records which path produced it.

    Example:
        >>> pipeline = TaskGenerationPipeline(client)
        >>> result = await pipeline.generate(prp, {"stack": "fastapi"}, TaskGenerationConfig())
        >>> result.is_fallback
        False
    """

    def __init__(
        self,
        client: CompletionClient | None = None,
        rng: random.Random | None = None,
    ) -> None:
        """
        Initialize the pipeline.

        Args:
            client: Completion client. Without one every call falls back.
            rng: Random source for fallback hour estimates.
        """
        self.client = client
        self.rng = rng or random.Random()

    async def generate(
        self,
        content: str,
        project_context: dict[str, Any] | None = None,
        config: TaskGenerationConfig | None = None,
    ) -> GenerationResult:
        """
        Generate tasks from PRP content.

        Args:
            content: Sanitized requirement content.
            project_context: Free-form project context for the prompt.
            config: Generation directives.

        Returns:
            GenerationResult with at most ``config.max_tasks`` tasks. Never raises.
        """
        content = content or ""
        config = config or TaskGenerationConfig()

        logger.info(f"Generating up to {config.max_tasks} tasks from {len(content)} chars of PRP")

        if self.client is None:
            return self._fallback(
                content, config, FallbackReason.NOT_CONFIGURED, "No completion client configured"
            )

        try:
            prompt = build_task_generation_prompt(content, project_context, config)
            response_text = await self.client.complete(prompt)
        except Exception as e:
            logger.warning(f"Task generation request failed: {e}, using fallback")
            return self._fallback(content, config, FallbackReason.REQUEST_FAILED, str(e))

        try:
            raw_tasks = extract_json_array(response_text)
            tasks = normalize_tasks(raw_tasks, config)
        except Exception as e:
            logger.warning(f"Could not read tasks from response: {e}, using fallback")
            return self._fallback(content, config, FallbackReason.UNPARSEABLE_RESPONSE, str(e))

        model = getattr(self.client, "model", None)
        logger.info(f"Generated {len(tasks)} tasks with {model}")
        return GenerationResult(
            tasks=tasks,
            origin=AIOrigin(model=model),
            metadata={"response_items": len(raw_tasks)},
        )

    def _fallback(
        self,
        content: str,
        config: TaskGenerationConfig,
        reason: FallbackReason,
        detail: str,
    ) -> GenerationResult:
        tasks = fallback_tasks(content, config, self.rng)
        logger.info(f"Fallback extraction produced {len(tasks)} tasks ({reason.value})")
        return GenerationResult(
            tasks=tasks,
            origin=FallbackOrigin(reason=reason, detail=detail),
        )


# =============================================================================
# NORMALIZATION
# =============================================================================


def _text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def _clamp_hours(value: Any) -> float | None:
    """Clamp a numeric estimate to the allowed range; anything else is dropped."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        # Bound as int first: huge JSON integers overflow float()
        value = float(max(0, min(int(MAX_ESTIMATED_HOURS), value)))
    if isinstance(value, float) and math.isfinite(value):
        return max(MIN_ESTIMATED_HOURS, min(MAX_ESTIMATED_HOURS, value))
    return None


def normalize_tasks(raw_tasks: list[Any], config: TaskGenerationConfig) -> list[AITask]:
    """
    Validate and normalize model-generated tasks.

    Args:
        raw_tasks: Decoded JSON array from the model.
        config: Generation directives.

    Returns:
        At most ``config.max_tasks`` well-formed tasks.
    """
    tasks: list[AITask] = []

    for index, raw in enumerate(raw_tasks[: config.max_tasks]):
        item = raw if isinstance(raw, dict) else {}
        number = index + 1

        title = _text(item.get("title"))
        description = _text(item.get("description"))
        priority = _text(item.get("priority")).lower()

        task = AITask(
            title=title[:MAX_TITLE_LENGTH] or f"Generated Implementation Task {number}",
            description=description or title or f"Implementation task {number}",
            priority=priority if priority in _PRIORITIES else config.default_priority,
        )

        if config.estimate_hours:
            task.estimated_hours = _clamp_hours(
                item.get("estimatedHours", item.get("estimated_hours"))
            )

        deps = item.get("dependencies")
        if config.generate_dependencies and isinstance(deps, list):
            task.dependencies = [
                d for d in deps if isinstance(d, str) and _DEPENDENCY_TOKEN.fullmatch(d)
            ]

        tasks.append(task)

    return tasks


# =============================================================================
# FALLBACK EXTRACTION
# =============================================================================


def fallback_tasks(
    content: str,
    config: TaskGenerationConfig,
    rng: random.Random | None = None,
) -> list[AITask]:
    """
    Extract tasks from implementation-flavoured lines of the content.

    Args:
        content: Requirement content.
        config: Generation directives.
        rng: Random source for hour estimates.

    Returns:
        One task per matching line, at most ``config.max_tasks``.

    Example:
        >>> tasks = fallback_tasks("Implement login\\nMust create tests", TaskGenerationConfig())
        >>> [t.priority.value for t in tasks]
        ['medium', 'high']
    """
    rng = rng or random.Random()
    tasks: list[AITask] = []

    for line in content.splitlines():
        text = line.strip()
        if not text:
            continue

        lowered = text.lower()
        if not any(keyword in lowered for keyword in FALLBACK_KEYWORDS):
            continue

        priority = (
            TaskPriority.HIGH
            if "critical" in lowered or "must" in lowered
            else TaskPriority.MEDIUM
        )

        tasks.append(
            AITask(
                title=text[:MAX_TITLE_LENGTH].strip(),
                description=f"{text}{VALIDATION_REMINDER}",
                priority=priority,
                estimated_hours=float(rng.randint(1, 8)) if config.estimate_hours else None,
            )
        )

        if len(tasks) >= config.max_tasks:
            break

    return tasks
