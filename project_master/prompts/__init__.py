"""Prompt templates and builders for task generation."""

from project_master.prompts.builder import build_task_generation_prompt, serialize_context
from project_master.prompts.templates import TASK_GENERATION_PROMPT, PromptTemplate

__all__ = [
    "PromptTemplate",
    "TASK_GENERATION_PROMPT",
    "build_task_generation_prompt",
    "serialize_context",
]
