"""Task generation - PRP content validation and AI-assisted task extraction.

This module turns a requirement document into a bounded list of tasks:
- Content validation and sanitization (ContentValidator)
- Completion clients (CompletionClient, AnthropicCompletionClient)
- JSON array recovery from model output (extract_json_array)
- Generation with keyword fallback (TaskGenerationPipeline)
"""

from project_master.generation.client import AnthropicCompletionClient, CompletionClient
from project_master.generation.content import (
    ContentValidator,
    sanitize_prp_content,
    validate_prp_content,
)
from project_master.generation.extraction import extract_json_array
from project_master.generation.pipeline import (
    TaskGenerationPipeline,
    fallback_tasks,
    normalize_tasks,
)

__all__ = [
    # Content
    "ContentValidator",
    "validate_prp_content",
    "sanitize_prp_content",
    # Clients
    "CompletionClient",
    "AnthropicCompletionClient",
    # Pipeline
    "TaskGenerationPipeline",
    "extract_json_array",
    "normalize_tasks",
    "fallback_tasks",
]
