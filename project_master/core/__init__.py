"""Core module - configuration, logging and exceptions."""

from project_master.core.config import Settings, clear_settings_cache, get_settings
from project_master.core.exceptions import (
    CompletionServiceError,
    CyclicGraphError,
    PermissionDeniedError,
    ProjectMasterError,
    ResponseParseError,
)
from project_master.core.log_config import configure_logging

__all__ = [
    "Settings",
    "get_settings",
    "clear_settings_cache",
    "configure_logging",
    "ProjectMasterError",
    "CyclicGraphError",
    "CompletionServiceError",
    "ResponseParseError",
    "PermissionDeniedError",
]
