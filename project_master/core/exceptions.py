"""Exception types raised inside the Project Master core."""

from typing import Any


class ProjectMasterError(Exception):
    """Base class for all Project Master errors."""

    def __init__(self, message: str, details: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class CyclicGraphError(ProjectMasterError):
    """A dependency graph that should be acyclic contains a cycle."""

    def __init__(self, cycle: list[str]) -> None:
        super().__init__(
            f"Circular dependency detected: {' -> '.join(cycle)}",
            details={"cycle": cycle},
        )
        self.cycle = cycle


class CompletionServiceError(ProjectMasterError):
    """The completion service could not be reached or answered with an error."""


class ResponseParseError(ProjectMasterError):
    """The completion service answered, but no task array could be read from it."""


class PermissionDeniedError(ProjectMasterError):
    """An identity lacks the permission an operation requires."""

    def __init__(self, message: str, identity: str | None = None) -> None:
        super().__init__(message, details={"identity": identity})
        self.identity = identity
