"""Project permission policies.

Permission logic is injected as a policy object rather than read from a
global set of privileged identities, so callers decide who may write.
"""

from collections.abc import Iterable
from enum import Enum
from typing import Protocol

from pydantic import BaseModel, ConfigDict

from project_master.core.exceptions import PermissionDeniedError
from project_master.tasks.models import Project

ACCESS_DENIED_REASON = "You don't have permission to access this project"


class PermissionLevel(str, Enum):
    """Access level an operation requires."""

    READ = "read"
    WRITE = "write"
    ADMIN = "admin"


class Identity(BaseModel):
    """Authenticated caller as propagated by the transport layer."""

    model_config = ConfigDict(frozen=True)

    login: str
    name: str = ""
    email: str = ""


class PermissionResult(BaseModel):
    """Outcome of a permission check."""

    model_config = ConfigDict(frozen=True)

    has_permission: bool
    reason: str | None = None


class PermissionPolicy(Protocol):
    """Decides whether an identity may act on a project."""

    def check(
        self,
        project: Project,
        identity: Identity,
        level: PermissionLevel = PermissionLevel.READ,
    ) -> PermissionResult: ...


class OwnerPolicy:
    """Grant every level to the project owner and nothing to anyone else."""

    def check(
        self,
        project: Project,
        identity: Identity,
        level: PermissionLevel = PermissionLevel.READ,
    ) -> PermissionResult:
        if project.user_id and project.user_id == identity.login:
            return PermissionResult(has_permission=True)
        return PermissionResult(has_permission=False, reason=ACCESS_DENIED_REASON)


class AllowListPolicy:
    """
    Restrict write and admin access to a set of logins.

    Read checks, and write checks for listed logins, are delegated to the
    wrapped policy.

    Example:
        >>> policy = AllowListPolicy({"alice"})
        >>> policy.check(project, Identity(login="bob"), PermissionLevel.WRITE).has_permission
        False
    """

    def __init__(
        self,
        logins: Iterable[str],
        inner: PermissionPolicy | None = None,
    ) -> None:
        self.logins = frozenset(logins)
        self.inner = inner or OwnerPolicy()

    def check(
        self,
        project: Project,
        identity: Identity,
        level: PermissionLevel = PermissionLevel.READ,
    ) -> PermissionResult:
        if level != PermissionLevel.READ and identity.login not in self.logins:
            return PermissionResult(
                has_permission=False,
                reason=f"{identity.login} is not allowed {level.value} access",
            )
        return self.inner.check(project, identity, level)


def require_permission(
    policy: PermissionPolicy,
    project: Project,
    identity: Identity,
    level: PermissionLevel = PermissionLevel.READ,
) -> None:
    """
    Raise if ``identity`` lacks ``level`` on ``project``.

    Raises:
        PermissionDeniedError: With the policy's reason.
    """
    result = policy.check(project, identity, level)
    if not result.has_permission:
        raise PermissionDeniedError(result.reason or ACCESS_DENIED_REASON, identity.login)
