"""
Access decision point.

Every tenant-scoped handler passes through `authorize` (or `decide` when
it only needs the verdict). Target tenant ids are explicit arguments;
nothing is read from request-global state.

Order of checks:
1. no context                          -> Unauthorized
2. incomplete context on tenant route  -> Forbidden
3. target church != caller church      -> Forbidden (even with the permission)
4. branch-scoped and branch mismatch   -> Forbidden (ADMINGERAL exempt)
5. role below floor                    -> Forbidden
6. permission not in effective set     -> Forbidden
"""

from dataclasses import dataclass

from churchapp.core.exceptions import (
    ChurchAppException,
    ForbiddenException,
    UnauthorizedException,
)
from churchapp.core.logging import get_logger
from churchapp.core.role_policy import PermissionType
from churchapp.models.role import Role
from churchapp.models.tenant_context import TenantContext

logger = get_logger(__name__)

# Generic reason for tenant mismatches; never confirms the target exists
ACCESS_DENIED = "Access denied"
INCOMPLETE_CONTEXT = "Church membership required: complete onboarding first"


@dataclass(frozen=True)
class AccessDecision:
    allowed: bool
    reason: str | None = None
    error: type[ChurchAppException] | None = None

    def raise_if_denied(self) -> None:
        if not self.allowed:
            raise self.error(self.reason)


ALLOW = AccessDecision(allowed=True)


def _deny(reason: str, error: type[ChurchAppException] = ForbiddenException) -> AccessDecision:
    return AccessDecision(allowed=False, reason=reason, error=error)


@dataclass(frozen=True)
class TenantScope:
    """Filter every list query must apply. branch_id None means church-wide."""

    church_id: str
    branch_id: str | None = None


def decide(
    context: TenantContext | None,
    *,
    church_id: str | None = None,
    branch_id: str | None = None,
    permission: PermissionType | str | None = None,
    min_role: Role | None = None,
    requires_tenant: bool = True,
    branch_scoped: bool = False,
) -> AccessDecision:
    """
    Decide whether the caller may perform an operation.

    Args:
        context: Resolved caller context (None if unauthenticated)
        church_id: Tenant of the target resource, if it has one
        branch_id: Branch of the target resource, if it has one
        permission: Permission type the operation requires
        min_role: Role floor the operation requires
        requires_tenant: False for onboarding endpoints that accept
            incomplete contexts
        branch_scoped: Non-ADMINGERAL callers must also match branch_id

    Returns:
        AccessDecision (ALLOW or a denial carrying reason and error type)
    """
    if context is None:
        return _deny("Not authenticated", UnauthorizedException)

    if not context.is_complete:
        if requires_tenant or church_id is not None or permission is not None or min_role is not None:
            return _deny(INCOMPLETE_CONTEXT)
        return ALLOW

    if church_id is not None and church_id != context.church_id:
        return _deny(ACCESS_DENIED)

    if (
        branch_scoped
        and branch_id is not None
        and not context.is_general_admin()
        and branch_id != context.branch_id
    ):
        return _deny(ACCESS_DENIED)

    if min_role is not None and not context.has_role(min_role):
        return _deny(f"Role {min_role.value} or higher required")

    if permission is not None and not context.can(permission):
        value = permission.value if isinstance(permission, PermissionType) else permission
        return _deny(f"Missing required permission: {value}")

    return ALLOW


def authorize(context: TenantContext | None, **kwargs) -> TenantContext:
    """
    Same as `decide`, raising the denial's exception.

    Returns:
        The context, for chaining in handlers
    """
    decision = decide(context, **kwargs)
    if not decision.allowed:
        logger.warning(
            "Access denied",
            reason=decision.reason,
            member_id=context.member_id if context else None,
            caller_church_id=context.church_id if context else None,
            target_church_id=kwargs.get("church_id"),
        )
        decision.raise_if_denied()
    return context


def list_scope(context: TenantContext | None, *, church_wide: bool = False) -> TenantScope:
    """
    Row filter for list endpoints.

    ADMINGERAL (or church_wide=True) sees the whole church; any other role
    is limited to their own branch.
    """
    authorize(context)
    if church_wide or context.is_general_admin():
        return TenantScope(church_id=context.church_id)
    return TenantScope(church_id=context.church_id, branch_id=context.branch_id)
