"""Tenant context for request authorization."""

from dataclasses import dataclass, field

from churchapp.core import role_policy
from churchapp.models.role import Role


@dataclass(frozen=True)
class TenantContext:
    """
    Caller identity and tenant resolved from a bearer token.

    A context is *incomplete* when the caller is a user without a Member
    (still onboarding): member_id, role, branch_id and church_id are None
    and every tenant-scoped operation is denied.

    Attributes:
        user_id: The 'sub' claim
        member_id: Member row bound to the user, if any
        role: Member role within the church
        branch_id: Branch the member belongs to
        church_id: Tenant the member belongs to
        permissions: Explicit grants carried in the token
    """

    user_id: str
    email: str
    name: str
    member_id: str | None = None
    role: Role | None = None
    branch_id: str | None = None
    church_id: str | None = None
    permissions: frozenset[str] = field(default_factory=frozenset)
    onboarding_completed: bool = False

    @property
    def is_complete(self) -> bool:
        return None not in (self.member_id, self.role, self.branch_id, self.church_id)

    @property
    def effective_permissions(self) -> frozenset[str]:
        """Explicit grants ∪ role-implied full access ∪ members_view"""
        if not self.is_complete:
            return frozenset()
        return role_policy.effective_permissions(self.role, self.permissions)

    def has_role(self, required_role: Role) -> bool:
        """
        Check if the member's role meets or exceeds required role.

        Role hierarchy: ADMINGERAL (3) > ADMINFILIAL (2) > COORDINATOR (1) > MEMBER (0)
        """
        if self.role is None:
            return False
        return role_policy.role_at_least(self.role, required_role)

    def can(self, permission: role_policy.PermissionType | str) -> bool:
        value = permission.value if isinstance(permission, role_policy.PermissionType) else permission
        return value in self.effective_permissions

    def is_general_admin(self) -> bool:
        return self.role == Role.ADMINGERAL

    def is_admin_or_higher(self) -> bool:
        """ADMINFILIAL or ADMINGERAL"""
        return self.has_role(Role.ADMINFILIAL)

    def __repr__(self) -> str:
        role = self.role.value if self.role else None
        return (
            f"<TenantContext(user_id={self.user_id}, member_id={self.member_id}, "
            f"church_id={self.church_id}, role={role})>"
        )
